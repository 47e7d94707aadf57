from fastapi import APIRouter, Depends, Header, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from memberbridge.api.deps import event_dispatcher
from memberbridge.services.dispatcher import EventDispatcher

router = APIRouter(tags=["stripe"])


@router.post("/stripe-webhook")
async def stripe_webhook(
    request: Request,
    dispatcher: EventDispatcher = Depends(event_dispatcher),
    stripe_signature: str | None = Header(default=None, alias="Stripe-Signature"),
):
    # signature check needs the exact raw bytes
    payload = await request.body()

    # Stripe/Telegram calls are blocking; keep them off the event loop
    ack = await run_in_threadpool(dispatcher.handle, payload, stripe_signature)
    return JSONResponse(status_code=ack.status_code, content=ack.body)
