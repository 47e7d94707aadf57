from __future__ import annotations

import logging

import stripe
from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from memberbridge.api.deps import app_settings, stripe_gateway
from memberbridge.api.v1.schemas.checkout import CheckoutSessionIn, CheckoutSessionOut
from memberbridge.core.config import Settings
from memberbridge.core.identity import field, parse_chat_id
from memberbridge.integrations.stripe.client import StripeGateway

logger = logging.getLogger(__name__)

router = APIRouter(tags=["checkout"])


@router.post("/create-checkout-session", response_model=CheckoutSessionOut)
async def create_checkout_session(
    body: CheckoutSessionIn,
    settings: Settings = Depends(app_settings),
    gateway: StripeGateway = Depends(stripe_gateway),
):
    if not body.price_id or body.telegram_id in (None, ""):
        return JSONResponse(status_code=400, content={"error": "Missing priceId or telegramId"})

    identity = parse_chat_id(body.telegram_id)
    if identity is None:
        return JSONResponse(status_code=400, content={"error": "telegramId must be a numeric chat id"})

    try:
        session = await run_in_threadpool(
            lambda: gateway.create_checkout_session(
                price_id=body.price_id,
                subscriber_id=identity.chat_id,
                success_url=settings.checkout_success_url,
                cancel_url=settings.checkout_cancel_url,
                metadata_key=settings.metadata_key,
            )
        )
    except stripe.StripeError as e:
        logger.error("Checkout session creation failed (price=%s): %s", body.price_id, e)
        return JSONResponse(status_code=500, content={"error": str(e)})

    return CheckoutSessionOut(url=field(session, "url"))
