import json
from typing import Any

import stripe


def construct_event(payload: bytes, signature: str, *, secret: str, tolerance: int) -> dict[str, Any]:
    """
    Verify the Stripe signature, then parse the body as plain JSON.

    Fails with stripe.SignatureVerificationError on a bad/stale signature and
    ValueError on a body that is not a JSON object.
    """
    body = payload.decode("utf-8")
    stripe.WebhookSignature.verify_header(body, signature, secret, tolerance)

    event = json.loads(body)
    if not isinstance(event, dict):
        raise ValueError("Webhook payload is not a JSON object")
    return event
