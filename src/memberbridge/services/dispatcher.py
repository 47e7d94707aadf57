from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import stripe

from memberbridge.core.actions import Invite, MembershipAction, Revoke
from memberbridge.core.config import Settings
from memberbridge.core.identity import field as obj_field
from memberbridge.core.plans import build_tier_table, classify_plan
from memberbridge.core.stripe_events import (
    ACTIVATION_EVENT_TYPES,
    HANDLED_EVENT_TYPES,
    INITIAL_INVOICE_BILLING_REASON,
    INVOICE_PAYMENT_SUCCEEDED,
    REVOCATION_EVENT_TYPES,
)
from memberbridge.integrations.stripe.webhook import construct_event
from memberbridge.services.identity_resolver import (
    StripeReader,
    SubscriptionLookup,
    resolve_identity,
    resolve_price_id,
)
from memberbridge.services.membership import ActionResult, MembershipActionExecutor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WebhookAck:
    status_code: int
    body: dict[str, Any] = field(default_factory=dict)


class EventDispatcher:
    """
    Unverified -> Verified -> Classified -> Actioned -> Acknowledged,
    or Unverified -> Rejected.

    Once the signature checks out the answer is always 200, whatever happens
    downstream. Stripe retries non-2xx deliveries, and a retried activation
    would mint another invite.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        reader: StripeReader,
        executor: MembershipActionExecutor,
    ) -> None:
        self._settings = settings
        self._reader = reader
        self._executor = executor
        self._tier_table = build_tier_table(settings)

    def handle(self, payload: bytes, signature: Optional[str]) -> WebhookAck:
        # 1) Verify
        if not signature:
            return self._reject("Missing Stripe-Signature header")

        secret = self._settings.stripe_webhook_secret
        if secret is None:
            return self._reject("STRIPE_WEBHOOK_SECRET is not set")

        try:
            event = construct_event(
                payload,
                signature,
                secret=secret.get_secret_value(),
                tolerance=self._settings.stripe_webhook_tolerance_sec,
            )
        except (stripe.SignatureVerificationError, ValueError) as e:
            return self._reject(str(e))

        event_id = event.get("id")
        event_type = event.get("type")

        # 2) Classify
        if not isinstance(event_type, str) or event_type not in HANDLED_EVENT_TYPES:
            logger.debug("Ignoring event %s (%s)", event_id, event_type)
            return self._ack(event_type)

        obj = obj_field(event.get("data"), "object")
        if self.is_initial_invoice(event_type, obj):
            logger.info("Skipping first invoice on event %s; checkout already invited", event_id)
            return self._ack(event_type, skipped="initial_invoice")

        # 3) Action
        try:
            action = self.classify(event_type, obj)
            if action is None:
                logger.warning(
                    "No subscriber identity on event %s (%s); skipping", event_id, event_type
                )
                return self._ack(event_type, skipped="identity_unresolved")

            result = self.execute(action)
        except Exception:
            logger.exception("Unhandled error while actioning event %s (%s)", event_id, event_type)
            return self._ack(event_type, skipped="internal_error")

        if not result.ok:
            logger.error(
                "Membership %s failed for event %s (%s): %s",
                result.action,
                event_id,
                event_type,
                result.reason,
            )

        # 4) Acknowledge
        return self._ack(event_type, result=result)

    @staticmethod
    def is_initial_invoice(event_type: str, obj: Any) -> bool:
        return (
            event_type == INVOICE_PAYMENT_SUCCEEDED
            and obj_field(obj, "billing_reason") == INITIAL_INVOICE_BILLING_REASON
        )

    def classify(self, event_type: str, obj: Any) -> Optional[MembershipAction]:
        lookup = SubscriptionLookup.for_object(self._reader, obj)
        identity = resolve_identity(
            event_type,
            obj,
            lookup,
            metadata_key=self._settings.metadata_key,
        )
        if identity is None:
            return None

        if event_type in ACTIVATION_EVENT_TYPES:
            price_id = resolve_price_id(event_type, obj, lookup, self._reader)
            return Invite(identity=identity, tier_label=classify_plan(price_id, self._tier_table))

        if event_type in REVOCATION_EVENT_TYPES:
            return Revoke(identity=identity)

        return None

    def execute(self, action: MembershipAction) -> ActionResult:
        if isinstance(action, Invite):
            return self._executor.issue_invite(action.identity, action.tier_label)
        return self._executor.revoke_membership(action.identity)

    @staticmethod
    def _reject(reason: str) -> WebhookAck:
        logger.warning("Rejected webhook: %s", reason)
        return WebhookAck(status_code=400, body={"error": f"Webhook error: {reason}"})

    @staticmethod
    def _ack(
        event_type: Optional[str],
        *,
        result: Optional[ActionResult] = None,
        skipped: Optional[str] = None,
    ) -> WebhookAck:
        body: dict[str, Any] = {
            "received": True,
            "event_type": event_type,
            "action": result.action if result is not None else "none",
            "ok": result.ok if result is not None else None,
        }
        if skipped:
            body["skipped"] = skipped
        return WebhookAck(status_code=200, body=body)
