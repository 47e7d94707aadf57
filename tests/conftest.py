import hashlib
import hmac
import json
import time
from typing import Any

import pytest
import stripe

from memberbridge.core.config import Settings
from memberbridge.integrations.telegram.bot_api import TelegramBotAPIError

WEBHOOK_SECRET = "whsec_test_secret"
GROUP_CHAT_ID = "-1001234567890"
PREMIUM_PRICE = "price_premium_test"
GENERIC_PRICE = "price_generic_test"


class FakeBot:
    """Records Bot API calls; methods listed in ``fail`` raise after being recorded."""

    def __init__(self, *, invite_url: str | None = "https://t.me/+invite123", fail: tuple[str, ...] = ()) -> None:
        self.invite_url = invite_url
        self.fail = set(fail)
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def _record(self, method: str, params: dict[str, Any]) -> None:
        self.calls.append((method, params))
        if method in self.fail:
            raise TelegramBotAPIError(method, "Bad Request: forced failure", status_code=400)

    def methods(self) -> list[str]:
        return [method for method, _ in self.calls]

    def create_chat_invite_link(self, chat_id, *, member_limit, expire_date):
        self._record(
            "createChatInviteLink",
            {"chat_id": chat_id, "member_limit": member_limit, "expire_date": expire_date},
        )
        return {"invite_link": self.invite_url} if self.invite_url else {}

    def send_message(self, chat_id, text, *, parse_mode=None):
        self._record("sendMessage", {"chat_id": chat_id, "text": text, "parse_mode": parse_mode})
        return {"message_id": 1}

    def ban_chat_member(self, chat_id, user_id):
        self._record("banChatMember", {"chat_id": chat_id, "user_id": user_id})
        return True

    def unban_chat_member(self, chat_id, user_id):
        self._record("unbanChatMember", {"chat_id": chat_id, "user_id": user_id})
        return True


class FakeStripeReader:
    def __init__(
        self,
        *,
        subscriptions: dict[str, Any] | None = None,
        invoices: dict[str, Any] | None = None,
        fail: bool = False,
    ) -> None:
        self.subscriptions = subscriptions or {}
        self.invoices = invoices or {}
        self.fail = fail
        self.calls: list[tuple[str, str]] = []

    def retrieve_subscription(self, subscription_id: str) -> Any:
        self.calls.append(("subscription", subscription_id))
        if self.fail:
            raise stripe.StripeError("upstream unavailable")
        if subscription_id not in self.subscriptions:
            raise stripe.InvalidRequestError(f"No such subscription: {subscription_id}", "id")
        return self.subscriptions[subscription_id]

    def retrieve_invoice(self, invoice_id: str) -> Any:
        self.calls.append(("invoice", invoice_id))
        if self.fail:
            raise stripe.StripeError("upstream unavailable")
        if invoice_id not in self.invoices:
            raise stripe.InvalidRequestError(f"No such invoice: {invoice_id}", "id")
        return self.invoices[invoice_id]


def sign_payload(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    ts = int(time.time()) if timestamp is None else timestamp
    signed = f"{ts}.".encode("utf-8") + payload
    digest = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={ts},v1={digest}"


def make_event(event_type: str, obj: dict[str, Any], event_id: str = "evt_test_1") -> bytes:
    event = {
        "id": event_id,
        "object": "event",
        "type": event_type,
        "created": int(time.time()),
        "livemode": False,
        "data": {"object": obj},
    }
    return json.dumps(event, separators=(",", ":")).encode("utf-8")


def invoice_obj(
    *,
    chat_id: str | None = None,
    price_id: str | None = PREMIUM_PRICE,
    subscription: Any = None,
    invoice_id: str = "in_test_1",
    billing_reason: str = "subscription_cycle",
) -> dict[str, Any]:
    lines = []
    if price_id is not None:
        lines.append({"object": "line_item", "id": "il_1", "price": {"object": "price", "id": price_id}})
    return {
        "object": "invoice",
        "id": invoice_id,
        "billing_reason": billing_reason,
        "subscription": subscription,
        "metadata": {"telegram_id": chat_id} if chat_id else {},
        "lines": {"object": "list", "data": lines},
    }


def subscription_obj(
    *,
    chat_id: str | None = None,
    price_id: str | None = PREMIUM_PRICE,
    subscription_id: str = "sub_test_1",
) -> dict[str, Any]:
    items = []
    if price_id is not None:
        items.append({"object": "subscription_item", "id": "si_1", "price": {"object": "price", "id": price_id}})
    return {
        "object": "subscription",
        "id": subscription_id,
        "metadata": {"telegram_id": chat_id} if chat_id else {},
        "items": {"object": "list", "data": items},
    }


def session_obj(*, chat_id: str | None = None, subscription: Any = "sub_test_1") -> dict[str, Any]:
    return {
        "object": "checkout.session",
        "id": "cs_test_1",
        "mode": "subscription",
        "subscription": subscription,
        "metadata": {"telegram_id": chat_id} if chat_id else {},
    }


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        env="test",
        stripe_api_key="sk_test_dummy",
        stripe_webhook_secret=WEBHOOK_SECRET,
        telegram_bot_token="123:ABC",
        group_chat_id=GROUP_CHAT_ID,
        premium_price_id=PREMIUM_PRICE,
        generic_price_id=GENERIC_PRICE,
    )


@pytest.fixture()
def bot() -> FakeBot:
    return FakeBot()


@pytest.fixture()
def reader() -> FakeStripeReader:
    return FakeStripeReader()
