"""
Typed projections over Stripe objects.

Every helper here is total: it takes whatever Stripe handed us (a dict, a
StripeObject, a bare id string or None) and returns an optional value. None of
them call the network.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

_CHAT_ID_RE = re.compile(r"^-?\d+$")


@dataclass(frozen=True)
class SubscriberIdentity:
    chat_id: str


def field(obj: Any, key: str) -> Any:
    if obj is None or isinstance(obj, str):
        return None
    if isinstance(obj, Mapping):
        return obj.get(key)
    # StripeObject stopped being a dict in stripe 15; item access still works
    try:
        return obj[key]
    except (KeyError, IndexError, TypeError):
        return None


def parse_chat_id(value: Any) -> Optional[SubscriberIdentity]:
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    if not _CHAT_ID_RE.match(text):
        return None
    return SubscriberIdentity(chat_id=text)


def identity_from_metadata(obj: Any, key: str) -> Optional[SubscriberIdentity]:
    """Read the subscriber custom field from an object's ``metadata``."""
    return parse_chat_id(field(field(obj, "metadata"), key))


def subscription_ref(obj: Any) -> Any:
    """
    Subscription linked to a session or invoice: an id string, an expanded
    object, or None.

    Invoices on API versions >= 2025-03 move the link under
    ``parent.subscription_details``.
    """
    ref = field(obj, "subscription")
    if ref:
        return ref
    details = field(field(obj, "parent"), "subscription_details")
    return field(details, "subscription") or None


def object_id(ref: Any) -> Optional[str]:
    if isinstance(ref, str):
        return ref or None
    value = field(ref, "id")
    return str(value) if value else None


def _first(items: Any) -> Any:
    data = field(items, "data")
    if not data:
        return None
    try:
        return data[0]
    except (IndexError, KeyError, TypeError):
        return None


def _price_of_line(line: Any) -> Optional[str]:
    price = field(line, "price")
    if isinstance(price, str):
        return price or None
    price_id = field(price, "id")
    if price_id:
        return str(price_id)

    # newer invoice line shape
    details = field(field(line, "pricing"), "price_details")
    price = field(details, "price")
    if isinstance(price, str):
        return price or None
    price_id = field(price, "id")
    return str(price_id) if price_id else None


def invoice_price_id(invoice: Any) -> Optional[str]:
    return _price_of_line(_first(field(invoice, "lines")))


def session_price_id(session: Any) -> Optional[str]:
    # line_items only appear when the session was expanded
    return _price_of_line(_first(field(session, "line_items")))


def subscription_price_id(subscription: Any) -> Optional[str]:
    return _price_of_line(_first(field(subscription, "items")))
