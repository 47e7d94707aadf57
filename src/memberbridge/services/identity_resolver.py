from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

import stripe

from memberbridge.core.identity import (
    SubscriberIdentity,
    identity_from_metadata,
    invoice_price_id,
    object_id,
    session_price_id,
    subscription_price_id,
    subscription_ref,
)
from memberbridge.core.stripe_events import (
    CHECKOUT_COMPLETED,
    INVOICE_PAYMENT_SUCCEEDED,
    SUBSCRIPTION_DELETED,
)

logger = logging.getLogger(__name__)


class StripeReader(Protocol):
    def retrieve_subscription(self, subscription_id: str) -> Any: ...

    def retrieve_invoice(self, invoice_id: str) -> Any: ...


class SubscriptionLookup:
    """
    The subscription linked to one event's object, fetched lazily and at most
    once. Lives only as long as the request that built it.
    """

    def __init__(self, reader: StripeReader, ref: Any) -> None:
        self._reader = reader
        self._ref = ref
        self._loaded = False
        self._value: Any = None

    @classmethod
    def for_object(cls, reader: StripeReader, obj: Any) -> "SubscriptionLookup":
        return cls(reader, subscription_ref(obj))

    def get(self) -> Any:
        if self._loaded:
            return self._value
        self._loaded = True

        if self._ref is None:
            return None
        if not isinstance(self._ref, str):
            # already expanded in the payload
            self._value = self._ref
            return self._value

        try:
            self._value = self._reader.retrieve_subscription(self._ref)
        except stripe.StripeError as e:
            logger.warning("Subscription fetch failed (id=%s): %s", self._ref, e)
            self._value = None
        return self._value


def resolve_identity(
    event_type: str,
    obj: Any,
    lookup: SubscriptionLookup,
    *,
    metadata_key: str,
) -> Optional[SubscriberIdentity]:
    """
    Fixed lookup order per event kind:

    - checkout.session.completed: session metadata, then the linked subscription
    - invoice.payment_succeeded: linked subscription, then invoice metadata
    - customer.subscription.deleted: the subscription in the payload

    Returns None when every source is empty. Callers treat that as "cannot act".
    """
    if event_type == CHECKOUT_COMPLETED:
        return identity_from_metadata(obj, metadata_key) or identity_from_metadata(lookup.get(), metadata_key)

    if event_type == INVOICE_PAYMENT_SUCCEEDED:
        return identity_from_metadata(lookup.get(), metadata_key) or identity_from_metadata(obj, metadata_key)

    if event_type == SUBSCRIPTION_DELETED:
        return identity_from_metadata(obj, metadata_key)

    return None


def resolve_price_id(
    event_type: str,
    obj: Any,
    lookup: SubscriptionLookup,
    reader: StripeReader,
) -> Optional[str]:
    if event_type == INVOICE_PAYMENT_SUCCEEDED:
        price_id = invoice_price_id(obj)
        if price_id:
            return price_id

        invoice_id = object_id(obj)
        if invoice_id:
            try:
                price_id = invoice_price_id(reader.retrieve_invoice(invoice_id))
            except stripe.StripeError as e:
                logger.warning("Invoice fetch failed (id=%s): %s", invoice_id, e)
            if price_id:
                return price_id

        return subscription_price_id(lookup.get())

    if event_type == CHECKOUT_COMPLETED:
        return session_price_id(obj) or subscription_price_id(lookup.get())

    return None
