from __future__ import annotations

from typing import Any

import stripe


class StripeGateway:
    """Thin read/create wrapper; the API key is passed per call, never set globally."""

    def __init__(self, api_key: str | None) -> None:
        self._api_key = api_key

    def retrieve_subscription(self, subscription_id: str) -> Any:
        return stripe.Subscription.retrieve(subscription_id, api_key=self._api_key)

    def retrieve_invoice(self, invoice_id: str) -> Any:
        return stripe.Invoice.retrieve(
            invoice_id,
            api_key=self._api_key,
            expand=["lines.data.price"],
        )

    def create_checkout_session(
        self,
        *,
        price_id: str,
        subscriber_id: str,
        success_url: str,
        cancel_url: str,
        metadata_key: str,
    ) -> Any:
        metadata = {metadata_key: subscriber_id}
        return stripe.checkout.Session.create(
            api_key=self._api_key,
            mode="subscription",
            line_items=[{"price": price_id, "quantity": 1}],
            success_url=success_url,
            cancel_url=cancel_url,
            metadata=metadata,
            # copied onto the subscription so renewals/cancellations carry it too
            subscription_data={"metadata": metadata},
        )
