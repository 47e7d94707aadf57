# Event kinds that drive a membership action. Everything else is acknowledged
# and ignored, so new Stripe event types never fail a delivery.

CHECKOUT_COMPLETED = "checkout.session.completed"
INVOICE_PAYMENT_SUCCEEDED = "invoice.payment_succeeded"
SUBSCRIPTION_DELETED = "customer.subscription.deleted"

ACTIVATION_EVENT_TYPES: frozenset[str] = frozenset(
    {
        CHECKOUT_COMPLETED,
        INVOICE_PAYMENT_SUCCEEDED,
    }
)

REVOCATION_EVENT_TYPES: frozenset[str] = frozenset(
    {
        SUBSCRIPTION_DELETED,
    }
)

HANDLED_EVENT_TYPES: frozenset[str] = ACTIVATION_EVENT_TYPES | REVOCATION_EVENT_TYPES

# The first invoice of a subscription; checkout.session.completed already
# covers that purchase, so only renewals should invite from an invoice.
INITIAL_INVOICE_BILLING_REASON = "subscription_create"
