"""
Stripe Gateway Adapter
======================

Thin wrapper around the official `stripe` SDK for the three calls the
payment flow needs:

- create_customer            → one Stripe Customer per user (cached on the profile)
- create_checkout_session    → hosted Checkout in `payment` mode
- retrieve_checkout_session  → source of truth for `payment_status`

Every `stripe.error.StripeError` is converted into `UpstreamFailure` so the
services above never deal with SDK exceptions. Sessions are returned as the
plain `CheckoutSession` dataclass, which also lets tests hand a fake gateway
to the services.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import stripe
from django.conf import settings

from .exceptions import UpstreamFailure

stripe.api_key = settings.STRIPE_SECRET_KEY

logger = logging.getLogger(__name__)


def _field(obj: Any, name: str, default: Any = None) -> Any:
    """Read a field from a StripeObject or from a raw webhook dict."""
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


@dataclass(frozen=True)
class CheckoutSession:
    id: str
    url: Optional[str] = None
    payment_status: str = "unpaid"
    customer: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)
    amount_total: Optional[int] = None
    currency: Optional[str] = None

    @property
    def is_paid(self) -> bool:
        return self.payment_status == "paid"

    @classmethod
    def from_stripe(cls, obj: Any) -> "CheckoutSession":
        metadata = _field(obj, "metadata") or {}
        if not isinstance(metadata, dict) and hasattr(metadata, "to_dict"):
            metadata = metadata.to_dict()
        return cls(
            id=_field(obj, "id"),
            url=_field(obj, "url"),
            payment_status=_field(obj, "payment_status") or "unpaid",
            customer=_field(obj, "customer"),
            metadata={str(k): str(v) for k, v in metadata.items()},
            amount_total=_field(obj, "amount_total"),
            currency=_field(obj, "currency"),
        )


class StripeGateway:
    """Stripe-backed payment gateway."""

    def create_customer(self, email: str, name: str, user_id: Any) -> str:
        try:
            customer = stripe.Customer.create(
                email=email,
                name=name or email,
                metadata={"user_id": str(user_id)},
            )
        except stripe.error.StripeError as e:
            logger.exception("Stripe customer creation failed for user %s", user_id)
            raise UpstreamFailure(
                "Could not create payment customer",
                details={"stripe_error": getattr(e, "user_message", None) or str(e)},
            ) from e

        logger.info("Created Stripe customer %s for user %s", customer.id, user_id)
        return customer.id

    def create_checkout_session(
        self,
        *,
        customer_id: str,
        line_items: List[Dict[str, Any]],
        success_url: str,
        cancel_url: str,
        metadata: Dict[str, str],
    ) -> CheckoutSession:
        try:
            session = stripe.checkout.Session.create(
                customer=customer_id,
                payment_method_types=["card"],
                line_items=line_items,
                mode="payment",
                success_url=success_url,
                cancel_url=cancel_url,
                metadata=metadata,
            )
        except stripe.error.StripeError as e:
            logger.exception("Stripe Checkout session creation failed (customer=%s)", customer_id)
            raise UpstreamFailure(
                "Could not create checkout session",
                details={"stripe_error": getattr(e, "user_message", None) or str(e)},
            ) from e

        return CheckoutSession.from_stripe(session)

    def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        try:
            session = stripe.checkout.Session.retrieve(session_id)
        except stripe.error.StripeError as e:
            logger.exception("Stripe Checkout session %s could not be retrieved", session_id)
            raise UpstreamFailure(
                "Could not retrieve checkout session",
                details={"stripe_error": getattr(e, "user_message", None) or str(e)},
            ) from e

        return CheckoutSession.from_stripe(session)


_gateway: Optional[StripeGateway] = None


def get_gateway() -> StripeGateway:
    """Returns the process-wide gateway instance."""
    global _gateway
    if _gateway is None:
        _gateway = StripeGateway()
    return _gateway
