"""
In-memory payment gateway used by the payment tests.

Mirrors the public interface of `StripeGateway` and records every call so
tests can assert on what would have been sent to Stripe.
"""

import dataclasses

from django.contrib.auth.models import User
from rest_framework_simplejwt.tokens import AccessToken

from core.stripe_integration.exceptions import UpstreamFailure
from core.stripe_integration.gateway import CheckoutSession


class FakeGateway:
    def __init__(self):
        self.customers = []
        self.checkout_requests = []
        self.retrieved = []
        self.sessions = {}

    def create_customer(self, email, name, user_id):
        self.customers.append({"email": email, "name": name, "user_id": user_id})
        return f"cus_test_{len(self.customers)}"

    def create_checkout_session(self, *, customer_id, line_items, success_url, cancel_url, metadata):
        session_id = f"cs_test_{len(self.checkout_requests) + 1}"
        self.checkout_requests.append(
            {
                "customer_id": customer_id,
                "line_items": line_items,
                "success_url": success_url,
                "cancel_url": cancel_url,
                "metadata": metadata,
            }
        )
        session = CheckoutSession(
            id=session_id,
            url=f"https://checkout.stripe.test/c/pay/{session_id}",
            payment_status="unpaid",
            customer=customer_id,
            metadata=dict(metadata),
        )
        self.sessions[session_id] = session
        return session

    def retrieve_checkout_session(self, session_id):
        self.retrieved.append(session_id)
        if session_id not in self.sessions:
            raise UpstreamFailure("Could not retrieve checkout session")
        return self.sessions[session_id]

    # test helpers

    def mark_paid(self, session_id):
        self.sessions[session_id] = dataclasses.replace(self.sessions[session_id], payment_status="paid")


def make_user(username, **kwargs):
    return User.objects.create_user(
        username=username, password="pw", email=f"{username}@academy.test", **kwargs
    )


def bearer(user):
    return {"HTTP_AUTHORIZATION": f"Bearer {AccessToken.for_user(user)}"}
