"""
Payment-to-Enrollment Services
==============================

CheckoutInitiator
    Turns a list of purchase items into a Stripe Checkout Session and one
    `pending` PaymentRecord per item.

PaymentVerifier
    Confirms a paid session for the caller and applies its side effects:
    ledger rows → `completed`, registration → `fees_paid`, purchased
    courses → enrolled. Every step tolerates being run again for the same
    session (page refresh on the success page, webhook after redirect).

The caller is passed in explicitly as a `CallerIdentity`; the services never
read the request. Both services take an optional gateway so tests can inject
a fake one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import DatabaseError, transaction
from django.utils import timezone

from academy.courses.models import Course
from academy.courses.services import mark_enrolled
from academy.users.models import Profile
from .exceptions import InvalidRequest, MissingParameter, NotFound, PaymentIncomplete, Unauthorized
from .gateway import CheckoutSession, StripeGateway, get_gateway
from .models import PaymentRecord, PaymentStatus
from .serializers import CheckoutRequestSerializer

logger = logging.getLogger(__name__)
User = get_user_model()


# ---------- caller identity ----------


@dataclass(frozen=True)
class CallerIdentity:
    user_id: int
    email: str = ""
    name: str = ""


def identity_from_request(request) -> CallerIdentity:
    """
    Build the caller identity from the authenticated request user.

    Raises:
        Unauthorized: if the request carries no valid credential
    """
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        raise Unauthorized()
    return CallerIdentity(
        user_id=user.pk,
        email=user.email or "",
        name=user.get_full_name() or user.username,
    )


def _get_user(identity: CallerIdentity):
    try:
        return User.objects.get(pk=identity.user_id, is_active=True)
    except User.DoesNotExist:
        raise Unauthorized() from None


# ---------- checkout ----------


@dataclass
class CheckoutResult:
    url: str
    session_id: str
    records: List[PaymentRecord] = field(default_factory=list)


class CheckoutInitiator:
    def __init__(self, gateway: Optional[StripeGateway] = None):
        self.gateway = gateway or get_gateway()

    def initiate(self, identity: CallerIdentity, items: Any) -> CheckoutResult:
        """
        Create a checkout session for the given purchase items.

        Args:
            identity: Authenticated caller
            items: List of `{name, description, amount, type, course_id?}`

        Returns:
            CheckoutResult with the hosted Checkout URL

        Raises:
            InvalidRequest: empty or malformed item list
            UpstreamFailure: Stripe call failed
        """
        validated = self._validate_items(items)
        user = _get_user(identity)

        customer_id = self._resolve_customer_id(user, identity)
        currency = settings.DEFAULT_CURRENCY
        course_ids = [item["course"].pk for item in validated if item.get("course")]

        session = self.gateway.create_checkout_session(
            customer_id=customer_id,
            line_items=[self._line_item(item, currency) for item in validated],
            success_url=self._success_url(course_ids),
            cancel_url=self._cancel_url(),
            metadata={"user_id": str(user.pk)},
        )
        logger.info(
            "Checkout session %s created for user %s (%s item(s))",
            session.id,
            user.pk,
            len(validated),
        )

        try:
            with transaction.atomic():
                records = [
                    PaymentRecord.objects.create(
                        user=user,
                        amount=item["amount"],
                        currency=currency,
                        description=item["name"],
                        transaction_id=session.id,
                        status=PaymentStatus.PENDING,
                        payment_type=self._payment_type(item),
                        course=item.get("course"),
                    )
                    for item in validated
                ]
        except DatabaseError:
            # TODO: expire the orphaned session via stripe.checkout.Session.expire
            logger.exception(
                "Ledger insert failed after checkout session %s was created (orphaned)",
                session.id,
            )
            raise

        return CheckoutResult(url=session.url, session_id=session.id, records=records)

    # ----- helpers -----

    @staticmethod
    def _validate_items(items: Any) -> List[Dict[str, Any]]:
        serializer = CheckoutRequestSerializer(data={"items": items})
        if not serializer.is_valid():
            raise InvalidRequest(details={"details": serializer.errors["items"]})
        return serializer.validated_data["items"]

    def _resolve_customer_id(self, user, identity: CallerIdentity) -> str:
        """
        Return the cached Stripe customer id, creating it on first use.

        The profile row stays locked while the customer is created so two
        concurrent checkouts cannot both create one.
        """
        with transaction.atomic():
            profile, _ = Profile.objects.select_for_update().get_or_create(user=user)
            if profile.stripe_customer_id:
                return profile.stripe_customer_id

            customer_id = self.gateway.create_customer(
                email=identity.email,
                name=identity.name,
                user_id=user.pk,
            )
            profile.stripe_customer_id = customer_id
            profile.save(update_fields=["stripe_customer_id"])
            return customer_id

    @staticmethod
    def _line_item(item: Dict[str, Any], currency: str) -> Dict[str, Any]:
        product_data = {"name": item["name"]}
        if item.get("description"):
            product_data["description"] = item["description"]
        return {
            "price_data": {
                "currency": currency,
                "product_data": product_data,
                "unit_amount": item["amount"],
            },
            "quantity": 1,
        }

    @staticmethod
    def _payment_type(item: Dict[str, Any]) -> str:
        if item.get("type"):
            return item["type"]
        return PaymentRecord.COURSE if item.get("course") else "other"

    @staticmethod
    def _success_url(course_ids: Sequence[int]) -> str:
        url = (
            f"{settings.FRONTEND_URL.rstrip('/')}{settings.PAYMENT_SUCCESS_PATH}"
            f"?session_id={{CHECKOUT_SESSION_ID}}"
        )
        if course_ids:
            url += "&course_ids=" + ",".join(str(pk) for pk in course_ids)
        return url

    @staticmethod
    def _cancel_url() -> str:
        return f"{settings.FRONTEND_URL.rstrip('/')}{settings.PAYMENT_CANCEL_PATH}?canceled=true"


# ---------- verification ----------


@dataclass
class VerificationResult:
    session_id: str
    status: str = PaymentStatus.COMPLETED.value
    success: bool = True
    enrolled_course_ids: List[int] = field(default_factory=list)
    fees_paid: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "session_id": self.session_id,
            "status": self.status,
            "enrolled_course_ids": self.enrolled_course_ids,
        }


class PaymentVerifier:
    def __init__(self, gateway: Optional[StripeGateway] = None):
        self.gateway = gateway or get_gateway()

    def verify(
        self,
        identity: CallerIdentity,
        session_id: Optional[str],
        course_ids: Optional[Iterable[int]] = None,
    ) -> VerificationResult:
        """
        Verify a checkout session with Stripe and reconcile it for the caller.

        Raises:
            MissingParameter: no session id
            PaymentIncomplete: Stripe does not report the session as paid
            NotFound: no ledger row for this session and caller
            UpstreamFailure: Stripe call failed
        """
        if not session_id:
            raise MissingParameter()

        session: CheckoutSession = self.gateway.retrieve_checkout_session(session_id)
        if not session.is_paid:
            logger.info("Session %s not paid yet (status=%s)", session_id, session.payment_status)
            raise PaymentIncomplete(session.payment_status)

        user = _get_user(identity)
        return self.reconcile(user, session_id, course_ids)

    def reconcile(
        self,
        user,
        session_id: str,
        course_ids: Optional[Iterable[int]] = None,
    ) -> VerificationResult:
        """
        Apply the side effects of a paid session for `user`.

        Shared by the verify endpoint and the webhook handler. Re-running it
        for the same session leaves the same end state.
        """
        with transaction.atomic():
            records = list(
                PaymentRecord.objects.select_for_update().filter(
                    transaction_id=session_id, user=user
                )
            )
            if not records:
                logger.warning("No payment records for session %s and user %s", session_id, user.pk)
                raise NotFound()

            pending = [r.pk for r in records if r.status == PaymentStatus.PENDING]
            if pending:
                PaymentRecord.objects.filter(pk__in=pending).update(
                    status=PaymentStatus.COMPLETED, updated_at=timezone.now()
                )
                logger.info(
                    "Completed %s payment record(s) for session %s", len(pending), session_id
                )

            fees_paid = self._apply_registration(user, records)
            enrolled = self._apply_enrollments(user, records, course_ids)

        return VerificationResult(
            session_id=session_id,
            enrolled_course_ids=enrolled,
            fees_paid=fees_paid,
        )

    @staticmethod
    def _apply_registration(user, records: List[PaymentRecord]) -> bool:
        if not any(r.payment_type == PaymentRecord.REGISTRATION for r in records):
            return False
        profile, _ = Profile.objects.select_for_update().get_or_create(user=user)
        if not profile.fees_paid:
            profile.fees_paid = True
            profile.save(update_fields=["fees_paid"])
            logger.info("Registration fee paid for user %s", user.pk)
        return True

    @staticmethod
    def _apply_enrollments(
        user, records: List[PaymentRecord], course_ids: Optional[Iterable[int]]
    ) -> List[int]:
        purchased = sorted({r.course_id for r in records if r.course_id})

        if course_ids:
            unmatched = set(course_ids) - set(purchased)
            if unmatched:
                # Only courses that were actually paid for are enrolled
                logger.warning(
                    "Ignoring course ids %s for user %s: not part of the purchase",
                    sorted(unmatched),
                    user.pk,
                )

        courses = list(Course.objects.filter(pk__in=purchased).order_by("pk"))
        for course in courses:
            mark_enrolled(user, course)
        return [course.pk for course in courses]
