"""
Webhook reconciliation tests.

The dj-stripe Event is replaced by a plain object carrying the fields the
receiver reads (type, id, data), so no Stripe objects need to be synced.
"""

from types import SimpleNamespace
from unittest import mock

from django.test import TestCase

from academy.courses.models import Course, CourseEnrollment, EnrollmentStatus
from academy.users.models import Profile
from core.stripe_integration.models import PaymentRecord, PaymentStatus
from core.stripe_integration.signals import (
    handle_checkout_session_completed,
    on_djstripe_event_created,
)
from .fakes import make_user


def checkout_event(session, event_type="checkout.session.completed"):
    return SimpleNamespace(
        id="evt_test_1",
        type=event_type,
        data={"object": session},
    )


class CheckoutSessionCompletedTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = make_user("student")
        cls.course = Course.objects.create(code="MATH101", name="Algebra", price=9900)

    def setUp(self):
        PaymentRecord.objects.create(
            user=self.user,
            amount=9900,
            description="Algebra",
            transaction_id="cs_test_1",
            payment_type="course",
            course=self.course,
        )
        PaymentRecord.objects.create(
            user=self.user,
            amount=5000,
            description="Registration Fee",
            transaction_id="cs_test_1",
            payment_type="registration",
        )

    def session(self, **overrides):
        session = {
            "id": "cs_test_1",
            "object": "checkout.session",
            "payment_status": "paid",
            "metadata": {"user_id": str(self.user.id)},
        }
        session.update(overrides)
        return session

    def send(self, event, created=True):
        on_djstripe_event_created(sender=None, instance=event, created=created)

    def assertUntouched(self):
        self.assertEqual(
            set(PaymentRecord.objects.values_list("status", flat=True)), {PaymentStatus.PENDING}
        )
        self.assertFalse(CourseEnrollment.objects.exists())
        self.assertFalse(Profile.objects.get(user=self.user).fees_paid)

    def test_paid_session_is_reconciled(self):
        self.send(checkout_event(self.session()))

        self.assertEqual(
            set(PaymentRecord.objects.values_list("status", flat=True)), {PaymentStatus.COMPLETED}
        )
        enrollment = CourseEnrollment.objects.get(student=self.user, course=self.course)
        self.assertEqual(enrollment.enrollment_status, EnrollmentStatus.ENROLLED)
        self.assertTrue(Profile.objects.get(user=self.user).fees_paid)

    def test_nested_event_payload(self):
        event = SimpleNamespace(
            id="evt_test_2",
            type="checkout.session.completed",
            data={"data": {"object": self.session()}},
        )
        self.send(event)
        self.assertTrue(CourseEnrollment.objects.filter(student=self.user).exists())

    def test_duplicate_delivery_is_idempotent(self):
        self.send(checkout_event(self.session()))
        self.send(checkout_event(self.session()))
        self.assertEqual(CourseEnrollment.objects.filter(student=self.user).count(), 1)

    def test_updated_event_is_ignored(self):
        self.send(checkout_event(self.session()), created=False)
        self.assertUntouched()

    def test_other_event_types_are_ignored(self):
        self.send(checkout_event(self.session(), event_type="payment_intent.succeeded"))
        self.assertUntouched()

    def test_unpaid_session_is_skipped(self):
        self.send(checkout_event(self.session(payment_status="unpaid")))
        self.assertUntouched()

    def test_missing_user_metadata(self):
        self.send(checkout_event(self.session(metadata={})))
        self.assertUntouched()

    def test_unknown_user(self):
        with self.assertLogs("core.stripe_integration.signals", level="ERROR"):
            handle_checkout_session_completed(self.session(metadata={"user_id": "999999"}))
        self.assertUntouched()

    def test_session_of_another_user(self):
        other = make_user("other")
        handle_checkout_session_completed(self.session(metadata={"user_id": str(other.id)}))
        self.assertUntouched()

    def test_handler_errors_are_not_raised(self):
        with mock.patch(
            "core.stripe_integration.signals.handle_checkout_session_completed",
            side_effect=RuntimeError("boom"),
        ):
            with self.assertLogs("core.stripe_integration.signals", level="ERROR"):
                self.send(checkout_event(self.session()))
