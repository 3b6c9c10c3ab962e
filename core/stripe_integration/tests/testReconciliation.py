"""
Payment success page tests: the reconciliation state machine on its own and
GET /api/payments/success/ end to end.
"""

from unittest import mock

from django.test import SimpleTestCase, override_settings
from rest_framework import status
from rest_framework.test import APITestCase

from academy.courses.models import Course, CourseEnrollment
from core.stripe_integration.exceptions import NotFound, PaymentIncomplete
from core.stripe_integration.reconciliation import (
    NO_SESSION_MESSAGE,
    SIGN_IN_MESSAGE,
    PaymentReconciliation,
    ReconciliationState,
    parse_course_ids,
)
from core.stripe_integration.services import CallerIdentity, VerificationResult
from .fakes import FakeGateway, bearer, make_user

IDENTITY = CallerIdentity(user_id=1, email="student@academy.test")


@override_settings(FRONTEND_URL="https://academy.test")
class PaymentReconciliationTests(SimpleTestCase):
    def setUp(self):
        self.verifier = mock.Mock()

    def reconcile(self, session_id="cs_test_1", course_ids=None):
        return PaymentReconciliation(IDENTITY, session_id, course_ids, verifier=self.verifier)

    def test_starts_idle(self):
        reconciliation = self.reconcile()
        self.assertEqual(reconciliation.state, ReconciliationState.IDLE)
        self.verifier.verify.assert_not_called()

    def test_no_session_id_fails_without_verifying(self):
        for session_id in (None, ""):
            with self.subTest(session_id=session_id):
                reconciliation = self.reconcile(session_id=session_id).run()

                self.assertEqual(reconciliation.state, ReconciliationState.FAILED)
                self.assertEqual(reconciliation.message, NO_SESSION_MESSAGE)
                self.assertEqual(reconciliation.retry_url, "https://academy.test/payment")
        self.verifier.verify.assert_not_called()

    def test_anonymous_caller_fails_without_verifying(self):
        reconciliation = PaymentReconciliation(None, "cs_test_1", verifier=self.verifier).run()

        self.assertEqual(reconciliation.state, ReconciliationState.FAILED)
        self.assertEqual(reconciliation.status_code, 401)
        self.assertEqual(reconciliation.message, SIGN_IN_MESSAGE)
        self.assertEqual(reconciliation.retry_url, "https://academy.test/payment")
        self.verifier.verify.assert_not_called()

    def test_missing_session_is_reported_before_sign_in(self):
        reconciliation = PaymentReconciliation(None, None, verifier=self.verifier).run()
        self.assertEqual(reconciliation.message, NO_SESSION_MESSAGE)
        self.assertEqual(reconciliation.status_code, 400)

    def test_success(self):
        self.verifier.verify.return_value = VerificationResult(
            session_id="cs_test_1", enrolled_course_ids=[3, 4]
        )
        reconciliation = self.reconcile(course_ids=[3, 4]).run()

        self.verifier.verify.assert_called_once_with(IDENTITY, "cs_test_1", [3, 4])
        self.assertEqual(
            reconciliation.to_dict(),
            {
                "state": "success",
                "message": "Your payment has been processed successfully.",
                "transaction_id": "cs_test_1",
                "courses_enrolled": 2,
                "retry_url": None,
            },
        )

    def test_run_is_one_shot(self):
        self.verifier.verify.return_value = VerificationResult(session_id="cs_test_1")
        reconciliation = self.reconcile()
        reconciliation.run()
        reconciliation.run()
        self.assertEqual(self.verifier.verify.call_count, 1)

    def test_failed_run_is_not_retried(self):
        self.verifier.verify.side_effect = PaymentIncomplete("unpaid")
        reconciliation = self.reconcile()
        reconciliation.run()
        reconciliation.run()

        self.assertEqual(self.verifier.verify.call_count, 1)
        self.assertEqual(reconciliation.state, ReconciliationState.FAILED)
        self.assertEqual(reconciliation.status_code, 400)

    def test_payment_error_fails_with_retry(self):
        self.verifier.verify.side_effect = NotFound()
        result = self.reconcile().run().to_dict()

        self.assertEqual(result["state"], "failed")
        self.assertIsNone(result["transaction_id"])
        self.assertEqual(result["courses_enrolled"], 0)
        self.assertEqual(result["retry_url"], "https://academy.test/payment")
        self.assertTrue(result["message"])

    def test_unexpected_error_fails(self):
        self.verifier.verify.side_effect = RuntimeError("boom")
        with self.assertLogs("core.stripe_integration.reconciliation", level="ERROR"):
            reconciliation = self.reconcile().run()

        self.assertEqual(reconciliation.state, ReconciliationState.FAILED)
        self.assertEqual(reconciliation.status_code, 500)


class ParseCourseIdsTests(SimpleTestCase):
    def test_parse(self):
        self.assertEqual(parse_course_ids("1,2,3"), [1, 2, 3])
        self.assertEqual(parse_course_ids(" 4 , abc,,-1,0,4,5"), [4, 5])

    def test_empty(self):
        self.assertEqual(parse_course_ids(None), [])
        self.assertEqual(parse_course_ids(""), [])


@override_settings(FRONTEND_URL="https://academy.test")
class PaymentSuccessViewTests(APITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = make_user("student")
        cls.math = Course.objects.create(code="MATH101", name="Algebra", price=9900)
        cls.physics = Course.objects.create(code="PHY101", name="Physics", price=9900)

    def setUp(self):
        self.gateway = FakeGateway()
        patcher = mock.patch("core.stripe_integration.services.get_gateway", return_value=self.gateway)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_without_session_id(self):
        response = self.client.get("/api/payments/success/", **bearer(self.user))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["state"], "failed")
        self.assertEqual(response.json()["message"], NO_SESSION_MESSAGE)
        self.assertEqual(response.json()["retry_url"], "https://academy.test/payment")
        self.assertEqual(self.gateway.retrieved, [])

    def test_paid_checkout(self):
        items = [
            {"name": "Algebra", "amount": 9900, "course_id": self.math.id},
            {"name": "Physics", "amount": 9900, "course_id": self.physics.id},
        ]
        self.client.post("/api/payments/checkout/", {"items": items}, format="json", **bearer(self.user))
        self.gateway.mark_paid("cs_test_1")

        response = self.client.get(
            f"/api/payments/success/?session_id=cs_test_1&course_ids={self.math.id},{self.physics.id}",
            **bearer(self.user),
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["state"], "success")
        self.assertEqual(response.json()["transaction_id"], "cs_test_1")
        self.assertEqual(response.json()["courses_enrolled"], 2)
        self.assertEqual(self.gateway.retrieved, ["cs_test_1"])
        self.assertEqual(CourseEnrollment.objects.filter(student=self.user).count(), 2)

    def test_paid_checkout_without_course_ids_enrolls_purchase(self):
        items = [{"name": "Algebra", "amount": 9900, "course_id": self.math.id}]
        self.client.post("/api/payments/checkout/", {"items": items}, format="json", **bearer(self.user))
        self.gateway.mark_paid("cs_test_1")

        response = self.client.get("/api/payments/success/?session_id=cs_test_1", **bearer(self.user))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["courses_enrolled"], 1)
        self.assertTrue(CourseEnrollment.objects.filter(student=self.user, course=self.math).exists())

    def test_unpaid_checkout(self):
        self.client.post(
            "/api/payments/checkout/",
            {"items": [{"name": "Registration Fee", "amount": 5000, "type": "registration"}]},
            format="json",
            **bearer(self.user),
        )
        response = self.client.get("/api/payments/success/?session_id=cs_test_1", **bearer(self.user))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["state"], "failed")
        self.assertIsNotNone(response.json()["retry_url"])

    def test_signed_out_landing_renders_failed_state(self):
        response = self.client.get("/api/payments/success/?session_id=cs_test_1")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(
            response.json(),
            {
                "state": "failed",
                "message": SIGN_IN_MESSAGE,
                "transaction_id": None,
                "courses_enrolled": 0,
                "retry_url": "https://academy.test/payment",
            },
        )
        self.assertEqual(self.gateway.retrieved, [])

    def test_signed_out_without_session_id(self):
        response = self.client.get("/api/payments/success/")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["state"], "failed")
        self.assertEqual(response.json()["message"], NO_SESSION_MESSAGE)
        self.assertEqual(response.json()["retry_url"], "https://academy.test/payment")

    def test_invalid_token_renders_failed_state(self):
        response = self.client.get(
            "/api/payments/success/?session_id=cs_test_1", HTTP_AUTHORIZATION="Bearer not-a-token"
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.json()["state"], "failed")
        self.assertEqual(response.json()["retry_url"], "https://academy.test/payment")
        self.assertEqual(self.gateway.retrieved, [])
