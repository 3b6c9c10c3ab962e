"""
Payment Views (core.stripe_integration)
=======================================

REST endpoints of the payment-to-enrollment flow, mounted under `/api/payments/`.

Endpoints
---------

1. CreateCheckoutSessionView
   - URL: /api/payments/checkout/
   - Method: POST
   - Body: {"items": [{"name", "description", "amount", "type", "course_id"?}]}
   - Purpose:
       Creates a Stripe Checkout Session and one pending PaymentRecord per
       item. Returns {"url": "<hosted checkout url>"}.

2. VerifyPaymentView
   - URL: /api/payments/verify/
   - Method: POST
   - Body: {"session_id": "cs_...", "course_ids": [1, 2]}
   - Purpose:
       Confirms a paid session for the caller, completes the ledger rows,
       sets fees_paid for registrations and enrolls purchased courses.

3. PaymentSuccessView
   - URL: /api/payments/success/?session_id=cs_...&course_ids=1,2
   - Method: GET
   - Purpose:
       State document for the post-checkout landing page
       (idle → verifying → success | failed). Errors, including a missing
       credential, come back as the `failed` document, not as `{"error"}`.

4. PaymentHistoryView
   - URL: /api/payments/history/
   - Method: GET
   - Purpose:
       The caller's payment records, newest first.

5. GetStripeConfigView
   - URL: /api/payments/stripe/config/
   - Method: GET
   - Auth: None
   - Purpose:
       Returns the publishable key so the frontend can initialize Stripe.js.

Errors
------
Every error leaves as `{"error": "<message>", ...}` with an explicit status:
401 unauthorized, 400 invalid/missing/incomplete, 404 no matching payment,
502 Stripe failure, 500 anything unexpected.
"""

import logging

from django.conf import settings
from rest_framework import status
from rest_framework.exceptions import APIException, AuthenticationFailed, NotAuthenticated, ValidationError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .exceptions import PaymentError, Unauthorized
from .models import PaymentRecord
from .reconciliation import PaymentReconciliation, parse_course_ids
from .serializers import PaymentRecordSerializer, VerifyPaymentSerializer
from .services import CheckoutInitiator, PaymentVerifier, identity_from_request

logger = logging.getLogger(__name__)


class PaymentAPIView(APIView):
    """
    Base view for the payment endpoints.

    Authentication is checked by the services (`identity_from_request`) so
    that a missing credential surfaces as the `Unauthorized` payment error.
    """

    permission_classes = [AllowAny]

    def handle_exception(self, exc):
        if isinstance(exc, PaymentError):
            return Response(exc.to_response(), status=exc.status_code)

        if isinstance(exc, (NotAuthenticated, AuthenticationFailed)):
            unauthorized = Unauthorized()
            return Response(unauthorized.to_response(), status=unauthorized.status_code)

        if isinstance(exc, ValidationError):
            return Response(
                {"error": "Invalid request", "details": exc.detail},
                status=status.HTTP_400_BAD_REQUEST,
            )

        if not isinstance(exc, APIException):
            logger.exception("Unexpected error in %s", self.__class__.__name__)
            return Response(
                {"error": "Internal server error"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return super().handle_exception(exc)


class CreateCheckoutSessionView(PaymentAPIView):
    def post(self, request):
        identity = identity_from_request(request)
        result = CheckoutInitiator().initiate(identity, request.data.get("items"))
        return Response({"url": result.url}, status=status.HTTP_200_OK)


class VerifyPaymentView(PaymentAPIView):
    def post(self, request):
        identity = identity_from_request(request)

        serializer = VerifyPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = PaymentVerifier().verify(
            identity,
            serializer.validated_data["session_id"],
            serializer.validated_data["course_ids"],
        )
        return Response(result.to_dict(), status=status.HTTP_200_OK)


class PaymentSuccessView(PaymentAPIView):
    """
    Always answers with the reconciliation state document, also when the
    credential is missing or invalid (`failed`, 401).
    """

    def perform_authentication(self, request):
        # resolved lazily in get()
        pass

    def get(self, request):
        try:
            identity = identity_from_request(request)
        except (Unauthorized, AuthenticationFailed):
            identity = None

        reconciliation = PaymentReconciliation(
            identity,
            session_id=request.query_params.get("session_id"),
            course_ids=parse_course_ids(request.query_params.get("course_ids")),
        ).run()
        return Response(reconciliation.to_dict(), status=reconciliation.status_code)


class PaymentHistoryView(PaymentAPIView):
    def get(self, request):
        identity = identity_from_request(request)
        records = (
            PaymentRecord.objects.filter(user_id=identity.user_id)
            .select_related("course")
            .order_by("-created_at")
        )
        return Response(PaymentRecordSerializer(records, many=True).data, status=status.HTTP_200_OK)


class GetStripeConfigView(APIView):
    """
    endpoint so the frontend can initialize Stripe.js
    """
    permission_classes = [AllowAny]

    def get(self, request):
        publishable_key = (
            settings.STRIPE_LIVE_PUBLISHABLE_KEY
            if settings.STRIPE_LIVE_MODE
            else settings.STRIPE_TEST_PUBLISHABLE_KEY
        )
        return Response(
            {"publishableKey": publishable_key, "currency": settings.DEFAULT_CURRENCY},
            status=200,
        )
