from django.urls import path
from .views import (
    CreateCheckoutSessionView,
    GetStripeConfigView,
    PaymentHistoryView,
    PaymentSuccessView,
    VerifyPaymentView,
)

app_name = "stripe_integration"

urlpatterns = [
    path("checkout/", CreateCheckoutSessionView.as_view(), name="checkout"),
    path("verify/", VerifyPaymentView.as_view(), name="verify"),
    path("success/", PaymentSuccessView.as_view(), name="success"),
    path("history/", PaymentHistoryView.as_view(), name="history"),
    path("stripe/config/", GetStripeConfigView.as_view(), name="stripe-config"),
]
