"""
Root URL configuration for the academy backend.

- /admin/          Django admin (Jazzmin skin)
- /api/academy/    Authentication, courses, enrollments, attendance, grades
- /api/payments/   Checkout, verification, reconciliation, payment history
- /stripe/         dj-stripe webhook endpoint
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/academy/", include("academy.urls")),
    path("api/payments/", include("core.stripe_integration.urls")),
    path("stripe/", include("djstripe.urls", namespace="djstripe")),
]
