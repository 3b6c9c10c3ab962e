"""
Payment Ledger Model

PaymentRecord is one row per purchased item of a checkout. All rows of one
checkout share the Stripe Checkout Session id as `transaction_id`.

Lifecycle:
- created `pending` when the checkout session is created
- set to `completed` once, when the paid session is verified
- never deleted

`updated_at` is written only on the status transition.
"""

import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class PaymentStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    COMPLETED = "completed", _("Completed")
    FAILED = "failed", _("Failed")


class PaymentRecord(models.Model):
    """A single purchased item of a checkout."""

    REGISTRATION = "registration"
    COURSE = "course"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="payment_records",
        verbose_name=_("User"),
    )
    amount = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        verbose_name=_("Amount"),
        help_text=_("Amount in minor currency units (e.g. cents)"),
    )
    currency = models.CharField(max_length=3, default="usd", verbose_name=_("Currency"))
    description = models.CharField(max_length=255, verbose_name=_("Description"))
    transaction_id = models.CharField(
        max_length=255,
        db_index=True,
        verbose_name=_("Transaction ID"),
        help_text=_("Stripe Checkout Session id, shared by all items of one checkout"),
    )
    status = models.CharField(
        max_length=16,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
        verbose_name=_("Status"),
    )
    payment_type = models.CharField(
        max_length=32,
        verbose_name=_("Payment type"),
        help_text=_("registration, course, ..."),
    )
    course = models.ForeignKey(
        "academy.Course",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payment_records",
        verbose_name=_("Course"),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = _("Payment record")
        verbose_name_plural = _("Payment records")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["transaction_id", "user"], name="stripe_inte_transac_5b2e8c_idx"),
        ]

    def __str__(self):
        return f"{self.description} ({self.amount} {self.currency}) – {self.status}"

