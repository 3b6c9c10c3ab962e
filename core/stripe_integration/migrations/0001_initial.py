import uuid

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("academy", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="PaymentRecord",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "amount",
                    models.PositiveIntegerField(
                        help_text="Amount in minor currency units (e.g. cents)",
                        validators=[django.core.validators.MinValueValidator(1)],
                        verbose_name="Amount",
                    ),
                ),
                ("currency", models.CharField(default="usd", max_length=3, verbose_name="Currency")),
                ("description", models.CharField(max_length=255, verbose_name="Description")),
                (
                    "transaction_id",
                    models.CharField(
                        db_index=True,
                        help_text="Stripe Checkout Session id, shared by all items of one checkout",
                        max_length=255,
                        verbose_name="Transaction ID",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("completed", "Completed"), ("failed", "Failed")],
                        default="pending",
                        max_length=16,
                        verbose_name="Status",
                    ),
                ),
                (
                    "payment_type",
                    models.CharField(help_text="registration, course, ...", max_length=32, verbose_name="Payment type"),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "course",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="payment_records",
                        to="academy.course",
                        verbose_name="Course",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payment_records",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="User",
                    ),
                ),
            ],
            options={
                "verbose_name": "Payment record",
                "verbose_name_plural": "Payment records",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["transaction_id", "user"], name="stripe_inte_transac_5b2e8c_idx"),
                ],
            },
        ),
    ]
