"""
Academy User Profile Models

This module extends Django's built-in User model with the academy profile:
the user's role, whether registration fees have been paid, and the cached
payment-gateway customer id. Profiles are created automatically through
Django signals.

Models:
- Profile: Role, fee status and payment customer reference per user
"""

from django.db import models
from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver
from django.utils.translation import gettext_lazy as _

__all__ = ["Profile"]


class Profile(models.Model):
    """
    Extended user profile model for the academy.

    Attributes:
        user: One-to-one relationship with Django User model
        role: Academy role, drives permissions on teacher/admin endpoints
        fees_paid: Set once a registration fee payment has been verified
        stripe_customer_id: Gateway customer id, created at most once per user
        phone: Optional contact number
    """

    class Role(models.TextChoices):
        ADMIN = "admin", _("Admin")
        TEACHER = "teacher", _("Teacher")
        STUDENT = "student", _("Student")
        PARENT = "parent", _("Parent")

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
        verbose_name=_("User"),
        help_text=_("Associated user account"),
    )

    role = models.CharField(
        max_length=16,
        choices=Role.choices,
        default=Role.STUDENT,
        verbose_name=_("Role"),
    )

    fees_paid = models.BooleanField(
        default=False,
        verbose_name=_("Fees Paid"),
        help_text=_("Registration fee has been paid and verified"),
    )

    stripe_customer_id = models.CharField(
        max_length=255,
        blank=True,
        null=True,
        verbose_name=_("Stripe Customer ID"),
        help_text=_("Cached payment gateway customer, reused across checkouts"),
    )

    phone = models.CharField(max_length=32, blank=True, verbose_name=_("Phone"))

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("User Profile")
        verbose_name_plural = _("User Profiles")
        db_table = "academy_profile"

    def __str__(self) -> str:
        return f"{self.user.username} Profile"

    def __repr__(self) -> str:
        return f"<Profile(user={self.user.username}, role={self.role}, fees_paid={self.fees_paid})>"

    @property
    def is_teacher(self) -> bool:
        return self.role == self.Role.TEACHER

    @property
    def is_admin(self) -> bool:
        return self.role == self.Role.ADMIN or self.user.is_staff


# --- Signal Handlers for Automatic Profile Management ---


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_user_profile(sender, instance, created: bool, **kwargs) -> None:
    """
    Automatically create a user profile when a new user is created.

    Args:
        sender: The User model class
        instance: The actual User instance that was saved
        created: Boolean indicating if this is a new instance
        **kwargs: Additional signal arguments
    """
    if created:
        Profile.objects.get_or_create(user=instance)
