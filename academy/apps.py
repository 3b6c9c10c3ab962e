"""
Academy Application Configuration

Defines the Django application configuration for the academy domain.
Importing the users models in ready() wires up the profile signals.
"""

from django.apps import AppConfig


class AcademyConfig(AppConfig):
    """
    Configuration class for the Academy Django application.

    Attributes:
        default_auto_field: Default primary key field type for models
        name: Application name for Django registration
        verbose_name: Human-readable application name for admin interface
    """

    default_auto_field: str = "django.db.models.BigAutoField"
    name: str = "academy"
    verbose_name: str = "Academy"

    def ready(self) -> None:
        """
        Register the profile signal handlers once the app registry is loaded.
        """
        super().ready()
        from .users import models  # noqa: F401
