"""
Stripe Integration AppConfig
============================

Registers `core.stripe_integration` with Django and imports the signal
handlers at startup so the `post_save` receiver on `djstripe.models.Event`
is connected exactly once per process.

Keep `ready()` free of DB and network calls; it runs on every process start.
"""

from django.apps import AppConfig


class StripeIntegrationConfig(AppConfig):
    """
    App configuration for the `core.stripe_integration` package.
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "core.stripe_integration"
    label = "stripe_integration"
    verbose_name = "Payments"

    def ready(self):
        # Import signals so Django registers the post_save handler for dj-stripe Event
        from . import signals  # noqa: F401
