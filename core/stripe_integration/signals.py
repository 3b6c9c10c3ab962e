"""
Stripe Webhook Signal Handlers
==============================

dj-stripe verifies the webhook signature and persists each event as a
`djstripe.models.Event`. We react to newly saved events through Django's
`post_save` signal instead of talking to Stripe from here.

Handled event types:
- `checkout.session.completed` → same reconciliation as the verify endpoint
  (ledger rows completed, registration fees, course enrollments) for the
  user in `metadata.user_id`, but only when the session is `paid`.

Everything else is ignored. A customer that closes the tab before being
redirected still ends up enrolled through this path, and the verify endpoint
stays a no-op afterwards.

Safety:
- Never re-raise from the signal handler (prevents webhook retry storms).
- Reconciliation is idempotent, so a redirect and a webhook for the same
  session can both run.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from django.contrib.auth import get_user_model
from django.db.models.signals import post_save
from django.dispatch import receiver

from djstripe.models import Event

from .exceptions import PaymentError
from .services import PaymentVerifier

logger = logging.getLogger(__name__)
User = get_user_model()


def _extract_data_object(event: Event) -> Dict[str, Any]:
    """
    Extract the Stripe event's `data.object` payload from a dj-stripe Event.

    Returns:
        A dict representing the `data.object` (or `{}` if not found).
    """
    data = event.data or {}
    if not isinstance(data, dict):
        return {}
    # Standard Stripe event shape: {"data": {"object": {...}}}
    inner = data.get("data")
    if isinstance(inner, dict) and isinstance(inner.get("object"), dict):
        return inner["object"]
    if isinstance(data.get("object"), dict):
        return data["object"]
    return {}


@receiver(post_save, sender=Event)
def on_djstripe_event_created(sender, instance: Event, created: bool, **kwargs):
    """
    Post-save hook for dj-stripe Event.

    Runs once for each *new* event saved by dj-stripe. Never re-raises.
    """
    if not created:
        return

    logger.info("[webhook] %s (event_id=%s)", instance.type, instance.id)

    if instance.type != "checkout.session.completed":
        logger.debug("Unhandled event type: %s", instance.type)
        return

    try:
        handle_checkout_session_completed(_extract_data_object(instance))
    except Exception as exc:
        logger.exception("Error handling event %s: %s", instance.type, exc)


def handle_checkout_session_completed(session: Dict[str, Any]) -> None:
    """
    Reconcile a completed Checkout Session for the user in its metadata.
    """
    session_id = session.get("id")
    payment_status = session.get("payment_status")
    user_id = (session.get("metadata") or {}).get("user_id")

    logger.info(
        "checkout.session.completed session=%s user=%s status=%s",
        session_id,
        user_id,
        payment_status,
    )

    if payment_status != "paid":
        # async payment methods complete later via a separate event
        logger.info("Session %s not paid yet (status=%s). Skipping.", session_id, payment_status)
        return

    if not session_id or not user_id:
        logger.warning("Missing session id or user_id in metadata. Skipping.")
        return

    try:
        user = User.objects.get(pk=user_id)
    except (User.DoesNotExist, ValueError):
        logger.error("Stripe webhook: user %s not found.", user_id)
        return

    try:
        result = PaymentVerifier().reconcile(user, session_id)
    except PaymentError as e:
        logger.warning("Webhook reconciliation skipped for session %s: %s", session_id, e.message)
        return

    logger.info(
        "Webhook reconciled session %s for user %s (courses=%s)",
        session_id,
        user.pk,
        result.enrolled_course_ids,
    )
