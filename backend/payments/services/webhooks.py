from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from ..models import StripeWebhookEvent
from .checkout import session_metadata, session_value
from .settlement import PAID, settle_paid_session

logger = logging.getLogger(__name__)

SETTLEMENT_EVENTS = {
    "checkout.session.completed",
    "checkout.session.async_payment_succeeded",
}


def handle_stripe_event(event) -> bool:
    """
    Apply a verified Stripe event. Returns False when the event id was already processed.

    Failures are recorded on the event row and re-raised so Stripe retries the
    delivery; a later successful retry clears the error.
    """
    event_id = event["id"]
    event_type = event["type"]

    with transaction.atomic():
        record, _ = StripeWebhookEvent.objects.select_for_update().get_or_create(
            event_id=event_id,
            defaults={"type": event_type},
        )
        if record.processed_at is not None:
            logger.info("Stripe event %s already processed; skipping", event_id)
            return False

    try:
        if event_type in SETTLEMENT_EVENTS:
            _settle_checkout_session(event["data"]["object"])
        else:
            logger.debug("Ignoring Stripe event %s of type %s", event_id, event_type)
    except Exception as exc:
        record.error_message = str(exc)[:500]
        record.save(update_fields=["error_message"])
        raise

    record.processed_at = timezone.now()
    record.error_message = ""
    record.save(update_fields=["processed_at", "error_message"])
    return True


def _settle_checkout_session(session) -> None:
    metadata = session_metadata(session)
    booking_id = metadata.get("bookingId")
    session_id = session_value(session, "id")
    if not booking_id:
        logger.warning("Checkout session %s has no booking metadata; nothing to settle", session_id)
        return
    if session_value(session, "payment_status") != PAID:
        logger.info("Checkout session %s completed without payment yet; waiting", session_id)
        return
    result = settle_paid_session(session, booking_id=booking_id, acting_user_id=metadata.get("userId"))
    logger.info(
        "Webhook settled session %s for booking %s (already processed: %s)",
        session_id,
        booking_id,
        result.already_processed,
    )
