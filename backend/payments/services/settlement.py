from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from django.db import IntegrityError, transaction
from django.db.models import DecimalField, F, Value
from django.db.models.functions import Coalesce
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied

from bookings.models import Booking
from core.exceptions import BadRequest
from events.models import Event
from ..models import Payment
from .checkout import retrieve_checkout_session, session_metadata, session_value

logger = logging.getLogger(__name__)

PAID = "paid"


@dataclass
class SettlementResult:
    success: bool
    payment_status: str
    already_processed: bool = False
    payment: Optional[Payment] = None

    def as_response(self) -> dict:
        body = {"success": self.success, "paymentStatus": self.payment_status}
        if self.already_processed:
            body["alreadyProcessed"] = True
        return body


def verify_checkout_session(*, session_id: str, user) -> SettlementResult:
    """
    Confirm a Checkout session on behalf of the customer who paid for it.

    Unpaid sessions are reported back without touching the database; paid
    sessions go through :func:`settle_paid_session`.
    """
    if not session_id:
        raise BadRequest("Session ID is required")

    session = retrieve_checkout_session(session_id)
    metadata = session_metadata(session)

    if metadata.get("userId") != str(user.pk):
        logger.warning("User %s tried to verify checkout session %s owned by another user", user.pk, session_id)
        raise PermissionDenied("Not authorized to verify this payment")

    booking_id = metadata.get("bookingId")
    if not booking_id:
        raise BadRequest("Invalid session - no booking associated")

    payment_status = session_value(session, "payment_status")
    if payment_status != PAID:
        return SettlementResult(success=False, payment_status=payment_status or "unpaid")

    return settle_paid_session(session, booking_id=booking_id, acting_user_id=user.pk)


def settle_paid_session(session: Any, *, booking_id, acting_user_id=None) -> SettlementResult:
    """
    Record a paid Checkout session against its booking exactly once.

    The booking row is locked for the duration so that concurrent verify and
    webhook deliveries for the same session serialize; a duplicate that slips
    past the lock hits the completed-payment constraint and is reported as
    already processed. When ``acting_user_id`` is given the booking must belong
    to that user. A booking that has already left ``pending`` keeps its status
    but still gets the payment and the event spend recorded.
    """
    session_id = session_value(session, "id") or ""
    payment_intent = session_value(session, "payment_intent")
    if payment_intent is not None and not isinstance(payment_intent, str):
        payment_intent = session_value(payment_intent, "id")

    with transaction.atomic():
        try:
            booking = Booking.objects.select_for_update().get(pk=booking_id)
        except (Booking.DoesNotExist, ValueError):
            raise NotFound("Booking not found")
        if acting_user_id is not None and str(booking.user_id) != str(acting_user_id):
            logger.warning(
                "Session %s names user %s but booking %s belongs to %s",
                session_id,
                acting_user_id,
                booking.id,
                booking.user_id,
            )
            raise PermissionDenied("Not authorized to verify this payment")

        already_settled = booking.payments.filter(
            stripe_session_id=session_id,
            status=Payment.COMPLETED,
        ).exists()
        if already_settled:
            logger.info("Checkout session %s already settled for booking %s", session_id, booking.id)
            return SettlementResult(success=True, payment_status=PAID, already_processed=True)

        try:
            with transaction.atomic():
                payment = Payment.objects.create(
                    booking=booking,
                    user_id=booking.user_id,
                    vendor_id=booking.vendor_id,
                    amount=booking.amount,
                    status=Payment.COMPLETED,
                    stripe_payment_id=payment_intent or "",
                    stripe_session_id=session_id,
                    paid_at=timezone.now(),
                )
        except IntegrityError:
            logger.info("Checkout session %s settled concurrently for booking %s", session_id, booking.id)
            return SettlementResult(success=True, payment_status=PAID, already_processed=True)

        if booking.status == Booking.PENDING:
            booking.status = Booking.ACCEPTED
            booking.save(update_fields=["status", "updated_at"])
        else:
            logger.warning(
                "Booking %s settled by session %s while %s; status left unchanged",
                booking.id,
                session_id,
                booking.status,
            )

        money = DecimalField(max_digits=12, decimal_places=2)
        Event.objects.filter(pk=booking.event_id).update(
            spent_amount=Coalesce(F("spent_amount"), Value(Decimal("0")), output_field=money)
            + Value(booking.amount, output_field=money),
        )

    logger.info(
        "Settled checkout session %s: booking %s paid %s (payment %s)",
        session_id,
        booking.id,
        booking.amount,
        payment.id,
    )
    return SettlementResult(success=True, payment_status=PAID, payment=payment)
