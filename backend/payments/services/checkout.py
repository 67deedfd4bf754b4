from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import stripe
from django.conf import settings

from bookings.models import Booking
from core.exceptions import ProviderError
from vendors.models import Vendor

logger = logging.getLogger(__name__)

_http_client_configured = False


def configure_stripe():
    global _http_client_configured
    if not settings.STRIPE_SECRET_KEY:
        raise RuntimeError("STRIPE_SECRET_KEY is not configured.")
    stripe.api_key = settings.STRIPE_SECRET_KEY
    if not _http_client_configured:
        stripe.default_http_client = stripe.RequestsClient(timeout=settings.STRIPE_TIMEOUT_SECONDS)
        _http_client_configured = True


def to_minor_units(amount: Decimal | str | float) -> int:
    """Convert a rupee amount to paise (Stripe's ``unit_amount``), rounding half up."""
    value = Decimal(str(amount)) * 100
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def session_value(session: Any, key: str, default=None):
    """Read a field from a Stripe session whether it arrived as an SDK object or a webhook dict."""
    if isinstance(session, dict):
        return session.get(key, default)
    return getattr(session, key, default)


def session_metadata(session: Any) -> dict:
    metadata = session_value(session, "metadata") or {}
    if isinstance(metadata, dict):
        return metadata
    return dict(metadata)


def create_booking_checkout_session(*, booking: Booking, vendor: Vendor):
    """
    Create a Stripe Checkout session for the full booking amount.

    The booking, customer and vendor ids travel as session metadata so that
    verification and webhooks can find their way back to the booking without
    any local row being written here.
    """
    try:
        configure_stripe()
    except RuntimeError as exc:
        logger.error("Stripe is not configured: %s", exc)
        raise ProviderError("Failed to create checkout session") from exc

    base_url = settings.APP_URL.rstrip("/")
    try:
        session = stripe.checkout.Session.create(
            mode="payment",
            payment_method_types=["card"],
            line_items=[
                {
                    "quantity": 1,
                    "price_data": {
                        "currency": settings.STRIPE_CURRENCY,
                        "unit_amount": to_minor_units(booking.amount),
                        "product_data": {
                            "name": f"{vendor.business_name} - {booking.service_name}",
                            "description": "Booking for event services",
                        },
                    },
                }
            ],
            success_url=(
                f"{base_url}/payment/success?session_id={{CHECKOUT_SESSION_ID}}&booking_id={booking.id}"
            ),
            cancel_url=f"{base_url}/payment/cancel?booking_id={booking.id}",
            metadata={
                "bookingId": str(booking.id),
                "userId": str(booking.user_id),
                "vendorId": str(booking.vendor_id),
            },
        )
    except stripe.StripeError as exc:
        logger.exception("Failed to create Stripe checkout session for booking %s: %s", booking.id, exc)
        raise ProviderError("Failed to create checkout session") from exc

    logger.info("Created checkout session %s for booking %s", session.id, booking.id)
    return session


def retrieve_checkout_session(session_id: str):
    try:
        configure_stripe()
    except RuntimeError as exc:
        logger.error("Stripe is not configured: %s", exc)
        raise ProviderError("Failed to verify payment") from exc

    try:
        return stripe.checkout.Session.retrieve(session_id)
    except stripe.StripeError as exc:
        logger.exception("Failed to retrieve Stripe checkout session %s: %s", session_id, exc)
        raise ProviderError("Failed to verify payment") from exc
