import json
from datetime import timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest
import stripe
from django.core.management import call_command
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import User
from bookings.models import Booking
from events.models import Event
from payments.models import Payment, StripeWebhookEvent
from vendors.models import Vendor

WEBHOOK_UUID = "5f0c6d0e-3f3b-4a41-9a51-0b8b1a6c2d10"


@pytest.fixture
def booking(db):
    customer = User.objects.create_user(
        username="priya@example.com",
        email="priya@example.com",
        password="password123",
    )
    owner = User.objects.create_user(
        username="studio@example.com",
        email="studio@example.com",
        password="password123",
        role=User.ROLE_VENDOR,
    )
    vendor = Vendor.objects.create(user=owner, business_name="Frame & Fable", category=Vendor.PHOTOGRAPHY)
    event = Event.objects.create(
        user=customer,
        title="Wedding",
        type="wedding",
        date=timezone.now() + timedelta(days=60),
        budget=Decimal("200000.00"),
        spent_amount=Decimal("0"),
    )
    return Booking.objects.create(
        event=event,
        vendor=vendor,
        user=customer,
        service_name="Full-day coverage",
        amount=Decimal("50000.00"),
    )


@pytest.fixture(autouse=True)
def stripe_settings(settings):
    settings.STRIPE_SECRET_KEY = "sk_test"
    settings.STRIPE_WEBHOOK_SECRET = "whsec_test"
    settings.STRIPE_WEBHOOK_UUID = WEBHOOK_UUID


def _completed_event(booking, *, event_id="evt_1", session_id="cs_test_paid"):
    return {
        "id": event_id,
        "type": "checkout.session.completed",
        "data": {
            "object": {
                "id": session_id,
                "object": "checkout.session",
                "payment_status": "paid",
                "payment_intent": "pi_test_123",
                "metadata": {
                    "bookingId": str(booking.id),
                    "userId": str(booking.user_id),
                    "vendorId": str(booking.vendor_id),
                },
            }
        },
    }


def _post(event, *, signature="t=1,v1=signed", webhook_uuid=WEBHOOK_UUID):
    url = reverse("stripe-webhook", args=[webhook_uuid])
    headers = {"HTTP_STRIPE_SIGNATURE": signature} if signature else {}
    return APIClient().post(url, data=json.dumps(event), content_type="application/json", **headers)


def _accept_signature(monkeypatch, event):
    monkeypatch.setattr(
        "payments.api.stripe.Webhook.construct_event",
        lambda payload, sig_header, secret: event,
    )


@pytest.mark.django_db
def test_completed_session_settles_booking(monkeypatch, booking):
    event = _completed_event(booking)
    _accept_signature(monkeypatch, event)

    response = _post(event)

    assert response.status_code == 200
    assert response.json() == {"received": True}
    booking.refresh_from_db()
    assert booking.status == Booking.ACCEPTED
    assert Payment.objects.filter(booking=booking, status=Payment.COMPLETED).count() == 1
    booking.event.refresh_from_db()
    assert booking.event.spent_amount == Decimal("50000")
    assert StripeWebhookEvent.objects.get(event_id="evt_1").processed_at is not None


@pytest.mark.django_db
def test_redelivered_event_is_noop(monkeypatch, booking):
    event = _completed_event(booking)
    _accept_signature(monkeypatch, event)

    _post(event)
    response = _post(event)

    assert response.status_code == 200
    assert Payment.objects.count() == 1
    assert StripeWebhookEvent.objects.count() == 1


@pytest.mark.django_db
def test_webhook_after_verify_does_not_double_credit(monkeypatch, booking):
    session = SimpleNamespace(
        id="cs_test_paid",
        payment_status="paid",
        payment_intent="pi_test_123",
        metadata={"bookingId": str(booking.id), "userId": str(booking.user_id)},
    )
    monkeypatch.setattr(
        "payments.services.checkout.stripe.checkout.Session.retrieve",
        lambda session_id: session,
    )
    client = APIClient()
    client.force_authenticate(booking.user)
    client.post(reverse("checkout-verify"), {"sessionId": "cs_test_paid"}, format="json")

    event = _completed_event(booking, event_id="evt_2")
    _accept_signature(monkeypatch, event)
    response = _post(event)

    assert response.status_code == 200
    assert Payment.objects.filter(status=Payment.COMPLETED).count() == 1
    booking.event.refresh_from_db()
    assert booking.event.spent_amount == Decimal("50000")


@pytest.mark.django_db
def test_missing_signature(booking):
    response = _post(_completed_event(booking), signature=None)

    assert response.status_code == 400
    assert response.json() == {"error": "Missing stripe-signature"}


@pytest.mark.django_db
def test_invalid_signature(monkeypatch, booking):
    def reject(payload, sig_header, secret):
        raise stripe.SignatureVerificationError("bad signature", sig_header)

    monkeypatch.setattr("payments.api.stripe.Webhook.construct_event", reject)

    response = _post(_completed_event(booking))

    assert response.status_code == 400
    assert response.json() == {"error": "Webhook processing error"}
    assert Payment.objects.count() == 0


@pytest.mark.django_db
def test_unknown_webhook_path_is_rejected(monkeypatch, booking):
    event = _completed_event(booking)
    _accept_signature(monkeypatch, event)

    response = _post(event, webhook_uuid="00000000-0000-0000-0000-000000000000")

    assert response.status_code == 400
    assert Payment.objects.count() == 0


@pytest.mark.django_db
def test_processing_error_is_recorded_and_retryable(monkeypatch, booking):
    event = _completed_event(booking)
    event["data"]["object"]["metadata"]["bookingId"] = "999999"
    _accept_signature(monkeypatch, event)

    response = _post(event)

    assert response.status_code == 400
    record = StripeWebhookEvent.objects.get(event_id="evt_1")
    assert record.processed_at is None
    assert record.error_message == "Booking not found"


@pytest.mark.django_db
def test_other_event_types_are_acknowledged(monkeypatch, booking):
    event = {"id": "evt_other", "type": "customer.created", "data": {"object": {"id": "cus_1"}}}
    _accept_signature(monkeypatch, event)

    response = _post(event)

    assert response.status_code == 200
    assert Payment.objects.count() == 0


@pytest.mark.django_db
def test_syncstripe_settles_paid_sessions(monkeypatch, booking):
    paid = SimpleNamespace(
        id="cs_test_paid",
        payment_status="paid",
        payment_intent="pi_test_123",
        metadata={"bookingId": str(booking.id), "userId": str(booking.user_id)},
    )
    unpaid = SimpleNamespace(id="cs_test_open", payment_status="unpaid", payment_intent=None, metadata={})
    listing = SimpleNamespace(auto_paging_iter=lambda: iter([paid, unpaid]))
    monkeypatch.setattr("payments.services.checkout.stripe.checkout.Session.list", lambda **kwargs: listing)

    call_command("syncstripe", "--since-hours", "24")
    call_command("syncstripe")

    assert Payment.objects.filter(stripe_session_id="cs_test_paid").count() == 1
    booking.refresh_from_db()
    assert booking.status == Booking.ACCEPTED
