from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import User
from bookings.models import Booking
from events.models import Event
from vendors.models import Vendor


@pytest.fixture
def customer(db):
    return User.objects.create_user(
        username="priya@example.com",
        email="priya@example.com",
        password="password123",
    )


@pytest.fixture
def vendor_owner(db):
    return User.objects.create_user(
        username="dj@example.com",
        email="dj@example.com",
        password="password123",
        role=User.ROLE_VENDOR,
    )


@pytest.fixture
def vendor(vendor_owner):
    return Vendor.objects.create(user=vendor_owner, business_name="Beats by Kabir", category=Vendor.ENTERTAINMENT)


@pytest.fixture
def event(customer):
    return Event.objects.create(
        user=customer,
        title="Sangeet",
        type="wedding",
        date=timezone.now() + timedelta(days=40),
        budget=Decimal("300000.00"),
    )


@pytest.fixture
def booking(customer, vendor, event):
    return Booking.objects.create(
        event=event,
        vendor=vendor,
        user=customer,
        service_name="DJ night",
        amount=Decimal("45000.00"),
    )


@pytest.mark.django_db
def test_create_booking_starts_pending(customer, vendor, event):
    client = APIClient()
    client.force_authenticate(customer)

    response = client.post(
        "/api/bookings",
        {
            "eventId": event.id,
            "vendorId": vendor.id,
            "serviceName": "DJ night",
            "amount": "45000.00",
            "status": "accepted",
        },
        format="json",
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["userId"] == customer.id
    assert Booking.objects.get(pk=body["id"]).status == Booking.PENDING


@pytest.mark.django_db
def test_cannot_book_for_someone_elses_event(vendor, event):
    intruder = User.objects.create_user(username="x@example.com", email="x@example.com", password="password123")
    client = APIClient()
    client.force_authenticate(intruder)

    response = client.post(
        "/api/bookings",
        {"eventId": event.id, "vendorId": vendor.id, "serviceName": "DJ", "amount": "100.00"},
        format="json",
    )

    assert response.status_code == 400
    assert "eventId" in response.json()["errors"]


@pytest.mark.django_db
def test_list_returns_only_own_bookings(customer, vendor_owner, booking):
    client = APIClient()
    client.force_authenticate(customer)
    assert [b["id"] for b in client.get("/api/bookings").json()] == [booking.id]

    client.force_authenticate(vendor_owner)
    assert client.get("/api/bookings").json() == []


@pytest.mark.django_db
def test_vendor_accepts_booking(vendor_owner, booking):
    client = APIClient()
    client.force_authenticate(vendor_owner)

    response = client.patch(f"/api/bookings/{booking.id}", {"status": "accepted"}, format="json")

    assert response.status_code == 200
    assert response.json()["status"] == "accepted"
    booking.refresh_from_db()
    assert booking.status == Booking.ACCEPTED


@pytest.mark.django_db
def test_customer_cannot_accept_own_booking(customer, booking):
    client = APIClient()
    client.force_authenticate(customer)

    response = client.patch(f"/api/bookings/{booking.id}", {"status": "accepted"}, format="json")

    assert response.status_code == 403
    booking.refresh_from_db()
    assert booking.status == Booking.PENDING


@pytest.mark.django_db
def test_customer_cancels_and_edits_notes(customer, booking):
    client = APIClient()
    client.force_authenticate(customer)

    response = client.patch(
        f"/api/bookings/{booking.id}",
        {"status": "cancelled", "notes": "Date moved"},
        format="json",
    )

    assert response.status_code == 200
    booking.refresh_from_db()
    assert booking.status == Booking.CANCELLED
    assert booking.notes == "Date moved"


@pytest.mark.django_db
def test_unknown_booking_is_404(customer):
    client = APIClient()
    client.force_authenticate(customer)

    response = client.patch("/api/bookings/999999", {"notes": "hi"}, format="json")

    assert response.status_code == 404
    assert response.json() == {"message": "Booking not found"}


@pytest.mark.django_db
def test_amount_is_editable_while_pending(customer, booking):
    client = APIClient()
    client.force_authenticate(customer)

    response = client.patch(f"/api/bookings/{booking.id}", {"amount": "40000.00"}, format="json")

    assert response.status_code == 200
    booking.refresh_from_db()
    assert booking.amount == Decimal("40000.00")


@pytest.mark.django_db
def test_amount_is_locked_after_booking_is_accepted(vendor_owner, booking):
    booking.status = Booking.ACCEPTED
    booking.save(update_fields=["status"])
    client = APIClient()
    client.force_authenticate(vendor_owner)

    response = client.patch(f"/api/bookings/{booking.id}", {"amount": "1.00"}, format="json")

    assert response.status_code == 400
    assert response.json()["message"] == "Amount cannot change once the booking has been paid or actioned."
    booking.refresh_from_db()
    assert booking.amount == Decimal("45000.00")
