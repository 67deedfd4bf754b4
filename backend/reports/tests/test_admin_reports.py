from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import User
from bookings.models import Booking
from events.models import Event
from payments.models import Payment
from vendors.models import Vendor


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        username="admin@example.com",
        email="admin@example.com",
        password="password123",
        role=User.ROLE_ADMIN,
    )


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(admin_user)
    return client


@pytest.fixture
def marketplace(db):
    customer = User.objects.create_user(username="c@example.com", email="c@example.com", password="password123")
    owner = User.objects.create_user(
        username="v@example.com",
        email="v@example.com",
        password="password123",
        role=User.ROLE_VENDOR,
    )
    vendor = Vendor.objects.create(user=owner, business_name="Royal Gardens", category=Vendor.VENUE)
    event = Event.objects.create(user=customer, title="Wedding", type="wedding", date=timezone.now() + timedelta(days=9))
    paid = Booking.objects.create(event=event, vendor=vendor, user=customer, service_name="Hall", amount=Decimal("50000"))
    Booking.objects.create(event=event, vendor=vendor, user=customer, service_name="Lawn", amount=Decimal("20000"))
    Payment.objects.create(
        booking=paid,
        user=customer,
        vendor=vendor,
        amount=Decimal("50000.00"),
        status=Payment.COMPLETED,
        stripe_session_id="cs_1",
    )
    Payment.objects.create(booking=paid, user=customer, vendor=vendor, amount=Decimal("999.00"))
    return customer


@pytest.mark.django_db
def test_stats_sum_completed_revenue(admin_client, marketplace):
    response = admin_client.get("/api/admin/stats")

    assert response.status_code == 200
    assert response.json() == {
        "totalUsers": 3,
        "totalVendors": 1,
        "totalEvents": 1,
        "totalBookings": 2,
        "totalRevenue": 50000.0,
    }


@pytest.mark.django_db
def test_stats_with_no_payments(admin_client):
    assert admin_client.get("/api/admin/stats").json()["totalRevenue"] == 0


@pytest.mark.django_db
def test_listings(admin_client, marketplace):
    assert len(admin_client.get("/api/admin/users").json()) == 3
    assert [e["title"] for e in admin_client.get("/api/admin/events").json()] == ["Wedding"]
    assert len(admin_client.get("/api/admin/bookings").json()) == 2


@pytest.mark.django_db
def test_admin_routes_are_forbidden_for_users(marketplace):
    client = APIClient()
    client.force_authenticate(marketplace)

    for path in ("/api/admin/stats", "/api/admin/users", "/api/admin/events", "/api/admin/bookings"):
        response = client.get(path)
        assert response.status_code == 403
        assert response.json() == {"message": "Forbidden"}
