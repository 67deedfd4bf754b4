import logging
from datetime import timedelta

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from rest_framework.exceptions import NotFound, ValidationError

from accounts.models import User
from bookings.models import Booking
from core.exceptions import ProviderError, api_exception_handler
from events.models import Event, EventTask
from vendors.models import Vendor


def test_validation_errors_keep_field_detail():
    exc = ValidationError({"email": ["Invalid email address"], "password": ["Password is required"]})

    response = api_exception_handler(exc, {})

    assert response.status_code == 400
    assert response.data["message"] == "Invalid email address"
    assert response.data["errors"]["password"] == ["Password is required"]


def test_detail_errors_become_message():
    response = api_exception_handler(NotFound("Event not found"), {})

    assert response.status_code == 404
    assert response.data == {"message": "Event not found"}


def test_provider_errors_are_logged(caplog):
    with caplog.at_level(logging.ERROR, logger="core.exceptions"):
        response = api_exception_handler(ProviderError("Failed to verify payment"), {})

    assert response.status_code == 500
    assert response.data == {"message": "Failed to verify payment"}
    assert "Failed to verify payment" in caplog.text


def test_unhandled_exceptions_are_left_to_django():
    assert api_exception_handler(RuntimeError("boom"), {}) is None


@pytest.mark.django_db
def test_api_requests_are_logged(client, caplog):
    with caplog.at_level(logging.INFO, logger="eventmate.requests"):
        client.get("/api/vendors")

    assert "GET /api/vendors 200 in" in caplog.text


@pytest.mark.django_db
def test_devseed_refuses_outside_debug(settings):
    settings.DEBUG = False

    with pytest.raises(CommandError):
        call_command("devseed")


@pytest.mark.django_db
def test_devseed_is_idempotent(settings):
    settings.DEBUG = True

    call_command("devseed")
    call_command("devseed")

    assert User.objects.filter(role=User.ROLE_ADMIN).count() == 1
    assert Vendor.objects.count() == 4
    assert Event.objects.count() == 1
    assert EventTask.objects.count() == 3
    assert EventTask.objects.get(title="Book venue").completed_at is not None
    assert Booking.objects.filter(status=Booking.PENDING).count() == 1
    event = Event.objects.get()
    assert event.date - event.created_at > timedelta(days=80)
