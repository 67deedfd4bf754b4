import json
from decimal import Decimal
from types import SimpleNamespace

import pytest
from rest_framework.test import APIClient

from accounts.models import User
from recommendations.services import gemini
from vendors.models import Vendor


class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


def _install_fake_client(monkeypatch, models):
    monkeypatch.setattr(gemini.genai, "Client", lambda **kwargs: SimpleNamespace(models=models))


@pytest.fixture(autouse=True)
def gemini_key(settings):
    settings.GEMINI_API_KEY = "test-key"


@pytest.fixture
def planner(db):
    return User.objects.create_user(
        username="planner@example.com",
        email="planner@example.com",
        password="password123",
    )


def test_defaults_for_wedding():
    result = gemini.get_default_recommendations("wedding", 200000, 100)

    assert len(result["vendorRecommendations"]) == 5
    assert len(result["schedule"]) == 3
    assert [phase["phase"] for phase in result["schedule"]] == [
        "Initial Planning",
        "Vendor Coordination",
        "Final Preparations",
    ]
    assert all(len(phase["tasks"]) == 3 for phase in result["schedule"])
    assert len(result["budgetBreakdown"]) == 6
    assert sum(line["percentage"] for line in result["budgetBreakdown"]) == 100
    assert len(result["tips"]) == 5

    costs = {rec["category"]: rec["estimatedCost"] for rec in result["vendorRecommendations"]}
    assert costs == {
        "venue": 70000,
        "catering": 60000,
        "decoration": 20000,
        "photography": 20000,
        "entertainment": 20000,
    }
    assert result["vendorRecommendations"][0]["description"] == "A suitable venue for 100 guests for your wedding"
    assert result["budgetBreakdown"][-1] == {
        "category": "Miscellaneous",
        "percentage": 5,
        "estimatedAmount": 10000,
        "tips": "Always keep a contingency fund",
    }


def test_defaults_are_deterministic_and_round_half_up():
    first = gemini.get_default_recommendations("party", Decimal("1001"), 10)
    second = gemini.get_default_recommendations("party", Decimal("1001"), 10)

    assert first == second
    # 1001 * 0.35 = 350.35, 1001 * 0.05 = 50.05
    assert first["vendorRecommendations"][0]["estimatedCost"] == 350
    assert first["budgetBreakdown"][-1]["estimatedAmount"] == 50


def test_provider_failure_falls_back(monkeypatch):
    _install_fake_client(monkeypatch, FakeModels(error=RuntimeError("quota exceeded")))

    result = gemini.get_event_recommendations(event_type="wedding", budget=200000, guest_count=100)

    assert result == gemini.get_default_recommendations("wedding", 200000, 100)


def test_malformed_json_falls_back(monkeypatch):
    _install_fake_client(monkeypatch, FakeModels(text="not json at all"))

    result = gemini.get_event_recommendations(event_type="wedding", budget=200000, guest_count=100)

    assert len(result["budgetBreakdown"]) == 6


def test_wrong_shape_falls_back(monkeypatch):
    _install_fake_client(monkeypatch, FakeModels(text=json.dumps({"vendorRecommendations": "none"})))

    result = gemini.get_event_recommendations(event_type="wedding", budget=200000, guest_count=100)

    assert len(result["vendorRecommendations"]) == 5


def test_missing_api_key_falls_back(settings, monkeypatch):
    settings.GEMINI_API_KEY = ""
    monkeypatch.setattr(gemini.genai, "Client", lambda **kwargs: pytest.fail("client should not be built"))

    result = gemini.get_event_recommendations(event_type="birthday", budget=50000, guest_count=30)

    assert result["vendorRecommendations"][0]["estimatedCost"] == 17500


def test_valid_response_is_returned(monkeypatch):
    answer = {
        "vendorRecommendations": [
            {
                "category": "venue",
                "name": "Royal Gardens",
                "vendorId": "12",
                "description": "Lawns",
                "estimatedCost": 90000,
                "priority": "essential",
                "reason": "Fits 300 guests",
            }
        ],
        "schedule": [
            {
                "phase": "Planning",
                "tasks": [
                    {
                        "title": "Book venue",
                        "description": "Pay advance",
                        "daysBeforeEvent": 60,
                        "category": "booking",
                        "estimatedDuration": "1 day",
                    }
                ],
            }
        ],
        "budgetBreakdown": [{"category": "Venue", "percentage": 100, "estimatedAmount": 90000, "tips": ""}],
        "tips": ["Book early"],
    }
    models = FakeModels(text=json.dumps(answer))
    _install_fake_client(monkeypatch, models)

    result = gemini.get_event_recommendations(event_type="wedding", budget=90000, guest_count=300)

    assert result == answer
    call = models.calls[0]
    assert call["model"] == "gemini-2.5-flash"
    assert call["config"].response_mime_type == "application/json"
    assert "Budget: Rs. 90,000 (Indian Rupees)" in call["contents"]


def test_format_inr_uses_indian_grouping():
    assert gemini.format_inr(200000) == "2,00,000"
    assert gemini.format_inr(12345678) == "1,23,45,678"
    assert gemini.format_inr(999) == "999"
    assert gemini.format_inr(Decimal("1500.50")) == "1,500.5"


@pytest.mark.django_db
def test_prompt_lists_platform_vendors_by_category(planner):
    Vendor.objects.create(
        user=planner,
        business_name="Royal Gardens",
        category=Vendor.VENUE,
        location="Jaipur",
        price_range={"min": 150000, "max": 600000},
        rating=Decimal("4.7"),
        review_count=12,
        is_verified=True,
    )
    Vendor.objects.create(user=planner, business_name="Spice Trail", category=Vendor.CATERING)

    prompt = gemini.build_event_prompt(
        event_type="wedding",
        budget=2000000,
        guest_count=300,
        location="Jaipur",
        date="2026-12-12",
        theme="Royal",
        vendors=Vendor.objects.order_by("category"),
    )

    assert "Use their exact business names." in prompt
    assert "VENUE:" in prompt and "CATERING:" in prompt
    assert "Price Range: Rs. 1,50,000 - Rs. 6,00,000" in prompt
    assert "Price Range: Contact for pricing" in prompt
    assert "(Verified Vendor)" in prompt
    assert "Theme: Royal" in prompt


def test_vendor_suggestions_fallback(monkeypatch):
    _install_fake_client(monkeypatch, FakeModels(error=RuntimeError("timeout")))

    result = gemini.get_vendor_suggestions(category="catering", budget=50000, event_type="wedding", guest_count=100)

    assert len(result["suggestions"]) == 5
    assert len(result["tips"]) == 3


@pytest.mark.django_db
def test_recommendation_endpoint(monkeypatch, planner):
    _install_fake_client(monkeypatch, FakeModels(error=RuntimeError("offline")))
    client = APIClient()
    client.force_authenticate(planner)

    response = client.post(
        "/api/ai/recommendations",
        {"eventType": "wedding", "budget": 200000, "guestCount": 100, "location": "Pune", "date": "2026-12-01"},
        format="json",
    )

    assert response.status_code == 200
    body = response.json()
    assert len(body["vendorRecommendations"]) == 5
    assert sum(line["percentage"] for line in body["budgetBreakdown"]) == 100


@pytest.mark.django_db
def test_recommendation_endpoint_validates_input(planner):
    client = APIClient()
    client.force_authenticate(planner)

    response = client.post("/api/ai/recommendations", {"eventType": "wedding"}, format="json")

    assert response.status_code == 400


@pytest.mark.django_db
def test_vendor_suggestion_endpoint_requires_login():
    response = APIClient().post(
        "/api/ai/vendor-suggestions",
        {"category": "venue", "budget": 1000, "eventType": "party", "guestCount": 10},
        format="json",
    )

    assert response.status_code == 401
