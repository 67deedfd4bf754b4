from __future__ import annotations

import json
import logging
from collections import OrderedDict
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from django.conf import settings
from google import genai
from google.genai import types

from vendors.models import Vendor
from ..serializers import EventRecommendationsSerializer, VendorSuggestionsSerializer

logger = logging.getLogger(__name__)

RESPONSE_SHAPE = """{
  "vendorRecommendations": [
    {
      "category": "venue|catering|decoration|photography|entertainment|florist|cake|transport",
      "name": "Exact business name from available vendors list OR general vendor type if no match",
      "vendorId": "ID from the vendors list if recommending a specific vendor, null otherwise",
      "description": "Brief description of what they offer or what to look for",
      "estimatedCost": number (in Indian Rupees),
      "priority": "essential|recommended|optional",
      "reason": "Why this vendor/category is recommended for this event"
    }
  ],
  "schedule": [
    {
      "phase": "Planning Phase Name",
      "tasks": [
        {
          "title": "Task name",
          "description": "Task description",
          "daysBeforeEvent": number,
          "category": "planning|booking|coordination|setup",
          "estimatedDuration": "e.g., 2 hours"
        }
      ]
    }
  ],
  "budgetBreakdown": [
    {
      "category": "Category name",
      "percentage": number (0-100),
      "estimatedAmount": number (in Indian Rupees),
      "tips": "Budget optimization tip"
    }
  ],
  "tips": ["General planning tips for this event type in India"]
}"""

DEFAULT_VENDOR_SUGGESTIONS = {
    "suggestions": [
        "Check reviews and ratings",
        "Ask for references from previous clients",
        "Compare at least 3 different vendors",
        "Review their portfolio",
        "Confirm availability for your date",
    ],
    "tips": [
        "Book during off-peak season for better rates",
        "Bundle services for discounts",
        "Negotiate package deals",
    ],
}


class RecommendationError(Exception):
    """The model could not be reached or answered with something unusable."""


def format_inr(amount) -> str:
    """Format a number with Indian digit grouping, e.g. ``200000`` -> ``2,00,000``."""
    value = Decimal(str(amount or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, _, fraction = f"{abs(value):.2f}".partition(".")
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])
    fraction = fraction.rstrip("0")
    return f"{sign}{whole}.{fraction}" if fraction else f"{sign}{whole}"


def _share(budget, percent: str) -> int:
    value = Decimal(str(budget or 0)) * Decimal(percent)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_vendors_for_ai(vendors: Iterable[Vendor]) -> str:
    vendors = list(vendors)
    if not vendors:
        return "No vendors available in the system."

    grouped: "OrderedDict[str, list[Vendor]]" = OrderedDict()
    for vendor in vendors:
        grouped.setdefault(vendor.category, []).append(vendor)

    lines = ["AVAILABLE VENDORS IN OUR PLATFORM:"]
    for category, category_vendors in grouped.items():
        lines.append("")
        lines.append(f"{category.upper()}:")
        for vendor in category_vendors:
            price_range = vendor.price_range or None
            if price_range:
                price = f"Rs. {format_inr(price_range.get('min'))} - Rs. {format_inr(price_range.get('max'))}"
            else:
                price = "Contact for pricing"
            lines.append(f"  - {vendor.business_name} (ID: {vendor.id})")
            lines.append(f"    Location: {vendor.location or 'Not specified'}")
            lines.append(f"    Rating: {vendor.rating}/5 ({vendor.review_count} reviews)")
            lines.append(f"    Price Range: {price}")
            if vendor.is_verified:
                lines.append("    (Verified Vendor)")
    return "\n".join(lines) + "\n"


def build_event_prompt(
    *,
    event_type: str,
    budget,
    guest_count: int,
    location: str,
    date: str,
    theme: Optional[str] = None,
    vendors: Iterable[Vendor] = (),
) -> str:
    vendors = list(vendors)
    sections = [
        "You are an expert event planner for EventMate, an Indian event planning platform. "
        "Generate comprehensive recommendations for the following event:",
        "",
        f"Event Type: {event_type}",
        f"Budget: Rs. {format_inr(budget)} (Indian Rupees)",
        f"Guest Count: {guest_count}",
        f"Location: {location}",
        f"Date: {date}",
    ]
    if theme:
        sections.append(f"Theme: {theme}")
    if vendors:
        sections += [
            "",
            "IMPORTANT: You MUST recommend vendors from the following list of available vendors on our platform.",
            "Only recommend vendors that exist in this list. Use their exact business names.",
            "",
            format_vendors_for_ai(vendors),
        ]
    sections += [
        "",
        "Please provide a JSON response with the following structure:",
        RESPONSE_SHAPE,
        "",
        "IMPORTANT:",
        "- All costs should be in Indian Rupees (Rs.)",
        "- If vendors are available on the platform, PRIORITIZE recommending them by name",
        "- Ensure the total budget breakdown adds up to 100% and estimated costs align with the provided budget",
        "- Provide at least 5 vendor recommendations, 3 schedule phases with multiple tasks each, "
        "and 5 budget categories",
        "- Consider Indian wedding/event customs and preferences",
    ]
    return "\n".join(sections)


def build_vendor_suggestion_prompt(*, category: str, budget, event_type: str, guest_count: int) -> str:
    return "\n".join(
        [
            "As an event planning expert, provide specific vendor selection tips for:",
            f"Category: {category}",
            f"Budget for this category: Rs. {format_inr(budget)}",
            f"Event Type: {event_type}",
            f"Guest Count: {guest_count}",
            "",
            "Return JSON with:",
            "{",
            f'  "suggestions": ["5 specific things to look for when selecting a {category} vendor"],',
            f'  "tips": ["3 cost-saving tips for {category}"]',
            "}",
        ]
    )


def _client() -> genai.Client:
    if not settings.GEMINI_API_KEY:
        raise RecommendationError("GEMINI_API_KEY is not configured.")
    return genai.Client(
        api_key=settings.GEMINI_API_KEY,
        http_options=types.HttpOptions(timeout=settings.GEMINI_TIMEOUT_SECONDS * 1000),
    )


def _generate_json(prompt: str, serializer_class):
    """Ask the model for JSON and validate it against ``serializer_class``."""
    try:
        response = _client().models.generate_content(
            model=settings.GEMINI_MODEL,
            contents=prompt,
            config=types.GenerateContentConfig(response_mime_type="application/json"),
        )
    except RecommendationError:
        raise
    except Exception as exc:
        raise RecommendationError(f"Gemini request failed: {exc}") from exc

    raw = getattr(response, "text", None)
    if not raw:
        raise RecommendationError("Empty response from Gemini")
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise RecommendationError(f"Gemini returned invalid JSON: {exc}") from exc

    serializer = serializer_class(data=payload)
    if not serializer.is_valid():
        raise RecommendationError(f"Gemini response has unexpected shape: {serializer.errors}")
    return payload


def get_event_recommendations(
    *,
    event_type: str,
    budget,
    guest_count: int,
    location: str = "",
    date: str = "",
    theme: Optional[str] = None,
    vendors: Iterable[Vendor] = (),
) -> dict:
    """
    Return vendor, schedule and budget recommendations for an event.

    Never raises for model failures: an unreachable model, invalid JSON or a
    response of the wrong shape all produce :func:`get_default_recommendations`.
    """
    prompt = build_event_prompt(
        event_type=event_type,
        budget=budget,
        guest_count=guest_count,
        location=location,
        date=date,
        theme=theme,
        vendors=vendors,
    )
    try:
        return _generate_json(prompt, EventRecommendationsSerializer)
    except RecommendationError as exc:
        logger.warning("Falling back to default recommendations for %s: %s", event_type, exc)
        return get_default_recommendations(event_type, budget, guest_count)


def get_vendor_suggestions(*, category: str, budget, event_type: str, guest_count: int) -> dict:
    prompt = build_vendor_suggestion_prompt(
        category=category,
        budget=budget,
        event_type=event_type,
        guest_count=guest_count,
    )
    try:
        return _generate_json(prompt, VendorSuggestionsSerializer)
    except RecommendationError as exc:
        logger.warning("Falling back to default vendor suggestions for %s: %s", category, exc)
        return {
            "suggestions": list(DEFAULT_VENDOR_SUGGESTIONS["suggestions"]),
            "tips": list(DEFAULT_VENDOR_SUGGESTIONS["tips"]),
        }


def get_default_recommendations(event_type: str, budget, guest_count: int) -> dict:
    return {
        "vendorRecommendations": [
            {
                "category": "venue",
                "name": "Event Venue",
                "description": f"A suitable venue for {guest_count} guests for your {event_type}",
                "estimatedCost": _share(budget, "0.35"),
                "priority": "essential",
                "reason": "The foundation of your event experience",
            },
            {
                "category": "catering",
                "name": "Catering Service",
                "description": "Full-service catering with appetizers, main course, and desserts",
                "estimatedCost": _share(budget, "0.30"),
                "priority": "essential",
                "reason": "Quality food is key to guest satisfaction",
            },
            {
                "category": "decoration",
                "name": "Event Decorator",
                "description": "Professional decoration and styling services",
                "estimatedCost": _share(budget, "0.10"),
                "priority": "recommended",
                "reason": "Creates the atmosphere and visual impact",
            },
            {
                "category": "photography",
                "name": "Professional Photographer",
                "description": "Event photography and videography services",
                "estimatedCost": _share(budget, "0.10"),
                "priority": "recommended",
                "reason": "Captures precious memories",
            },
            {
                "category": "entertainment",
                "name": "Entertainment",
                "description": "Music, DJ, or live entertainment",
                "estimatedCost": _share(budget, "0.10"),
                "priority": "recommended",
                "reason": "Keeps guests engaged and entertained",
            },
        ],
        "schedule": [
            {
                "phase": "Initial Planning",
                "tasks": [
                    _task("Set budget and guest list", "Finalize your budget and create initial guest list",
                          90, "planning", "2-3 hours"),
                    _task("Book venue", "Visit and book your preferred venue", 75, "booking", "1 day"),
                    _task("Hire caterer", "Select and book catering service", 60, "booking", "1 day"),
                ],
            },
            {
                "phase": "Vendor Coordination",
                "tasks": [
                    _task("Book photographer", "Hire professional photographer/videographer",
                          45, "booking", "2 hours"),
                    _task("Arrange decorations", "Finalize decoration theme and book decorator",
                          40, "booking", "3 hours"),
                    _task("Book entertainment", "Arrange music/DJ or live entertainment", 35, "booking", "2 hours"),
                ],
            },
            {
                "phase": "Final Preparations",
                "tasks": [
                    _task("Final guest count", "Confirm final guest count with caterer",
                          14, "coordination", "1 hour"),
                    _task("Vendor confirmations", "Confirm all vendors and timings", 7, "coordination", "2 hours"),
                    _task("Day-before setup", "Coordinate setup with venue and decorators", 1, "setup", "4 hours"),
                ],
            },
        ],
        "budgetBreakdown": [
            _budget_line("Venue", 35, budget, "Consider off-peak dates for savings"),
            _budget_line("Catering", 30, budget, "Buffet style can be more cost-effective"),
            _budget_line("Decoration", 10, budget, "Rent items instead of buying"),
            _budget_line("Photography", 10, budget, "Book for specific hours, not full day"),
            _budget_line("Entertainment", 10, budget, "Consider local talent for better rates"),
            _budget_line("Miscellaneous", 5, budget, "Always keep a contingency fund"),
        ],
        "tips": [
            "Start planning at least 3 months in advance",
            "Get at least 3 quotes for each vendor category",
            "Keep 10% of budget as contingency",
            "Communicate clearly with all vendors about expectations",
            "Create a detailed timeline for the event day",
        ],
    }


def _task(title, description, days_before, category, duration):
    return {
        "title": title,
        "description": description,
        "daysBeforeEvent": days_before,
        "category": category,
        "estimatedDuration": duration,
    }


def _budget_line(category, percentage, budget, tips):
    return {
        "category": category,
        "percentage": percentage,
        "estimatedAmount": _share(budget, str(Decimal(percentage) / 100)),
        "tips": tips,
    }
