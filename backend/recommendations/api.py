import logging

from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from vendors.models import Vendor
from .serializers import EventRecommendationRequestSerializer, VendorSuggestionRequestSerializer
from .services.gemini import get_event_recommendations, get_vendor_suggestions

logger = logging.getLogger(__name__)


class EventRecommendationView(APIView):
    """AI planning recommendations, steered towards vendors listed on the platform."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = EventRecommendationRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        vendors = Vendor.objects.filter(is_active=True).order_by("category", "-rating", "business_name")
        recommendations = get_event_recommendations(
            event_type=data["eventType"],
            budget=data["budget"],
            guest_count=data["guestCount"],
            location=data["location"],
            date=data["date"],
            theme=data.get("theme"),
            vendors=vendors,
        )
        logger.info("Generated recommendations for %s (%s) for %s", data["eventType"], data["budget"], request.user.email)
        return Response(recommendations)


class VendorSuggestionView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = VendorSuggestionRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        return Response(
            get_vendor_suggestions(
                category=data["category"],
                budget=data["budget"],
                event_type=data["eventType"],
                guest_count=data["guestCount"],
            )
        )
