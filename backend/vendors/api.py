import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework import permissions, status, viewsets
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdmin, IsVendor
from bookings.models import Booking
from bookings.serializers import BookingSerializer

from .models import Vendor
from .serializers import VendorSerializer, VendorVerifySerializer

User = get_user_model()
logger = logging.getLogger(__name__)


def get_vendor_for_user(user) -> Vendor:
    vendor = Vendor.objects.filter(user=user).order_by("created_at").first()
    if vendor is None:
        raise NotFound("Vendor profile not found")
    return vendor


class VendorViewSet(viewsets.ReadOnlyModelViewSet):
    """Public vendor directory, optionally filtered with ``?category=``."""

    serializer_class = VendorSerializer
    permission_classes = [permissions.AllowAny]
    filterset_fields = ["category"]
    search_fields = ["business_name", "location", "description"]
    ordering_fields = ["rating", "business_name", "created_at"]

    def get_queryset(self):
        return Vendor.objects.all().order_by("-rating", "business_name")

    def retrieve(self, request, *args, **kwargs):
        try:
            vendor = Vendor.objects.get(pk=kwargs["pk"])
        except (Vendor.DoesNotExist, ValueError):
            raise NotFound("Vendor not found")
        return Response(self.get_serializer(vendor).data)


class VendorProfileView(APIView):
    """Read or edit the vendor profile owned by the current account."""

    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        vendor = get_vendor_for_user(request.user)
        return Response(VendorSerializer(vendor).data)

    def patch(self, request, *args, **kwargs):
        vendor = get_vendor_for_user(request.user)
        serializer = VendorSerializer(vendor, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


class VendorSetupView(APIView):
    """Turn an existing account into a vendor by attaching a business profile."""

    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = VendorSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            vendor = serializer.save(user=request.user)
            if request.user.role != User.ROLE_VENDOR:
                request.user.role = User.ROLE_VENDOR
                request.user.save(update_fields=["role", "updated_at"])
        logger.info("User %s set up vendor profile %s", request.user.email, vendor.business_name)
        return Response(VendorSerializer(vendor).data, status=status.HTTP_201_CREATED)


class VendorBookingListView(APIView):
    permission_classes = [IsAuthenticated, IsVendor]

    def get(self, request, *args, **kwargs):
        vendor = get_vendor_for_user(request.user)
        bookings = Booking.objects.filter(vendor=vendor).order_by("-created_at")
        return Response(BookingSerializer(bookings, many=True).data)


class AdminVendorVerifyView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def patch(self, request, vendor_id, *args, **kwargs):
        try:
            vendor = Vendor.objects.get(pk=vendor_id)
        except Vendor.DoesNotExist:
            raise NotFound("Vendor not found")
        serializer = VendorVerifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        vendor.is_verified = serializer.validated_data["is_verified"]
        vendor.save(update_fields=["is_verified", "updated_at"])
        logger.info(
            "Admin %s set verified=%s on vendor %s",
            request.user.email,
            vendor.is_verified,
            vendor.business_name,
        )
        return Response(VendorSerializer(vendor).data)
