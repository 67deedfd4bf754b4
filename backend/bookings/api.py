import logging

from django.db.models import Q
from rest_framework import permissions, status, viewsets
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.response import Response

from .models import Booking
from .serializers import BookingCreateSerializer, BookingSerializer, BookingUpdateSerializer

logger = logging.getLogger(__name__)

VENDOR_STATUSES = {Booking.ACCEPTED, Booking.REJECTED, Booking.COMPLETED}
CUSTOMER_STATUSES = {Booking.CANCELLED}


class BookingViewSet(viewsets.ModelViewSet):
    """
    Bookings placed by the current user.

    Updates are also open to the vendor being booked: vendors accept, reject and
    complete bookings, customers may cancel them. Payment settlement is the only
    other path that moves a booking out of ``pending``.
    """

    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]
    http_method_names = ["get", "post", "patch", "head", "options"]
    filterset_fields = ["status", "event", "vendor"]

    def get_queryset(self):
        user = self.request.user
        queryset = Booking.objects.select_related("event", "vendor").order_by("-created_at")
        if self.action in {"partial_update", "update", "retrieve"}:
            return queryset.filter(Q(user=user) | Q(vendor__user=user))
        return queryset.filter(user=user)

    def get_object(self):
        try:
            return self.get_queryset().get(pk=self.kwargs["pk"])
        except (Booking.DoesNotExist, ValueError):
            raise NotFound("Booking not found")

    def get_serializer_class(self):
        if self.action == "create":
            return BookingCreateSerializer
        if self.action in {"partial_update", "update"}:
            return BookingUpdateSerializer
        return super().get_serializer_class()

    def perform_create(self, serializer):
        booking = serializer.save(user=self.request.user, status=Booking.PENDING)
        logger.info(
            "Booking %s created by %s for vendor %s (%s)",
            booking.id,
            self.request.user.email,
            booking.vendor_id,
            booking.amount,
        )

    def partial_update(self, request, *args, **kwargs):
        booking = self.get_object()
        serializer = BookingUpdateSerializer(booking, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        new_status = serializer.validated_data.get("status")
        if new_status and new_status != booking.status:
            is_vendor = booking.vendor.user_id == request.user.id
            is_customer = booking.user_id == request.user.id
            allowed = (VENDOR_STATUSES if is_vendor else set()) | (CUSTOMER_STATUSES if is_customer else set())
            if new_status not in allowed:
                raise PermissionDenied(f"Not permitted to mark this booking {new_status}.")

        serializer.save()
        if new_status:
            logger.info("Booking %s status -> %s by %s", booking.id, booking.status, request.user.email)
        return Response(BookingSerializer(booking).data, status=status.HTTP_200_OK)
