from decimal import Decimal

from django.db.models import Sum
from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.models import User
from accounts.permissions import IsAdmin
from accounts.serializers import UserSerializer
from bookings.models import Booking
from bookings.serializers import BookingSerializer
from events.models import Event
from events.serializers import EventSerializer
from payments.models import Payment
from vendors.models import Vendor


class AdminBaseView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsAdmin]


class AdminStatsView(AdminBaseView):
    """Platform-wide counts; revenue is the sum of completed payments."""

    def get(self, request, *args, **kwargs):
        revenue = Payment.objects.filter(status=Payment.COMPLETED).aggregate(total=Sum("amount"))["total"]
        return Response(
            {
                "totalUsers": User.objects.count(),
                "totalVendors": Vendor.objects.count(),
                "totalEvents": Event.objects.count(),
                "totalBookings": Booking.objects.count(),
                "totalRevenue": float(revenue or Decimal("0")),
            }
        )


class AdminUserListView(AdminBaseView):
    def get(self, request, *args, **kwargs):
        users = User.objects.order_by("-created_at")
        return Response(UserSerializer(users, many=True).data)


class AdminEventListView(AdminBaseView):
    def get(self, request, *args, **kwargs):
        events = Event.objects.order_by("-created_at")
        return Response(EventSerializer(events, many=True).data)


class AdminBookingListView(AdminBaseView):
    def get(self, request, *args, **kwargs):
        bookings = Booking.objects.order_by("-created_at")
        return Response(BookingSerializer(bookings, many=True).data)
