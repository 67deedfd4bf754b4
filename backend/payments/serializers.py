from rest_framework import serializers

from bookings.models import Booking
from bookings.serializers import BookingSerializer
from vendors.serializers import VendorSummarySerializer
from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    bookingId = serializers.PrimaryKeyRelatedField(source="booking", queryset=Booking.objects.all())
    userId = serializers.IntegerField(source="user_id", read_only=True)
    vendorId = serializers.IntegerField(source="vendor_id", read_only=True)
    stripePaymentId = serializers.CharField(source="stripe_payment_id", required=False, allow_blank=True)
    stripeSessionId = serializers.CharField(source="stripe_session_id", read_only=True)
    paidAt = serializers.DateTimeField(source="paid_at", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Payment
        fields = [
            "id",
            "bookingId",
            "userId",
            "vendorId",
            "amount",
            "status",
            "stripePaymentId",
            "stripeSessionId",
            "paidAt",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = ["status"]
        extra_kwargs = {"amount": {"min_value": 0}}

    def validate_bookingId(self, booking):
        request = self.context.get("request")
        if request is not None and booking.user_id != request.user.id:
            raise serializers.ValidationError("Booking not found.")
        return booking


class UserPaymentSerializer(PaymentSerializer):
    """A payment with its booking and the vendor that was paid."""

    booking = BookingSerializer(read_only=True)
    vendor = VendorSummarySerializer(read_only=True)

    class Meta(PaymentSerializer.Meta):
        fields = PaymentSerializer.Meta.fields + ["booking", "vendor"]


class CheckoutBookingSerializer(serializers.Serializer):
    bookingId = serializers.IntegerField(error_messages={"required": "Booking ID is required"})


class CheckoutVerifySerializer(serializers.Serializer):
    sessionId = serializers.CharField(required=False, allow_blank=True, default="")
