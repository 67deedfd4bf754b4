from rest_framework import serializers

from events.models import Event
from payments.models import Payment
from vendors.models import Vendor
from vendors.serializers import VendorSerializer
from .models import Booking


class BookingSerializer(serializers.ModelSerializer):
    eventId = serializers.PrimaryKeyRelatedField(source="event", queryset=Event.objects.all())
    vendorId = serializers.PrimaryKeyRelatedField(source="vendor", queryset=Vendor.objects.all())
    userId = serializers.IntegerField(source="user_id", read_only=True)
    serviceName = serializers.CharField(source="service_name")
    scheduledDate = serializers.DateTimeField(source="scheduled_date", required=False, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "eventId",
            "vendorId",
            "userId",
            "serviceName",
            "amount",
            "status",
            "notes",
            "scheduledDate",
            "createdAt",
            "updatedAt",
        ]
        extra_kwargs = {
            "amount": {"min_value": 0},
            "notes": {"required": False, "allow_blank": True},
        }

    def validate_eventId(self, event):
        request = self.context.get("request")
        if request is not None and event.user_id != request.user.id:
            raise serializers.ValidationError("Event not found.")
        return event

    def validate_vendorId(self, vendor):
        if not vendor.is_active:
            raise serializers.ValidationError("Vendor is not accepting bookings.")
        return vendor


class BookingCreateSerializer(BookingSerializer):
    """New bookings always start pending; the status is driven by vendor actions and settlement."""

    class Meta(BookingSerializer.Meta):
        read_only_fields = ["status"]


class BookingUpdateSerializer(serializers.ModelSerializer):
    serviceName = serializers.CharField(source="service_name", required=False)
    scheduledDate = serializers.DateTimeField(source="scheduled_date", required=False, allow_null=True)

    class Meta:
        model = Booking
        fields = ["serviceName", "amount", "status", "notes", "scheduledDate"]
        extra_kwargs = {
            "amount": {"min_value": 0, "required": False},
            "notes": {"required": False, "allow_blank": True},
        }

    def validate_amount(self, amount):
        booking = self.instance
        if booking is None or amount == booking.amount:
            return amount
        if booking.status != Booking.PENDING or booking.payments.filter(status=Payment.COMPLETED).exists():
            raise serializers.ValidationError("Amount cannot change once the booking has been paid or actioned.")
        return amount


class BookingWithVendorSerializer(BookingSerializer):
    vendor = VendorSerializer(read_only=True)

    class Meta(BookingSerializer.Meta):
        fields = BookingSerializer.Meta.fields + ["vendor"]
