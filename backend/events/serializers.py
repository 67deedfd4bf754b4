from rest_framework import serializers

from vendors.models import Vendor
from .models import Event, EventTask


class EventSerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source="user_id", read_only=True)
    endDate = serializers.DateTimeField(source="end_date", required=False, allow_null=True)
    guestCount = serializers.IntegerField(source="guest_count", required=False, min_value=0)
    spentAmount = serializers.DecimalField(
        source="spent_amount", max_digits=12, decimal_places=2, read_only=True
    )
    aiRecommendations = serializers.JSONField(source="ai_recommendations", required=False, allow_null=True)
    coverImage = serializers.CharField(source="cover_image", required=False, allow_blank=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Event
        fields = [
            "id",
            "userId",
            "title",
            "type",
            "description",
            "date",
            "endDate",
            "location",
            "guestCount",
            "budget",
            "spentAmount",
            "theme",
            "status",
            "aiRecommendations",
            "schedule",
            "notes",
            "coverImage",
            "createdAt",
            "updatedAt",
        ]
        extra_kwargs = {
            "budget": {"min_value": 0},
        }

    def validate(self, attrs):
        start = attrs.get("date") or getattr(self.instance, "date", None)
        end = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start and end and end < start:
            raise serializers.ValidationError({"endDate": "End date must be on or after the event date."})
        return attrs


class EventTaskSerializer(serializers.ModelSerializer):
    eventId = serializers.IntegerField(source="event_id", read_only=True)
    dueDate = serializers.DateTimeField(source="due_date", required=False, allow_null=True)
    assignedVendorId = serializers.PrimaryKeyRelatedField(
        source="assigned_vendor",
        queryset=Vendor.objects.all(),
        required=False,
        allow_null=True,
    )
    completedAt = serializers.DateTimeField(source="completed_at", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = EventTask
        fields = [
            "id",
            "eventId",
            "title",
            "description",
            "category",
            "dueDate",
            "status",
            "priority",
            "assignedVendorId",
            "completedAt",
            "createdAt",
            "updatedAt",
        ]

    def create(self, validated_data):
        task = EventTask(**validated_data)
        task.sync_completed_at()
        task.save()
        return task

    def update(self, instance, validated_data):
        status_changed = "status" in validated_data
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if status_changed:
            instance.sync_completed_at()
        instance.save()
        return instance
