from rest_framework import serializers


class EventRecommendationRequestSerializer(serializers.Serializer):
    eventType = serializers.CharField(max_length=100)
    budget = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    guestCount = serializers.IntegerField(min_value=0)
    location = serializers.CharField(required=False, allow_blank=True, default="")
    date = serializers.CharField(required=False, allow_blank=True, default="")
    theme = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")


class VendorSuggestionRequestSerializer(serializers.Serializer):
    category = serializers.CharField(max_length=50)
    budget = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    eventType = serializers.CharField(max_length=100)
    guestCount = serializers.IntegerField(min_value=0)


# Shapes the model must answer with; anything that does not fit falls back to defaults.


class VendorRecommendationSerializer(serializers.Serializer):
    category = serializers.CharField()
    name = serializers.CharField()
    vendorId = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    description = serializers.CharField(allow_blank=True)
    estimatedCost = serializers.FloatField()
    priority = serializers.CharField()
    reason = serializers.CharField(allow_blank=True)


class ScheduleTaskSerializer(serializers.Serializer):
    title = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    daysBeforeEvent = serializers.IntegerField()
    category = serializers.CharField()
    estimatedDuration = serializers.CharField(allow_blank=True)


class SchedulePhaseSerializer(serializers.Serializer):
    phase = serializers.CharField()
    tasks = ScheduleTaskSerializer(many=True)


class BudgetBreakdownSerializer(serializers.Serializer):
    category = serializers.CharField()
    percentage = serializers.FloatField(min_value=0, max_value=100)
    estimatedAmount = serializers.FloatField()
    tips = serializers.CharField(allow_blank=True)


class EventRecommendationsSerializer(serializers.Serializer):
    vendorRecommendations = VendorRecommendationSerializer(many=True)
    schedule = SchedulePhaseSerializer(many=True)
    budgetBreakdown = BudgetBreakdownSerializer(many=True)
    tips = serializers.ListField(child=serializers.CharField())


class VendorSuggestionsSerializer(serializers.Serializer):
    suggestions = serializers.ListField(child=serializers.CharField())
    tips = serializers.ListField(child=serializers.CharField())
