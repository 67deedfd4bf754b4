from rest_framework import serializers

from .models import Vendor


def _clean_price_range(value):
    if value is None:
        return None
    if not isinstance(value, dict):
        raise serializers.ValidationError("Price range must be an object with min and max.")
    cleaned = {}
    for key in ("min", "max"):
        amount = value.get(key)
        if amount is None:
            continue
        try:
            cleaned[key] = float(amount)
        except (TypeError, ValueError):
            raise serializers.ValidationError(f"Price range {key} must be a number.")
    if "min" in cleaned and "max" in cleaned and cleaned["min"] > cleaned["max"]:
        raise serializers.ValidationError("Minimum price cannot exceed the maximum.")
    return cleaned


class VendorSerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source="user_id", read_only=True)
    businessName = serializers.CharField(source="business_name", min_length=2)
    priceRange = serializers.JSONField(source="price_range", required=False, allow_null=True)
    reviewCount = serializers.IntegerField(source="review_count", read_only=True)
    isVerified = serializers.BooleanField(source="is_verified", read_only=True)
    isActive = serializers.BooleanField(source="is_active", required=False)
    stripeAccountId = serializers.CharField(source="stripe_account_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Vendor
        fields = [
            "id",
            "userId",
            "businessName",
            "category",
            "description",
            "services",
            "priceRange",
            "location",
            "rating",
            "reviewCount",
            "images",
            "availability",
            "isVerified",
            "isActive",
            "stripeAccountId",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = ["id", "rating"]
        extra_kwargs = {
            "description": {"required": False, "allow_blank": True},
            "location": {"required": False, "allow_blank": True},
        }

    def validate_priceRange(self, value):
        return _clean_price_range(value)


class VendorSummarySerializer(serializers.ModelSerializer):
    businessName = serializers.CharField(source="business_name", read_only=True)
    isVerified = serializers.BooleanField(source="is_verified", read_only=True)

    class Meta:
        model = Vendor
        fields = ["id", "businessName", "category", "location", "rating", "isVerified"]


class VendorVerifySerializer(serializers.Serializer):
    isVerified = serializers.BooleanField(source="is_verified")
