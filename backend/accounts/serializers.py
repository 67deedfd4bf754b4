from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework import serializers

from vendors.models import Vendor

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Expose the public fields of an account; the password hash never leaves the server."""

    firstName = serializers.CharField(source="first_name", read_only=True)
    lastName = serializers.CharField(source="last_name", read_only=True)
    profileImageUrl = serializers.CharField(source="profile_image_url", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "firstName",
            "lastName",
            "profileImageUrl",
            "role",
            "phone",
            "location",
            "preferences",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


class RegisterSerializer(serializers.ModelSerializer):
    """Validate and create an account during registration."""

    email = serializers.EmailField(error_messages={"invalid": "Invalid email address"})
    password = serializers.CharField(
        write_only=True,
        min_length=8,
        error_messages={"min_length": "Password must be at least 8 characters"},
    )
    firstName = serializers.CharField(
        source="first_name", required=False, allow_blank=True, allow_null=True
    )
    lastName = serializers.CharField(
        source="last_name", required=False, allow_blank=True, allow_null=True
    )

    class Meta:
        model = User
        fields = ["email", "password", "firstName", "lastName"]

    def validate_email(self, value: str) -> str:
        email = value.lower()
        if User.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError("Email already registered")
        return email

    def create(self, validated_data):
        """Persist the user with a normalized email and a salted password hash."""
        email = validated_data.pop("email").lower()
        role = validated_data.pop("role", User.ROLE_USER)
        first_name = validated_data.pop("first_name", None) or ""
        last_name = validated_data.pop("last_name", None) or ""
        return User.objects.create_user(
            username=email,
            email=email,
            password=validated_data.pop("password"),
            first_name=first_name,
            last_name=last_name,
            role=role,
            **validated_data,
        )


class VendorRegisterSerializer(RegisterSerializer):
    """Registration payload for a vendor: the account plus its business profile."""

    phone = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    businessName = serializers.CharField(
        min_length=2,
        error_messages={
            "min_length": "Business name is required",
            "required": "Business name is required",
            "blank": "Business name is required",
        },
    )
    category = serializers.ChoiceField(choices=Vendor.CATEGORIES)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    location = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    class Meta(RegisterSerializer.Meta):
        fields = RegisterSerializer.Meta.fields + [
            "phone",
            "businessName",
            "category",
            "description",
            "location",
        ]

    def create(self, validated_data):
        vendor_data = {
            "business_name": validated_data.pop("businessName"),
            "category": validated_data.pop("category"),
            "description": validated_data.pop("description", None) or "",
            "location": validated_data.pop("location", None) or "",
        }
        validated_data["phone"] = validated_data.pop("phone", None) or ""
        validated_data["role"] = User.ROLE_VENDOR
        with transaction.atomic():
            user = super().create(validated_data)
            vendor = Vendor.objects.create(
                user=user,
                is_verified=False,
                is_active=True,
                **vendor_data,
            )
        self.vendor = vendor
        return user


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField(error_messages={"invalid": "Invalid email address"})
    password = serializers.CharField(
        write_only=True,
        error_messages={"blank": "Password is required", "required": "Password is required"},
    )

    def validate_email(self, value: str) -> str:
        return value.lower()


class RoleUpdateSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=User.ROLES)
