import logging

from django.conf import settings
from django.contrib.auth import authenticate, get_user_model, login, logout
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed, NotFound, PermissionDenied
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from vendors.models import Vendor
from vendors.serializers import VendorSerializer

from .permissions import IsAdmin
from .serializers import (
    LoginSerializer,
    RegisterSerializer,
    RoleUpdateSerializer,
    UserSerializer,
    VendorRegisterSerializer,
)

User = get_user_model()
logger = logging.getLogger(__name__)


def _authenticate_credentials(request, *, message: str = "Invalid email or password"):
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    user = authenticate(
        request,
        username=serializer.validated_data["email"],
        password=serializer.validated_data["password"],
    )
    if user is None:
        raise AuthenticationFailed(message)
    return user


class RegisterView(APIView):
    """Create a new user account and start a session for it."""

    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        login(request, user)
        logger.info("Registered user %s", user.email)
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """Authenticate via email + password and bind the user to the session cookie."""

    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        user = _authenticate_credentials(request)
        login(request, user)
        return Response(UserSerializer(user).data)


class LogoutView(APIView):
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        logout(request)
        response = Response({"message": "Logged out successfully"})
        response.delete_cookie(settings.SESSION_COOKIE_NAME)
        return response


class CurrentUserView(APIView):
    """Return the serialized profile for the session's user."""

    def get(self, request, *args, **kwargs):
        return Response(UserSerializer(request.user).data)


class VendorRegisterView(APIView):
    """Create an account with the vendor role together with its vendor profile."""

    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = VendorRegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        login(request, user)
        logger.info("Registered vendor %s (%s)", serializer.vendor.business_name, user.email)
        return Response(
            {
                "user": UserSerializer(user).data,
                "vendor": VendorSerializer(serializer.vendor).data,
            },
            status=status.HTTP_201_CREATED,
        )


class VendorLoginView(APIView):
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        user = _authenticate_credentials(request)
        if user.role != User.ROLE_VENDOR:
            raise PermissionDenied(
                "This account is not registered as a vendor. Please use the vendor registration page."
            )
        vendor = Vendor.objects.filter(user=user).first()
        if vendor is None:
            raise PermissionDenied("Vendor profile not found. Please contact support.")

        login(request, user)
        return Response(
            {
                "user": UserSerializer(user).data,
                "vendor": VendorSerializer(vendor).data,
            }
        )


class AdminLoginView(APIView):
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        user = _authenticate_credentials(request, message="Invalid credentials")
        if user.role != User.ROLE_ADMIN:
            raise PermissionDenied("Access denied. Admin privileges required.")
        login(request, user)
        return Response(UserSerializer(user).data)


class AdminCreateView(APIView):
    """Let an existing admin create another admin account."""

    permission_classes = [IsAuthenticated, IsAdmin]

    def post(self, request, *args, **kwargs):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        admin_user = serializer.save(role=User.ROLE_ADMIN)
        logger.info("Admin %s created admin %s", request.user.email, admin_user.email)
        return Response(UserSerializer(admin_user).data, status=status.HTTP_201_CREATED)


class AdminUserRoleView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def patch(self, request, user_id, *args, **kwargs):
        try:
            user = User.objects.get(pk=user_id)
        except User.DoesNotExist:
            raise NotFound("User not found")
        serializer = RoleUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user.role = serializer.validated_data["role"]
        user.save(update_fields=["role", "updated_at"])
        logger.info("Admin %s set role of %s to %s", request.user.email, user.email, user.role)
        return Response(UserSerializer(user).data)
