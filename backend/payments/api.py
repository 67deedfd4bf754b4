import logging

import stripe
from django.conf import settings
from rest_framework import permissions, status, viewsets
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.response import Response
from rest_framework.views import APIView

from bookings.models import Booking
from vendors.models import Vendor
from .models import Payment
from .serializers import (
    CheckoutBookingSerializer,
    CheckoutVerifySerializer,
    PaymentSerializer,
    UserPaymentSerializer,
)
from .services.checkout import create_booking_checkout_session
from .services.settlement import verify_checkout_session
from .services.webhooks import handle_stripe_event

logger = logging.getLogger(__name__)


class CheckoutBookingView(APIView):
    """Start a Stripe Checkout session for one of the caller's bookings."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = CheckoutBookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking_id = serializer.validated_data["bookingId"]

        try:
            booking = Booking.objects.get(pk=booking_id)
        except Booking.DoesNotExist:
            raise NotFound("Booking not found")
        if booking.user_id != request.user.id:
            logger.warning("User %s attempted checkout for booking %s", request.user.id, booking.id)
            raise PermissionDenied("Not authorized")

        try:
            vendor = Vendor.objects.get(pk=booking.vendor_id)
        except Vendor.DoesNotExist:
            raise NotFound("Vendor not found")

        session = create_booking_checkout_session(booking=booking, vendor=vendor)
        return Response({"url": session.url, "sessionId": session.id})


class CheckoutVerifyView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = CheckoutVerifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = verify_checkout_session(
            session_id=serializer.validated_data["sessionId"],
            user=request.user,
        )
        return Response(result.as_response())


class UserPaymentListView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, *args, **kwargs):
        payments = (
            Payment.objects.filter(user=request.user)
            .select_related("booking", "vendor")
            .order_by("-created_at")
        )
        return Response(UserPaymentSerializer(payments, many=True).data)


class PaymentViewSet(viewsets.ModelViewSet):
    """
    The caller's payment records.

    Manually recorded payments start ``pending``; only Checkout settlement
    writes ``completed`` rows.
    """

    serializer_class = PaymentSerializer
    permission_classes = [permissions.IsAuthenticated]
    http_method_names = ["get", "post", "head", "options"]
    filterset_fields = ["status", "booking"]

    def get_queryset(self):
        return Payment.objects.filter(user=self.request.user).order_by("-created_at")

    def get_object(self):
        try:
            return self.get_queryset().get(pk=self.kwargs["pk"])
        except (Payment.DoesNotExist, ValueError):
            raise NotFound("Payment not found")

    def perform_create(self, serializer):
        booking = serializer.validated_data["booking"]
        payment = serializer.save(
            user=self.request.user,
            vendor_id=booking.vendor_id,
            status=Payment.PENDING,
        )
        logger.info("Payment %s recorded for booking %s by %s", payment.id, booking.id, self.request.user.email)


class StripePublishableKeyView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, *args, **kwargs):
        if not settings.STRIPE_PUBLISHABLE_KEY:
            logger.error("Stripe publishable key not configured.")
            return Response(
                {"message": "Failed to get Stripe configuration"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return Response({"publishableKey": settings.STRIPE_PUBLISHABLE_KEY})


class StripeWebhookView(APIView):
    """Receive Stripe Checkout events and settle paid sessions."""

    permission_classes: list = []
    authentication_classes: list = []

    def post(self, request, webhook_uuid, *args, **kwargs):
        sig_header = request.META.get("HTTP_STRIPE_SIGNATURE")
        if not sig_header:
            return Response({"error": "Missing stripe-signature"}, status=status.HTTP_400_BAD_REQUEST)

        if settings.STRIPE_WEBHOOK_UUID and str(webhook_uuid) != settings.STRIPE_WEBHOOK_UUID:
            logger.warning("Stripe webhook called with unknown path id %s", webhook_uuid)
            return _webhook_error()
        if not settings.STRIPE_WEBHOOK_SECRET:
            logger.error("Stripe webhook secret not configured.")
            return _webhook_error()

        try:
            event = stripe.Webhook.construct_event(request.body, sig_header, settings.STRIPE_WEBHOOK_SECRET)
        except ValueError:
            logger.warning("Invalid payload received on Stripe webhook.")
            return _webhook_error()
        except stripe.SignatureVerificationError:
            logger.warning("Invalid Stripe signature.")
            return _webhook_error()

        try:
            handle_stripe_event(event)
        except Exception as exc:
            logger.exception("Error processing Stripe event %s: %s", event.get("id"), exc)
            return _webhook_error()

        return Response({"received": True})


def _webhook_error():
    return Response({"error": "Webhook processing error"}, status=status.HTTP_400_BAD_REQUEST)
