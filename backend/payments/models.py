from django.conf import settings
from django.db import models
from django.db.models import Q


class Payment(models.Model):
    """A payment attempt against a booking; settled rows carry the Stripe identifiers."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"
    STATUSES = [
        (PENDING, "Pending"),
        (PROCESSING, "Processing"),
        (COMPLETED, "Completed"),
        (FAILED, "Failed"),
        (REFUNDED, "Refunded"),
    ]

    booking = models.ForeignKey("bookings.Booking", on_delete=models.PROTECT, related_name="payments")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="payments",
    )
    vendor = models.ForeignKey("vendors.Vendor", on_delete=models.PROTECT, related_name="payments")
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=12, choices=STATUSES, default=PENDING)
    stripe_payment_id = models.CharField(max_length=255, blank=True)
    stripe_session_id = models.CharField(max_length=255, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "id"]
        constraints = [
            # A checkout session can settle a booking at most once.
            models.UniqueConstraint(
                fields=["booking", "stripe_session_id"],
                condition=Q(status="completed") & ~Q(stripe_session_id=""),
                name="unique_completed_payment_per_session",
            ),
        ]

    def __str__(self):
        return f"{self.amount} for booking {self.booking_id} ({self.status})"


class StripeWebhookEvent(models.Model):
    """One row per Stripe event id received, so redelivered events are acknowledged once."""

    event_id = models.CharField(max_length=255, unique=True)
    type = models.CharField(max_length=100)
    received_at = models.DateTimeField(auto_now_add=True)
    processed_at = models.DateTimeField(null=True, blank=True)
    error_message = models.CharField(max_length=500, blank=True)

    class Meta:
        ordering = ["-received_at"]

    def __str__(self):
        return f"{self.type} ({self.event_id})"
