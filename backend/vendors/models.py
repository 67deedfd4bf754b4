from django.conf import settings
from django.db import models


class Vendor(models.Model):
    """A service provider that users can book for their events."""

    VENUE = "venue"
    CATERING = "catering"
    DECORATION = "decoration"
    PHOTOGRAPHY = "photography"
    ENTERTAINMENT = "entertainment"
    FLORIST = "florist"
    CAKE = "cake"
    TRANSPORT = "transport"
    OTHER = "other"
    CATEGORIES = [
        (VENUE, "Venue"),
        (CATERING, "Catering"),
        (DECORATION, "Decoration"),
        (PHOTOGRAPHY, "Photography"),
        (ENTERTAINMENT, "Entertainment"),
        (FLORIST, "Florist"),
        (CAKE, "Cake"),
        (TRANSPORT, "Transport"),
        (OTHER, "Other"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="vendor_profiles",
    )
    business_name = models.CharField(max_length=200)
    category = models.CharField(max_length=20, choices=CATEGORIES)
    description = models.TextField(blank=True)
    services = models.JSONField(null=True, blank=True)
    price_range = models.JSONField(null=True, blank=True)
    location = models.CharField(max_length=200, blank=True)
    rating = models.DecimalField(max_digits=2, decimal_places=1, default=0)
    review_count = models.PositiveIntegerField(default=0)
    images = models.JSONField(null=True, blank=True)
    availability = models.JSONField(null=True, blank=True)
    is_verified = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    stripe_account_id = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-rating", "business_name"]

    def __str__(self):
        return self.business_name
