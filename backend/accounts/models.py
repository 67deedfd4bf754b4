from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Platform account. The email doubles as the username."""

    ROLE_USER = "user"
    ROLE_VENDOR = "vendor"
    ROLE_ADMIN = "admin"
    ROLES = [
        (ROLE_USER, "User"),
        (ROLE_VENDOR, "Vendor"),
        (ROLE_ADMIN, "Admin"),
    ]

    email = models.EmailField(unique=True)
    role = models.CharField(max_length=10, choices=ROLES, default=ROLE_USER)
    phone = models.CharField(max_length=30, blank=True)
    location = models.CharField(max_length=200, blank=True)
    profile_image_url = models.URLField(blank=True)
    preferences = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "id"]

    def __str__(self):
        return self.email
