from django.contrib import admin

from .models import Vendor


@admin.register(Vendor)
class VendorAdmin(admin.ModelAdmin):
    list_display = ("business_name", "category", "location", "rating", "is_verified", "is_active")
    list_filter = ("category", "is_verified", "is_active")
    search_fields = ("business_name", "location", "user__email")
