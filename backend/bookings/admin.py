from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("service_name", "event", "vendor", "user", "amount", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("service_name", "event__title", "vendor__business_name", "user__email")
