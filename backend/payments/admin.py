from django.contrib import admin

from .models import Payment, StripeWebhookEvent


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("booking", "user", "vendor", "amount", "status", "paid_at", "created_at")
    list_filter = ("status",)
    search_fields = ("stripe_session_id", "stripe_payment_id", "user__email", "vendor__business_name")
    readonly_fields = ("stripe_session_id", "stripe_payment_id", "paid_at")


@admin.register(StripeWebhookEvent)
class StripeWebhookEventAdmin(admin.ModelAdmin):
    list_display = ("event_id", "type", "received_at", "processed_at")
    search_fields = ("event_id", "type")
