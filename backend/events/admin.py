from django.contrib import admin

from .models import Event, EventTask


class EventTaskInline(admin.TabularInline):
    model = EventTask
    extra = 0


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("title", "type", "user", "date", "budget", "spent_amount", "status")
    list_filter = ("status", "type")
    search_fields = ("title", "location", "user__email")
    readonly_fields = ("spent_amount",)
    inlines = [EventTaskInline]
