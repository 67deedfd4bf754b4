import logging

from django.db.models import ProtectedError
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from bookings.serializers import BookingWithVendorSerializer
from core.exceptions import Conflict
from .models import Event, EventTask
from .serializers import EventSerializer, EventTaskSerializer

logger = logging.getLogger(__name__)


class EventViewSet(viewsets.ModelViewSet):
    """Events owned by the current user, plus their tasks and bookings."""

    serializer_class = EventSerializer
    permission_classes = [permissions.IsAuthenticated]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]
    filterset_fields = ["status", "type"]
    search_fields = ["title", "location", "description"]
    ordering_fields = ["date", "created_at"]

    def get_queryset(self):
        return Event.objects.filter(user=self.request.user).order_by("date", "id")

    def get_object(self):
        try:
            return self.get_queryset().get(pk=self.kwargs["pk"])
        except (Event.DoesNotExist, ValueError):
            raise NotFound("Event not found")

    def perform_create(self, serializer):
        serializer.save(user=self.request.user, spent_amount=0)

    def perform_destroy(self, instance):
        try:
            instance.delete()
        except ProtectedError:
            logger.warning("Refused to delete event %s: it has recorded payments", instance.id)
            raise Conflict("Cannot delete an event with recorded payments")

    @action(detail=True, methods=["get", "post"], url_path="tasks")
    def tasks(self, request, pk=None):
        event = self.get_object()
        if request.method.lower() == "get":
            tasks = event.tasks.select_related("assigned_vendor").order_by("due_date", "-priority", "id")
            return Response(EventTaskSerializer(tasks, many=True).data)

        serializer = EventTaskSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        task = serializer.save(event=event)
        return Response(EventTaskSerializer(task).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get"], url_path="bookings")
    def bookings(self, request, pk=None):
        event = self.get_object()
        bookings = event.bookings.select_related("vendor").order_by("-created_at")
        return Response(BookingWithVendorSerializer(bookings, many=True).data)


class EventTaskViewSet(viewsets.ModelViewSet):
    """Flat view of every task across the current user's events."""

    serializer_class = EventTaskSerializer
    permission_classes = [permissions.IsAuthenticated]
    http_method_names = ["get", "patch", "delete", "head", "options"]

    def get_queryset(self):
        return (
            EventTask.objects.filter(event__user=self.request.user)
            .select_related("event", "assigned_vendor")
            .order_by("due_date", "-priority", "id")
        )

    def get_object(self):
        try:
            return self.get_queryset().get(pk=self.kwargs["pk"])
        except (EventTask.DoesNotExist, ValueError):
            raise NotFound("Task not found")
