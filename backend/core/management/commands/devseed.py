from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone

from accounts.models import User
from bookings.models import Booking
from events.models import Event, EventTask
from vendors.models import Vendor


SEED_PASSWORD = "EventMate123!"
ADMIN_EMAIL = "admin@eventmate.test"
ADMIN_PASSWORD = "AdminEventMate123!"

VENDORS = [
    {
        "email": "bookings@royalgardens.test",
        "business_name": "Royal Gardens Banquet",
        "category": Vendor.VENUE,
        "location": "Jaipur",
        "price_range": {"min": 150000, "max": 600000},
        "rating": Decimal("4.7"),
        "review_count": 128,
        "is_verified": True,
    },
    {
        "email": "hello@spicetrail.test",
        "business_name": "Spice Trail Caterers",
        "category": Vendor.CATERING,
        "location": "Jaipur",
        "price_range": {"min": 800, "max": 2500},
        "rating": Decimal("4.5"),
        "review_count": 94,
        "is_verified": True,
    },
    {
        "email": "studio@frameandfable.test",
        "business_name": "Frame & Fable Studios",
        "category": Vendor.PHOTOGRAPHY,
        "location": "Delhi",
        "price_range": {"min": 40000, "max": 150000},
        "rating": Decimal("4.8"),
        "review_count": 61,
        "is_verified": False,
    },
    {
        "email": "team@marigolddecor.test",
        "business_name": "Marigold Decor Co.",
        "category": Vendor.DECORATION,
        "location": "Jaipur",
        "price_range": {"min": 30000, "max": 200000},
        "rating": Decimal("4.3"),
        "review_count": 37,
        "is_verified": True,
    },
]


class Command(BaseCommand):
    help = "Populate the local development database with sample data."

    def handle(self, *args, **options):
        if not settings.DEBUG:
            raise CommandError("Refusing to seed data while DEBUG is False.")

        with transaction.atomic():
            self.stdout.write(self.style.MIGRATE_HEADING("Creating accounts"))
            self._ensure_admin()
            planner = self._ensure_user(
                email="priya@example.test",
                first_name="Priya",
                last_name="Sharma",
                role=User.ROLE_USER,
            )

            self.stdout.write(self.style.MIGRATE_HEADING("Creating vendors"))
            vendors = {}
            for vendor_data in VENDORS:
                vendors[vendor_data["category"]] = self._ensure_vendor(**vendor_data)

            self.stdout.write(self.style.MIGRATE_HEADING("Creating events"))
            wedding_date = timezone.now() + timedelta(days=90)
            event, created = Event.objects.get_or_create(
                user=planner,
                title="Priya & Arjun's Wedding",
                defaults={
                    "type": "wedding",
                    "date": wedding_date,
                    "location": "Jaipur",
                    "guest_count": 250,
                    "budget": Decimal("2000000.00"),
                    "spent_amount": Decimal("0"),
                    "theme": "Royal Rajasthani",
                    "status": Event.PLANNING,
                },
            )
            if created:
                self.stdout.write(self.style.NOTICE(f"Created event {event.title}"))

            tasks = [
                ("Book venue", "booking", 75, EventTask.COMPLETED, vendors[Vendor.VENUE]),
                ("Finalize menu tasting", "catering", 45, EventTask.IN_PROGRESS, vendors[Vendor.CATERING]),
                ("Send invitations", "planning", 30, EventTask.PENDING, None),
            ]
            for title, category, days_before, status, vendor in tasks:
                task, task_created = EventTask.objects.get_or_create(
                    event=event,
                    title=title,
                    defaults={
                        "category": category,
                        "due_date": wedding_date - timedelta(days=days_before),
                        "status": status,
                        "assigned_vendor": vendor,
                    },
                )
                if task_created:
                    task.sync_completed_at()
                    task.save(update_fields=["completed_at"])

            self.stdout.write(self.style.MIGRATE_HEADING("Creating bookings"))
            Booking.objects.get_or_create(
                event=event,
                vendor=vendors[Vendor.CATERING],
                user=planner,
                service_name="Wedding dinner buffet",
                defaults={"amount": Decimal("500000.00"), "status": Booking.PENDING},
            )

        self.stdout.write(self.style.SUCCESS("Development data ready."))
        self.stdout.write(f"  Admin: {ADMIN_EMAIL} / {ADMIN_PASSWORD}")
        self.stdout.write(f"  Planner and vendors: password {SEED_PASSWORD}")

    def _ensure_user(self, email: str, first_name: str, last_name: str, role: str) -> User:
        user, created = User.objects.get_or_create(
            email=email,
            defaults={
                "username": email,
                "first_name": first_name,
                "last_name": last_name,
                "role": role,
            },
        )
        if created:
            user.set_password(SEED_PASSWORD)
            user.save()
        elif user.role != role:
            user.role = role
            user.save(update_fields=["role", "updated_at"])
        return user

    def _ensure_vendor(self, *, email: str, business_name: str, category: str, **fields) -> Vendor:
        owner = self._ensure_user(email=email, first_name=business_name, last_name="", role=User.ROLE_VENDOR)
        vendor, created = Vendor.objects.get_or_create(
            user=owner,
            business_name=business_name,
            defaults={"category": category, **fields},
        )
        if created:
            self.stdout.write(self.style.NOTICE(f"Added {category} vendor {business_name}"))
        return vendor

    def _ensure_admin(self) -> User:
        user, created = User.objects.get_or_create(
            email=ADMIN_EMAIL,
            defaults={
                "username": ADMIN_EMAIL,
                "first_name": "Admin",
                "last_name": "User",
                "role": User.ROLE_ADMIN,
                "is_staff": True,
                "is_superuser": True,
            },
        )
        flag_updates = {}
        if user.role != User.ROLE_ADMIN:
            flag_updates["role"] = User.ROLE_ADMIN
        if not user.is_staff:
            flag_updates["is_staff"] = True
        if not user.is_superuser:
            flag_updates["is_superuser"] = True
        if flag_updates:
            for attr, value in flag_updates.items():
                setattr(user, attr, value)
            user.save(update_fields=list(flag_updates.keys()))
        if created or not user.has_usable_password():
            user.set_password(ADMIN_PASSWORD)
            user.save(update_fields=["password"])
        return user
