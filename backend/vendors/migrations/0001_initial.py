import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Vendor",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("business_name", models.CharField(max_length=200)),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("venue", "Venue"),
                            ("catering", "Catering"),
                            ("decoration", "Decoration"),
                            ("photography", "Photography"),
                            ("entertainment", "Entertainment"),
                            ("florist", "Florist"),
                            ("cake", "Cake"),
                            ("transport", "Transport"),
                            ("other", "Other"),
                        ],
                        max_length=20,
                    ),
                ),
                ("description", models.TextField(blank=True)),
                ("services", models.JSONField(blank=True, null=True)),
                ("price_range", models.JSONField(blank=True, null=True)),
                ("location", models.CharField(blank=True, max_length=200)),
                ("rating", models.DecimalField(decimal_places=1, default=0, max_digits=2)),
                ("review_count", models.PositiveIntegerField(default=0)),
                ("images", models.JSONField(blank=True, null=True)),
                ("availability", models.JSONField(blank=True, null=True)),
                ("is_verified", models.BooleanField(default=False)),
                ("is_active", models.BooleanField(default=True)),
                ("stripe_account_id", models.CharField(blank=True, max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="vendor_profiles",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-rating", "business_name"],
            },
        ),
    ]
