import django.core.validators
from django.db import migrations, models

import apps.locations.validators


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Location",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                ("company_name", models.CharField(blank=True, max_length=200)),
                ("street_address", models.CharField(max_length=200)),
                ("postal_code", models.CharField(max_length=10)),
                ("city", models.CharField(max_length=100)),
                ("phone", models.CharField(blank=True, max_length=50)),
                ("fax", models.CharField(blank=True, max_length=50)),
                ("email", models.EmailField(max_length=254)),
                ("description", models.TextField(blank=True)),
                ("service_areas", models.TextField(blank=True, help_text="Comma separated list of towns")),
                ("opening_hours", models.CharField(blank=True, max_length=200)),
                ("google_maps_embed_url", models.URLField(blank=True, max_length=1000)),
                ("google_business_url", models.URLField(blank=True, max_length=500)),
                ("logo_url", models.URLField(blank=True, max_length=500)),
                ("has_showroom", models.BooleanField(default=False)),
                ("showroom_info_url", models.URLField(blank=True, max_length=500)),
                ("latitude", models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ("longitude", models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("is_default", models.BooleanField(default=False)),
                ("display_order", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["display_order", "name"],
            },
        ),
        migrations.CreateModel(
            name="FieldStaff",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("area_name", models.CharField(max_length=100)),
                ("area_number", models.PositiveSmallIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(9)])),
                ("first_name", models.CharField(max_length=50)),
                ("last_name", models.CharField(max_length=50)),
                ("phone", models.CharField(max_length=50)),
                ("email", models.EmailField(max_length=254)),
                ("image_url", models.URLField(blank=True, max_length=500)),
                ("assigned_postal_codes", models.JSONField(default=list, validators=[apps.locations.validators.validate_postal_code_tokens])),
                ("contact_form_url", models.URLField(blank=True, max_length=500)),
                ("is_active", models.BooleanField(default=True)),
                ("display_order", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["display_order", "last_name"],
                "verbose_name_plural": "Field staff",
            },
        ),
    ]
