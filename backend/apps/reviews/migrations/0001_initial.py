import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def rating_field():
    return models.DecimalField(
        blank=True,
        decimal_places=1,
        max_digits=2,
        null=True,
        validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(5)],
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Review",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("slug", models.SlugField(max_length=255, unique=True)),
                ("status", models.CharField(choices=[("draft", "Draft"), ("published", "Published")], db_index=True, default="draft", max_length=20)),
                ("customer_salutation", models.CharField(max_length=20)),
                ("customer_firstname", models.CharField(blank=True, max_length=100)),
                ("customer_lastname", models.CharField(max_length=100)),
                ("street", models.CharField(blank=True, max_length=200)),
                ("house_number", models.CharField(blank=True, max_length=20)),
                ("postal_code", models.CharField(blank=True, max_length=10)),
                ("city", models.CharField(max_length=100)),
                ("installation_date", models.DateField()),
                ("product_category", models.CharField(choices=[("Kaminofen", "Kaminofen"), ("Neubau Kaminanlage", "Neubau Kaminanlage"), ("Austausch Kamineinsatz", "Austausch Kamineinsatz"), ("Kaminkassette", "Kaminkassette"), ("Kaminkassette FreeStanding", "Kaminkassette FreeStanding"), ("Austausch Kachelofeneinsatz", "Austausch Kachelofeneinsatz")], db_index=True, max_length=50)),
                ("installed_by", models.CharField(blank=True, max_length=100)),
                ("rating_consultation", rating_field()),
                ("rating_fire_safety", rating_field()),
                ("rating_heating_performance", rating_field()),
                ("rating_aesthetics", rating_field()),
                ("rating_installation_quality", rating_field()),
                ("rating_service", rating_field()),
                ("average_rating", models.DecimalField(blank=True, decimal_places=2, editable=False, max_digits=3, null=True)),
                ("customer_comment", models.TextField(blank=True)),
                ("internal_notes", models.TextField(blank=True)),
                ("before_image_key", models.CharField(blank=True, max_length=255)),
                ("after_image_key", models.CharField(blank=True, max_length=255)),
                ("latitude", models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ("longitude", models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ("geocoding_status", models.CharField(choices=[("pending", "Pending"), ("success", "Success"), ("failed", "Failed")], default="pending", max_length=20)),
                ("geocoded_at", models.DateTimeField(blank=True, null=True)),
                ("meta_title", models.CharField(blank=True, max_length=200)),
                ("meta_description", models.CharField(blank=True, max_length=300)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("updated_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-installation_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["status", "product_category"], name="review_status_category_idx"),
                ],
            },
        ),
    ]
