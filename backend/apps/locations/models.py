# apps/locations/models.py
from django.db import models, transaction
from django.core.validators import MinValueValidator, MaxValueValidator
from .validators import validate_postal_code_tokens


class Location(models.Model):
    """
    Branch office / showroom shown as contact on the review pages.
    """
    name = models.CharField(max_length=100)
    company_name = models.CharField(max_length=200, blank=True)

    street_address = models.CharField(max_length=200)
    postal_code = models.CharField(max_length=10)
    city = models.CharField(max_length=100)

    phone = models.CharField(max_length=50, blank=True)
    fax = models.CharField(max_length=50, blank=True)
    email = models.EmailField()

    description = models.TextField(blank=True)
    service_areas = models.TextField(blank=True, help_text="Comma separated list of towns")
    opening_hours = models.CharField(max_length=200, blank=True)

    google_maps_embed_url = models.URLField(max_length=1000, blank=True)
    google_business_url = models.URLField(max_length=500, blank=True)
    logo_url = models.URLField(max_length=500, blank=True)
    has_showroom = models.BooleanField(default=False)
    showroom_info_url = models.URLField(max_length=500, blank=True)

    # Precision: 6 decimal places (~11cm)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)

    is_active = models.BooleanField(default=True)
    is_default = models.BooleanField(default=False)
    display_order = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["display_order", "name"]

    def save(self, *args, **kwargs):
        with transaction.atomic():
            if self.is_default:
                Location.objects.filter(is_default=True).exclude(pk=self.pk).update(is_default=False)
            super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.name} ({self.city})"


class FieldStaff(models.Model):
    """
    Field sales contact responsible for a set of postal code areas.
    """
    area_name = models.CharField(max_length=100)
    area_number = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(9)],
    )

    first_name = models.CharField(max_length=50)
    last_name = models.CharField(max_length=50)
    phone = models.CharField(max_length=50)
    email = models.EmailField()
    image_url = models.URLField(max_length=500, blank=True)

    # Tokens: "96" (prefix) or "06-09" (inclusive range of 2-digit prefixes)
    assigned_postal_codes = models.JSONField(default=list, validators=[validate_postal_code_tokens])
    contact_form_url = models.URLField(max_length=500, blank=True)

    is_active = models.BooleanField(default=True)
    display_order = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["display_order", "last_name"]
        verbose_name_plural = "Field staff"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self):
        return f"{self.full_name} - {self.area_name}"
