# apps/reviews/models.py
from decimal import Decimal, ROUND_HALF_UP
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.db.models import Q

PRODUCT_CATEGORIES = (
    "Kaminofen",
    "Neubau Kaminanlage",
    "Austausch Kamineinsatz",
    "Kaminkassette",
    "Kaminkassette FreeStanding",
    "Austausch Kachelofeneinsatz",
)

RATING_FIELDS = (
    "rating_consultation",
    "rating_fire_safety",
    "rating_heating_performance",
    "rating_aesthetics",
    "rating_installation_quality",
    "rating_service",
)


def _rating_field():
    return models.DecimalField(
        max_digits=2,
        decimal_places=1,
        null=True,
        blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(5)],
    )


class ReviewQuerySet(models.QuerySet):
    def published(self):
        return self.filter(status=Review.Status.PUBLISHED)

    def missing_coordinates(self):
        return self.filter(Q(latitude__isnull=True) | Q(longitude__isnull=True))

    def with_valid_coordinates(self):
        bounds = settings.GEO_BOUNDS
        return self.filter(
            latitude__isnull=False,
            longitude__isnull=False,
            latitude__gte=bounds["south"],
            latitude__lte=bounds["north"],
            longitude__gte=bounds["west"],
            longitude__lte=bounds["east"],
        ).exclude(latitude=0).exclude(longitude=0)


class Review(models.Model):
    """
    A customer review of a completed fireplace installation.
    Public URL: /bewertung/<slug>
    """

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        PUBLISHED = "published", "Published"

    class GeocodingStatus(models.TextChoices):
        PENDING = "pending", "Pending"
        SUCCESS = "success", "Success"
        FAILED = "failed", "Failed"

    slug = models.SlugField(max_length=255, unique=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT, db_index=True)

    customer_salutation = models.CharField(max_length=20)
    customer_firstname = models.CharField(max_length=100, blank=True)
    customer_lastname = models.CharField(max_length=100)

    street = models.CharField(max_length=200, blank=True)
    house_number = models.CharField(max_length=20, blank=True)
    postal_code = models.CharField(max_length=10, blank=True)
    city = models.CharField(max_length=100)

    installation_date = models.DateField()
    product_category = models.CharField(
        max_length=50,
        choices=[(c, c) for c in PRODUCT_CATEGORIES],
        db_index=True,
    )
    installed_by = models.CharField(max_length=100, blank=True)

    rating_consultation = _rating_field()
    rating_fire_safety = _rating_field()
    rating_heating_performance = _rating_field()
    rating_aesthetics = _rating_field()
    rating_installation_quality = _rating_field()
    rating_service = _rating_field()
    average_rating = models.DecimalField(max_digits=3, decimal_places=2, null=True, blank=True, editable=False)

    customer_comment = models.TextField(blank=True)
    internal_notes = models.TextField(blank=True)

    # Object keys in the image bucket, not URLs
    before_image_key = models.CharField(max_length=255, blank=True)
    after_image_key = models.CharField(max_length=255, blank=True)

    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    geocoding_status = models.CharField(
        max_length=20,
        choices=GeocodingStatus.choices,
        default=GeocodingStatus.PENDING,
    )
    geocoded_at = models.DateTimeField(null=True, blank=True)

    meta_title = models.CharField(max_length=200, blank=True)
    meta_description = models.CharField(max_length=300, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ReviewQuerySet.as_manager()

    class Meta:
        ordering = ["-installation_date", "-created_at"]
        indexes = [
            models.Index(fields=["status", "product_category"], name="review_status_category_idx"),
        ]

    @property
    def is_published(self):
        return self.status == self.Status.PUBLISHED

    def ratings(self):
        return {field: getattr(self, field) for field in RATING_FIELDS}

    def compute_average_rating(self):
        values = [Decimal(str(v)) for v in self.ratings().values() if v is not None]
        if not values:
            return None
        return (sum(values) / len(values)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    def save(self, *args, **kwargs):
        self.average_rating = self.compute_average_rating()
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and set(update_fields) & set(RATING_FIELDS):
            kwargs["update_fields"] = set(update_fields) | {"average_rating"}
        super().save(*args, **kwargs)

    def __str__(self):
        return self.slug
