# apps/reviews/services.py
import logging
from decimal import Decimal, ROUND_HALF_UP
from asgiref.sync import async_to_sync
from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Avg, Count

from apps.audit.services import AuditService
from apps.locations.models import Location, FieldStaff
from apps.locations.services import LocationService, FieldStaffService
from apps.seo.models import SEOSettings
from apps.seo.services import SEOContentService
from apps.utils.exceptions import BusinessLogicException, SlugConflictError
from .images import ReviewImageService
from .models import Review
from .slugs import SlugSource, ensure_unique, should_regenerate
from .tasks import delete_review_image

logger = logging.getLogger(__name__)

SLUG_SOURCE_FIELDS = ("product_category", "customer_lastname", "city", "installation_date")
IMAGE_FIELDS = ("before_image_key", "after_image_key")
LOCATION_FIELDS = ("postal_code", "city")


class ReviewService:

    @staticmethod
    def _check_slug_sources(review):
        missing = [f for f in SLUG_SOURCE_FIELDS if not getattr(review, f)]
        if missing:
            raise BusinessLogicException(
                f"Required fields missing: {', '.join(missing)}",
                code="missing_fields",
            )

    @staticmethod
    def _validate_images(review, old_images=None):
        old_images = old_images or {}
        for field in IMAGE_FIELDS:
            key = getattr(review, field)
            if key and key != old_images.get(field):
                ReviewImageService.validate_upload(key)

    @staticmethod
    def _slug_taken_by_other(review):
        qs = Review.objects.filter(slug=review.slug)
        if review.pk is not None:
            qs = qs.exclude(pk=review.pk)
        return qs.exists()

    @staticmethod
    def _save_with_unique_slug(review, candidate):
        """
        Resolves a free slug and saves. The unique constraint on `slug` is the
        final arbiter: a concurrent writer taking the same slug between check
        and insert triggers a fresh resolution, up to REVIEW_SLUG_SAVE_ATTEMPTS.
        """
        attempts = settings.REVIEW_SLUG_SAVE_ATTEMPTS
        for attempt in range(1, attempts + 1):
            review.slug = async_to_sync(ensure_unique)(candidate, review.pk)
            try:
                with transaction.atomic():
                    review.save()
                return review
            except IntegrityError:
                if not ReviewService._slug_taken_by_other(review):
                    raise
                logger.warning(f"Slug '{review.slug}' taken concurrently (attempt {attempt}/{attempts})")

        raise SlugConflictError()

    @staticmethod
    def create_review(data, user=None):
        review = Review(**data)
        ReviewService._check_slug_sources(review)
        ReviewService._validate_images(review)

        if user is not None and user.is_authenticated:
            review.created_by = user
            review.updated_by = user

        ReviewService._save_with_unique_slug(review, SlugSource.from_review(review).slug())
        AuditService.review_created(review, user)
        logger.info(f"Review {review.id} created with slug {review.slug}")
        return review

    @staticmethod
    def update_review(review, data, user=None):
        """
        Applies `data` to the review. The slug is only rebuilt when one of its
        source fields changed; otherwise the stored slug is kept as is.
        Returns (review, slug_changed).
        """
        old_source = SlugSource.from_review(review)
        old_slug = review.slug
        old_images = {f: getattr(review, f) for f in IMAGE_FIELDS}

        changed = set()
        for field, value in data.items():
            if getattr(review, field) != value:
                setattr(review, field, value)
                changed.add(field)

        ReviewService._check_slug_sources(review)
        ReviewService._validate_images(review, old_images)

        if changed & set(LOCATION_FIELDS):
            review.latitude = None
            review.longitude = None
            review.geocoding_status = Review.GeocodingStatus.PENDING
            review.geocoded_at = None

        if user is not None and user.is_authenticated:
            review.updated_by = user

        new_source = SlugSource.from_review(review)
        if should_regenerate(old_source, new_source):
            ReviewService._save_with_unique_slug(review, new_source.slug())
        else:
            review.save()

        slug_changed = review.slug != old_slug

        for field, old_key in old_images.items():
            if old_key and old_key != getattr(review, field):
                transaction.on_commit(lambda key=old_key: delete_review_image.delay(key))

        if changed:
            AuditService.review_updated(review, user, changed)
        if "status" in changed:
            if review.is_published:
                AuditService.review_published(review, user)
            else:
                AuditService.review_unpublished(review, user)
        if slug_changed:
            AuditService.review_slug_changed(review, user, old_slug)
            logger.info(f"Review {review.id} slug changed: {old_slug} -> {review.slug}")

        return review, slug_changed

    @staticmethod
    def delete_review(review, user=None):
        review_id, slug = review.id, review.slug
        image_keys = [getattr(review, f) for f in IMAGE_FIELDS if getattr(review, f)]

        with transaction.atomic():
            review.delete()
            AuditService.review_deleted(review_id, slug, user)
            for key in image_keys:
                transaction.on_commit(lambda key=key: delete_review_image.delay(key))

    @staticmethod
    def publish(review, user=None):
        if review.status != Review.Status.PUBLISHED:
            review.status = Review.Status.PUBLISHED
            ReviewService._save_status(review, user)
            AuditService.review_published(review, user)
        return review

    @staticmethod
    def unpublish(review, user=None):
        if review.status != Review.Status.DRAFT:
            review.status = Review.Status.DRAFT
            ReviewService._save_status(review, user)
            AuditService.review_unpublished(review, user)
        return review

    @staticmethod
    def _save_status(review, user):
        fields = ["status", "updated_at"]
        if user is not None and user.is_authenticated:
            review.updated_by = user
            fields.append("updated_by")
        review.save(update_fields=fields)

    @staticmethod
    def similar_reviews(review, limit=3):
        return (
            Review.objects.published()
            .filter(product_category=review.product_category)
            .exclude(pk=review.pk)
            .order_by("-installation_date", "-created_at")[:limit]
        )

    @staticmethod
    def business_stats():
        aggregates = Review.objects.published().aggregate(
            total=Count("id"),
            average=Avg("average_rating"),
        )
        average = aggregates["average"]
        if average is None:
            average = 0
        else:
            average = float(Decimal(str(average)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
        return {
            "total_reviews": aggregates["total"],
            "average_rating": average,
        }


class ReviewPageService:
    """
    Everything the public review page needs in one payload.
    """

    @staticmethod
    def contact_block(review):
        locations = list(Location.objects.filter(is_active=True).order_by("display_order", "name"))
        location = LocationService.resolve_contact_location(review.latitude, review.longitude, locations)

        staff = []
        if review.postal_code:
            candidates = FieldStaff.objects.filter(is_active=True).order_by("display_order")
            staff = FieldStaffService.find_field_staff_for_postal_code(review.postal_code, candidates)

        return {
            "location": location,
            "field_staff": staff[0] if staff else None,
        }

    @staticmethod
    def build(review, seo_settings=None):
        seo_settings = seo_settings or SEOSettings.load()
        contact = ReviewPageService.contact_block(review)
        stats = ReviewService.business_stats()

        return {
            "review": review,
            "contact": contact,
            "seo": SEOContentService.review_page_content(review, seo_settings),
            "structured_data": SEOContentService.local_business_schema(
                review, seo_settings, contact["location"], stats
            ),
            "similar_reviews": list(ReviewService.similar_reviews(review)),
            "business_stats": stats,
        }
