from django.utils import timezone
from .models import AuditLog

class AuditService:
    """
    Centralized Audit Logging.
    Every editorial change to a review leaves an immutable row behind.
    """

    @staticmethod
    def log(action, reference_id, user, metadata):
        if user is not None and not user.is_authenticated:
            user = None
        AuditLog.objects.create(
            user=user,
            action=action,
            reference_id=reference_id,
            metadata=metadata,
            created_at=timezone.now()
        )

    @staticmethod
    def review_created(review, user):
        AuditService.log(
            action="review_created",
            reference_id=str(review.id),
            user=user,
            metadata={
                "slug": review.slug,
                "category": review.product_category,
                "city": review.city,
            },
        )

    @staticmethod
    def review_updated(review, user, changed_fields):
        AuditService.log(
            action="review_updated",
            reference_id=str(review.id),
            user=user,
            metadata={"fields": sorted(changed_fields)},
        )

    @staticmethod
    def review_slug_changed(review, user, old_slug):
        AuditService.log(
            action="review_slug_changed",
            reference_id=str(review.id),
            user=user,
            metadata={"old_slug": old_slug, "new_slug": review.slug},
        )

    @staticmethod
    def review_published(review, user=None):
        AuditService.log(
            action="review_published",
            reference_id=str(review.id),
            user=user,
            metadata={"slug": review.slug},
        )

    @staticmethod
    def review_unpublished(review, user=None):
        AuditService.log(
            action="review_unpublished",
            reference_id=str(review.id),
            user=user,
            metadata={"slug": review.slug},
        )

    @staticmethod
    def review_deleted(review_id, slug, user):
        AuditService.log(
            action="review_deleted",
            reference_id=str(review_id),
            user=user,
            metadata={"slug": slug},
        )

    @staticmethod
    def review_geocoded(review, success):
        AuditService.log(
            action="review_geocoded",
            reference_id=str(review.id),
            user=None,
            metadata={
                "success": success,
                "latitude": str(review.latitude) if review.latitude is not None else None,
                "longitude": str(review.longitude) if review.longitude is not None else None,
            },
        )
