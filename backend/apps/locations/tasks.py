# apps/locations/tasks.py
from celery import shared_task
from celery.utils.log import get_task_logger
from .geocoding import GeocodingService

logger = get_task_logger(__name__)


@shared_task(queue="default")
def bulk_geocode_reviews(review_ids=None):
    """
    Batch geocoding of published reviews without coordinates.
    Runs nightly via beat and on demand from the admin API.
    """
    reviews = None
    if review_ids:
        reviews = GeocodingService.reviews_missing_coordinates().filter(id__in=review_ids)

    stats = GeocodingService.bulk_geocode(reviews)
    logger.info(f"Bulk geocoding: {stats['success']} ok, {stats['failed']} failed, {stats['skipped']} skipped")
    return stats
