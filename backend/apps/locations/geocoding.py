# apps/locations/geocoding.py
import time
import logging
from decimal import Decimal
import requests
from django.conf import settings
from django.utils import timezone

from apps.audit.services import AuditService
from apps.reviews.models import Review
from apps.utils.exceptions import GeocodingError
from apps.utils.resilience import CircuitBreaker, CircuitBreakerOpenException
from .services import is_valid_coordinate

logger = logging.getLogger(__name__)

GOOGLE_GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"


class GeocodingService:
    """
    Address -> coordinates via the Google Geocoding API.
    Only results inside GEO_BOUNDS are accepted.
    """

    @staticmethod
    def build_address(city, postal_code=None):
        if postal_code:
            return f"{postal_code} {city}, Deutschland"
        return f"{city}, Deutschland"

    @staticmethod
    def geocode_address(city, postal_code=None):
        if not city:
            raise GeocodingError("City is required", code="city_required")

        api_key = settings.GOOGLE_MAPS_API_KEY
        if not api_key:
            raise GeocodingError("Geocoding API key not configured", code="config_error")

        address = GeocodingService.build_address(city, postal_code)

        @CircuitBreaker(
            service_name="google_geocoding",
            failure_threshold=5,
            recovery_timeout=60,
            tracked_exceptions=(requests.RequestException,),
        )
        def _call_provider():
            response = requests.get(
                GOOGLE_GEOCODE_URL,
                params={"address": address, "key": api_key},
                timeout=settings.GEOCODING_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
            return response.json()

        try:
            data = _call_provider()
        except CircuitBreakerOpenException:
            raise GeocodingError("Geocoding service busy. Please try later.", code="geocoding_unavailable")
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Geocoding provider error for '{address}': {e}")
            raise GeocodingError("Geocoding provider error", code="geocoding_unavailable")

        provider_status = data.get("status")
        results = data.get("results") or []
        if provider_status != "OK" or not results:
            logger.warning(f"Geocoding failed for '{address}': {provider_status}")
            raise GeocodingError("Geocoding failed", provider_status=provider_status)

        location = results[0]["geometry"]["location"]
        lat, lng = location["lat"], location["lng"]

        if not is_valid_coordinate(lat, lng):
            logger.warning(f"Geocoding result outside bounds for '{address}': {lat}, {lng}")
            raise GeocodingError("Location outside Germany", code="outside_bounds", provider_status=provider_status)

        return lat, lng

    @staticmethod
    def geocode_review(review):
        """
        Stores coordinates on the review, or marks it failed and re-raises.
        """
        try:
            lat, lng = GeocodingService.geocode_address(review.city, review.postal_code)
        except GeocodingError:
            review.geocoding_status = Review.GeocodingStatus.FAILED
            review.save(update_fields=["geocoding_status", "updated_at"])
            AuditService.review_geocoded(review, success=False)
            raise

        review.latitude = Decimal(str(round(lat, 6)))
        review.longitude = Decimal(str(round(lng, 6)))
        review.geocoding_status = Review.GeocodingStatus.SUCCESS
        review.geocoded_at = timezone.now()
        review.save(update_fields=["latitude", "longitude", "geocoding_status", "geocoded_at", "updated_at"])
        AuditService.review_geocoded(review, success=True)
        logger.info(f"Review {review.id} geocoded: {review.latitude}, {review.longitude}")
        return review

    @staticmethod
    def reviews_missing_coordinates():
        return Review.objects.published().missing_coordinates().order_by("created_at")

    @staticmethod
    def bulk_geocode(reviews=None, delay_seconds=None):
        """
        Geocodes reviews one request at a time with a fixed pause in between.
        Reviews without city or postal code are skipped; failures are counted.
        """
        if reviews is None:
            reviews = GeocodingService.reviews_missing_coordinates()
        if delay_seconds is None:
            delay_seconds = settings.GEOCODING_BULK_DELAY_SECONDS

        reviews = list(reviews)
        stats = {"total": len(reviews), "processed": 0, "success": 0, "failed": 0, "skipped": 0}

        for review in reviews:
            if not review.city or not review.postal_code:
                stats["skipped"] += 1
                stats["processed"] += 1
                continue

            try:
                GeocodingService.geocode_review(review)
                stats["success"] += 1
            except GeocodingError as e:
                logger.warning(f"Bulk geocoding failed for review {review.id}: {e.code}")
                stats["failed"] += 1

            stats["processed"] += 1

            if delay_seconds:
                time.sleep(delay_seconds)

        logger.info(f"Bulk geocoding finished: {stats}")
        return stats

    @staticmethod
    def data_quality_stats():
        published = Review.objects.published()
        total = published.count()
        with_coordinates = published.with_valid_coordinates().count()
        return {
            "total_published": total,
            "with_coordinates": with_coordinates,
            "without_coordinates": total - with_coordinates,
        }
