from datetime import date
from decimal import Decimal
from unittest.mock import patch, MagicMock
import requests
from django.core.cache import cache
from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.test import TestCase, SimpleTestCase, override_settings
from django.contrib.auth import get_user_model
from io import StringIO
from rest_framework.test import APIClient
from rest_framework import status

from apps.accounts.models import UserRole
from apps.audit.models import AuditLog
from apps.reviews.models import Review
from apps.utils.exceptions import GeocodingError
from apps.locations.geocoding import GeocodingService
from apps.locations.models import Location, FieldStaff
from apps.locations.services import LocationService, FieldStaffService, is_valid_coordinate
from apps.locations.validators import parse_postal_code_token, validate_postal_code_tokens

User = get_user_model()


def make_location(name, lat=None, lng=None, **extra):
    return Location.objects.create(
        name=name,
        street_address="Hauptstraße 1",
        postal_code="96047",
        city=name,
        email=f"{name.lower()}@kamindoktor.de",
        latitude=lat,
        longitude=lng,
        **extra
    )


def make_review(slug, city="Bamberg", postal_code="96047", **extra):
    extra.setdefault("status", Review.Status.PUBLISHED)
    return Review.objects.create(
        slug=slug,
        customer_salutation="Herr",
        customer_lastname="Müller",
        city=city,
        postal_code=postal_code,
        installation_date=date(2024, 5, 10),
        product_category="Kaminofen",
        **extra
    )


def geocode_response(status_code="OK", lat=49.8988, lng=10.9028):
    response = MagicMock()
    response.raise_for_status.return_value = None
    results = [{"geometry": {"location": {"lat": lat, "lng": lng}}}] if status_code == "OK" else []
    response.json.return_value = {"status": status_code, "results": results}
    return response


class DistanceTestCase(SimpleTestCase):
    def test_distance_calculation(self):
        # Bamberg -> Nürnberg is roughly 50 km
        dist = LocationService.calculate_distance_km(49.8988, 10.9028, 49.4521, 11.0767)
        self.assertAlmostEqual(dist, 51.0, delta=2)

    def test_same_point(self):
        self.assertEqual(LocationService.calculate_distance_km(50, 10, 50, 10), 0)

    def test_accepts_decimals(self):
        dist = LocationService.calculate_distance_km(Decimal("52.52"), Decimal("13.405"), 48.1351, 11.582)
        self.assertAlmostEqual(dist, 504, delta=5)

    def test_coordinate_validity(self):
        self.assertTrue(is_valid_coordinate(49.89, 10.90))
        self.assertTrue(is_valid_coordinate("49.89", "10.90"))
        self.assertFalse(is_valid_coordinate(None, 10.90))
        self.assertFalse(is_valid_coordinate(0, 10.90))
        self.assertFalse(is_valid_coordinate(40.4, -3.7))
        self.assertFalse(is_valid_coordinate("abc", 10.90))


class NearestLocationTestCase(SimpleTestCase):
    def location(self, name, lat, lng, is_active=True, is_default=False):
        return Location(name=name, latitude=lat, longitude=lng, is_active=is_active, is_default=is_default)

    def test_nearest(self):
        bamberg = self.location("Bamberg", 49.8988, 10.9028)
        berlin = self.location("Berlin", 52.52, 13.405)

        nearest = LocationService.find_nearest_location(49.9, 10.9, [berlin, bamberg])
        self.assertIs(nearest, bamberg)
        self.assertLess(nearest.distance, 1)

    def test_tie_keeps_first(self):
        first = self.location("Nord", 51.0, 10.0)
        second = self.location("Süd", 49.0, 10.0)
        self.assertIs(LocationService.find_nearest_location(50.0, 10.0, [first, second]), first)

    def test_no_candidates(self):
        self.assertIsNone(LocationService.find_nearest_location(50.0, 10.0, []))
        self.assertIsNone(LocationService.find_nearest_location(50.0, 10.0, [self.location("X", None, None)]))

    def test_contact_fallback_chain(self):
        inactive_near = self.location("Bamberg", 49.8988, 10.9028, is_active=False)
        default = self.location("Berlin", 52.52, 13.405, is_default=True)
        plain = self.location("Köln", 50.94, 6.96)

        # Inactive locations never win, the nearest active one does
        self.assertIs(LocationService.resolve_contact_location(49.9, 10.9, [inactive_near, plain, default]), plain)
        # No usable coordinates: default location
        self.assertIs(LocationService.resolve_contact_location(None, None, [plain, default]), default)
        self.assertIs(LocationService.resolve_contact_location(40.4, -3.7, [plain, default]), default)
        # No default: first active
        self.assertIs(LocationService.resolve_contact_location(None, None, [inactive_near, plain]), plain)
        self.assertIsNone(LocationService.resolve_contact_location(None, None, [inactive_near]))


class PostalCodeTestCase(SimpleTestCase):
    def test_ranges(self):
        self.assertTrue(FieldStaffService.is_postal_code_in_range("07911", "06-09"))
        self.assertTrue(FieldStaffService.is_postal_code_in_range("06000", "06-09"))
        self.assertTrue(FieldStaffService.is_postal_code_in_range("09999", "06-09"))
        self.assertFalse(FieldStaffService.is_postal_code_in_range("10115", "06-09"))

    def test_prefixes(self):
        self.assertTrue(FieldStaffService.is_postal_code_in_range("96047", "96"))
        self.assertFalse(FieldStaffService.is_postal_code_in_range("97047", "96"))

    def test_malformed_input(self):
        self.assertFalse(FieldStaffService.is_postal_code_in_range("", "96"))
        self.assertFalse(FieldStaffService.is_postal_code_in_range("9", "96"))
        self.assertFalse(FieldStaffService.is_postal_code_in_range("ab123", "96"))
        self.assertFalse(FieldStaffService.is_postal_code_in_range(None, "96"))
        self.assertFalse(FieldStaffService.is_postal_code_in_range("96047", "9"))
        self.assertFalse(FieldStaffService.is_postal_code_in_range("96047", "96-"))
        self.assertFalse(FieldStaffService.is_postal_code_in_range("96047", "99-01"))

    def test_parse_token(self):
        self.assertEqual(parse_postal_code_token("96"), (96, 96))
        self.assertEqual(parse_postal_code_token("06-09"), (6, 9))
        self.assertIsNone(parse_postal_code_token("6-9"))
        self.assertIsNone(parse_postal_code_token(96))

    def test_validate_tokens(self):
        validate_postal_code_tokens(["01", "96", "06-09"])
        for tokens in ([], "96", ["961"], ["09-06"]):
            with self.assertRaises(ValidationError):
                validate_postal_code_tokens(tokens)

    def test_first_matching_staff_order(self):
        inactive = FieldStaff(first_name="A", last_name="Alt", assigned_postal_codes=["96"], is_active=False)
        first = FieldStaff(first_name="B", last_name="Erst", assigned_postal_codes=["01", "95-97"])
        second = FieldStaff(first_name="C", last_name="Zweit", assigned_postal_codes=["96"])
        other = FieldStaff(first_name="D", last_name="Nord", assigned_postal_codes=["20-25"])

        matches = FieldStaffService.find_field_staff_for_postal_code("96047", [inactive, first, second, other])
        self.assertEqual(matches, [first, second])
        self.assertEqual(FieldStaffService.find_field_staff_for_postal_code("", [first]), [])


class LocationModelTestCase(TestCase):
    def test_single_default(self):
        first = make_location("Bamberg", is_default=True)
        second = make_location("Berlin", is_default=True)

        first.refresh_from_db()
        self.assertFalse(first.is_default)
        self.assertTrue(second.is_default)
        self.assertEqual(Location.objects.filter(is_default=True).count(), 1)


@override_settings(GOOGLE_MAPS_API_KEY="test-key", GEOCODING_TIMEOUT_SECONDS=5)
class GeocodingServiceTestCase(TestCase):
    def setUp(self):
        cache.clear()

    @patch("apps.locations.geocoding.requests.get")
    def test_geocode_address(self, mock_get):
        mock_get.return_value = geocode_response()

        lat, lng = GeocodingService.geocode_address("Bamberg", "96047")

        self.assertEqual((lat, lng), (49.8988, 10.9028))
        params = mock_get.call_args.kwargs["params"]
        self.assertEqual(params["address"], "96047 Bamberg, Deutschland")
        self.assertEqual(mock_get.call_args.kwargs["timeout"], 5)

    def test_city_required(self):
        with self.assertRaises(GeocodingError) as ctx:
            GeocodingService.geocode_address("", "96047")
        self.assertEqual(ctx.exception.code, "city_required")

    @override_settings(GOOGLE_MAPS_API_KEY="")
    def test_missing_api_key(self):
        with self.assertRaises(GeocodingError) as ctx:
            GeocodingService.geocode_address("Bamberg")
        self.assertEqual(ctx.exception.code, "config_error")

    @patch("apps.locations.geocoding.requests.get")
    def test_zero_results(self, mock_get):
        mock_get.return_value = geocode_response("ZERO_RESULTS")
        with self.assertRaises(GeocodingError) as ctx:
            GeocodingService.geocode_address("Nirgendwo")
        self.assertEqual(ctx.exception.code, "geocoding_failed")
        self.assertEqual(ctx.exception.provider_status, "ZERO_RESULTS")

    @patch("apps.locations.geocoding.requests.get")
    def test_result_outside_bounds(self, mock_get):
        mock_get.return_value = geocode_response(lat=40.4168, lng=-3.7038)
        with self.assertRaises(GeocodingError) as ctx:
            GeocodingService.geocode_address("Madrid")
        self.assertEqual(ctx.exception.code, "outside_bounds")

    @patch("apps.locations.geocoding.requests.get")
    def test_network_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("boom")
        with self.assertRaises(GeocodingError) as ctx:
            GeocodingService.geocode_address("Bamberg")
        self.assertEqual(ctx.exception.code, "geocoding_unavailable")

    @patch("apps.locations.geocoding.requests.get")
    def test_geocode_review_success(self, mock_get):
        mock_get.return_value = geocode_response()
        review = make_review("a")

        GeocodingService.geocode_review(review)
        review.refresh_from_db()

        self.assertEqual(review.latitude, Decimal("49.898800"))
        self.assertEqual(review.geocoding_status, Review.GeocodingStatus.SUCCESS)
        self.assertIsNotNone(review.geocoded_at)
        self.assertTrue(AuditLog.objects.filter(action="review_geocoded", metadata__success=True).exists())

    @patch("apps.locations.geocoding.requests.get")
    def test_geocode_review_failure_is_recorded(self, mock_get):
        mock_get.return_value = geocode_response("ZERO_RESULTS")
        review = make_review("a")

        with self.assertRaises(GeocodingError):
            GeocodingService.geocode_review(review)

        review.refresh_from_db()
        self.assertEqual(review.geocoding_status, Review.GeocodingStatus.FAILED)
        self.assertIsNone(review.latitude)

    @patch("apps.locations.geocoding.time.sleep")
    @patch("apps.locations.geocoding.requests.get")
    def test_bulk_geocode(self, mock_get, mock_sleep):
        def fake_get(url, params=None, timeout=None):
            if "Nirgendwo" in params["address"]:
                return geocode_response("ZERO_RESULTS")
            return geocode_response()

        mock_get.side_effect = fake_get
        make_review("ok")
        make_review("no-postal-code", postal_code="")
        make_review("unknown", city="Nirgendwo")
        make_review("draft", status=Review.Status.DRAFT)
        make_review("done", latitude=Decimal("49.9"), longitude=Decimal("10.9"))

        stats = GeocodingService.bulk_geocode(delay_seconds=0.2)

        self.assertEqual(stats, {"total": 3, "processed": 3, "success": 1, "failed": 1, "skipped": 1})
        self.assertEqual(mock_get.call_count, 2)
        self.assertEqual(mock_sleep.call_count, 2)
        mock_sleep.assert_called_with(0.2)

    def test_data_quality(self):
        make_review("with", latitude=Decimal("49.9"), longitude=Decimal("10.9"))
        make_review("without")
        make_review("outside", latitude=Decimal("40.4"), longitude=Decimal("-3.7"))
        make_review("draft", status=Review.Status.DRAFT)

        self.assertEqual(
            GeocodingService.data_quality_stats(),
            {"total_published": 3, "with_coordinates": 1, "without_coordinates": 2},
        )

    @patch("apps.locations.geocoding.GeocodingService.bulk_geocode")
    def test_management_command_stats_only(self, mock_bulk):
        make_review("without")
        out = StringIO()
        call_command("geocode_reviews", "--stats-only", stdout=out)
        self.assertIn("Published: 1", out.getvalue())
        mock_bulk.assert_not_called()


class LocationAPITestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(email="admin@kamindoktor.de", password="adminpass123")
        UserRole.objects.create(user=self.admin, role=UserRole.ADMIN)

    def test_public_list_only_active(self):
        make_location("Bamberg")
        make_location("Alt", is_active=False)
        response = self.client.get("/api/v1/locations/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([loc["name"] for loc in response.data], ["Bamberg"])

    def test_admin_create_field_staff_from_comma_list(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post("/api/v1/locations/admin/field-staff/", {
            "area_name": "Oberfranken",
            "area_number": 3,
            "first_name": "Anna",
            "last_name": "Ofen",
            "phone": "0951 123456",
            "email": "anna@kamindoktor.de",
            "assigned_postal_codes": "95, 96, 06-09",
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(FieldStaff.objects.get().assigned_postal_codes, ["95", "96", "06-09"])

    def test_admin_rejects_bad_postal_codes(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post("/api/v1/locations/admin/field-staff/", {
            "area_name": "Oberfranken",
            "first_name": "Anna",
            "last_name": "Ofen",
            "phone": "0951 123456",
            "email": "anna@kamindoktor.de",
            "assigned_postal_codes": ["9-6"],
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("assigned_postal_codes", response.data["error"]["details"])

    @patch("apps.locations.views.bulk_geocode_reviews")
    def test_bulk_geocode_queued(self, mock_task):
        mock_task.delay.return_value = MagicMock(id="task-1")
        make_review("pending")
        self.client.force_authenticate(user=self.admin)

        response = self.client.post("/api/v1/locations/admin/geocode/bulk/")

        self.assertEqual(response.status_code, status.HTTP_202_ACCEPTED)
        self.assertEqual(response.data["pending"], 1)
        mock_task.delay.assert_called_once_with()

    def test_bulk_geocode_nothing_to_do(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post("/api/v1/locations/admin/geocode/bulk/")
        self.assertEqual(response.data["status"], "nothing_to_do")

    @override_settings(GOOGLE_MAPS_API_KEY="test-key")
    @patch("apps.locations.geocoding.requests.get")
    def test_geocode_single_review_failure(self, mock_get):
        cache.clear()
        mock_get.return_value = geocode_response("ZERO_RESULTS")
        review = make_review("a")
        self.client.force_authenticate(user=self.admin)

        response = self.client.post(f"/api/v1/locations/admin/geocode/review/{review.id}/")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "geocoding_failed")

    def test_data_quality_requires_admin(self):
        response = self.client.get("/api/v1/locations/admin/data-quality/")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
