from datetime import date
from decimal import Decimal
from unittest.mock import patch, MagicMock
from asgiref.sync import async_to_sync
from botocore.exceptions import ClientError
from django.test import TestCase, SimpleTestCase, override_settings
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework import status

from apps.accounts.models import UserRole
from apps.audit.models import AuditLog
from apps.locations.models import Location, FieldStaff
from apps.utils.exceptions import BusinessLogicException, SlugConflictError
from apps.reviews.images import ReviewImageService
from apps.reviews.models import Review
from apps.reviews.services import ReviewService, ReviewPageService
from apps.reviews.slugs import (
    normalize,
    base_slug,
    ensure_unique,
    installation_year,
    SlugSource,
    should_regenerate,
)

User = get_user_model()

BASE_SLUG = "kaminofen-mueller-bamberg-2024"


def review_data(**overrides):
    data = dict(
        customer_salutation="Herr",
        customer_lastname="Müller",
        postal_code="96047",
        city="Bamberg",
        installation_date=date(2024, 5, 10),
        product_category="Kaminofen",
        rating_consultation=Decimal("4.5"),
        rating_service=Decimal("5.0"),
        rating_aesthetics=Decimal("4.0"),
        customer_comment="Sehr saubere Montage, der Ofen heizt hervorragend.",
    )
    data.update(overrides)
    return data


def make_review(slug=None, **overrides):
    data = review_data(**overrides)
    data.setdefault("status", Review.Status.PUBLISHED)
    return Review.objects.create(slug=slug or BASE_SLUG, **data)


def make_admin(email="admin@kamindoktor.de"):
    user = User.objects.create_user(email=email, password="adminpass123", is_staff=True)
    UserRole.objects.create(user=user, role=UserRole.ADMIN)
    return user


class SlugBuilderTestCase(SimpleTestCase):
    def test_normalize(self):
        self.assertEqual(normalize("Müller"), "mueller")
        self.assertEqual(normalize("Straße 5"), "strasse-5")
        self.assertEqual(normalize("  A--b  "), "a-b")
        self.assertEqual(normalize("Weißenburg i. Bay."), "weissenburg-i-bay")
        self.assertEqual(normalize("  Neubau Kaminanlage "), "neubau-kaminanlage")
        self.assertEqual(normalize("Kaminkassette FreeStanding"), "kaminkassette-freestanding")
        self.assertEqual(normalize(""), "")
        self.assertEqual(normalize(None), "")

    def test_base_slug(self):
        self.assertEqual(base_slug("Kaminofen", "Müller", "Bamberg", date(2024, 5, 10)), BASE_SLUG)
        self.assertEqual(
            base_slug("Austausch Kachelofeneinsatz", "Schäfer", "Bad Kissingen", "2021-11-02"),
            "austausch-kachelofeneinsatz-schaefer-bad-kissingen-2021",
        )

    def test_invalid_date(self):
        self.assertIsNone(installation_year("not-a-date"))
        with self.assertRaises(ValueError):
            base_slug("Kaminofen", "Müller", "Bamberg", "not-a-date")

    def test_should_regenerate(self):
        old = SlugSource("Kaminofen", "Müller", "Bamberg", date(2024, 5, 10))
        self.assertFalse(should_regenerate(old, SlugSource("Kaminofen", "Müller", "Bamberg", date(2024, 12, 1))))
        self.assertTrue(should_regenerate(old, SlugSource("Kaminofen", "Müller", "Bamberg", date(2023, 5, 10))))
        self.assertTrue(should_regenerate(old, SlugSource("Kaminofen", "Meier", "Bamberg", date(2024, 5, 10))))
        self.assertTrue(should_regenerate(old, SlugSource("Kaminofen", "Müller", "Coburg", date(2024, 5, 10))))
        self.assertTrue(should_regenerate(old, SlugSource("Kaminkassette", "Müller", "Bamberg", date(2024, 5, 10))))


class EnsureUniqueTestCase(SimpleTestCase):
    async def test_free_candidate_returned_unchanged(self):
        async def exists(candidate, exclude_id=None):
            return False

        self.assertEqual(await ensure_unique("a", exists=exists), "a")

    async def test_lowest_free_suffix(self):
        taken = {"a", "a-2", "a-4"}
        probes = []

        async def exists(candidate, exclude_id=None):
            probes.append(candidate)
            return candidate in taken

        self.assertEqual(await ensure_unique("a", exists=exists), "a-3")
        self.assertEqual(probes, ["a", "a-2", "a-3"])

    async def test_exclude_id_passed_through(self):
        seen = []

        async def exists(candidate, exclude_id=None):
            seen.append(exclude_id)
            return False

        await ensure_unique("a", exclude_id=42, exists=exists)
        self.assertEqual(seen, [42])

    async def test_errors_propagate(self):
        async def exists(candidate, exclude_id=None):
            raise RuntimeError("database unavailable")

        with self.assertRaises(RuntimeError):
            await ensure_unique("a", exists=exists)


class EnsureUniqueDatabaseTestCase(TestCase):
    def test_against_stored_reviews(self):
        review = make_review()
        make_review(slug=f"{BASE_SLUG}-2")

        self.assertEqual(async_to_sync(ensure_unique)(BASE_SLUG), f"{BASE_SLUG}-3")
        # A review never collides with itself
        self.assertEqual(async_to_sync(ensure_unique)(BASE_SLUG, review.pk), BASE_SLUG)


class ReviewModelTestCase(TestCase):
    def test_average_rating(self):
        review = make_review()
        self.assertEqual(review.average_rating, Decimal("4.50"))

    def test_average_rating_rounds(self):
        review = make_review(
            rating_consultation=Decimal("4"),
            rating_service=Decimal("5"),
            rating_aesthetics=Decimal("5"),
        )
        self.assertEqual(review.average_rating, Decimal("4.67"))

    def test_average_rating_without_ratings(self):
        review = make_review(rating_consultation=None, rating_service=None, rating_aesthetics=None)
        self.assertIsNone(review.average_rating)

    def test_average_rating_follows_update_fields(self):
        review = make_review()
        review.rating_service = Decimal("1.0")
        review.save(update_fields=["rating_service"])
        review.refresh_from_db()
        self.assertEqual(review.average_rating, Decimal("3.17"))

    @override_settings(GEO_BOUNDS={"south": 47.0, "north": 55.5, "west": 5.5, "east": 15.5})
    def test_coordinate_querysets(self):
        make_review(slug="a", latitude=Decimal("49.891"), longitude=Decimal("10.886"))
        make_review(slug="b", latitude=Decimal("40.4"), longitude=Decimal("-3.7"))
        make_review(slug="c")

        self.assertEqual(list(Review.objects.with_valid_coordinates().values_list("slug", flat=True)), ["a"])
        self.assertEqual(Review.objects.missing_coordinates().count(), 1)


class ReviewServiceCreateTestCase(TestCase):
    def setUp(self):
        self.admin = make_admin()

    def test_create_builds_slug_and_audits(self):
        review = ReviewService.create_review(review_data(), self.admin)

        self.assertEqual(review.slug, BASE_SLUG)
        self.assertEqual(review.created_by, self.admin)
        self.assertEqual(review.status, Review.Status.DRAFT)
        self.assertTrue(AuditLog.objects.filter(action="review_created", reference_id=str(review.id)).exists())

    def test_colliding_reviews_get_numbered_suffixes(self):
        slugs = [ReviewService.create_review(review_data(), self.admin).slug for _ in range(3)]
        self.assertEqual(slugs, [BASE_SLUG, f"{BASE_SLUG}-2", f"{BASE_SLUG}-3"])

    def test_missing_slug_source(self):
        with self.assertRaises(BusinessLogicException) as ctx:
            ReviewService.create_review(review_data(city=""), self.admin)
        self.assertEqual(ctx.exception.code, "missing_fields")
        self.assertFalse(Review.objects.exists())

    def test_new_images_are_validated(self):
        with patch("apps.reviews.services.ReviewImageService.validate_upload") as mock_validate:
            ReviewService.create_review(review_data(before_image_key="reviews/before/abc.jpg"), self.admin)
        mock_validate.assert_called_once_with("reviews/before/abc.jpg")

    def test_concurrent_writer_triggers_new_resolution(self):
        make_review()
        calls = []

        async def stale_ensure_unique(candidate, exclude_id=None):
            calls.append(candidate)
            if len(calls) == 1:
                # Answer computed before the other writer committed
                return candidate
            return await ensure_unique(candidate, exclude_id)

        with patch("apps.reviews.services.ensure_unique", stale_ensure_unique):
            review = ReviewService.create_review(review_data(), self.admin)

        self.assertEqual(review.slug, f"{BASE_SLUG}-2")
        self.assertEqual(len(calls), 2)

    @override_settings(REVIEW_SLUG_SAVE_ATTEMPTS=3)
    def test_gives_up_after_bounded_attempts(self):
        make_review()
        calls = []

        async def always_stale(candidate, exclude_id=None):
            calls.append(candidate)
            return candidate

        with patch("apps.reviews.services.ensure_unique", always_stale):
            with self.assertRaises(SlugConflictError):
                ReviewService.create_review(review_data(), self.admin)

        self.assertEqual(len(calls), 3)
        self.assertEqual(Review.objects.count(), 1)


class ReviewServiceUpdateTestCase(TestCase):
    def setUp(self):
        self.admin = make_admin()
        self.review = ReviewService.create_review(review_data(), self.admin)
        self.review.latitude = Decimal("49.891")
        self.review.longitude = Decimal("10.886")
        self.review.geocoding_status = Review.GeocodingStatus.SUCCESS
        self.review.save()

    def test_unrelated_change_keeps_slug(self):
        review, slug_changed = ReviewService.update_review(
            self.review, {"customer_comment": "Nachtrag: alles bestens."}, self.admin
        )
        self.assertFalse(slug_changed)
        self.assertEqual(review.slug, BASE_SLUG)
        self.assertEqual(review.geocoding_status, Review.GeocodingStatus.SUCCESS)

    def test_postal_code_change_keeps_slug_but_resets_coordinates(self):
        review, slug_changed = ReviewService.update_review(self.review, {"postal_code": "96049"}, self.admin)
        self.assertFalse(slug_changed)
        self.assertIsNone(review.latitude)
        self.assertEqual(review.geocoding_status, Review.GeocodingStatus.PENDING)

    def test_same_year_keeps_slug(self):
        _, slug_changed = ReviewService.update_review(
            self.review, {"installation_date": date(2024, 11, 30)}, self.admin
        )
        self.assertFalse(slug_changed)

    def test_stored_slug_is_never_rewritten_when_sources_unchanged(self):
        # Older reviews may carry a hand-made slug
        Review.objects.filter(pk=self.review.pk).update(slug="kaminofen-bamberg-alt")
        self.review.refresh_from_db()

        review, slug_changed = ReviewService.update_review(self.review, {"installed_by": "Team Nord"}, self.admin)
        self.assertFalse(slug_changed)
        self.assertEqual(review.slug, "kaminofen-bamberg-alt")

    def test_city_change_regenerates_slug_and_resets_coordinates(self):
        review, slug_changed = ReviewService.update_review(self.review, {"city": "Coburg"}, self.admin)

        self.assertTrue(slug_changed)
        self.assertEqual(review.slug, "kaminofen-mueller-coburg-2024")
        self.assertIsNone(review.latitude)
        self.assertEqual(review.geocoding_status, Review.GeocodingStatus.PENDING)

        entry = AuditLog.objects.get(action="review_slug_changed", reference_id=str(review.id))
        self.assertEqual(entry.metadata["old_slug"], BASE_SLUG)

    def test_regenerated_slug_respects_other_reviews(self):
        make_review(slug="kaminofen-mueller-coburg-2024")
        review, _ = ReviewService.update_review(self.review, {"city": "Coburg"}, self.admin)
        self.assertEqual(review.slug, "kaminofen-mueller-coburg-2024-2")

    def test_regeneration_to_same_slug(self):
        # "Mueller" and "Müller" normalize identically
        review, slug_changed = ReviewService.update_review(
            self.review, {"customer_lastname": "Mueller"}, self.admin
        )
        self.assertFalse(slug_changed)
        self.assertEqual(review.slug, BASE_SLUG)

    def test_replaced_image_is_deleted_after_commit(self):
        Review.objects.filter(pk=self.review.pk).update(before_image_key="reviews/before/old.jpg")
        self.review.refresh_from_db()

        with patch("apps.reviews.services.ReviewImageService.validate_upload"), \
                patch("apps.reviews.services.delete_review_image") as mock_task:
            with self.captureOnCommitCallbacks(execute=True):
                ReviewService.update_review(
                    self.review, {"before_image_key": "reviews/before/new.jpg"}, self.admin
                )

        mock_task.delay.assert_called_once_with("reviews/before/old.jpg")

    def test_publish_and_unpublish(self):
        ReviewService.publish(self.review, self.admin)
        self.assertTrue(self.review.is_published)
        ReviewService.unpublish(self.review, self.admin)
        self.assertFalse(self.review.is_published)

        actions = list(
            AuditLog.objects.filter(reference_id=str(self.review.id))
            .exclude(action="review_created")
            .values_list("action", flat=True)
        )
        self.assertCountEqual(actions, ["review_published", "review_unpublished"])

    def test_delete(self):
        review_id = self.review.id
        ReviewService.delete_review(self.review, self.admin)

        self.assertFalse(Review.objects.filter(pk=review_id).exists())
        entry = AuditLog.objects.get(action="review_deleted", reference_id=str(review_id))
        self.assertEqual(entry.metadata["slug"], BASE_SLUG)


class ReviewAggregatesTestCase(TestCase):
    def test_business_stats(self):
        make_review(slug="a")  # 4.50
        make_review(slug="b", rating_consultation=Decimal("4"), rating_service=Decimal("4"), rating_aesthetics=Decimal("4"))
        make_review(slug="c", status=Review.Status.DRAFT, rating_service=Decimal("1"))

        stats = ReviewService.business_stats()
        self.assertEqual(stats["total_reviews"], 2)
        self.assertEqual(stats["average_rating"], 4.3)

    def test_business_stats_empty(self):
        self.assertEqual(ReviewService.business_stats(), {"total_reviews": 0, "average_rating": 0})

    def test_similar_reviews(self):
        review = make_review(slug="self")
        for i in range(4):
            make_review(slug=f"same-{i}", installation_date=date(2023, i + 1, 1))
        make_review(slug="draft", status=Review.Status.DRAFT)
        make_review(slug="other", product_category="Kaminkassette")

        similar = list(ReviewService.similar_reviews(review))
        self.assertEqual([r.slug for r in similar], ["same-3", "same-2", "same-1"])


class ReviewPageServiceTestCase(TestCase):
    def setUp(self):
        self.bamberg = Location.objects.create(
            name="Bamberg",
            street_address="Hauptstraße 1",
            postal_code="96047",
            city="Bamberg",
            email="bamberg@kamindoktor.de",
            latitude=Decimal("49.891"),
            longitude=Decimal("10.886"),
        )
        self.berlin = Location.objects.create(
            name="Berlin",
            street_address="Unter den Linden 5",
            postal_code="10117",
            city="Berlin",
            email="berlin@kamindoktor.de",
            latitude=Decimal("52.517"),
            longitude=Decimal("13.389"),
            is_default=True,
        )
        self.staff = FieldStaff.objects.create(
            area_name="Oberfranken",
            first_name="Anna",
            last_name="Ofen",
            phone="0951 123456",
            email="anna@kamindoktor.de",
            assigned_postal_codes=["95-96"],
        )

    def test_nearest_location_and_field_staff(self):
        review = make_review(latitude=Decimal("49.9"), longitude=Decimal("10.9"))
        contact = ReviewPageService.contact_block(review)

        self.assertEqual(contact["location"], self.bamberg)
        self.assertLess(contact["location"].distance, 5)
        self.assertEqual(contact["field_staff"], self.staff)

    def test_default_location_without_coordinates(self):
        review = make_review(postal_code="10115", city="Berlin")
        contact = ReviewPageService.contact_block(review)

        self.assertEqual(contact["location"], self.berlin)
        self.assertIsNone(contact["field_staff"])

    def test_page_payload(self):
        review = make_review()
        make_review(slug="similar", installation_date=date(2022, 1, 1))

        page = ReviewPageService.build(review)

        self.assertEqual(page["review"], review)
        self.assertEqual(page["business_stats"]["total_reviews"], 2)
        self.assertEqual([r.slug for r in page["similar_reviews"]], ["similar"])
        self.assertEqual(page["structured_data"]["@type"], "LocalBusiness")
        self.assertIn("Müller", page["seo"]["meta_title"])


@override_settings(AWS_STORAGE_BUCKET_NAME="reviews-bucket", REVIEW_IMAGE_MAX_BYTES=5 * 1024 * 1024)
class ReviewImageServiceTestCase(SimpleTestCase):
    def setUp(self):
        patcher = patch("apps.reviews.images._client")
        self.client_factory = patcher.start()
        self.addCleanup(patcher.stop)
        self.s3 = MagicMock()
        self.client_factory.return_value = self.s3

    def test_presigned_post(self):
        self.s3.generate_presigned_post.return_value = {"url": "https://upload", "fields": {}}

        with override_settings(R2_PUBLIC_URL="https://images.kamindoktor.de"):
            result = ReviewImageService.generate_presigned_post("before", "image/png")

        self.assertTrue(result["key"].startswith("reviews/before/"))
        self.assertTrue(result["key"].endswith(".png"))
        self.assertEqual(result["public_url"], f"https://images.kamindoktor.de/{result['key']}")
        conditions = self.s3.generate_presigned_post.call_args.kwargs["Conditions"]
        self.assertIn(["content-length-range", 100, 5 * 1024 * 1024], conditions)

    def test_presign_rejects_unsupported_type(self):
        with self.assertRaises(BusinessLogicException) as ctx:
            ReviewImageService.generate_presigned_post("before", "image/gif")
        self.assertEqual(ctx.exception.code, "unsupported_file_type")

    def test_missing_upload(self):
        self.s3.head_object.side_effect = ClientError({"Error": {"Code": "404"}}, "HeadObject")
        with self.assertRaises(BusinessLogicException) as ctx:
            ReviewImageService.validate_upload("reviews/before/missing.jpg")
        self.assertEqual(ctx.exception.code, "image_not_found")

    def test_too_small_upload_is_removed(self):
        self.s3.head_object.return_value = {"ContentLength": 20, "ContentType": "image/jpeg"}
        with self.assertRaises(BusinessLogicException) as ctx:
            ReviewImageService.validate_upload("reviews/before/tiny.jpg")
        self.assertEqual(ctx.exception.code, "invalid_image_size")
        self.s3.delete_object.assert_called_once_with(Bucket="reviews-bucket", Key="reviews/before/tiny.jpg")

    def test_wrong_content_type_is_removed(self):
        self.s3.head_object.return_value = {"ContentLength": 2048, "ContentType": "application/pdf"}
        with self.assertRaises(BusinessLogicException):
            ReviewImageService.validate_upload("reviews/after/doc.jpg")
        self.s3.delete_object.assert_called_once()

    def test_valid_upload(self):
        self.s3.head_object.return_value = {"ContentLength": 2048, "ContentType": "image/webp"}
        result = ReviewImageService.validate_upload("reviews/after/ok.webp")
        self.assertEqual(result["size"], 2048)
        self.s3.delete_object.assert_not_called()

    def test_foreign_keys_rejected(self):
        with self.assertRaises(BusinessLogicException) as ctx:
            ReviewImageService.validate_upload("products/../reviews/x.jpg")
        self.assertEqual(ctx.exception.code, "invalid_image_key")
        self.s3.head_object.assert_not_called()


class PublicReviewAPITestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.review = make_review(latitude=Decimal("49.891"), longitude=Decimal("10.886"))
        make_review(slug="kaminkassette-meier-coburg-2023", product_category="Kaminkassette",
                    customer_lastname="Meier", city="Coburg", installation_date=date(2023, 3, 1))
        make_review(slug="draft-review", status=Review.Status.DRAFT)

    def test_list_only_published(self):
        response = self.client.get("/api/v1/reviews/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        slugs = [r["slug"] for r in response.data["results"]]
        self.assertCountEqual(slugs, [BASE_SLUG, "kaminkassette-meier-coburg-2023"])

    def test_list_filter_by_category(self):
        response = self.client.get("/api/v1/reviews/", {"product_category": "Kaminkassette"})
        self.assertEqual([r["slug"] for r in response.data["results"]], ["kaminkassette-meier-coburg-2023"])

    def test_detail(self):
        response = self.client.get(f"/api/v1/reviews/{BASE_SLUG}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["review"]["slug"], BASE_SLUG)
        self.assertEqual(response.data["review"]["coordinates"], {"lat": 49.891, "lng": 10.886})
        self.assertIn("meta_title", response.data["seo"])
        self.assertEqual(response.data["business_stats"]["total_reviews"], 2)
        self.assertIsNone(response.data["contact"]["location"])

    def test_draft_detail_not_found(self):
        response = self.client.get("/api/v1/reviews/draft-review/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_stats(self):
        response = self.client.get("/api/v1/reviews/stats/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total_reviews"], 2)

    def test_sitemap(self):
        response = self.client.get("/sitemap.xml")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.content.decode()
        self.assertIn(f"http://testserver/bewertung/{BASE_SLUG}", body)
        self.assertIn("<lastmod>2024-05-10</lastmod>", body)
        self.assertNotIn("draft-review", body)


class AdminReviewAPITestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = make_admin()
        self.client.force_authenticate(user=self.admin)

    def payload(self, **overrides):
        data = {
            "customer_salutation": "Frau",
            "customer_lastname": "Schäfer",
            "postal_code": "96450",
            "city": "Coburg",
            "installation_date": "2023-10-05",
            "product_category": "Kaminkassette",
            "rating_consultation": "5.0",
            "rating_service": "4.0",
        }
        data.update(overrides)
        return data

    def test_create(self):
        response = self.client.post("/api/v1/reviews/admin/", self.payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["slug"], "kaminkassette-schaefer-coburg-2023")
        self.assertEqual(response.data["average_rating"], "4.50")
        self.assertEqual(response.data["created_by_email"], self.admin.email)

    def test_create_validates_postal_code(self):
        response = self.client.post("/api/v1/reviews/admin/", self.payload(postal_code="9645"), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "validation_error")
        self.assertIn("postal_code", response.data["error"]["details"])

    def test_slug_is_read_only(self):
        response = self.client.post("/api/v1/reviews/admin/", self.payload(slug="eigener-slug"), format="json")
        self.assertEqual(response.data["slug"], "kaminkassette-schaefer-coburg-2023")

    def test_patch_reports_slug_change(self):
        review = ReviewService.create_review(review_data(), self.admin)

        response = self.client.patch(f"/api/v1/reviews/admin/{review.id}/", {"city": "Forchheim"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["slug_changed"])
        self.assertEqual(response.data["slug"], "kaminofen-mueller-forchheim-2024")

        response = self.client.patch(f"/api/v1/reviews/admin/{review.id}/", {"internal_notes": "Rückruf"}, format="json")
        self.assertFalse(response.data["slug_changed"])

    def test_publish_endpoint(self):
        review = ReviewService.create_review(review_data(), self.admin)
        response = self.client.post(f"/api/v1/reviews/admin/{review.id}/publish/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "published")

    def test_delete(self):
        review = ReviewService.create_review(review_data(), self.admin)
        response = self.client.delete(f"/api/v1/reviews/admin/{review.id}/")
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertTrue(AuditLog.objects.filter(action="review_deleted").exists())

    def test_presign(self):
        with patch("apps.reviews.views.ReviewImageService.generate_presigned_post") as mock_presign:
            mock_presign.return_value = {"post_data": {}, "key": "reviews/after/x.jpg", "public_url": None}
            response = self.client.post(
                "/api/v1/reviews/admin/images/presign/",
                {"kind": "after", "content_type": "image/jpeg"},
                format="json",
            )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        mock_presign.assert_called_once_with("after", "image/jpeg")

    def test_requires_admin_role(self):
        user = User.objects.create_user(email="user@example.de", password="password123")
        self.client.force_authenticate(user=user)
        response = self.client.get("/api/v1/reviews/admin/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.get("/api/v1/reviews/admin/")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
