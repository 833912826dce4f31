from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace
from django.test import TestCase, SimpleTestCase
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework import status
from apps.accounts.models import UserRole
from apps.seo.models import SEOSettings
from apps.seo.services import SEOContentService
from apps.seo.templating import ReviewContext, CustomerContext, render, format_number

User = get_user_model()


def make_context(**overrides):
    values = dict(
        category="Kaminofen",
        city="Bamberg",
        postal_code="96047",
        region="Bayern",
        installation_date="2023-03-15",
        customer=CustomerContext(salutation="Herr", lastname="Müller"),
        rating=4.5,
    )
    values.update(overrides)
    return ReviewContext(**values)


class TemplateRenderTestCase(SimpleTestCase):
    def test_all_placeholders(self):
        template = (
            "{category} in {city} ({postal_code}, {region}) - {installation_month} "
            "{installation_year} - {customer_salutation} {customer_lastname}: {rating}"
        )
        self.assertEqual(
            render(template, make_context()),
            "Kaminofen in Bamberg (96047, Bayern) - März 2023 - Herr Müller: 4.5",
        )

    def test_unknown_tokens_stay_verbatim(self):
        self.assertEqual(render("{foo} {city} {CITY}", make_context()), "{foo} Bamberg {CITY}")

    def test_single_pass(self):
        context = make_context(customer=CustomerContext(salutation="Frau", lastname="{city}"))
        self.assertEqual(render("{customer_lastname} aus {city}", context), "{city} aus Bamberg")

    def test_repeated_tokens(self):
        self.assertEqual(render("{city}, {city}", make_context()), "Bamberg, Bamberg")

    def test_template_without_tokens(self):
        self.assertEqual(render("Kaminofen kaufen", make_context()), "Kaminofen kaufen")
        self.assertEqual(render("", make_context()), "")

    def test_integral_rating_has_no_fraction(self):
        self.assertEqual(render("{rating}", make_context(rating=5.0)), "5")
        self.assertEqual(render("{rating}", make_context(rating=Decimal("4.00"))), "4")
        self.assertEqual(render("{rating}", make_context(rating=0)), "0")

    def test_date_objects(self):
        self.assertEqual(render("{installation_month} {installation_year}", make_context(installation_date=date(2022, 12, 1))), "Dezember 2022")
        self.assertEqual(render("{installation_month}", make_context(installation_date=datetime(2021, 1, 31, 12, 0))), "Januar")

    def test_unparseable_date_degrades(self):
        for value in ("kein Datum", "", None, "2023-13-45"):
            with self.subTest(value=value):
                self.assertEqual(
                    render("{installation_month}/{installation_year}", make_context(installation_date=value)),
                    "NaN/NaN",
                )

    def test_format_number(self):
        self.assertEqual(format_number(4.25), "4.25")
        self.assertEqual(format_number(3), "3")
        self.assertEqual(format_number(float("nan")), "NaN")


class SEOContentServiceTestCase(TestCase):
    def setUp(self):
        self.settings = SEOSettings.load()
        self.settings.company_name = "Der Kamindoktor"
        self.settings.address_region = "Bayern"
        self.settings.canonical_base_url = "https://bewertungen.example.de/"
        self.settings.save()
        self.review = SimpleNamespace(
            slug="kaminofen-mueller-bamberg-2023",
            product_category="Kaminofen",
            city="Bamberg",
            postal_code="96047",
            installation_date=date(2023, 3, 15),
            customer_salutation="Herr",
            customer_lastname="Müller",
            customer_comment="Sehr saubere Arbeit. " * 20,
            average_rating=Decimal("4.50"),
            meta_title="",
            meta_description="",
        )

    def test_load_is_singleton(self):
        self.assertEqual(SEOSettings.load().pk, 1)
        self.assertEqual(SEOSettings.objects.count(), 1)

    def test_fallback_without_category_content(self):
        content = SEOContentService.review_page_content(self.review, self.settings)

        self.assertEqual(content["meta_title"], "Herr Müller - Kaminofen in Bamberg | Der Kamindoktor")
        self.assertTrue(content["meta_description"].startswith("4.5/5.0 - Sehr saubere Arbeit."))
        self.assertEqual(len(content["meta_description"]), len("4.5/5.0 - ") + 150 + 3)
        self.assertEqual(content["faq"], [])
        self.assertEqual(content["canonical_url"], "https://bewertungen.example.de/bewertung/kaminofen-mueller-bamberg-2023")

    def test_category_templates_rendered(self):
        self.settings.category_seo_content = {
            "Kaminofen": {
                "meta_title_template": "{category} {city} {installation_year}",
                "meta_description_template": "{customer_salutation} {customer_lastname} gibt {rating} Punkte",
                "heading": "Kaminofen in {region}",
                "description": "<p>{city}</p>",
                "faq": [{"question": "Was kostet ein Kaminofen in {city}?", "answer": "Kommt drauf an."}],
            }
        }
        content = SEOContentService.review_page_content(self.review, self.settings)

        self.assertEqual(content["meta_title"], "Kaminofen Bamberg 2023")
        self.assertEqual(content["meta_description"], "Herr Müller gibt 4.5 Punkte")
        self.assertEqual(content["heading"], "Kaminofen in Bayern")
        self.assertEqual(content["faq"][0]["question"], "Was kostet ein Kaminofen in Bamberg?")

    def test_review_meta_fields_win(self):
        self.review.meta_title = "Eigener Titel"
        content = SEOContentService.review_page_content(self.review, self.settings)
        self.assertEqual(content["meta_title"], "Eigener Titel")

    def test_indexing_flag(self):
        self.settings.enable_indexing = False
        content = SEOContentService.review_page_content(self.review, self.settings)
        self.assertEqual(content["robots"], "noindex, nofollow")

    def test_schema_uses_location(self):
        location = SimpleNamespace(
            city="Nürnberg", description="", street_address="Hauptstr. 1", postal_code="90402",
            phone="0911 123", email="nbg@example.de", service_areas="Fürth, Erlangen", opening_hours="Mo-Fr 9-18",
        )
        schema = SEOContentService.local_business_schema(
            self.review, self.settings, location, {"total_reviews": 10, "average_rating": 4.6}
        )
        self.assertEqual(schema["name"], "Der Kamindoktor Nürnberg")
        self.assertEqual(schema["address"]["addressLocality"], "Nürnberg")
        self.assertEqual(schema["areaServed"][1]["name"], "Erlangen")
        self.assertEqual(schema["aggregateRating"]["ratingValue"], "4.60")


class SEOSettingsAPITestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(email="admin@kamindoktor.de", password="password123")
        UserRole.objects.create(user=self.admin, role=UserRole.ADMIN)

    def test_public_settings(self):
        response = self.client.get("/api/v1/seo/settings/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["company_name"], "Der Kamindoktor")

    def test_admin_patch_valid_category(self):
        self.client.force_authenticate(user=self.admin)
        payload = {
            "category_seo_content": {
                "Kaminofen": {
                    "meta_title_template": "{category} in {city}",
                    "faq": [{"question": "Q?", "answer": "A."}],
                }
            }
        }
        response = self.client.patch("/api/v1/seo/admin/settings/", payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        stored = SEOSettings.load().category_seo_content["Kaminofen"]
        self.assertEqual(stored["meta_title_template"], "{category} in {city}")
        self.assertEqual(stored["heading"], "")

    def test_admin_patch_rejects_unknown_category(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.patch(
            "/api/v1/seo/admin/settings/",
            {"category_seo_content": {"Gartengrill": {}}},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "validation_error")

    def test_admin_patch_rejects_incomplete_faq(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.patch(
            "/api/v1/seo/admin/settings/",
            {"category_seo_content": {"Kaminofen": {"faq": [{"question": "Nur Frage"}]}}},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_admin_requires_role(self):
        user = User.objects.create_user(email="user@example.de", password="password123")
        self.client.force_authenticate(user=user)
        response = self.client.get("/api/v1/seo/admin/settings/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
