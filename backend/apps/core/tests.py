# apps/core/tests.py
import logging
from unittest.mock import patch
from django.test import TestCase, RequestFactory, override_settings
from django.core.cache import cache
from django.http import JsonResponse
from rest_framework.test import APIClient
from apps.core.middleware import (
    CorrelationIDMiddleware,
    MaintenanceModeMiddleware,
    MAINTENANCE_KEY,
    get_correlation_id,
)
from apps.seo.models import SEOSettings
from apps.utils.logging import CorrelationIdFilter


class MiddlewareTestCase(TestCase):
    def setUp(self):
        self.factory = RequestFactory()
        self.get_response = lambda req: JsonResponse({"status": "ok"})
        cache.clear()

    def test_correlation_id_generation(self):
        middleware = CorrelationIDMiddleware(self.get_response)
        request = self.factory.get("/")
        response = middleware(request)

        self.assertTrue(response.has_header("X-Request-ID"))
        self.assertIsNotNone(request.correlation_id)
        # Reset once the request is done
        self.assertIsNone(get_correlation_id())

    def test_correlation_id_reused_and_logged(self):
        seen = {}

        def get_response(request):
            record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)
            CorrelationIdFilter().filter(record)
            seen["id"] = record.correlation_id
            return JsonResponse({})

        middleware = CorrelationIDMiddleware(get_response)
        response = middleware(self.factory.get("/", HTTP_X_REQUEST_ID="req-123"))

        self.assertEqual(response["X-Request-ID"], "req-123")
        self.assertEqual(seen["id"], "req-123")

    def test_maintenance_mode_blocks_writes(self):
        cache.set(MAINTENANCE_KEY, True)
        middleware = MaintenanceModeMiddleware(self.get_response)

        response = middleware(self.factory.post("/"))
        self.assertEqual(response.status_code, 503)

        # Reads still pass
        response_get = middleware(self.factory.get("/"))
        self.assertEqual(response_get.status_code, 200)

    def test_maintenance_mode_inactive(self):
        middleware = MaintenanceModeMiddleware(self.get_response)
        response = middleware(self.factory.post("/"))
        self.assertEqual(response.status_code, 200)

    def test_cache_failure_blocks_writes(self):
        middleware = MaintenanceModeMiddleware(self.get_response)
        with patch("apps.core.middleware.cache") as mock_cache:
            mock_cache.get.side_effect = ConnectionError("down")
            response = middleware(self.factory.delete("/"))
        self.assertEqual(response.status_code, 503)


class HealthCheckTestCase(TestCase):
    def test_health_check_ok(self):
        response = self.client.get("/health/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["services"], {"db": "ok", "cache": "ok"})

    def test_cache_down(self):
        with patch("apps.core.views.cache") as mock_cache:
            mock_cache.set.side_effect = ConnectionError("down")
            response = self.client.get("/health/")
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["services"]["cache"], "unreachable")


class AppConfigTestCase(TestCase):
    @override_settings(GOOGLE_MAPS_BROWSER_KEY="browser-key")
    def test_app_config(self):
        settings_row = SEOSettings.load()
        settings_row.enable_indexing = False
        settings_row.save()

        response = APIClient().get("/api/v1/core/app-config/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["keys"]["google_maps"], "browser-key")
        self.assertFalse(response.data["enable_indexing"])
        self.assertFalse(response.data["maintenance_mode"])
