import logging
from django.http import JsonResponse
from django.db import connection
from django.core.cache import cache
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny
from django.conf import settings

from apps.seo.models import SEOSettings
from .middleware import MAINTENANCE_KEY

logger = logging.getLogger(__name__)


def health_check(request):
    """
    Liveness Probe.
    Returns 200 if DB/Redis are up, 503 if either is unreachable.
    """
    status_data = {
        "status": "ok",
        "services": {"db": "ok", "cache": "ok"}
    }

    # 1. Check Database
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except Exception as e:
        logger.critical(f"Health Check DB Fail: {e}")
        status_data["status"] = "error"
        status_data["services"]["db"] = "unreachable"
        return JsonResponse(status_data, status=503)

    # 2. Check Cache
    try:
        cache.set("health_ping", "pong", timeout=5)
        if cache.get("health_ping") != "pong":
            raise Exception("Cache R/W mismatch")
    except Exception as e:
        logger.critical(f"Health Check Cache Fail: {e}")
        status_data["status"] = "error"
        status_data["services"]["cache"] = "unreachable"
        return JsonResponse(status_data, status=503)

    return JsonResponse(status_data, status=200)


class AppConfigAPIView(APIView):
    """
    Public bootstrap endpoint for the front end.
    Exposes the browser Maps key and whether search engines may index pages.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        seo_settings = SEOSettings.load()

        return Response({
            "maintenance_mode": bool(cache.get(MAINTENANCE_KEY, False)),
            "enable_indexing": seo_settings.enable_indexing,
            "keys": {
                "google_maps": settings.GOOGLE_MAPS_BROWSER_KEY or "",
            },
            "company": {
                "name": seo_settings.company_name,
                "phone": seo_settings.company_phone,
                "email": seo_settings.company_email,
            },
        })
