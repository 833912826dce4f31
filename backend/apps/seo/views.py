import logging
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny
from apps.accounts.permissions import IsAdminRole
from .models import SEOSettings
from .serializers import SEOSettingsSerializer, PublicSEOSettingsSerializer

logger = logging.getLogger(__name__)


class PublicSEOSettingsAPIView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        return Response(PublicSEOSettingsSerializer(SEOSettings.load()).data)


class AdminSEOSettingsAPIView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        return Response(SEOSettingsSerializer(SEOSettings.load()).data)

    def patch(self, request):
        seo_settings = SEOSettings.load()
        serializer = SEOSettingsSerializer(seo_settings, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info(f"SEO settings updated by user {request.user.id}")
        return Response(serializer.data)
