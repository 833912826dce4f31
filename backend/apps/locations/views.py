# apps/locations/views.py
import logging
from django.shortcuts import get_object_or_404
from rest_framework import generics, status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny

from apps.accounts.permissions import IsAdminRole
from apps.reviews.models import Review
from .geocoding import GeocodingService
from .models import Location, FieldStaff
from .serializers import LocationSerializer, FieldStaffSerializer
from .tasks import bulk_geocode_reviews

logger = logging.getLogger(__name__)


class PublicLocationListAPIView(generics.ListAPIView):
    permission_classes = [AllowAny]
    serializer_class = LocationSerializer
    pagination_class = None
    filter_backends = []

    def get_queryset(self):
        return Location.objects.filter(is_active=True).order_by("display_order", "name")


class PublicFieldStaffListAPIView(generics.ListAPIView):
    permission_classes = [AllowAny]
    serializer_class = FieldStaffSerializer
    pagination_class = None
    filter_backends = []

    def get_queryset(self):
        return FieldStaff.objects.filter(is_active=True).order_by("display_order")


# ==============================================================================
# ADMIN
# ==============================================================================

class AdminLocationListCreateAPIView(generics.ListCreateAPIView):
    permission_classes = [IsAdminRole]
    serializer_class = LocationSerializer
    queryset = Location.objects.all().order_by("display_order", "name")
    pagination_class = None
    search_fields = ["name", "city", "postal_code"]


class AdminLocationDetailAPIView(generics.RetrieveUpdateDestroyAPIView):
    permission_classes = [IsAdminRole]
    serializer_class = LocationSerializer
    queryset = Location.objects.all()


class AdminFieldStaffListCreateAPIView(generics.ListCreateAPIView):
    permission_classes = [IsAdminRole]
    serializer_class = FieldStaffSerializer
    queryset = FieldStaff.objects.all().order_by("display_order")
    pagination_class = None
    search_fields = ["area_name", "first_name", "last_name"]


class AdminFieldStaffDetailAPIView(generics.RetrieveUpdateDestroyAPIView):
    permission_classes = [IsAdminRole]
    serializer_class = FieldStaffSerializer
    queryset = FieldStaff.objects.all()


class DataQualityAPIView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        return Response(GeocodingService.data_quality_stats())


class GeocodeReviewAPIView(APIView):
    """
    Geocodes a single review synchronously.
    Provider failures surface as a 400 business error.
    """
    permission_classes = [IsAdminRole]

    def post(self, request, review_id):
        review = get_object_or_404(Review, pk=review_id)
        review = GeocodingService.geocode_review(review)
        return Response({
            "latitude": review.latitude,
            "longitude": review.longitude,
            "geocoding_status": review.geocoding_status,
        })


class BulkGeocodeAPIView(APIView):
    permission_classes = [IsAdminRole]

    def post(self, request):
        pending = GeocodingService.reviews_missing_coordinates().count()
        if not pending:
            return Response({"status": "nothing_to_do", "pending": 0})

        task = bulk_geocode_reviews.delay()
        logger.info(f"Bulk geocoding of {pending} reviews queued by user {request.user.id}")
        return Response(
            {"status": "queued", "pending": pending, "task_id": task.id},
            status=status.HTTP_202_ACCEPTED,
        )
