# apps/reviews/views.py
import logging
from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from django.utils.xmlutils import SimplerXMLGenerator
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, OpenApiResponse
from rest_framework import generics, filters, status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny

from apps.accounts.permissions import IsAdminRole
from apps.locations.serializers import ContactLocationSerializer, FieldStaffSerializer
from apps.seo.models import SEOSettings
from .images import ReviewImageService
from .models import Review
from .serializers import (
    PublicReviewListSerializer,
    PublicReviewDetailSerializer,
    SimilarReviewSerializer,
    AdminReviewSerializer,
    ImagePresignSerializer,
)
from .services import ReviewService, ReviewPageService

logger = logging.getLogger(__name__)

# ==============================================================================
# PUBLIC REVIEW APIS
# Authentication classes empty to allow anonymous visitors
# ==============================================================================

class PublicReviewListAPIView(generics.ListAPIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    serializer_class = PublicReviewListSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]

    filterset_fields = ['product_category', 'city', 'postal_code']
    search_fields = ['city', 'postal_code', 'customer_lastname', 'customer_comment', 'product_category']
    ordering_fields = ['installation_date', 'average_rating', 'created_at']
    ordering = ['-installation_date', '-created_at']

    def get_queryset(self):
        return Review.objects.published()


class PublicReviewDetailAPIView(APIView):
    """
    Review page payload: review, regional contact, SEO block,
    similar reviews and overall rating stats.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request, slug):
        review = get_object_or_404(Review.objects.published(), slug=slug)
        page = ReviewPageService.build(review, SEOSettings.load())

        location = page["contact"]["location"]
        staff = page["contact"]["field_staff"]
        return Response({
            "review": PublicReviewDetailSerializer(review).data,
            "contact": {
                "location": ContactLocationSerializer(location).data if location else None,
                "field_staff": FieldStaffSerializer(staff).data if staff else None,
            },
            "seo": page["seo"],
            "structured_data": page["structured_data"],
            "similar_reviews": SimilarReviewSerializer(page["similar_reviews"], many=True).data,
            "business_stats": page["business_stats"],
        })


class BusinessStatsAPIView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        return Response(ReviewService.business_stats())


def sitemap_xml(request):
    """
    sitemap.xml with one entry per published review.
    """
    seo_settings = SEOSettings.load()
    base_url = (seo_settings.canonical_base_url or request.build_absolute_uri("/")).rstrip("/")

    response = HttpResponse(content_type="application/xml; charset=utf-8")
    xml = SimplerXMLGenerator(response, "utf-8")
    xml.startDocument()
    xml.startElement("urlset", {"xmlns": "http://www.sitemaps.org/schemas/sitemap/0.9"})

    xml.startElement("url", {})
    xml.addQuickElement("loc", f"{base_url}/")
    xml.addQuickElement("changefreq", "daily")
    xml.addQuickElement("priority", "1.0")
    xml.endElement("url")

    reviews = Review.objects.published().only("slug", "installation_date", "created_at").order_by("-installation_date")
    for review in reviews.iterator():
        lastmod = review.installation_date or review.created_at.date()
        xml.startElement("url", {})
        xml.addQuickElement("loc", f"{base_url}/bewertung/{review.slug}")
        xml.addQuickElement("lastmod", lastmod.isoformat())
        xml.addQuickElement("changefreq", "monthly")
        xml.addQuickElement("priority", "0.8")
        xml.endElement("url")

    xml.endElement("urlset")
    xml.endDocument()
    return response


# ==============================================================================
# ADMIN REVIEW APIS
# ==============================================================================

class AdminReviewListCreateAPIView(generics.ListCreateAPIView):
    permission_classes = [IsAdminRole]
    serializer_class = AdminReviewSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]

    filterset_fields = ['status', 'product_category', 'geocoding_status', 'city']
    search_fields = ['slug', 'customer_lastname', 'customer_firstname', 'city', 'postal_code']
    ordering_fields = ['installation_date', 'created_at', 'updated_at', 'average_rating']
    ordering = ['-created_at']

    def get_queryset(self):
        return Review.objects.select_related('created_by', 'updated_by')


class AdminReviewDetailAPIView(generics.RetrieveUpdateDestroyAPIView):
    permission_classes = [IsAdminRole]
    serializer_class = AdminReviewSerializer
    queryset = Review.objects.select_related('created_by', 'updated_by')

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        review = self.get_object()
        serializer = self.get_serializer(review, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({
            **serializer.data,
            "slug_changed": getattr(serializer, "slug_changed", False),
        })

    def perform_destroy(self, instance):
        ReviewService.delete_review(instance, self.request.user)


class PublishReviewAPIView(APIView):
    permission_classes = [IsAdminRole]

    def post(self, request, pk):
        review = get_object_or_404(Review, pk=pk)
        ReviewService.publish(review, request.user)
        return Response({"id": review.id, "slug": review.slug, "status": review.status})


class UnpublishReviewAPIView(APIView):
    permission_classes = [IsAdminRole]

    def post(self, request, pk):
        review = get_object_or_404(Review, pk=pk)
        ReviewService.unpublish(review, request.user)
        return Response({"id": review.id, "slug": review.slug, "status": review.status})


class ImagePresignAPIView(APIView):
    """
    Presigned POST for a direct browser upload of a before/after photo.
    """
    permission_classes = [IsAdminRole]

    @extend_schema(request=ImagePresignSerializer, responses={200: OpenApiResponse(description="Presigned POST policy")})
    def post(self, request):
        serializer = ImagePresignSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = ReviewImageService.generate_presigned_post(
            serializer.validated_data["kind"],
            serializer.validated_data["content_type"],
        )
        return Response(result, status=status.HTTP_200_OK)
