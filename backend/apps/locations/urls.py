from django.urls import path
from .views import (
    PublicLocationListAPIView,
    PublicFieldStaffListAPIView,
    AdminLocationListCreateAPIView,
    AdminLocationDetailAPIView,
    AdminFieldStaffListCreateAPIView,
    AdminFieldStaffDetailAPIView,
    DataQualityAPIView,
    GeocodeReviewAPIView,
    BulkGeocodeAPIView,
)

urlpatterns = [
    path("", PublicLocationListAPIView.as_view()),
    path("field-staff/", PublicFieldStaffListAPIView.as_view()),

    path("admin/locations/", AdminLocationListCreateAPIView.as_view()),
    path("admin/locations/<int:pk>/", AdminLocationDetailAPIView.as_view()),
    path("admin/field-staff/", AdminFieldStaffListCreateAPIView.as_view()),
    path("admin/field-staff/<int:pk>/", AdminFieldStaffDetailAPIView.as_view()),

    path("admin/data-quality/", DataQualityAPIView.as_view()),
    path("admin/geocode/review/<int:review_id>/", GeocodeReviewAPIView.as_view()),
    path("admin/geocode/bulk/", BulkGeocodeAPIView.as_view()),
]
