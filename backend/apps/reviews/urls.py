from django.urls import path
from .views import (
    PublicReviewListAPIView,
    PublicReviewDetailAPIView,
    BusinessStatsAPIView,
    AdminReviewListCreateAPIView,
    AdminReviewDetailAPIView,
    PublishReviewAPIView,
    UnpublishReviewAPIView,
    ImagePresignAPIView,
)

urlpatterns = [
    # Admin
    path("admin/", AdminReviewListCreateAPIView.as_view()),
    path("admin/images/presign/", ImagePresignAPIView.as_view()),
    path("admin/<int:pk>/", AdminReviewDetailAPIView.as_view()),
    path("admin/<int:pk>/publish/", PublishReviewAPIView.as_view()),
    path("admin/<int:pk>/unpublish/", UnpublishReviewAPIView.as_view()),

    # Public; the slug route stays last
    path("", PublicReviewListAPIView.as_view(), name="review-list"),
    path("stats/", BusinessStatsAPIView.as_view(), name="review-stats"),
    path("<slug:slug>/", PublicReviewDetailAPIView.as_view(), name="review-detail"),
]
