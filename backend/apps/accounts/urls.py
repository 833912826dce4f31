# apps/accounts/urls.py
from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from .views import (
    MeAPIView,
    LogoutAPIView,
    SetupStatusAPIView,
    SetupFirstAdminAPIView,
    AdminUserListCreateAPIView,
    AdminUserDetailAPIView,
)

urlpatterns = [
    path("login/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("logout/", LogoutAPIView.as_view()),
    path("me/", MeAPIView.as_view()),

    # First-run bootstrap
    path("setup/", SetupStatusAPIView.as_view()),
    path("setup/admin/", SetupFirstAdminAPIView.as_view()),

    # User management
    path("admin/users/", AdminUserListCreateAPIView.as_view()),
    path("admin/users/<int:user_id>/", AdminUserDetailAPIView.as_view()),
]
