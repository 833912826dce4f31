from django.urls import path
from .views import PublicSEOSettingsAPIView, AdminSEOSettingsAPIView

urlpatterns = [
    path("settings/", PublicSEOSettingsAPIView.as_view(), name="seo-settings"),
    path("admin/settings/", AdminSEOSettingsAPIView.as_view(), name="seo-settings-admin"),
]
