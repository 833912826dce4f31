from django.urls import path
from .views import AppConfigAPIView

urlpatterns = [
    path('app-config/', AppConfigAPIView.as_view(), name='app-config'),
]
