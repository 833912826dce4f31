import time
import logging
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.throttling import AnonRateThrottle
from rest_framework import status
from rest_framework_simplejwt.tokens import RefreshToken, UntypedToken
from rest_framework_simplejwt.exceptions import TokenError
from django.core.cache import cache
from django.shortcuts import get_object_or_404

from .models import User
from .permissions import IsAdminRole
from .serializers import (
    UserSerializer,
    FirstAdminSetupSerializer,
    UserCreateSerializer,
    UserManageSerializer,
)
from .services import AccountService

logger = logging.getLogger(__name__)


class SetupThrottle(AnonRateThrottle):
    scope = 'setup'


class MeAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)


class SetupStatusAPIView(APIView):
    """
    Tells the frontend whether the first-admin setup screen must be shown.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        return Response({"setup_required": AccountService.setup_required()})


class SetupFirstAdminAPIView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [SetupThrottle]

    def post(self, request):
        serializer = FirstAdminSetupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = AccountService.setup_first_admin(**serializer.validated_data)
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


class LogoutAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        auth_header = request.headers.get("Authorization")
        if auth_header:
            parts = auth_header.split()
            if len(parts) == 2 and parts[0].lower() == 'bearer':
                try:
                    token = UntypedToken(parts[1])
                    ttl = int(token['exp'] - time.time())
                    if ttl > 0:
                        cache.set(f"blocklist:{token['jti']}", "true", timeout=ttl)
                except TokenError:
                    pass

        refresh_token = request.data.get("refresh")
        if refresh_token:
            try:
                token = RefreshToken(refresh_token)
            except TokenError:
                return Response({"error": "Invalid token"}, status=status.HTTP_400_BAD_REQUEST)
            cache.set(f"blocklist:{token['jti']}", "true", timeout=86400 * 7)

        return Response({"status": "logged_out"})


# ==============================================================================
# ADMIN USER MANAGEMENT
# ==============================================================================

class AdminUserListCreateAPIView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        users = User.objects.prefetch_related("roles").order_by("email")
        return Response(UserSerializer(users, many=True).data)

    def post(self, request):
        serializer = UserCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = AccountService.create_user(**serializer.validated_data)
        logger.info(f"User {user.id} created by admin {request.user.id}")
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


class AdminUserDetailAPIView(APIView):
    permission_classes = [IsAdminRole]

    def patch(self, request, user_id):
        user = get_object_or_404(User, pk=user_id)
        serializer = UserManageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if "is_active" in data:
            AccountService.set_active(user, data["is_active"])
        if "is_admin" in data:
            AccountService.set_admin(user, data["is_admin"])
        if "password" in data:
            AccountService.set_password(user, data["password"])

        user.refresh_from_db()
        return Response(UserSerializer(user).data)

    def delete(self, request, user_id):
        user = get_object_or_404(User, pk=user_id)
        if user == request.user:
            return Response(
                {"error": {"code": "self_delete", "message": "You cannot delete your own account."}},
                status=status.HTTP_400_BAD_REQUEST,
            )
        user.delete()
        logger.info(f"User {user_id} deleted by admin {request.user.id}")
        return Response(status=status.HTTP_204_NO_CONTENT)
