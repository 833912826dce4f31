# apps/accounts/tests.py
from django.test import TestCase
from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError
from unittest.mock import patch
from rest_framework.test import APIClient
from rest_framework import status
from apps.accounts.models import UserRole
from apps.accounts.services import AccountService
from apps.utils.exceptions import BusinessLogicException

User = get_user_model()


def make_admin(email="admin@kamindoktor.de", password="adminpass123"):
    user = User.objects.create_user(email=email, password=password, is_staff=True)
    UserRole.objects.create(user=user, role=UserRole.ADMIN)
    return user


class UserManagerTestCase(TestCase):
    def test_create_user_normalizes_email(self):
        user = User.objects.create_user(email="  Max.Muster@Example.DE ", password="password123")
        self.assertEqual(user.email, "max.muster@example.de")
        self.assertTrue(user.check_password("password123"))
        self.assertFalse(user.is_staff)
        self.assertFalse(user.is_superuser)

    def test_create_superuser(self):
        admin = User.objects.create_superuser(email="root@example.de", password="adminpass")
        self.assertTrue(admin.is_staff)
        self.assertTrue(admin.is_superuser)

    def test_email_required(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email=None, password="pass")


class AccountServiceTestCase(TestCase):
    def test_setup_first_admin(self):
        self.assertTrue(AccountService.setup_required())
        user = AccountService.setup_first_admin("chef@kamindoktor.de", "secret123", "Karl", "Kamin")

        self.assertTrue(user.is_admin)
        self.assertTrue(user.is_staff)
        self.assertFalse(AccountService.setup_required())

    def test_setup_refused_when_admin_exists(self):
        make_admin()
        with self.assertRaises(BusinessLogicException) as ctx:
            AccountService.setup_first_admin("other@kamindoktor.de", "secret123", "A", "B")
        self.assertEqual(ctx.exception.code, "setup_completed")

    def test_setup_rejects_short_password(self):
        with self.assertRaises(BusinessLogicException) as ctx:
            AccountService.setup_first_admin("chef@kamindoktor.de", "short", "Karl", "Kamin")
        self.assertEqual(ctx.exception.code, "weak_password")

    def test_create_user_duplicate_email(self):
        AccountService.create_user("user@example.de", "password123")
        with self.assertRaises(BusinessLogicException) as ctx:
            AccountService.create_user("USER@example.de", "password123")
        self.assertEqual(ctx.exception.code, "duplicate_email")

    def test_cannot_revoke_last_admin(self):
        admin = make_admin()
        with self.assertRaises(BusinessLogicException) as ctx:
            AccountService.set_admin(admin, False)
        self.assertEqual(ctx.exception.code, "last_admin")
        self.assertTrue(admin.is_admin)

    def test_grant_and_revoke_admin(self):
        make_admin()
        user = AccountService.create_user("user@example.de", "password123")
        AccountService.set_admin(user, True)
        self.assertTrue(user.is_admin)
        AccountService.set_admin(user, False)
        self.assertFalse(user.is_admin)
        self.assertFalse(user.is_staff)


class SetupFirstAdminCommandTestCase(TestCase):
    @patch.dict("os.environ", {"DJANGO_ADMIN_PASSWORD": "secret123"})
    def test_creates_admin(self):
        call_command("setup_first_admin", "--email", "chef@kamindoktor.de", "--no-input")
        self.assertTrue(User.objects.get(email="chef@kamindoktor.de").is_admin)

    @patch.dict("os.environ", {"DJANGO_ADMIN_PASSWORD": "secret123"})
    def test_skips_when_admin_exists(self):
        make_admin()
        call_command("setup_first_admin", "--email", "chef@kamindoktor.de", "--no-input")
        self.assertFalse(User.objects.filter(email="chef@kamindoktor.de").exists())

    @patch.dict("os.environ", {"DJANGO_ADMIN_PASSWORD": ""})
    def test_missing_password(self):
        with self.assertRaises(CommandError):
            call_command("setup_first_admin", "--email", "chef@kamindoktor.de", "--no-input")


class AuthAPITestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="user@example.de", password="testpass123")
        UserRole.objects.create(user=self.user, role=UserRole.USER)

    def test_login_returns_tokens(self):
        response = self.client.post(
            "/api/v1/auth/login/",
            {"email": "user@example.de", "password": "testpass123"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("access", response.data)
        self.assertIn("refresh", response.data)

    def test_logout_blocks_access_token(self):
        login = self.client.post(
            "/api/v1/auth/login/",
            {"email": "user@example.de", "password": "testpass123"},
            format="json",
        )
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['access']}")

        response = self.client.post("/api/v1/auth/logout/", {"refresh": login.data["refresh"]}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.get("/api/v1/auth/me/")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_endpoint_authenticated(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.get("/api/v1/auth/me/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["email"], self.user.email)
        self.assertEqual(response.data["roles"], ["user"])

    def test_me_endpoint_unauthenticated(self):
        self.client.force_authenticate(user=None)
        response = self.client.get("/api/v1/auth/me/")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_setup_status(self):
        response = self.client.get("/api/v1/auth/setup/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["setup_required"])

    def test_setup_first_admin_endpoint(self):
        payload = {
            "email": "chef@kamindoktor.de",
            "password": "secret123",
            "first_name": "Karl",
            "last_name": "Kamin",
        }
        response = self.client.post("/api/v1/auth/setup/admin/", payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn("admin", response.data["roles"])

        response = self.client.post("/api/v1/auth/setup/admin/", {**payload, "email": "x@y.de"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "setup_completed")


class AdminUserAPITestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = make_admin()
        self.user = AccountService.create_user("user@example.de", "password123")

    def test_non_admin_forbidden(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.get("/api/v1/auth/admin/users/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_users(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get("/api/v1/auth/admin/users/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_create_user(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            "/api/v1/auth/admin/users/",
            {"email": "neu@example.de", "password": "password123", "is_admin": True},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(User.objects.get(email="neu@example.de").is_admin)

    def test_deactivate_user(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.patch(
            f"/api/v1/auth/admin/users/{self.user.id}/", {"is_active": False}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["is_active"])

    def test_cannot_delete_self(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.delete(f"/api/v1/auth/admin/users/{self.admin.id}/")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
