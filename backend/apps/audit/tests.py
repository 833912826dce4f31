from django.test import TestCase
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework import status
from apps.accounts.models import UserRole
from apps.audit.models import AuditLog
from apps.audit.services import AuditService

User = get_user_model()

class AuditLogTestCase(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="editor@kamindoktor.de", password="password123")

    def test_immutability(self):
        log = AuditLog.objects.create(
            user=self.user, action="review_created", reference_id="REF123"
        )

        log.action = "tampered"
        with self.assertRaises(RuntimeError):
            log.save()

        with self.assertRaises(RuntimeError):
            log.delete()

    def test_bulk_operations_blocked(self):
        AuditLog.objects.create(user=self.user, action="review_created", reference_id="1")

        with self.assertRaises(RuntimeError):
            AuditLog.objects.all().update(action="review_deleted")
        with self.assertRaises(RuntimeError):
            AuditLog.objects.all().delete()

    def test_deleted_review_is_logged(self):
        AuditService.review_deleted(42, "kaminofen-mueller-berlin-2023", self.user)

        log = AuditLog.objects.get(reference_id="42")
        self.assertEqual(log.action, "review_deleted")
        self.assertEqual(log.metadata["slug"], "kaminofen-mueller-berlin-2023")
        self.assertEqual(log.user, self.user)


class AuditLogAPITestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(email="admin@kamindoktor.de", password="password123")
        UserRole.objects.create(user=self.admin, role=UserRole.ADMIN)
        AuditService.review_deleted(1, "a", self.admin)
        AuditService.review_deleted(2, "b", self.admin)

    def test_filter_by_reference(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get("/api/v1/audit/?reference_id=2")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["user_email"], "admin@kamindoktor.de")

    def test_requires_admin(self):
        response = self.client.get("/api/v1/audit/")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
