from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models
from django.utils import timezone
from .managers import UserManager

class User(AbstractBaseUser, PermissionsMixin):
    """
    Backend user. E-mail address is the unique login identifier.
    """
    email = models.EmailField(unique=True, db_index=True)

    first_name = models.CharField(max_length=50, blank=True)
    last_name = models.CharField(max_length=50, blank=True)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(default=timezone.now)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    class Meta:
        ordering = ["email"]

    def __str__(self):
        return self.email

    @property
    def is_admin(self):
        return self.roles.filter(role=UserRole.ADMIN).exists()


class UserRole(models.Model):
    """
    Role-Based Access Control (RBAC).
    'admin' may create, edit and moderate reviews and site content.
    """
    ADMIN = "admin"
    USER = "user"
    ROLE_CHOICES = (
        (ADMIN, "Administrator"),
        (USER, "User"),
    )

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="roles")
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=USER)

    class Meta:
        unique_together = ("user", "role")

    def __str__(self):
        return f"{self.user.email} - {self.role}"
