import logging
from django.db import transaction
from apps.utils.exceptions import BusinessLogicException
from .models import User, UserRole

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class AccountService:

    @staticmethod
    def _check_password(password):
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise BusinessLogicException(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
                code="weak_password",
            )

    @staticmethod
    def setup_required():
        return not UserRole.objects.filter(role=UserRole.ADMIN).exists()

    @staticmethod
    @transaction.atomic
    def setup_first_admin(email, password, first_name, last_name):
        """
        Bootstraps the very first administrator.
        Refuses to run once an administrator exists.
        """
        if not AccountService.setup_required():
            raise BusinessLogicException("Setup already completed. An administrator exists.", code="setup_completed")

        if not all([email, password, first_name, last_name]):
            raise BusinessLogicException("All fields are required", code="missing_fields")

        if User.objects.filter(email__iexact=email).exists():
            raise BusinessLogicException("A user with this e-mail already exists", code="duplicate_email")

        AccountService._check_password(password)

        user = User.objects.create_user(
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            is_staff=True,
        )
        UserRole.objects.create(user=user, role=UserRole.ADMIN)
        logger.info(f"First admin created: user_id={user.id}")
        return user

    @staticmethod
    @transaction.atomic
    def create_user(email, password, first_name="", last_name="", is_admin=False):
        if User.objects.filter(email__iexact=email).exists():
            raise BusinessLogicException("A user with this e-mail already exists", code="duplicate_email")

        AccountService._check_password(password)

        user = User.objects.create_user(
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
        )
        UserRole.objects.create(user=user, role=UserRole.USER)
        if is_admin:
            AccountService.set_admin(user, True)
        return user

    @staticmethod
    @transaction.atomic
    def set_admin(user, is_admin):
        if is_admin:
            UserRole.objects.get_or_create(user=user, role=UserRole.ADMIN)
            user.is_staff = True
        else:
            remaining = UserRole.objects.filter(role=UserRole.ADMIN).exclude(user=user)
            if not remaining.exists():
                raise BusinessLogicException("Cannot revoke the last administrator", code="last_admin")
            UserRole.objects.filter(user=user, role=UserRole.ADMIN).delete()
            user.is_staff = False
        user.save(update_fields=["is_staff"])
        return user

    @staticmethod
    def set_active(user, is_active):
        user.is_active = is_active
        user.save(update_fields=["is_active"])
        return user

    @staticmethod
    def set_password(user, password):
        AccountService._check_password(password)
        user.set_password(password)
        user.save(update_fields=["password"])
        return user
