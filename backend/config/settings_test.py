# config/settings_test.py
# Test overrides: SQLite, local-memory cache, eager Celery, no external services.
import os

os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("DJANGO_SECRET_KEY", "test-insecure-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from .settings import *  # noqa: E402,F401,F403

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "tests",
    }
}

CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = None
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

GOOGLE_MAPS_API_KEY = ""
GOOGLE_MAPS_BROWSER_KEY = ""
AWS_STORAGE_BUCKET_NAME = "test-bucket"
R2_PUBLIC_URL = "https://images.test"

REST_FRAMEWORK = {
    **REST_FRAMEWORK,  # noqa: F405
    "DEFAULT_THROTTLE_RATES": {"setup": "1000/hour"},
}

LOGGING["handlers"]["console"]["level"] = "CRITICAL"  # noqa: F405
