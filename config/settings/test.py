import os
import tempfile

os.environ.setdefault("SECRET_KEY", "test-secret-key")

from .base import *  # noqa: E402

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

CACHES = {
    "default": {"BACKEND": "django.core.cache.backends.dummy.DummyCache"},
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

MEDIA_ROOT = tempfile.mkdtemp(prefix="gymdesk-media-")

REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []

GYM_NAME = "Test Gym"
GYM_ADDRESS = "1 Main Street"
GYM_PHONE = "555-0100"
GYM_EMAIL = "info@testgym.example"

LOGGING["root"]["level"] = "WARNING"
