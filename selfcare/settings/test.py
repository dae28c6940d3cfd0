import os

import dj_database_url

# Set SECRET_KEY before importing base settings (which requires it)
# Not a real secret - tests don't need cryptographic security
os.environ.setdefault("SECRET_KEY", "test-key-not-secret")  # pragma: allowlist secret

from .base import *  # noqa

DEBUG = False
PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# Use DATABASE_URL if provided (CI uses Postgres), otherwise SQLite for local dev
DATABASES["default"] = dj_database_url.config(  # type: ignore[assignment]  # noqa: F405
    default="sqlite://:memory:",
    conn_max_age=600,
)

# Never reach the real API from tests
ANTHROPIC_API_KEY = ""

# Suppress app logs during tests
# Tests verify behavior through assertions, not log inspection
LOGGING["loggers"]["selfcare"]["level"] = "CRITICAL"  # type: ignore[index]  # noqa: F405
