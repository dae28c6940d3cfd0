"""Production settings."""

import sys

import dj_database_url
from decouple import config

from .base import *  # noqa
from .base import APP_LOG_LEVEL, DJANGO_LOG_LEVEL, LOGGING  # noqa: F401

DEBUG = False
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_SSL_REDIRECT = True
SECURE_HSTS_SECONDS = 31536000
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True

# Trust X-Forwarded-Proto header from hosting system's reverse proxy
# This is required when the proxy terminates SSL
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")

# Whitenoise for static/media file serving
INSTALLED_APPS = ["whitenoise.runserver_nostatic", *INSTALLED_APPS]  # noqa: F405
MIDDLEWARE.insert(1, "selfcare.middleware.MediaWhiteNoiseMiddleware")  # noqa: F405
STORAGES["staticfiles"] = {  # noqa: F405
    "BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"
}

database_url = config("DATABASE_URL", default="")
if not database_url.startswith("postgres"):
    print(
        f"ERROR: DATABASE_URL must be PostgreSQL. Got: {database_url[:20]}...", file=sys.stderr
    )
    sys.exit(1)

DATABASES = {
    "default": dj_database_url.parse(  # type: ignore[dict-item]
        database_url,
        conn_max_age=600,
        conn_health_checks=True,
    )
}

_loggers = LOGGING["loggers"]  # type: ignore[index]
_loggers["selfcare"]["level"] = config("WEB_LOG_LEVEL", default=APP_LOG_LEVEL).upper()
_web_django_level = config("WEB_DJANGO_LOG_LEVEL", default=DJANGO_LOG_LEVEL).upper()
_loggers["django.request"]["level"] = _web_django_level
_loggers["django.server"]["level"] = _web_django_level
