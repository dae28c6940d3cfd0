"""Base Django settings."""

from __future__ import annotations

from pathlib import Path

from decouple import Csv, config

REPO_ROOT = Path(__file__).resolve().parent.parent.parent
BASE_DIR = REPO_ROOT

SECRET_KEY = config("SECRET_KEY", default="dev-secret-key")
DEBUG = config("DEBUG", default=True, cast=bool)
ALLOWED_HOSTS = config("ALLOWED_HOSTS", default="localhost,127.0.0.1", cast=Csv())

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "constance",
    "constance.backends.database",
    "simple_history",
    "selfcare.apps.core",
    "selfcare.apps.accounts",
    "selfcare.apps.blog",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "selfcare.middleware.RequestContextMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "simple_history.middleware.HistoryRequestMiddleware",
]

ROOT_URLCONF = "selfcare.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [REPO_ROOT / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
                "constance.context_processors.config",
                "selfcare.apps.core.context_processors.site_navigation",
            ],
        },
    },
]

WSGI_APPLICATION = "selfcare.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": REPO_ROOT / "db.sqlite3",
    }
}

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "/static/"
STATIC_ROOT = REPO_ROOT / "static_collected"
STATICFILES_DIRS = [REPO_ROOT / "static"]

MEDIA_URL = "/media/"
MEDIA_ROOT = REPO_ROOT / "media"

STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LOGIN_URL = "login"
LOGIN_REDIRECT_URL = "blog-manage-dashboard"
LOGOUT_REDIRECT_URL = "home"

# Blog content rendering
# Opaque image references are resolved concurrently; slow storage lookups are
# abandoned after the timeout and left unresolved.
RENDER_RESOLVE_TIMEOUT_SECONDS = config("RENDER_RESOLVE_TIMEOUT_SECONDS", default=3.0, cast=float)
RENDER_RESOLVE_MAX_WORKERS = config("RENDER_RESOLVE_MAX_WORKERS", default=8, cast=int)

# Anthropic API key for blog writing assistance (excerpt and tag suggestions)
ANTHROPIC_API_KEY = config("ANTHROPIC_API_KEY", default="")

# django-constance configuration (admin-editable settings)
CONSTANCE_BACKEND = "constance.backends.database.DatabaseBackend"

CONSTANCE_CONFIG = {
    "SITE_TITLE": ("Sincerely, Selfcare", "Site title used in page <title> and meta tags", str),
    "SITE_DESCRIPTION": (
        "Therapeutic massage focused on recovery, pain relief, and mobility.",
        "Meta description for search engines",
        str,
    ),
    "SITE_KEYWORDS": (
        "massage, therapeutic massage, recovery, cupping, trigger point",
        "Comma-separated meta keywords",
        str,
    ),
    "BLOG_AI_ASSIST_ENABLED": (True, "Enable AI excerpt and tag suggestions in the editor", bool),
}

CONSTANCE_CONFIG_FIELDSETS = {
    "Site Metadata": ("SITE_TITLE", "SITE_DESCRIPTION", "SITE_KEYWORDS"),
    "Feature Flags": ("BLOG_AI_ASSIST_ENABLED",),
}

# Logging
# -------
# LOG_FORMAT selects the console formatter: "json" for production log
# aggregation, "dev" for human-readable output.
LOG_LEVEL = config("LOG_LEVEL", default="WARNING").upper()
APP_LOG_LEVEL = config("APP_LOG_LEVEL", default="INFO").upper()
DJANGO_LOG_LEVEL = config("DJANGO_LOG_LEVEL", default="WARNING").upper()
LOG_FORMAT = config("LOG_FORMAT", default="json")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {
        "request_context": {"()": "selfcare.logging.RequestContextFilter"},
    },
    "formatters": {
        "json": {"()": "selfcare.logging.JsonFormatter"},
        "dev": {"()": "selfcare.logging.DevFormatter"},
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": LOG_FORMAT,
            "filters": ["request_context"],
        },
    },
    "root": {"handlers": ["console"], "level": LOG_LEVEL},
    "loggers": {
        "selfcare": {"handlers": ["console"], "level": APP_LOG_LEVEL, "propagate": False},
        "django.request": {
            "handlers": ["console"],
            "level": DJANGO_LOG_LEVEL,
            "propagate": False,
        },
        "django.server": {
            "handlers": ["console"],
            "level": DJANGO_LOG_LEVEL,
            "propagate": False,
        },
    },
}
