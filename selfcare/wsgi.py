"""WSGI config for the selfcare project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "selfcare.settings.prod")

application = get_wsgi_application()
