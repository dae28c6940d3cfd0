"""Checks behind ``/healthz``."""

from __future__ import annotations

from django.db import connection

from selfcare.apps.blog.models import BlogPost


def run_health_checks() -> dict[str, object]:
    """Report whether the database answers and the blog table is readable.

    Raises whatever the database raises; the view turns that into a 503.
    """
    connection.ensure_connection()
    published = BlogPost.objects.published().count()
    return {"database": "ok", "published_posts": published}
