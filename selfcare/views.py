"""Project-level views."""

from django.conf import settings
from django.views.static import serve


def serve_media(request, path: str):
    """Serve an uploaded image that WhiteNoise has not indexed.

    ``serve`` rejects paths outside ``MEDIA_ROOT`` and returns 404 for
    missing files.
    """
    return serve(request, path, document_root=settings.MEDIA_ROOT)
