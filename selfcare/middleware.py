"""Request logging context and media serving middleware."""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable
from pathlib import Path

from django.conf import settings
from django.http import HttpRequest, HttpResponse
from ipware import get_client_ip
from whitenoise.middleware import WhiteNoiseMiddleware

from selfcare.logging import log_context

logger = logging.getLogger("selfcare.request")


class RequestContextMiddleware:
    """Tag every log line emitted while handling a request.

    Binds ``request_id`` (taken from an incoming ``X-Request-ID`` header or
    generated), path, method, the authenticated user and the client IP, then
    echoes the request id back on the response. Must run after
    ``AuthenticationMiddleware``.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.request_id = request_id  # type: ignore[attr-defined]

        user = getattr(request, "user", None)
        is_authenticated = bool(user and user.is_authenticated)
        client_ip, _ = get_client_ip(request)

        started = time.monotonic()
        with log_context(
            request_id=request_id,
            path=request.path,
            method=request.method,
            user_id=user.pk if is_authenticated else None,
            username=user.get_username() if is_authenticated else None,
            remote_ip=client_ip,
        ):
            response = self.get_response(request)
            logger.debug(
                "http_request",
                extra={
                    "status": response.status_code,
                    "duration_ms": round((time.monotonic() - started) * 1000, 1),
                },
            )

        response.headers.setdefault("X-Request-ID", request_id)
        return response


class MediaWhiteNoiseMiddleware(WhiteNoiseMiddleware):
    """WhiteNoise that also serves uploads from ``MEDIA_ROOT``.

    Files are indexed once at startup. Images uploaded later fall through to
    the ``serve_media`` view.
    """

    def __init__(self, get_response):
        super().__init__(get_response)
        media_root = Path(settings.MEDIA_ROOT) if settings.MEDIA_ROOT else None
        prefix = settings.MEDIA_URL.strip("/")
        if media_root and media_root.is_dir() and settings.MEDIA_URL.startswith("/"):
            self.add_files(str(media_root), prefix=f"{prefix}/" if prefix else "")
