"""Marketing pages and the health check."""

from django.http import JsonResponse
from django.views.generic import TemplateView

from selfcare.apps.blog.selectors import published_posts
from selfcare.apps.core.health import run_health_checks
from selfcare.apps.core.site_data import ABOUT, BOOKING_URL

HOME_LATEST_POSTS = 3


class HomeView(TemplateView):
    """Landing page with the latest published posts."""

    template_name = "core/home.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["latest_posts"] = published_posts(limit=HOME_LATEST_POSTS)
        context["booking_url"] = BOOKING_URL
        return context


class AboutView(TemplateView):
    template_name = "core/about.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["about"] = ABOUT
        context["booking_url"] = BOOKING_URL
        return context


def healthz(request):
    """Public health check endpoint."""
    try:
        details = run_health_checks()
    except Exception as exc:  # noqa: BLE001
        resp = JsonResponse({"status": "error", "error": str(exc)})
        resp.status_code = 503
        resp["Cache-Control"] = "no-store"
        return resp

    resp = JsonResponse({"status": "ok", "checks": details})
    resp["Cache-Control"] = "no-store"
    return resp
