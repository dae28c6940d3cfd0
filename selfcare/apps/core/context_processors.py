"""Template context processors."""

from selfcare.apps.core.site_data import NAV_ITEMS


def site_navigation(request):
    """Expose header navigation to every template."""
    return {"nav_items": NAV_ITEMS}
