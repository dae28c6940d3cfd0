"""Role checks.

Roles are Django groups. Superusers hold every role.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from django.contrib.auth.mixins import LoginRequiredMixin, UserPassesTestMixin

if TYPE_CHECKING:
    from django.contrib.auth.models import AbstractUser
    from django.http import HttpRequest

BLOG_ROLE = "blog"
ADMIN_ROLE = "admin"

# Role name -> group name
ROLE_GROUPS = {
    BLOG_ROLE: "Bloggers",
    ADMIN_ROLE: "Site Admins",
}


def has_role(user: AbstractUser | Any, role: str) -> bool:
    """Return True if ``user`` is authenticated and holds ``role``."""
    if not getattr(user, "is_authenticated", False):
        return False
    if user.is_superuser:
        return True
    group_name = ROLE_GROUPS.get(role)
    if group_name is None:
        return False
    return user.groups.filter(name=group_name).exists()


def can_manage_blog(user: AbstractUser | Any) -> bool:
    return has_role(user, BLOG_ROLE)


class CanManageBlogMixin(LoginRequiredMixin, UserPassesTestMixin):
    """
    Mixin requiring the blog role.

    Behavior:
    - Unauthenticated users -> redirect to login
    - Authenticated but unauthorized -> 403
    """

    request: HttpRequest  # Provided by View

    def test_func(self) -> bool:
        return can_manage_blog(self.request.user)
