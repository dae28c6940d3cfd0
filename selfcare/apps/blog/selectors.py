"""Read queries for blog posts."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from django.db.models import Count, Q
from django.utils import timezone

from selfcare.apps.accounts.roles import can_manage_blog
from selfcare.apps.blog.models import BlogPost

if TYPE_CHECKING:
    from collections.abc import Iterable

ORDER_FIELDS = ("created_at", "updated_at", "published_at")
RECENT_WINDOW = timedelta(days=7)


@dataclass(frozen=True)
class BlogStats:
    total: int
    draft: int
    published: int
    recent: int


def visible_post_by_slug(slug: str, user: Any) -> BlogPost | None:
    """Return the post at ``slug`` if ``user`` may read it.

    Published posts are public. Drafts are visible only to the blog role;
    anyone else gets None, same as a missing slug, so drafts stay hidden.
    """
    post = BlogPost.objects.with_author().filter(slug=slug).first()
    if post is None:
        return None
    if post.is_published or can_manage_blog(user):
        return post
    return None


def list_posts(
    *,
    status: str | None = None,
    author: Any = None,
    order_by: str = "created_at",
    order: str = "desc",
    limit: int | None = None,
) -> list[BlogPost]:
    """All posts for the management UI, optionally filtered and limited."""
    if order_by not in ORDER_FIELDS:
        raise ValueError(f"Cannot order posts by {order_by!r}")
    qs = BlogPost.objects.with_author()
    if status:
        qs = qs.filter(status=status)
    if author is not None:
        qs = qs.filter(author=author)
    prefix = "-" if order == "desc" else ""
    qs = qs.order_by(f"{prefix}{order_by}", f"{prefix}id")
    if limit:
        qs = qs[:limit]
    return list(qs)


def blog_stats(now: datetime | None = None) -> BlogStats:
    """Counts for the management dashboard."""
    now = now or timezone.now()
    counts = BlogPost.objects.aggregate(
        total=Count("id"),
        draft=Count("id", filter=Q(status=BlogPost.Status.DRAFT)),
        published=Count("id", filter=Q(status=BlogPost.Status.PUBLISHED)),
        recent=Count("id", filter=Q(created_at__gte=now - RECENT_WINDOW)),
    )
    return BlogStats(**counts)


def recent_posts(limit: int = 10) -> list[BlogPost]:
    return list(BlogPost.objects.with_author().order_by("-created_at", "-id")[:limit])


def _has_any_tag(post: BlogPost, tags: Iterable[str]) -> bool:
    return any(tag in (post.tags or []) for tag in tags)


def published_posts(
    *,
    tags: Iterable[str] | None = None,
    search: str | None = None,
    limit: int | None = None,
) -> list[BlogPost]:
    """Public listing, newest first.

    ``tags`` keeps posts carrying any of the given tags. ``search`` matches
    title, content or excerpt, case-insensitively.
    """
    qs = BlogPost.objects.published().with_author()
    if search and search.strip():
        qs = qs.search(search)
    posts = list(qs.order_by("-published_at", "-id"))

    tags = [t for t in (tags or []) if t]
    if tags:
        posts = [post for post in posts if _has_any_tag(post, tags)]
    if limit:
        posts = posts[:limit]
    return posts


def search_posts(query: str, *, status: str | None = None) -> list[BlogPost]:
    """Management search over title, content, excerpt and tags, newest edit first."""
    query = (query or "").strip()
    if not query:
        return []
    qs = BlogPost.objects.with_author()
    if status:
        qs = qs.filter(status=status)

    needle = query.lower()
    text_matches = set(qs.search(query).values_list("id", flat=True))
    return [
        post
        for post in qs.order_by("-updated_at", "-id")
        if post.id in text_matches or any(needle in tag.lower() for tag in post.tags or [])
    ]


def all_tags() -> list[str]:
    """Distinct tags across published posts, alphabetically."""
    tags: set[str] = set()
    for post_tags in BlogPost.objects.published().values_list("tags", flat=True):
        tags.update(post_tags or [])
    return sorted(tags, key=str.lower)
