"""Write operations for blog posts.

Slug assignment is check-then-insert, so two concurrent creates can derive the
same slug. The ``slug`` unique constraint is the authority: an
``IntegrityError`` on save re-derives the slug and retries inside a fresh
savepoint.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from django.db import IntegrityError, transaction
from django.utils import timezone

from selfcare.apps.blog.models import BlogPost
from selfcare.apps.blog.slugs import derive_slug
from selfcare.apps.core.storage import resolve_public_url

if TYPE_CHECKING:
    from django.contrib.auth.models import AbstractUser

logger = logging.getLogger(__name__)

EXCERPT_MAX_LENGTH = 160

# Times a save is retried after losing a slug race to a concurrent writer
MAX_SAVE_ATTEMPTS = 5

_MARKDOWN_PUNCTUATION_RE = re.compile(r"[#*`_~\[\]()]")

# Sentinel distinguishing "not passed" from an explicit None/"" in update_post
UNSET: Any = object()


class PostNotFound(Exception):
    """Raised when a post id does not exist."""

    def __init__(self, post_id: Any):
        self.post_id = post_id
        super().__init__(f"Post {post_id} not found")


def generate_excerpt(content: str, max_length: int = EXCERPT_MAX_LENGTH) -> str:
    """Plain-text summary of markdown content.

    Strips markdown punctuation, then truncates to ``max_length`` characters
    with a trailing ellipsis.
    """
    plain = _MARKDOWN_PUNCTUATION_RE.sub("", content or "").strip()
    if len(plain) <= max_length:
        return plain
    return plain[:max_length].strip() + "..."


def clean_tags(tags: Iterable[str] | None) -> list[str]:
    """Trim tags and drop blanks and duplicates, keeping first-seen order."""
    cleaned: dict[str, None] = {}
    for tag in tags or ():
        tag = (tag or "").strip()
        if tag:
            cleaned.setdefault(tag, None)
    return list(cleaned)


def _is_slug_conflict(exc: IntegrityError) -> bool:
    return "slug" in str(exc).lower()


def _save_with_slug(post: BlogPost, title: str, explicit_slug: str | None) -> None:
    """Assign a free slug and save, re-deriving if a concurrent writer took it."""
    for attempt in range(1, MAX_SAVE_ATTEMPTS + 1):
        post.slug = derive_slug(title, explicit_slug, exclude_id=post.pk)
        try:
            with transaction.atomic():
                post.save()
            return
        except IntegrityError as exc:
            if not _is_slug_conflict(exc) or attempt == MAX_SAVE_ATTEMPTS:
                raise
            logger.warning(
                "blog_slug_conflict_retry",
                extra={"slug": post.slug, "attempt": attempt},
            )


def create_post(
    *,
    author: AbstractUser | None,
    title: str,
    content: str,
    slug: str | None = None,
    excerpt: str | None = None,
    tags: Iterable[str] | None = None,
    status: str = BlogPost.Status.DRAFT,
    featured_image_token: str | None = None,
    featured_image_url: str | None = None,
) -> BlogPost:
    """Create a post, deriving its slug, excerpt and cover image URL.

    Raises:
        SlugExhausted: if no free slug could be found.
    """
    if not featured_image_url and featured_image_token:
        featured_image_url = resolve_public_url(featured_image_token)

    now = timezone.now()
    post = BlogPost(
        title=title,
        content=content,
        excerpt=excerpt or generate_excerpt(content),
        featured_image_token=featured_image_token or "",
        featured_image_url=featured_image_url or "",
        author=author,
        status=status,
        tags=clean_tags(tags),
        published_at=now if status == BlogPost.Status.PUBLISHED else None,
    )
    _save_with_slug(post, title, slug)
    logger.info(
        "blog_post_created",
        extra={"post_id": post.pk, "slug": post.slug, "status": post.status},
    )
    return post


def update_post(
    post_id: Any,
    *,
    title: str = UNSET,
    slug: str | None = UNSET,
    content: str = UNSET,
    excerpt: str | None = UNSET,
    tags: Iterable[str] = UNSET,
    status: str = UNSET,
    featured_image_token: str | None = UNSET,
    featured_image_url: str | None = UNSET,
) -> BlogPost:
    """Apply the given changes to a post.

    Only arguments that are passed are changed. The slug changes only when a
    new, different slug is passed explicitly; it is then made unique against
    every other post. Publishing stamps ``published_at`` once.

    Raises:
        PostNotFound: if ``post_id`` does not exist.
        SlugExhausted: if no free slug could be found.
    """
    try:
        post = BlogPost.objects.get(pk=post_id)
    except BlogPost.DoesNotExist:
        raise PostNotFound(post_id) from None

    if title is not UNSET:
        post.title = title

    if status is not UNSET:
        post.status = status
        if status == BlogPost.Status.PUBLISHED and post.published_at is None:
            post.published_at = timezone.now()

    if content is not UNSET:
        post.content = content
        if excerpt is UNSET:
            post.excerpt = generate_excerpt(content)
    if excerpt is not UNSET:
        post.excerpt = excerpt or ""

    if featured_image_token is not UNSET:
        post.featured_image_token = featured_image_token or ""
        if featured_image_url is UNSET:
            featured_image_url = resolve_public_url(featured_image_token)
    if featured_image_url is not UNSET:
        post.featured_image_url = featured_image_url or ""

    if tags is not UNSET:
        post.tags = clean_tags(tags)

    if slug is not UNSET and slug and slug != post.slug:
        _save_with_slug(post, post.title, slug)
    else:
        post.save()

    logger.info("blog_post_updated", extra={"post_id": post.pk, "slug": post.slug})
    return post


def delete_post(post_id: Any) -> Any:
    """Hard-delete a post and return its id.

    Raises:
        PostNotFound: if ``post_id`` does not exist.
    """
    deleted, _ = BlogPost.objects.filter(pk=post_id).delete()
    if not deleted:
        raise PostNotFound(post_id)
    logger.info("blog_post_deleted", extra={"post_id": post_id})
    return post_id
