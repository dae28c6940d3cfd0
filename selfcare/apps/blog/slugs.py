"""Slug derivation for blog posts.

``derive_slug`` turns a title (or an explicit slug typed by the author) into
a URL-safe identifier and appends ``-1``, ``-2``, ... until it no longer
matches another post. The check is advisory: the ``slug`` column is unique,
and the services re-derive on ``IntegrityError`` when a concurrent writer
wins the race.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from django.utils.text import slugify

# Used when a title normalizes to nothing (e.g. "!!!" or "日本語")
FALLBACK_SLUG = "post"

# Column length of BlogPost.slug
MAX_SLUG_LENGTH = 220

# Upper bound on numeric suffixes tried before giving up
MAX_SLUG_SUFFIX = 10_000

SLUG_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")

_SEPARATOR_RUN_RE = re.compile(r"[-_]+")

FindBySlug = Callable[[str], Any]


class SlugExhausted(Exception):
    """Raised when no free slug was found within ``MAX_SLUG_SUFFIX`` attempts."""

    def __init__(self, base: str, attempts: int):
        self.base = base
        self.attempts = attempts
        super().__init__(f"No free slug for '{base}' after {attempts} attempts")


def normalize_slug(text: str | None) -> str:
    """Normalize free text into slug form, or "" if nothing usable remains.

    Lowercases, folds accents to ASCII, drops punctuation, and joins words
    with single hyphens. Underscores count as separators.

        "Hello, World!"     -> "hello-world"
        "  Crème  brûlée "  -> "creme-brulee"
        "snake_case--title" -> "snake-case-title"
    """
    slug = slugify(text or "")
    return _SEPARATOR_RUN_RE.sub("-", slug).strip("-")


def _find_post_by_slug(slug: str):
    from selfcare.apps.blog.models import BlogPost

    return BlogPost.objects.filter(slug=slug).only("pk").first()


def _is_taken(slug: str, exclude_id: Any, find_by_slug: FindBySlug) -> bool:
    existing = find_by_slug(slug)
    if existing is None:
        return False
    return exclude_id is None or existing.pk != exclude_id


def _fit(base: str, max_length: int) -> str:
    return base[:max_length].rstrip("-")


def derive_slug(
    title: str,
    explicit_slug: str | None = None,
    exclude_id: Any = None,
    *,
    find_by_slug: FindBySlug = _find_post_by_slug,
    max_length: int = MAX_SLUG_LENGTH,
) -> str:
    """Return a slug for ``title`` that no other post currently uses.

    Args:
        title: Human-entered title; used when ``explicit_slug`` is blank.
        explicit_slug: Author-supplied slug, normalized the same way as titles.
        exclude_id: Primary key of the post being updated, so it does not
            collide with itself.
        find_by_slug: Lookup returning the object holding a slug, or None.
        max_length: Longest slug the column holds. The base is cut short so
            that it still fits once a ``-<n>`` suffix is appended.

    Raises:
        SlugExhausted: if ``MAX_SLUG_SUFFIX`` suffixes are all taken.
    """
    base = normalize_slug(explicit_slug) if explicit_slug else ""
    if not base:
        base = normalize_slug(title)
    base = _fit(base, max_length) or FALLBACK_SLUG

    if not _is_taken(base, exclude_id, find_by_slug):
        return base

    for counter in range(1, MAX_SLUG_SUFFIX + 1):
        suffix = f"-{counter}"
        candidate = _fit(base, max_length - len(suffix)) + suffix
        if not _is_taken(candidate, exclude_id, find_by_slug):
            return candidate

    raise SlugExhausted(base, MAX_SLUG_SUFFIX)
