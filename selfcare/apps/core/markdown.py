"""Markdown rendering pipeline.

Turns stored blog markdown into sanitized HTML on every public read:

    extract ref: images -> resolve to public URLs -> substitute
    -> markdown -> nh3 allow-list sanitization

Every step degrades instead of raising. A token that cannot be resolved stays
as visible ``ref:<token>`` text, and a parser failure falls back to escaped
plain text with line breaks. ``render_content`` always returns a string.
"""

from __future__ import annotations

import html
import logging
import re
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, wait

import nh3
from django.conf import settings
from markdown_it import MarkdownIt

from selfcare.logging import bind_log_context, current_log_context, reset_log_context

logger = logging.getLogger(__name__)

Resolver = Callable[[str], "str | None"]

# CommonMark parser with the GitHub-flavored extensions used by the editor.
# - linkify: bare URLs become links (structure-aware, skips code and links)
# - breaks: single newlines become <br>
# - table, strikethrough: GFM block/inline extensions
_md = MarkdownIt("commonmark", {"linkify": True, "breaks": True}).enable(
    ["linkify", "table", "strikethrough"]
)

# Allowed HTML tags for rendered blog content
ALLOWED_TAGS = frozenset(
    {
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "p",
        "br",
        "strong",
        "em",
        "u",
        "s",
        "ul",
        "ol",
        "li",
        "blockquote",
        "code",
        "pre",
        "a",
        "img",
        "hr",
        "table",
        "thead",
        "tbody",
        "tr",
        "th",
        "td",
    }
)

# Allowed attributes per tag; tags not listed here keep no attributes
ALLOWED_ATTRIBUTES = {
    "a": frozenset({"href", "title"}),
    "img": frozenset({"src", "alt", "title"}),
    "code": frozenset({"class"}),
    "pre": frozenset({"class"}),
}

# Schemes permitted in href/src; everything else (javascript:, vbscript:, ...) is dropped
ALLOWED_URL_SCHEMES = frozenset({"http", "https", "data"})

# ![alt](ref:token) - alt may be empty, token runs up to the closing paren
IMAGE_REF_RE = re.compile(r"!\[([^\]]*)\]\(ref:([^)]+)\)")

# CommonMark lets a backslash escape any ASCII punctuation character
_ASCII_PUNCTUATION_RE = re.compile(r"([!-/:-@\[-`{-~])")


def extract_image_refs(body: str) -> list[str]:
    """Return the distinct ``ref:`` tokens in ``body``, in first-seen order."""
    seen: dict[str, None] = {}
    for match in IMAGE_REF_RE.finditer(body or ""):
        seen.setdefault(match.group(2), None)
    return list(seen)


def _resolve_one(resolver: Resolver, token: str, context: dict) -> str | None:
    log_token = bind_log_context(**context)
    try:
        return resolver(token)
    finally:
        reset_log_context(log_token)


def resolve_image_refs(
    tokens: Iterable[str],
    resolver: Resolver,
    *,
    timeout: float | None = None,
    max_workers: int | None = None,
) -> dict[str, str]:
    """Resolve tokens to public URLs concurrently.

    Returns a mapping containing only the tokens that resolved, in the order
    the tokens were given. A resolver exception, a ``None`` answer, or a
    lookup still running when ``timeout`` expires leaves that token out;
    none of these abort the others.
    """
    tokens = list(dict.fromkeys(tokens))
    if not tokens:
        return {}
    if timeout is None:
        timeout = settings.RENDER_RESOLVE_TIMEOUT_SECONDS
    if max_workers is None:
        max_workers = settings.RENDER_RESOLVE_MAX_WORKERS

    context = current_log_context()
    pool = ThreadPoolExecutor(
        max_workers=max(1, min(max_workers, len(tokens))),
        thread_name_prefix="image-ref",
    )
    try:
        futures = {token: pool.submit(_resolve_one, resolver, token, context) for token in tokens}
        wait(futures.values(), timeout=timeout)
    finally:
        # Lookups are read-only; stragglers are abandoned rather than awaited.
        pool.shutdown(wait=False, cancel_futures=True)

    resolved: dict[str, str] = {}
    for token, future in futures.items():
        if not future.done():
            logger.warning(
                "blog_image_ref_timeout", extra={"token": token, "timeout_seconds": timeout}
            )
            continue
        try:
            url = future.result()
        except Exception as exc:  # noqa: BLE001 - one bad token must not break the page
            logger.warning("blog_image_ref_failed", extra={"token": token, "error": str(exc)})
            continue
        if not url:
            logger.info("blog_image_ref_unresolved", extra={"token": token})
            continue
        resolved[token] = url
    return resolved


def substitute_image_refs(body: str, resolved: dict[str, str]) -> str:
    """Rewrite ``ref:`` images to their resolved URLs.

    Each occurrence is rewritten exactly once from the original text, so a
    resolved URL that happens to contain ``ref:`` is never substituted again.
    Unresolved references are escaped so they render as literal text rather
    than as an image with a stripped ``src``.
    """

    def _replace(match: re.Match) -> str:
        alt, token = match.group(1), match.group(2)
        url = resolved.get(token)
        if url is None:
            return _ASCII_PUNCTUATION_RE.sub(r"\\\1", match.group(0))
        return f"![{alt}](<{url}>)"

    return IMAGE_REF_RE.sub(_replace, body)


def markdown_to_html(text: str) -> str:
    """Render markdown, falling back to escaped text if the parser fails."""
    try:
        return _md.render(text)
    except Exception:  # noqa: BLE001 - runs on every page view; never propagate
        logger.exception("blog_markdown_parse_failed", extra={"length": len(text)})
        return html.escape(text).replace("\r\n", "\n").replace("\n", "<br>\n")


def sanitize_html(raw_html: str) -> str:
    """Strip everything outside the tag, attribute and URL-scheme allow-lists."""
    return nh3.clean(
        raw_html,
        tags=set(ALLOWED_TAGS),
        attributes={tag: set(attrs) for tag, attrs in ALLOWED_ATTRIBUTES.items()},
        url_schemes=set(ALLOWED_URL_SCHEMES),
    )


def render_content(body: str | None, resolver: Resolver | None = None) -> str:
    """Convert stored blog markdown to sanitized HTML.

    Args:
        body: Markdown source, possibly containing ``![alt](ref:<token>)`` images.
        resolver: Maps a token to a public URL or ``None``. Defaults to the
            site's media storage.

    Returns:
        Sanitized HTML. Never raises.
    """
    if not body:
        return ""
    if resolver is None:
        from selfcare.apps.core.storage import resolve_public_url

        resolver = resolve_public_url

    tokens = extract_image_refs(body)
    resolved = resolve_image_refs(tokens, resolver) if tokens else {}
    hydrated = substitute_image_refs(body, resolved) if tokens else body
    return sanitize_html(markdown_to_html(hydrated))
