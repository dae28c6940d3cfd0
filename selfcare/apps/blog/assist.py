"""LLM writing assistance for the blog editor: excerpt and tag suggestions."""

from __future__ import annotations

import logging

import anthropic
from constance import config
from django.conf import settings

logger = logging.getLogger(__name__)

MODEL = "claude-sonnet-4-20250514"
MAX_TOKENS = 512

EXCERPT_PROMPT = (
    "Write a brief 1-2 sentence summary of this blog post. Be concise and capture the "
    "main point. Do not include any additional text, just give me the description."
)

TAGS_PROMPT = (
    "Generate 5-8 relevant tags for this blog post. Return only a comma-separated list of "
    "tags, nothing else. Each tag should be a single word or short phrase (2-3 words max). "
    "Make tags specific and relevant to the content."
)


class AssistError(Exception):
    """Raised when a suggestion cannot be produced. The message is user-facing."""


def suggest_excerpt(title: str, content: str) -> str:
    """Return a short summary of the post."""
    excerpt = _complete(EXCERPT_PROMPT, title, content).strip()
    if not excerpt:
        logger.error("blog_assist_empty_excerpt")
        raise AssistError("The AI service returned an empty summary. Please try again.")
    logger.info("blog_assist_excerpt_generated", extra={"length": len(excerpt)})
    return excerpt


def suggest_tags(title: str, content: str) -> list[str]:
    """Return suggested tags parsed from a comma-separated reply."""
    reply = _complete(TAGS_PROMPT, title, content)
    tags = [tag.strip() for tag in reply.split(",") if tag.strip()]
    if not tags:
        logger.error("blog_assist_no_tags", extra={"reply": reply[:200]})
        raise AssistError("No valid tags found in the AI response. Please try again.")
    logger.info("blog_assist_tags_generated", extra={"tag_count": len(tags)})
    return tags


def _complete(instructions: str, title: str, content: str) -> str:
    if not config.BLOG_AI_ASSIST_ENABLED:
        raise AssistError("AI suggestions are turned off.")
    api_key = settings.ANTHROPIC_API_KEY
    if not api_key:
        logger.error("ANTHROPIC_API_KEY not configured")
        raise AssistError("AI suggestions are not configured. Please contact an administrator.")

    try:
        response = _call_anthropic(api_key, _build_user_message(instructions, title, content))
    except anthropic.APIStatusError as e:
        logger.error("blog_assist_api_error", extra={"error": str(e), "status_code": e.status_code})
        if e.status_code == 529:
            raise AssistError(
                "The AI service is temporarily overloaded. Please try again in a moment."
            ) from e
        raise AssistError(
            f"AI service error (code {e.status_code}). Please try again later."
        ) from e
    except anthropic.APIError as e:
        logger.error("blog_assist_api_error", extra={"error": str(e)})
        raise AssistError("AI service error. Please try again later.") from e

    if response.stop_reason and response.stop_reason != "end_turn":
        logger.warning("blog_assist_stop_reason", extra={"stop_reason": response.stop_reason})
    return "".join(block.text for block in response.content if block.type == "text")


def _call_anthropic(api_key: str, user_message: str) -> anthropic.types.Message:
    client = anthropic.Anthropic(api_key=api_key)
    return client.messages.create(
        model=MODEL,
        max_tokens=MAX_TOKENS,
        messages=[{"role": "user", "content": user_message}],
    )


def _build_user_message(instructions: str, title: str, content: str) -> str:
    return f"{instructions}\n\nTitle: {title}\n\nContent: {content}"
