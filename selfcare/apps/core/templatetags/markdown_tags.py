"""Markdown pipeline: render_content."""

from django import template
from django.utils.safestring import mark_safe

register = template.Library()


@register.filter
def render_content(text):
    """Render blog markdown to sanitized HTML.

    Usage in templates::

        {{ post.content|render_content }}
    """
    from selfcare.apps.core.markdown import render_content as render

    return mark_safe(render(text))  # noqa: S308 - HTML sanitized by nh3
