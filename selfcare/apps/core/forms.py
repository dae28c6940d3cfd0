"""Shared form widgets and styling."""

from django import forms
from django.forms.widgets import Input
from django.urls import reverse_lazy

# First match wins, so subclasses come before their bases
WIDGET_CSS_CLASSES = (
    (forms.Textarea, "form-input form-textarea"),
    (forms.Select, "form-input form-select"),
    (forms.CheckboxInput, "checkbox"),
    (Input, "form-input"),
)


class MarkdownTextarea(forms.Textarea):
    """Textarea wired up for ``static/js/markdown_editor.js``.

    Pasted or dropped images are posted to ``data-image-upload-url`` and the
    returned ``![](ref:<token>)`` snippet is inserted at the cursor.
    """

    def __init__(self, attrs=None):
        super().__init__(
            attrs={
                "data-markdown-editor": "",
                "data-image-upload-url": reverse_lazy("blog-manage-upload"),
                **(attrs or {}),
            }
        )


class StyledFormMixin:
    """Add the site's CSS classes to visible widgets, keeping any already set."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            widget = field.widget
            if widget.is_hidden:
                continue
            css = next((css for kind, css in WIDGET_CSS_CLASSES if isinstance(widget, kind)), "")
            classes = widget.attrs.get("class", "").split()
            classes += [name for name in css.split() if name not in classes]
            if classes:
                widget.attrs["class"] = " ".join(classes)
