"""Forms for writing blog posts."""

from django import forms

from selfcare.apps.blog.models import BlogPost
from selfcare.apps.blog.services import clean_tags
from selfcare.apps.blog.slugs import MAX_SLUG_LENGTH
from selfcare.apps.core.forms import MarkdownTextarea, StyledFormMixin


class BlogPostForm(StyledFormMixin, forms.Form):
    """Create/edit form. Persistence goes through the blog services."""

    title = forms.CharField(max_length=200)
    slug = forms.CharField(
        max_length=MAX_SLUG_LENGTH,
        required=False,
        help_text="Leave blank to generate from the title.",
    )
    content = forms.CharField(widget=MarkdownTextarea(attrs={"rows": 20}), required=False)
    excerpt = forms.CharField(
        widget=forms.Textarea(attrs={"rows": 3}),
        required=False,
        help_text="Leave blank to generate from the content.",
    )
    tags = forms.CharField(
        required=False,
        help_text="Comma-separated.",
    )
    status = forms.ChoiceField(choices=BlogPost.Status.choices, initial=BlogPost.Status.DRAFT)
    featured_image_token = forms.CharField(
        max_length=255, required=False, widget=forms.HiddenInput()
    )

    @classmethod
    def initial_for(cls, post: BlogPost) -> dict:
        """Initial data for editing an existing post."""
        return {
            "title": post.title,
            "slug": post.slug,
            "content": post.content,
            "excerpt": post.excerpt,
            "tags": ", ".join(post.tags or []),
            "status": post.status,
            "featured_image_token": post.featured_image_token,
        }

    def clean_title(self):
        title = self.cleaned_data["title"].strip()
        if not title:
            raise forms.ValidationError("Title is required.")
        return title

    def clean_tags(self):
        return clean_tags(self.cleaned_data.get("tags", "").split(","))

    def clean_slug(self):
        return self.cleaned_data.get("slug", "").strip()
