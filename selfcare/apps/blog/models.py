"""Blog domain models."""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.urls import reverse
from simple_history.models import HistoricalRecords

from selfcare.apps.blog.slugs import MAX_SLUG_LENGTH
from selfcare.apps.core.models import TimeStampedMixin


class BlogPostQuerySet(models.QuerySet):
    """Custom queryset for BlogPost."""

    def published(self):
        return self.filter(status=BlogPost.Status.PUBLISHED)

    def drafts(self):
        return self.filter(status=BlogPost.Status.DRAFT)

    def search(self, query: str = ""):
        """Case-insensitive match on title, content, or excerpt.

        Returns empty queryset if query is empty/whitespace.
        Caller is responsible for ordering.
        """
        query = (query or "").strip()
        if not query:
            return self.none()

        return self.filter(
            models.Q(title__icontains=query)
            | models.Q(content__icontains=query)
            | models.Q(excerpt__icontains=query)
        )

    def with_author(self):
        return self.select_related("author")


class BlogPost(TimeStampedMixin):
    """A blog post written in markdown."""

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        PUBLISHED = "published", "Published"

    title = models.CharField(max_length=200)
    slug = models.SlugField(max_length=MAX_SLUG_LENGTH, unique=True)
    content = models.TextField(blank=True, help_text="Markdown; images use ![alt](ref:<token>)")
    excerpt = models.TextField(blank=True)
    featured_image_token = models.CharField(
        max_length=255, blank=True, help_text="Storage name of the cover image"
    )
    featured_image_url = models.CharField(
        max_length=500, blank=True, help_text="Resolved from featured_image_token on save"
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="blog_posts",
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    tags = models.JSONField(default=list, blank=True)
    published_at = models.DateTimeField(null=True, blank=True)

    objects = BlogPostQuerySet.as_manager()
    history = HistoricalRecords()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="blogpost_status_idx"),
            models.Index(fields=["published_at"], name="blogpost_published_at_idx"),
            models.Index(fields=["created_at"], name="blogpost_created_at_idx"),
        ]
        permissions = [("manage_posts", "Can write and publish blog posts")]

    def __str__(self) -> str:
        return self.title

    def get_absolute_url(self) -> str:
        return reverse("blog-post-detail", args=[self.slug])

    @property
    def is_published(self) -> bool:
        return self.status == self.Status.PUBLISHED

    @property
    def author_name(self) -> str:
        if self.author is None:
            return ""
        return self.author.get_full_name() or self.author.get_username()
