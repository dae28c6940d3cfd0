from django.contrib import admin
from simple_history.admin import SimpleHistoryAdmin

from selfcare.apps.blog.models import BlogPost
from selfcare.apps.blog.slugs import derive_slug


@admin.register(BlogPost)
class BlogPostAdmin(SimpleHistoryAdmin):
    list_display = ("title", "slug", "status", "author", "published_at", "updated_at")
    list_filter = ("status", "published_at", "created_at")
    search_fields = ("title", "slug", "content", "excerpt")
    readonly_fields = ("created_at", "updated_at", "featured_image_url")
    date_hierarchy = "created_at"

    fieldsets = (
        (None, {"fields": ("title", "slug", "status", "content", "excerpt", "tags")}),
        ("Cover image", {"fields": ("featured_image_token", "featured_image_url")}),
        (
            "Metadata",
            {
                "fields": ("author", "published_at", "created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("author")

    def save_model(self, request, obj, form, change):
        """Keep slugs unique when edited here, and default the author."""
        if not change and obj.author_id is None:
            obj.author = request.user
        if "slug" in form.changed_data or not obj.slug:
            obj.slug = derive_slug(obj.title, obj.slug, exclude_id=obj.pk)
        super().save_model(request, obj, form, change)
