import django.db.models.deletion
import simple_history.models
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="BlogPost",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("title", models.CharField(max_length=200)),
                ("slug", models.SlugField(max_length=220, unique=True)),
                (
                    "content",
                    models.TextField(
                        blank=True, help_text="Markdown; images use ![alt](ref:<token>)"
                    ),
                ),
                ("excerpt", models.TextField(blank=True)),
                (
                    "featured_image_token",
                    models.CharField(
                        blank=True, help_text="Storage name of the cover image", max_length=255
                    ),
                ),
                (
                    "featured_image_url",
                    models.CharField(
                        blank=True,
                        help_text="Resolved from featured_image_token on save",
                        max_length=500,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("draft", "Draft"), ("published", "Published")],
                        default="draft",
                        max_length=20,
                    ),
                ),
                ("tags", models.JSONField(blank=True, default=list)),
                ("published_at", models.DateTimeField(blank=True, null=True)),
                (
                    "author",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="blog_posts",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "permissions": [("manage_posts", "Can write and publish blog posts")],
                "indexes": [
                    models.Index(fields=["status"], name="blogpost_status_idx"),
                    models.Index(fields=["published_at"], name="blogpost_published_at_idx"),
                    models.Index(fields=["created_at"], name="blogpost_created_at_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="HistoricalBlogPost",
            fields=[
                (
                    "id",
                    models.BigIntegerField(
                        auto_created=True, blank=True, db_index=True, verbose_name="ID"
                    ),
                ),
                ("created_at", models.DateTimeField(blank=True, editable=False)),
                ("updated_at", models.DateTimeField(blank=True, editable=False)),
                ("title", models.CharField(max_length=200)),
                ("slug", models.SlugField(max_length=220)),
                (
                    "content",
                    models.TextField(
                        blank=True, help_text="Markdown; images use ![alt](ref:<token>)"
                    ),
                ),
                ("excerpt", models.TextField(blank=True)),
                (
                    "featured_image_token",
                    models.CharField(
                        blank=True, help_text="Storage name of the cover image", max_length=255
                    ),
                ),
                (
                    "featured_image_url",
                    models.CharField(
                        blank=True,
                        help_text="Resolved from featured_image_token on save",
                        max_length=500,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("draft", "Draft"), ("published", "Published")],
                        default="draft",
                        max_length=20,
                    ),
                ),
                ("tags", models.JSONField(blank=True, default=list)),
                ("published_at", models.DateTimeField(blank=True, null=True)),
                ("history_id", models.AutoField(primary_key=True, serialize=False)),
                ("history_date", models.DateTimeField(db_index=True)),
                ("history_change_reason", models.CharField(max_length=100, null=True)),
                (
                    "history_type",
                    models.CharField(
                        choices=[("+", "Created"), ("~", "Changed"), ("-", "Deleted")],
                        max_length=1,
                    ),
                ),
                (
                    "author",
                    models.ForeignKey(
                        blank=True,
                        db_constraint=False,
                        null=True,
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "history_user",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "historical blog post",
                "verbose_name_plural": "historical blog posts",
                "ordering": ("-history_date", "-history_id"),
                "get_latest_by": ("history_date", "history_id"),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]
