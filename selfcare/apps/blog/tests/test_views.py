"""Tests for public blog pages and the management UI."""

import json
from unittest.mock import patch

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, tag
from django.urls import reverse

from selfcare.apps.blog.assist import AssistError
from selfcare.apps.blog.models import BlogPost
from selfcare.apps.blog.slugs import SlugExhausted
from selfcare.apps.core.test_utils import (
    AccessControlTestCase,
    TemporaryMediaMixin,
    TestDataMixin,
    create_post,
    create_uploaded_image,
)


@tag("views", "public")
class BlogPostListViewTests(TestDataMixin, TestCase):
    def test_lists_published_posts_only(self):
        response = self.client.get(reverse("blog-post-list"))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Published Post")
        self.assertNotContains(response, "Draft Post")

    def test_tag_filter(self):
        create_post(title="Tagged Post", tags=["recovery"])
        response = self.client.get(reverse("blog-post-list"), {"tag": "recovery"})
        self.assertEqual([p.title for p in response.context["posts"]], ["Tagged Post"])
        self.assertEqual(response.context["selected_tags"], ["recovery"])

    def test_search(self):
        create_post(title="Cupping explained")
        response = self.client.get(reverse("blog-post-list"), {"q": "cupping"})
        self.assertEqual([p.title for p in response.context["posts"]], ["Cupping explained"])


@tag("views", "public")
class BlogPostDetailViewTests(TemporaryMediaMixin, TestDataMixin, AccessControlTestCase):
    def test_published_post_renders_markdown(self):
        response = self.client.get(self.published_post.get_absolute_url())
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "<strong>markdown</strong>", html=False)

    def test_draft_is_404_for_public(self):
        response = self.client.get(self.draft_post.get_absolute_url())
        self.assertEqual(response.status_code, 404)

    def test_draft_is_404_for_regular_user(self):
        self.client.force_login(self.regular_user)
        response = self.client.get(self.draft_post.get_absolute_url())
        self.assertEqual(response.status_code, 404)

    def test_draft_visible_to_blogger(self):
        self.client.force_login(self.blogger_user)
        response = self.client.get(self.draft_post.get_absolute_url())
        self.assertEqual(response.status_code, 200)

    def test_unknown_slug_is_404(self):
        response = self.client.get(reverse("blog-post-detail", args=["missing"]))
        self.assertEqual(response.status_code, 404)

    def test_image_reference_resolved_from_storage(self):
        name = default_storage.save("blog/inline.jpg", ContentFile(b"img"))
        post = create_post(content=f"![Inline](ref:{name}) and ![Gone](ref:blog/gone.jpg)")
        response = self.client.get(post.get_absolute_url())
        self.assertContains(response, f'src="/media/{name}"', html=False)
        self.assertContains(response, "ref:blog/gone.jpg", html=False)

    def test_script_in_content_is_not_rendered(self):
        post = create_post(content="Hi <script>alert('x')</script>")
        response = self.client.get(post.get_absolute_url())
        self.assertNotContains(response, "<script>alert", html=False)


@tag("views", "access-control")
class ManageAccessControlTests(TestDataMixin, AccessControlTestCase):
    def _urls(self):
        return [
            reverse("blog-manage-dashboard"),
            reverse("blog-manage-list"),
            reverse("blog-manage-create"),
            reverse("blog-manage-edit", args=[self.published_post.pk]),
        ]

    def test_anonymous_redirected_to_login(self):
        for url in self._urls():
            with self.subTest(url=url):
                response = self.client.get(url)
                self.assertEqual(response.status_code, 302)
                self.assertIn(reverse("login"), response["Location"])

    def test_user_without_role_forbidden(self):
        self.client.force_login(self.regular_user)
        for url in self._urls():
            with self.subTest(url=url):
                self.assertEqual(self.client.get(url).status_code, 403)

    def test_write_endpoints_forbidden_without_role(self):
        self.client.force_login(self.regular_user)
        delete_url = reverse("blog-manage-delete", args=[self.published_post.pk])
        self.assertEqual(self.client.post(delete_url).status_code, 403)
        self.assertEqual(self.client.post(reverse("blog-manage-upload")).status_code, 403)
        self.assertEqual(self.client.post(reverse("blog-assist-excerpt")).status_code, 403)
        self.assertTrue(BlogPost.objects.filter(pk=self.published_post.pk).exists())

    def test_anonymous_edit_of_missing_post_redirects(self):
        response = self.client.get(reverse("blog-manage-edit", args=[999_999]))
        self.assertEqual(response.status_code, 302)

    def test_blogger_and_superuser_allowed(self):
        for user in (self.blogger_user, self.superuser):
            self.client.force_login(user)
            for url in self._urls():
                with self.subTest(user=user.username, url=url):
                    self.assertEqual(self.client.get(url).status_code, 200)


@tag("views")
class DashboardViewTests(TestDataMixin, TestCase):
    def test_shows_stats_and_recent_posts(self):
        self.client.force_login(self.blogger_user)
        response = self.client.get(reverse("blog-manage-dashboard"))
        self.assertEqual(response.context["stats"].total, 2)
        self.assertEqual(response.context["stats"].draft, 1)
        self.assertContains(response, "Draft Post")


@tag("views")
class ManageListViewTests(TestDataMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.client.force_login(self.blogger_user)

    def test_lists_all_statuses(self):
        response = self.client.get(reverse("blog-manage-list"))
        self.assertContains(response, "Draft Post")
        self.assertContains(response, "Published Post")

    def test_status_filter(self):
        response = self.client.get(reverse("blog-manage-list"), {"status": "draft"})
        self.assertEqual(list(response.context["posts"]), [self.draft_post])

    def test_unknown_status_ignored(self):
        response = self.client.get(reverse("blog-manage-list"), {"status": "bogus"})
        self.assertEqual(len(response.context["posts"]), 2)

    def test_search(self):
        response = self.client.get(reverse("blog-manage-list"), {"q": "draft"})
        self.assertEqual(list(response.context["posts"]), [self.draft_post])


@tag("views", "forms")
class CreatePostViewTests(TestDataMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.client.force_login(self.blogger_user)
        self.url = reverse("blog-manage-create")

    def test_create_post(self):
        response = self.client.post(
            self.url,
            {
                "title": "Hello, World!",
                "content": "First **post**.",
                "tags": "recovery, cupping, recovery",
                "status": "published",
            },
        )
        post = BlogPost.objects.get(slug="hello-world")
        self.assertRedirects(response, reverse("blog-manage-edit", args=[post.pk]))
        self.assertEqual(post.author, self.blogger_user)
        self.assertEqual(post.tags, ["recovery", "cupping"])
        self.assertEqual(post.excerpt, "First post.")
        self.assertIsNotNone(post.published_at)

    def test_missing_title_rerenders_form(self):
        response = self.client.post(self.url, {"title": "  ", "status": "draft"})
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context["form"].errors)
        self.assertEqual(BlogPost.objects.count(), 2)

    def test_slug_exhaustion_reported_on_form(self):
        with patch(
            "selfcare.apps.blog.views.services.create_post",
            side_effect=SlugExhausted("hello", 10),
        ):
            response = self.client.post(self.url, {"title": "Hello", "status": "draft"})
        self.assertEqual(response.status_code, 200)
        self.assertIn("slug", response.context["form"].errors)


@tag("views", "forms")
class UpdatePostViewTests(TestDataMixin, AccessControlTestCase):
    def setUp(self):
        super().setUp()
        self.client.force_login(self.blogger_user)
        self.url = reverse("blog-manage-edit", args=[self.draft_post.pk])

    def _form_data(self, **overrides):
        data = {
            "title": self.draft_post.title,
            "slug": self.draft_post.slug,
            "content": self.draft_post.content,
            "excerpt": self.draft_post.excerpt,
            "tags": "",
            "status": self.draft_post.status,
        }
        data.update(overrides)
        return data

    def test_form_prefilled(self):
        response = self.client.get(self.url)
        self.assertEqual(response.context["form"].initial["title"], "Draft Post")
        self.assertEqual(response.context["post"], self.draft_post)

    def test_publish_and_rename(self):
        response = self.client.post(
            self.url, self._form_data(title="Renamed", status="published")
        )
        self.assertRedirects(response, self.url)
        self.draft_post.refresh_from_db()
        self.assertEqual(self.draft_post.title, "Renamed")
        self.assertEqual(self.draft_post.slug, "draft-post")
        self.assertIsNotNone(self.draft_post.published_at)

    def test_slug_change_made_unique(self):
        self.client.post(self.url, self._form_data(slug="published-post"))
        self.draft_post.refresh_from_db()
        self.assertEqual(self.draft_post.slug, "published-post-1")

    def test_content_change_regenerates_blank_excerpt(self):
        self.client.post(self.url, self._form_data(content="Fresh words", excerpt=""))
        self.draft_post.refresh_from_db()
        self.assertEqual(self.draft_post.excerpt, "Fresh words")

    def test_missing_post_is_404(self):
        response = self.client.get(reverse("blog-manage-edit", args=[999_999]))
        self.assertEqual(response.status_code, 404)


@tag("views")
class DeletePostViewTests(TestDataMixin, AccessControlTestCase):
    def setUp(self):
        super().setUp()
        self.client.force_login(self.blogger_user)

    def test_delete(self):
        url = reverse("blog-manage-delete", args=[self.draft_post.pk])
        response = self.client.post(url)
        self.assertRedirects(response, reverse("blog-manage-list"))
        self.assertFalse(BlogPost.objects.filter(pk=self.draft_post.pk).exists())

    def test_get_not_allowed(self):
        url = reverse("blog-manage-delete", args=[self.draft_post.pk])
        self.assertEqual(self.client.get(url).status_code, 405)

    def test_missing_post_is_404(self):
        response = self.client.post(reverse("blog-manage-delete", args=[999_999]))
        self.assertEqual(response.status_code, 404)


@tag("views", "ajax", "media")
class ImageUploadViewTests(TemporaryMediaMixin, TestDataMixin, AccessControlTestCase):
    def setUp(self):
        super().setUp()
        self.client.force_login(self.blogger_user)
        self.url = reverse("blog-manage-upload")

    def test_upload_returns_token_and_markdown(self):
        image = create_uploaded_image(name="photo.jpg")
        response = self.client.post(self.url, {"file": image})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data["success"])
        self.assertTrue(data["token"].startswith("blog/"))
        self.assertEqual(data["markdown"], f"![](ref:{data['token']})")
        self.assertTrue(default_storage.exists(data["token"]))

    def test_missing_file(self):
        response = self.client.post(self.url, {})
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()["success"])

    def test_non_image_rejected(self):
        upload = SimpleUploadedFile("notes.txt", b"hello", content_type="text/plain")
        response = self.client.post(self.url, {"file": upload})
        self.assertEqual(response.status_code, 400)


@tag("views", "ajax")
class AssistViewTests(TestDataMixin, AccessControlTestCase):
    def setUp(self):
        super().setUp()
        self.client.force_login(self.blogger_user)

    def _post(self, name, payload):
        return self.client.post(
            reverse(name), data=json.dumps(payload), content_type="application/json"
        )

    def test_excerpt_suggestion(self):
        with patch("selfcare.apps.blog.views.suggest_excerpt", return_value="A summary."):
            response = self._post("blog-assist-excerpt", {"title": "T", "content": "Body"})
        self.assertEqual(response.json(), {"success": True, "excerpt": "A summary."})

    def test_tag_suggestion(self):
        with patch("selfcare.apps.blog.views.suggest_tags", return_value=["a", "b"]):
            response = self._post("blog-assist-tags", {"title": "T", "content": "Body"})
        self.assertEqual(response.json(), {"success": True, "tags": ["a", "b"]})

    def test_empty_input_rejected(self):
        response = self._post("blog-assist-excerpt", {"title": " ", "content": ""})
        self.assertEqual(response.status_code, 400)

    def test_invalid_json_rejected(self):
        response = self.client.post(
            reverse("blog-assist-tags"), data="{not json", content_type="application/json"
        )
        self.assertEqual(response.status_code, 400)

    def test_assist_failure_returns_502(self):
        with patch(
            "selfcare.apps.blog.views.suggest_excerpt",
            side_effect=AssistError("AI suggestions are turned off."),
        ):
            response = self._post("blog-assist-excerpt", {"title": "T"})
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["error"], "AI suggestions are turned off.")
