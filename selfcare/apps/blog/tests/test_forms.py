"""Tests for the blog post form."""

from django.test import TestCase, tag

from selfcare.apps.blog.forms import BlogPostForm
from selfcare.apps.core.test_utils import create_post


@tag("forms")
class BlogPostFormTests(TestCase):
    def test_tags_split_and_cleaned(self):
        form = BlogPostForm(
            data={"title": "T", "status": "draft", "tags": " recovery, ,cupping,recovery "}
        )
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data["tags"], ["recovery", "cupping"])

    def test_blank_optional_fields(self):
        form = BlogPostForm(data={"title": "T", "status": "draft"})
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data["slug"], "")
        self.assertEqual(form.cleaned_data["tags"], [])

    def test_unknown_status_rejected(self):
        form = BlogPostForm(data={"title": "T", "status": "archived"})
        self.assertFalse(form.is_valid())
        self.assertIn("status", form.errors)

    def test_initial_for_existing_post(self):
        post = create_post(title="Hello", slug="hello", tags=["a", "b"])
        initial = BlogPostForm.initial_for(post)
        self.assertEqual(initial["tags"], "a, b")
        self.assertEqual(initial["slug"], "hello")

    def test_widgets_styled_and_editor_wired(self):
        form = BlogPostForm()
        self.assertIn("form-input", form.fields["title"].widget.attrs["class"])
        self.assertIn("form-select", form.fields["status"].widget.attrs["class"])
        self.assertNotIn("class", form.fields["featured_image_token"].widget.attrs)
        content_attrs = form.fields["content"].widget.attrs
        self.assertIn("form-textarea", content_attrs["class"])
        self.assertEqual(str(content_attrs["data-image-upload-url"]), "/manage/blog/upload/")
