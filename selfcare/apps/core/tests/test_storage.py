"""Tests for blog image storage tokens."""

from unittest.mock import patch

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, tag

from selfcare.apps.core.storage import (
    UploadRejected,
    resolve_public_url,
    save_upload,
    validate_upload,
)
from selfcare.apps.core.test_utils import (
    AccessControlTestCase,
    TemporaryMediaMixin,
    create_uploaded_image,
)


@tag("media")
class ResolvePublicUrlTests(TemporaryMediaMixin, TestCase):
    def test_blank_token_returns_none(self):
        self.assertIsNone(resolve_public_url(""))
        self.assertIsNone(resolve_public_url(None))

    def test_missing_file_returns_none(self):
        self.assertIsNone(resolve_public_url("blog/does-not-exist.jpg"))

    def test_stored_file_returns_media_url(self):
        name = default_storage.save("blog/photo.jpg", ContentFile(b"data"))
        self.assertEqual(resolve_public_url(name), f"/media/{name}")

    def test_path_outside_storage_returns_none(self):
        self.assertIsNone(resolve_public_url("../../etc/passwd"))

    def test_backend_error_returns_none(self):
        with patch.object(default_storage, "exists", side_effect=OSError("unavailable")):
            self.assertIsNone(resolve_public_url("blog/photo.jpg"))


@tag("media")
class SaveUploadTests(TemporaryMediaMixin, TestCase):
    def _upload(self, name="photo.jpg", **kwargs):
        image = create_uploaded_image(name=name, **kwargs)
        return SimpleUploadedFile(name, image.read(), content_type="image/jpeg")

    def test_saves_under_random_name(self):
        stored = save_upload(self._upload())
        self.assertTrue(stored.token.startswith("blog/"))
        self.assertTrue(stored.token.endswith(".jpg"))
        self.assertNotIn("photo", stored.token)
        self.assertTrue(default_storage.exists(stored.token))

    def test_returns_url_and_markdown_snippet(self):
        stored = save_upload(self._upload())
        self.assertEqual(stored.url, f"/media/{stored.token}")
        self.assertEqual(stored.markdown, f"![](ref:{stored.token})")

    def test_saved_token_resolves(self):
        stored = save_upload(self._upload())
        self.assertEqual(resolve_public_url(stored.token), stored.url)

    def test_two_uploads_get_distinct_tokens(self):
        first = save_upload(self._upload())
        second = save_upload(self._upload())
        self.assertNotEqual(first.token, second.token)


@tag("media")
class ValidateUploadTests(TestCase):
    def test_rejects_non_image(self):
        upload = SimpleUploadedFile("notes.txt", b"hello", content_type="text/plain")
        with self.assertRaises(UploadRejected):
            validate_upload(upload)

    def test_rejects_oversized_file(self):
        upload = SimpleUploadedFile("big.jpg", b"x" * 10, content_type="image/jpeg")
        with (
            patch("selfcare.apps.core.storage.MAX_UPLOAD_SIZE_BYTES", 5),
            self.assertRaises(UploadRejected),
        ):
            validate_upload(upload)

    def test_accepts_image_by_extension(self):
        upload = SimpleUploadedFile("photo.webp", b"data", content_type="application/octet-stream")
        validate_upload(upload)


@tag("views", "media")
class ServeMediaTests(TemporaryMediaMixin, AccessControlTestCase):
    def test_serves_uploaded_file(self):
        name = default_storage.save("blog/served.jpg", ContentFile(b"jpeg-bytes"))
        response = self.client.get(f"/media/{name}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(b"".join(response.streaming_content), b"jpeg-bytes")

    def test_missing_file_is_404(self):
        self.assertEqual(self.client.get("/media/blog/missing.jpg").status_code, 404)
