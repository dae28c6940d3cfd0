"""Blog views: public reading and role-gated management."""

from __future__ import annotations

import json
import logging

from django.contrib import messages
from django.http import Http404, JsonResponse
from django.shortcuts import redirect
from django.utils.functional import cached_property
from django.views import View
from django.views.generic import FormView, TemplateView

from selfcare.apps.accounts.roles import CanManageBlogMixin
from selfcare.apps.blog import selectors, services
from selfcare.apps.blog.assist import AssistError, suggest_excerpt, suggest_tags
from selfcare.apps.blog.forms import BlogPostForm
from selfcare.apps.blog.models import BlogPost
from selfcare.apps.blog.slugs import SlugExhausted
from selfcare.apps.core.markdown import render_content
from selfcare.apps.core.storage import UploadRejected, save_upload

logger = logging.getLogger(__name__)

PUBLIC_PAGE_SIZE = 20


# -----------------------------------------------------------------------------
# Public
# -----------------------------------------------------------------------------


class BlogPostListView(TemplateView):
    """Published posts, filterable by ?tag= and ?q=."""

    template_name = "blog/post_list.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        tags = [t for t in self.request.GET.getlist("tag") if t.strip()]
        query = self.request.GET.get("q", "").strip()
        context["posts"] = selectors.published_posts(
            tags=tags, search=query, limit=PUBLIC_PAGE_SIZE
        )
        context["selected_tags"] = tags
        context["search_query"] = query
        context["all_tags"] = selectors.all_tags()
        return context


class BlogPostDetailView(TemplateView):
    """A single post, rendered from markdown on every request."""

    template_name = "blog/post_detail.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        post = selectors.visible_post_by_slug(self.kwargs["slug"], self.request.user)
        if post is None:
            raise Http404("Post not found")
        context["post"] = post
        context["html"] = render_content(post.content)
        context["cover_image_url"] = post.featured_image_url
        return context


# -----------------------------------------------------------------------------
# Management (blog role)
# -----------------------------------------------------------------------------


class BlogDashboardView(CanManageBlogMixin, TemplateView):
    template_name = "blog/manage/dashboard.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["stats"] = selectors.blog_stats()
        context["recent_posts"] = selectors.recent_posts(limit=10)
        return context


class BlogManageListView(CanManageBlogMixin, TemplateView):
    """All posts with status filter and search."""

    template_name = "blog/manage/post_list.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        status = self.request.GET.get("status") or None
        if status not in (None, *BlogPost.Status.values):
            status = None
        query = self.request.GET.get("q", "").strip()
        if query:
            posts = selectors.search_posts(query, status=status)
        else:
            order_by = self.request.GET.get("order_by", "created_at")
            if order_by not in selectors.ORDER_FIELDS:
                order_by = "created_at"
            order = "asc" if self.request.GET.get("order") == "asc" else "desc"
            posts = selectors.list_posts(status=status, order_by=order_by, order=order)
        context["posts"] = posts
        context["status"] = status
        context["search_query"] = query
        context["status_choices"] = BlogPost.Status.choices
        return context


class BlogPostFormMixin(CanManageBlogMixin):
    form_class = BlogPostForm
    template_name = "blog/manage/post_form.html"

    def save_failed(self, form, error: Exception):
        form.add_error("slug", str(error))
        return self.form_invalid(form)


class BlogPostCreateView(BlogPostFormMixin, FormView):
    def form_valid(self, form):
        data = form.cleaned_data
        try:
            post = services.create_post(
                author=self.request.user,
                title=data["title"],
                slug=data["slug"] or None,
                content=data["content"],
                excerpt=data["excerpt"] or None,
                tags=data["tags"],
                status=data["status"],
                featured_image_token=data["featured_image_token"] or None,
            )
        except SlugExhausted as exc:
            return self.save_failed(form, exc)
        messages.success(self.request, f"Post “{post.title}” created.")
        return redirect("blog-manage-edit", pk=post.pk)


class BlogPostUpdateView(BlogPostFormMixin, FormView):
    @cached_property
    def post_obj(self) -> BlogPost:
        post = BlogPost.objects.filter(pk=self.kwargs["pk"]).first()
        if post is None:
            raise Http404("Post not found")
        return post

    def get_initial(self):
        return BlogPostForm.initial_for(self.post_obj)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["post"] = self.post_obj
        return context

    def form_valid(self, form):
        data = form.cleaned_data
        changes = {
            "title": data["title"],
            "tags": data["tags"],
            "status": data["status"],
        }
        if data["content"] != self.post_obj.content:
            changes["content"] = data["content"]
        if data["slug"]:
            changes["slug"] = data["slug"]
        if data["excerpt"] != self.post_obj.excerpt:
            changes["excerpt"] = data["excerpt"] or None
        if data["featured_image_token"] != self.post_obj.featured_image_token:
            changes["featured_image_token"] = data["featured_image_token"] or None
        try:
            post = services.update_post(self.post_obj.pk, **changes)
        except services.PostNotFound as exc:
            raise Http404("Post not found") from exc
        except SlugExhausted as exc:
            return self.save_failed(form, exc)
        messages.success(self.request, f"Post “{post.title}” saved.")
        return redirect("blog-manage-edit", pk=post.pk)


class BlogPostDeleteView(CanManageBlogMixin, View):
    http_method_names = ["post"]

    def post(self, request, pk):
        try:
            services.delete_post(pk)
        except services.PostNotFound as exc:
            raise Http404("Post not found") from exc
        messages.success(request, "Post deleted.")
        return redirect("blog-manage-list")


class ImageUploadView(CanManageBlogMixin, View):
    """Store an image and return its opaque reference token."""

    http_method_names = ["post"]

    def post(self, request):
        upload = request.FILES.get("file")
        if upload is None:
            return JsonResponse({"success": False, "error": "No file provided"}, status=400)
        try:
            stored = save_upload(upload)
        except UploadRejected as exc:
            logger.info("blog_upload_rejected", extra={"name": upload.name, "error": str(exc)})
            return JsonResponse({"success": False, "error": str(exc)}, status=400)
        return JsonResponse(
            {
                "success": True,
                "token": stored.token,
                "url": stored.url,
                "markdown": stored.markdown,
            }
        )


class AssistView(CanManageBlogMixin, View):
    """JSON endpoint wrapping an AI suggestion function."""

    http_method_names = ["post"]
    result_key = ""

    def suggest(self, title: str, content: str):
        raise NotImplementedError

    def post(self, request):
        try:
            payload = json.loads(request.body or b"{}")
        except json.JSONDecodeError:
            return JsonResponse({"success": False, "error": "Invalid JSON"}, status=400)
        title = (payload.get("title") or "").strip()
        content = (payload.get("content") or "").strip()
        if not title and not content:
            return JsonResponse(
                {"success": False, "error": "Add a title or some content first."}, status=400
            )
        try:
            result = self.suggest(title, content)
        except AssistError as exc:
            return JsonResponse({"success": False, "error": str(exc)}, status=502)
        return JsonResponse({"success": True, self.result_key: result})


class ExcerptSuggestionView(AssistView):
    result_key = "excerpt"

    def suggest(self, title: str, content: str):
        return suggest_excerpt(title, content)


class TagSuggestionView(AssistView):
    result_key = "tags"

    def suggest(self, title: str, content: str):
        return suggest_tags(title, content)
