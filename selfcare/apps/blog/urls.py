from django.urls import path

from selfcare.apps.blog import views

public_urlpatterns = [
    path("blog/", views.BlogPostListView.as_view(), name="blog-post-list"),
    path("blog/<slug:slug>/", views.BlogPostDetailView.as_view(), name="blog-post-detail"),
]

manage_urlpatterns = [
    path("manage/blog/", views.BlogDashboardView.as_view(), name="blog-manage-dashboard"),
    path("manage/blog/posts/", views.BlogManageListView.as_view(), name="blog-manage-list"),
    path("manage/blog/posts/new/", views.BlogPostCreateView.as_view(), name="blog-manage-create"),
    path(
        "manage/blog/posts/<int:pk>/", views.BlogPostUpdateView.as_view(), name="blog-manage-edit"
    ),
    path(
        "manage/blog/posts/<int:pk>/delete/",
        views.BlogPostDeleteView.as_view(),
        name="blog-manage-delete",
    ),
    path("manage/blog/upload/", views.ImageUploadView.as_view(), name="blog-manage-upload"),
    path(
        "manage/blog/assist/excerpt/",
        views.ExcerptSuggestionView.as_view(),
        name="blog-assist-excerpt",
    ),
    path(
        "manage/blog/assist/tags/",
        views.TagSuggestionView.as_view(),
        name="blog-assist-tags",
    ),
]

urlpatterns = public_urlpatterns + manage_urlpatterns
