from django.contrib import admin
from django.contrib.auth import views as auth_views
from django.urls import include, path

from selfcare.apps.core.views import AboutView, HomeView, healthz
from selfcare.views import serve_media

urlpatterns = [
    #
    # Marketing pages and health check
    #
    path("", HomeView.as_view(), name="home"),
    path("about/", AboutView.as_view(), name="about"),
    path("healthz", healthz, name="healthz"),
    #
    # Django admin
    #
    path("admin/", admin.site.urls),
    #
    # Authentication
    #
    path(
        "login/",
        auth_views.LoginView.as_view(template_name="registration/login.html"),
        name="login",
    ),
    path("logout/", auth_views.LogoutView.as_view(), name="logout"),
    #
    # Blog (public + management)
    #
    path("", include("selfcare.apps.blog.urls")),
    #
    # Uploaded images not yet indexed by WhiteNoise
    #
    path("media/<path:path>", serve_media, name="media"),
]
