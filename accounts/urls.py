from django.urls import path

from rest_framework_simplejwt.views import TokenRefreshView

from .views import CurrentUserView, LoginView

urlpatterns = [
    # Authentication
    path("login/", LoginView.as_view(), name="login"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("me/", CurrentUserView.as_view(), name="current-user"),
]
