from django.urls import path

from .views import NavItemDetailView, NavItemsView, SocialLinksView

app_name = "navigation"

urlpatterns = [
    path("nav/", NavItemsView.as_view(), name="nav-items"),
    path("nav/<int:item_id>/", NavItemDetailView.as_view(), name="nav-item"),
    path("social-media/", SocialLinksView.as_view(), name="social-links"),
]
