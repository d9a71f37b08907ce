from django.urls import path

from .views import SettingsView

app_name = "store_settings"

urlpatterns = [
    path("", SettingsView.as_view(), name="settings"),
]
