from django.apps import AppConfig


class RevenueConfig(AppConfig):
    name = "apps.revenue"
    label = "revenue"
    default_auto_field = "django.db.models.BigAutoField"
