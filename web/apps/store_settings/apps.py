from django.apps import AppConfig


class StoreSettingsConfig(AppConfig):
    name = "apps.store_settings"
    label = "store_settings"
    default_auto_field = "django.db.models.BigAutoField"
