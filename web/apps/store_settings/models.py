from django.db import models


class StoreSetting(models.Model):
    class Type(models.TextChoices):
        STRING = "string"
        NUMBER = "number"
        BOOLEAN = "boolean"
        JSON = "json"

    setting_key = models.CharField(max_length=100, unique=True)
    # Always text; ``setting_type`` decides how it is parsed on read
    setting_value = models.TextField()
    setting_type = models.CharField(max_length=16, choices=Type.choices, default=Type.STRING)
    description = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "store_settings"
        ordering = ["setting_key"]

    def __str__(self):
        return f"{self.setting_key}={self.setting_value!r}"
