from django.db import models


class NavItem(models.Model):
    label = models.CharField(max_length=100)
    href = models.CharField(max_length=500)
    # Submenu entries point at their parent; deleting a menu deletes its entries
    parent = models.ForeignKey("self", null=True, blank=True, on_delete=models.CASCADE, related_name="children")
    type = models.CharField(max_length=32, default="link")
    target = models.CharField(max_length=16, default="_self")
    icon = models.CharField(max_length=64, blank=True, default="")
    display_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    location = models.CharField(max_length=32, default="header", db_index=True)
    meta = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "nav_items"
        ordering = ["display_order", "id"]

    def __str__(self):
        return self.label


class SocialMediaLink(models.Model):
    platform = models.CharField(max_length=64)
    url = models.CharField(max_length=500)
    icon = models.CharField(max_length=64)
    display_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "social_media_links"
        ordering = ["display_order", "id"]

    def __str__(self):
        return self.platform
