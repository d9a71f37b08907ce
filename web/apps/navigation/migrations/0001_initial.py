import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="NavItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("label", models.CharField(max_length=100)),
                ("href", models.CharField(max_length=500)),
                ("type", models.CharField(default="link", max_length=32)),
                ("target", models.CharField(default="_self", max_length=16)),
                ("icon", models.CharField(blank=True, default="", max_length=64)),
                ("display_order", models.IntegerField(default=0)),
                ("is_active", models.BooleanField(default=True)),
                ("location", models.CharField(db_index=True, default="header", max_length=32)),
                ("meta", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "parent",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="children",
                        to="navigation.navitem",
                    ),
                ),
            ],
            options={
                "db_table": "nav_items",
                "ordering": ["display_order", "id"],
            },
        ),
        migrations.CreateModel(
            name="SocialMediaLink",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("platform", models.CharField(max_length=64)),
                ("url", models.CharField(max_length=500)),
                ("icon", models.CharField(max_length=64)),
                ("display_order", models.IntegerField(default=0)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "social_media_links",
                "ordering": ["display_order", "id"],
            },
        ),
    ]
