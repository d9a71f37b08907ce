from django.db import migrations

from apps.store_settings.defaults import DEFAULT_SETTINGS


def seed(apps, schema_editor):
    StoreSetting = apps.get_model("store_settings", "StoreSetting")
    existing = set(StoreSetting.objects.values_list("setting_key", flat=True))
    StoreSetting.objects.bulk_create(
        [
            StoreSetting(setting_key=k, setting_value=v, setting_type=t, description=d)
            for k, v, t, d in DEFAULT_SETTINGS
            if k not in existing
        ]
    )


class Migration(migrations.Migration):

    dependencies = [
        ("store_settings", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(seed, migrations.RunPython.noop),
    ]
