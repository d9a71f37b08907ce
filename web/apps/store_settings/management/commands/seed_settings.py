from django.core.management.base import BaseCommand

from apps.store_settings.domain import SettingsStore


class Command(BaseCommand):
    help = "Insert any missing default store settings (existing values are kept)."

    def handle(self, *args, **options):
        added = SettingsStore().seed_defaults()
        if added:
            self.stdout.write(self.style.SUCCESS(f"Added {added} default setting(s)."))
        else:
            self.stdout.write("Settings already seeded, nothing to do.")
