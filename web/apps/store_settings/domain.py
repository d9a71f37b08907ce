"""Settings Store: typed key/value configuration for the storefront.

Values are persisted as text together with a declared type. Reads parse
them back (``number`` to float, ``boolean`` by comparing with ``"true"``,
``json`` with a fallback to the raw text when it does not parse). Writes
go through :meth:`SettingsStore.set`, which only updates keys that were
seeded; brand-new keys must go through :meth:`SettingsStore.create`.
"""

import json
import logging
import math
from typing import Any

from django.db import IntegrityError, transaction

from apps.common.errors import Conflict, NotFound, ValidationError

from .defaults import DEFAULT_SETTINGS
from .models import StoreSetting

logger = logging.getLogger("storefront.settings")


def parse_value(raw: str, setting_type: str) -> Any:
    """Turn a stored text value into its typed form.

    Args:
        raw: Text stored in ``setting_value``.
        setting_type: One of ``string``, ``number``, ``boolean``, ``json``.

    Returns:
        float for numbers (NaN for legacy non-numeric text), bool for
        booleans, the decoded document for json (or ``raw`` when it is not
        valid JSON), and ``raw`` unchanged for strings.
    """
    if setting_type == StoreSetting.Type.NUMBER:
        try:
            return float(raw)
        except (TypeError, ValueError):
            return math.nan
    if setting_type == StoreSetting.Type.BOOLEAN:
        return raw == "true"
    if setting_type == StoreSetting.Type.JSON:
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            return raw
    return raw


def encode_value(value: Any, setting_type: str) -> str:
    """Turn an incoming value into the text stored for ``setting_type``.

    Numbers are checked here so a non-numeric ``number`` setting can never
    be written.

    Raises:
        ValidationError: When ``value`` is missing or does not fit the type.
    """
    if value is None:
        raise ValidationError("Setting value is required")

    if setting_type == StoreSetting.Type.NUMBER:
        if isinstance(value, bool):
            raise ValidationError("Numeric setting requires a number")
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Numeric setting requires a number, got {value!r}")
        if not math.isfinite(number):
            raise ValidationError("Numeric setting must be finite")
        return str(value).strip()

    if setting_type == StoreSetting.Type.BOOLEAN:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, str) and value.lower() in ("true", "false"):
            return value.lower()
        raise ValidationError("Boolean setting requires true or false")

    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def display_value(value: Any) -> Any:
    """Make a parsed value safe for the JSON response.

    NaN and infinities (legacy ``number`` rows, or ``NaN`` inside a json
    document) have no JSON form and are shown as null.
    """
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {k: display_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [display_value(v) for v in value]
    return value


def serialize(setting: StoreSetting) -> dict:
    return {
        "id": setting.id,
        "setting_key": setting.setting_key,
        "setting_value": setting.setting_value,
        "setting_type": setting.setting_type,
        "description": setting.description,
        "value": display_value(parse_value(setting.setting_value, setting.setting_type)),
        "created_at": setting.created_at,
        "updated_at": setting.updated_at,
    }


class SettingsStore:
    """Read and write store settings."""

    def get(self, key: str) -> StoreSetting:
        try:
            return StoreSetting.objects.get(setting_key=key)
        except StoreSetting.DoesNotExist:
            raise NotFound("Setting not found")

    def all(self) -> dict:
        """Return every setting as a parsed map plus the raw rows.

        Returns:
            dict: ``{"settings": {key: {value, type, description,
            updated_at}}, "raw": [row, ...]}`` ordered by key.
        """
        rows = list(StoreSetting.objects.order_by("setting_key"))
        settings_map = {
            s.setting_key: {
                "value": display_value(parse_value(s.setting_value, s.setting_type)),
                "type": s.setting_type,
                "description": s.description,
                "updated_at": s.updated_at,
            }
            for s in rows
        }
        return {"settings": settings_map, "raw": [serialize(s) for s in rows]}

    def value(self, key: str, default: Any = None) -> Any:
        """Parsed value of ``key``, or ``default`` when the key is absent."""
        row = StoreSetting.objects.filter(setting_key=key).only("setting_value", "setting_type").first()
        if row is None:
            return default
        return parse_value(row.setting_value, row.setting_type)

    def set(self, key: str, value: Any) -> StoreSetting:
        """Update an existing setting in place.

        Args:
            key: Setting key; must already exist.
            value: New value, encoded according to the setting's type.

        Returns:
            StoreSetting: The updated row (``updated_at`` refreshed).

        Raises:
            NotFound: If ``key`` was never seeded or created.
            ValidationError: If ``value`` does not fit the setting type.
        """
        setting = self.get(key)
        setting.setting_value = encode_value(value, setting.setting_type)
        setting.save(update_fields=["setting_value", "updated_at"])
        logger.info("setting updated", extra={"setting_key": key})
        return setting

    def create(self, key: str, value: Any, setting_type: str = "string", description: str = "") -> StoreSetting:
        if setting_type not in StoreSetting.Type.values:
            raise ValidationError(f"Unknown setting type {setting_type!r}")
        if StoreSetting.objects.filter(setting_key=key).exists():
            raise Conflict("Setting already exists")
        try:
            with transaction.atomic():
                setting = StoreSetting.objects.create(
                    setting_key=key,
                    setting_value=encode_value(value, setting_type),
                    setting_type=setting_type,
                    description=description or "",
                )
        except IntegrityError:
            raise Conflict("Setting already exists")
        logger.info("setting created", extra={"setting_key": key})
        return setting

    def seed_defaults(self) -> int:
        """Insert any default setting that is missing; return how many."""
        existing = set(StoreSetting.objects.values_list("setting_key", flat=True))
        missing = [
            StoreSetting(setting_key=k, setting_value=v, setting_type=t, description=d)
            for k, v, t, d in DEFAULT_SETTINGS
            if k not in existing
        ]
        StoreSetting.objects.bulk_create(missing, ignore_conflicts=True)
        return len(missing)
