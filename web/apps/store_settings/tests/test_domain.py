import math

import pytest

from apps.common.errors import NotFound, ValidationError
from apps.store_settings.domain import encode_value, parse_value
from apps.store_settings.models import StoreSetting


@pytest.mark.parametrize(
    "raw, kind, expected",
    [
        ("18", "number", 18.0),
        ("2.5", "number", 2.5),
        ("true", "boolean", True),
        ("True", "boolean", False),
        ("1", "boolean", False),
        ('{"a": [1, 2]}', "json", {"a": [1, 2]}),
        ("{not json", "json", "{not json"),
        ("Rs. ", "string", "Rs. "),
    ],
)
def test_parse_on_read(raw, kind, expected):
    assert parse_value(raw, kind) == expected


def test_legacy_non_numeric_number_reads_as_nan():
    assert math.isnan(parse_value("abc", "number"))


@pytest.mark.parametrize("value", ["abc", "", True, float("inf"), None])
def test_number_writes_must_be_finite_numbers(value):
    with pytest.raises(ValidationError):
        encode_value(value, "number")


def test_write_encoding():
    assert encode_value(12.5, "number") == "12.5"
    assert encode_value(" 7 ", "number") == "7"
    assert encode_value(False, "boolean") == "false"
    assert encode_value("TRUE", "boolean") == "true"
    assert encode_value({"k": 1}, "json") == '{"k": 1}'
    assert encode_value("hello", "string") == "hello"


@pytest.mark.django_db
def test_defaults_are_seeded(store_settings):
    assert store_settings.value("tax_rate") == 18.0
    assert store_settings.value("shipping_cost") == 200.0
    assert store_settings.value("free_shipping_threshold") == 0.0
    assert store_settings.value("currency_symbol") == "Rs. "
    assert store_settings.value("nope", "fallback") == "fallback"
    # seeding again inserts nothing
    assert store_settings.seed_defaults() == 0


@pytest.mark.django_db
def test_set_unknown_key_leaves_table_unchanged(store_settings):
    before = list(StoreSetting.objects.order_by("setting_key").values_list("setting_key", "setting_value"))
    with pytest.raises(NotFound):
        store_settings.set("does_not_exist", "x")
    after = list(StoreSetting.objects.order_by("setting_key").values_list("setting_key", "setting_value"))
    assert before == after


@pytest.mark.django_db
def test_set_touches_updated_at(store_settings):
    old = store_settings.get("tax_rate").updated_at
    s = store_settings.set("tax_rate", 12)
    assert s.setting_value == "12"
    assert s.updated_at >= old
    assert store_settings.value("tax_rate") == 12.0
