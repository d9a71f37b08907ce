"""Unit tests for the Pricing Calculator."""

import math
from decimal import Decimal

import pytest

from apps.orders.pricing import PricingSettings, compute_shipping, compute_tax, compute_totals

D = Decimal


@pytest.mark.parametrize(
    "subtotal, rate, expected",
    [
        ("25.00", "18", "4.50"),
        ("100.00", "18", "18.00"),
        ("0.05", "18", "0.01"),  # 0.009 rounds half-up
        ("33.33", "12.5", "4.17"),
        ("10.00", "0", "0.00"),
    ],
)
def test_tax_is_rate_percent_of_subtotal_to_cents(subtotal, rate, expected):
    assert compute_tax(D(subtotal), D(rate)) == D(expected)


def test_zero_threshold_means_shipping_is_always_free():
    s = PricingSettings(shipping_cost=D("200"), free_shipping_threshold=D("0"))
    for subtotal in ("0.01", "99.00", "100000.00"):
        assert compute_shipping(D(subtotal), s) == D("0")


def test_threshold_boundary():
    s = PricingSettings(shipping_cost=D("200"), free_shipping_threshold=D("100"))
    assert compute_shipping(D("99"), s) == D("200.00")
    assert compute_shipping(D("99.99"), s) == D("200.00")
    assert compute_shipping(D("100"), s) == D("0")
    assert compute_shipping(D("150"), s) == D("0")


def test_totals_round_trip():
    # 10 x 2 + 5 x 1
    t = compute_totals(D("25"), PricingSettings(tax_rate=D("18"), free_shipping_threshold=D("0")))
    assert (t.subtotal, t.tax, t.shipping, t.discount, t.total) == (D("25.00"), D("4.50"), D("0"), D("0.00"), D("29.50"))


def test_total_subtracts_discount_and_adds_shipping():
    s = PricingSettings(tax_rate=D("10"), shipping_cost=D("50"), free_shipping_threshold=D("500"))
    t = compute_totals(D("200"), s, discount=D("20"))
    assert t.total == D("200") + D("20") + D("50") - D("20")


class FakeStore:
    def __init__(self, values):
        self.values = values

    def value(self, key, default=None):
        return self.values.get(key, default)


def test_settings_snapshot_defaults_for_missing_or_unparseable_values():
    s = PricingSettings.from_store(FakeStore({"tax_rate": math.nan, "shipping_cost": 75.0}))
    assert s.tax_rate == D("18")
    assert s.shipping_cost == D("75.0")
    assert s.free_shipping_threshold == D("0")


@pytest.mark.django_db
def test_settings_snapshot_reads_the_settings_store(store_settings):
    store_settings.set("tax_rate", 5)
    store_settings.set("free_shipping_threshold", "1000")
    s = PricingSettings.from_store(store_settings)
    assert s.tax_rate == D("5")
    assert s.free_shipping_threshold == D("1000")
    assert s.shipping_cost == D("200")
