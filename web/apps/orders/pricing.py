"""Pricing Calculator: tax, shipping and grand total for a subtotal.

All arithmetic is done on ``Decimal`` and every amount is quantized to
cents with ROUND_HALF_UP, so totals never carry binary floating point
drift.

Shipping rules:
    - ``free_shipping_threshold == 0``: shipping is always free.
    - ``subtotal >= threshold``: free.
    - otherwise: ``shipping_cost``.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

DEFAULT_TAX_RATE = Decimal("18")
DEFAULT_SHIPPING_COST = Decimal("200")
DEFAULT_FREE_SHIPPING_THRESHOLD = Decimal("0")


def to_money(value: Any) -> Decimal:
    """Quantize ``value`` to cents (half-up)."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def _decimal_or(value: Any, default: Decimal) -> Decimal:
    if value is None or isinstance(value, bool):
        return default
    try:
        d = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default
    return d if d.is_finite() else default


@dataclass(frozen=True)
class PricingSettings:
    """Snapshot of the store settings pricing depends on."""

    tax_rate: Decimal = DEFAULT_TAX_RATE
    shipping_cost: Decimal = DEFAULT_SHIPPING_COST
    free_shipping_threshold: Decimal = DEFAULT_FREE_SHIPPING_THRESHOLD

    @classmethod
    def from_store(cls, store) -> "PricingSettings":
        """Read the current snapshot from a settings store.

        Missing or non-numeric settings fall back to the defaults.

        Args:
            store: Object with ``value(key, default)``, e.g. ``SettingsStore``.
        """
        return cls(
            tax_rate=_decimal_or(store.value("tax_rate"), DEFAULT_TAX_RATE),
            shipping_cost=_decimal_or(store.value("shipping_cost"), DEFAULT_SHIPPING_COST),
            free_shipping_threshold=_decimal_or(
                store.value("free_shipping_threshold"), DEFAULT_FREE_SHIPPING_THRESHOLD
            ),
        )


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    discount: Decimal
    total: Decimal


def compute_tax(subtotal: Decimal, tax_rate: Decimal) -> Decimal:
    return to_money(subtotal * tax_rate / Decimal(100))


def compute_shipping(subtotal: Decimal, settings: PricingSettings) -> Decimal:
    threshold = settings.free_shipping_threshold
    if threshold > 0 and subtotal < threshold:
        return to_money(settings.shipping_cost)
    return ZERO


def compute_totals(subtotal: Decimal, settings: PricingSettings, discount: Decimal = ZERO) -> Totals:
    """Derive tax, shipping and total for ``subtotal``.

    Args:
        subtotal: Sum of line subtotals.
        settings: Pricing snapshot.
        discount: Amount taken off the total (0 at checkout today).

    Returns:
        Totals: ``total = subtotal + tax + shipping - discount``.
    """
    subtotal = to_money(subtotal)
    discount = to_money(discount)
    tax = compute_tax(subtotal, settings.tax_rate)
    shipping = compute_shipping(subtotal, settings)
    return Totals(
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        discount=discount,
        total=subtotal + tax + shipping - discount,
    )
