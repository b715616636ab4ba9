"""
Monetary Normalizer

Converts amounts between the native currency (inventory prices) and the
secondary currency (local cash) with a single exchange rate expressed as
secondary units per native unit. Nothing here rounds; rounding is a
presentation concern.
"""

from decimal import ROUND_HALF_UP, Decimal


def quantize_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places using half-up rounding."""
    return value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


def to_reference(amount_native: Decimal, amount_secondary: Decimal, rate: Decimal) -> Decimal:
    """Combine both currencies into the reference (native) currency."""
    return amount_native + amount_secondary / rate


def to_ledger(amount_native: Decimal, amount_secondary: Decimal, rate: Decimal) -> Decimal:
    """Combine both currencies into the ledger (secondary) currency."""
    return amount_native * rate + amount_secondary


def ledger_to_native(amount: Decimal, rate: Decimal) -> Decimal:
    return amount / rate
