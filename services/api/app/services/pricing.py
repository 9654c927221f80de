"""Price drift, discount and currency display helpers.

Rounding policy: every rounding step (discount percentage, average discount,
2-decimal prices, 0-decimal currency display) rounds half away from zero.
Discount thresholds are compared with >= / <=, so 44.5% must become 45%, not 44%.
"""

import math
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext

from app.schemas.deals import Currency
from app.services.clock import epoch_millis
from app.services.errors import DealPipelineError

# Drift: amplitude-0.08 sinusoid over wall-clock milliseconds, phase-shifted per record.
DRIFT_AMPLITUDE = 0.08
DRIFT_PERIOD_DIVISOR_MS = 90000
PRICE_FLOOR_RATIO = 0.9

_CURRENCY_SYMBOLS = {
    Currency.BRL: "R$",
    Currency.USD: "US$",
}


def round_half_away(value: float, digits: int = 0) -> float:
    """Round to `digits` decimals, halves away from zero.

    Goes through `repr` so 2.675 rounds to 2.68 as written, not as stored in binary.
    """
    if not math.isfinite(value):
        raise DealPipelineError(f"Cannot round non-finite value: {value}")
    exact = Decimal(repr(value))
    quantum = Decimal(1).scaleb(-digits)
    with localcontext() as ctx:
        # quantize needs every integer digit plus `digits` decimals in the context precision.
        ctx.prec = max(ctx.prec, exact.adjusted() + digits + 2)
        return float(exact.quantize(quantum, rounding=ROUND_HALF_UP))


def round_to_int(value: float) -> int:
    return int(round_half_away(value, 0))


def apply_price_drift(nominal: float, index: int, now: datetime) -> float:
    """Deterministic live-price simulation for the seed at catalog position `index`.

    Returns max(nominal * 0.9, nominal * (1 + sin(ms / 90000 + index) * 0.08)).
    """
    drift = math.sin(epoch_millis(now) / DRIFT_PERIOD_DIVISOR_MS + index) * DRIFT_AMPLITUDE
    price_floor = nominal * PRICE_FLOOR_RATIO
    return max(price_floor, nominal * (1 + drift))


def calculate_discount(original: float, current: float) -> int:
    """Percentage below the original price. Negative when `current` is higher.

    Raises:
        DealPipelineError: original price <= 0 or either price is not finite.
    """
    if not math.isfinite(original) or not math.isfinite(current):
        raise DealPipelineError(f"Non-finite price: original={original}, current={current}")
    if original <= 0:
        raise DealPipelineError(f"Original price must be positive, got {original}")
    return round_to_int((original - current) / original * 100)


def format_currency(value: float, currency: Currency) -> str:
    """Brazilian Portuguese display with no decimals, e.g. "R$ 4.120".

    A non-breaking space separates the symbol from the amount.
    """
    amount = round_to_int(value)
    grouped = f"{abs(amount):,}".replace(",", ".")
    sign = "-" if amount < 0 else ""
    return f"{sign}{_CURRENCY_SYMBOLS[currency]}\u00a0{grouped}"
