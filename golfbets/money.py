"""Decimal money helpers shared by every engine."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, Mapping, Sequence

from .config import MONEY_PLACES

ZERO = Decimal("0")
CENT = Decimal(1).scaleb(-MONEY_PLACES)


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # Go through str() so 0.1 stays 0.1 instead of the binary expansion.
        return Decimal(str(value))
    return Decimal(value)


def quantize(value: Decimal | int | float | str) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def split_evenly(total: Decimal, recipients: Sequence[str]) -> Dict[str, Decimal]:
    """Split ``total`` across ``recipients`` with largest-remainder allocation.

    Every share is a whole number of cents. Leftover cents go one each to the
    recipients in the order given, so the shares always sum exactly to
    ``total`` (quantized) and the result is deterministic.
    """

    if not recipients:
        return {}
    amount = quantize(total)
    sign = -1 if amount < 0 else 1
    cents = int((abs(amount) / CENT).to_integral_value())
    base, remainder = divmod(cents, len(recipients))
    shares: Dict[str, Decimal] = {}
    for index, recipient in enumerate(recipients):
        share_cents = base + (1 if index < remainder else 0)
        shares[recipient] = sign * share_cents * CENT
    return shares


def scale_amounts(amounts: Mapping[str, Decimal], factor: Decimal) -> Dict[str, Decimal]:
    """Multiply every amount by ``factor``, rounding each to whole cents.

    Rounding each share on its own can gain or lose a cent overall. Those
    cents go back one at a time to the entries whose exact value was furthest
    from their rounded share (ties in the order given), so the shares sum to
    the rounded exact total.
    """

    exact = {key: to_decimal(value) * factor for key, value in amounts.items()}
    shares = {key: quantize(value) for key, value in exact.items()}
    residual = quantize(total(exact.values())) - total(shares.values())
    candidates = list(exact)
    while residual != ZERO and candidates:
        step = CENT if residual > ZERO else -CENT
        key = max(candidates, key=lambda k: (exact[k] - shares[k]) / step)
        shares[key] += step
        residual -= step
        candidates.remove(key)
    return shares


def add_into(target: Dict[str, Decimal], deltas: Mapping[str, Decimal]) -> None:
    for key, value in deltas.items():
        target[key] = target.get(key, ZERO) + value


def total(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


__all__ = [
    "CENT",
    "ZERO",
    "add_into",
    "quantize",
    "scale_amounts",
    "split_evenly",
    "to_decimal",
    "total",
]
