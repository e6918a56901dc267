"""
Post-shock recovery projection.

Compounds the stressed portfolio value at a fixed annual rate, paid monthly,
over a bounded horizon and flags the months at which the pre-shock value has
been regained. The projection never searches past the horizon.
"""
from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from stress_app.exceptions import InvalidInput
from stress_app.services.validation import require_number

DEFAULT_ANNUAL_RATE = 0.08
DEFAULT_HORIZON_MONTHS = 60


@dataclass(frozen=True)
class RecoveryPoint:
    month: int
    projected_value: float
    has_recovered: bool


def _require_horizon(horizon_months: object) -> int:
    if isinstance(horizon_months, bool) or not isinstance(horizon_months, int) or horizon_months < 0:
        raise InvalidInput(f"horizon_months must be a non-negative integer, got {horizon_months!r}")
    return horizon_months


def iter_recovery(
    final_value: float,
    target_value: float,
    annual_rate: float = DEFAULT_ANNUAL_RATE,
    horizon_months: int = DEFAULT_HORIZON_MONTHS,
) -> Iterator[RecoveryPoint]:
    """
    Lazily yield one RecoveryPoint per month, 0 through *horizon_months* inclusive.

    projected_value = final_value * (1 + annual_rate / 12) ** month
    has_recovered   = projected_value >= target_value

    Inputs are validated eagerly so a bad call fails before the first point.
    """
    final_value = require_number(final_value, "final_value")
    target_value = require_number(target_value, "target_value")
    annual_rate = require_number(annual_rate, "annual_rate")
    horizon_months = _require_horizon(horizon_months)
    growth = 1 + annual_rate / 12
    # the last month has the largest magnitude; if it fits, every month does
    try:
        last = final_value * growth ** horizon_months
    except OverflowError:
        last = math.inf
    if not math.isfinite(last):
        raise InvalidInput(
            f"annual_rate {annual_rate!r} overflows the projection over {horizon_months} months"
        )
    return _generate(final_value, target_value, growth, horizon_months)


def _generate(final_value: float, target_value: float, growth: float, horizon_months: int) -> Iterator[RecoveryPoint]:
    for month in range(horizon_months + 1):
        value = final_value * growth ** month
        yield RecoveryPoint(month=month, projected_value=value, has_recovered=value >= target_value)


def project_recovery(
    final_value: float,
    target_value: float,
    annual_rate: float = DEFAULT_ANNUAL_RATE,
    horizon_months: int = DEFAULT_HORIZON_MONTHS,
) -> list[RecoveryPoint]:
    """Eager form of :func:`iter_recovery`; the default horizon gives 61 points."""
    return list(iter_recovery(final_value, target_value, annual_rate, horizon_months))


def months_to_recovery(points: Iterable[RecoveryPoint]) -> int | None:
    """Index of the first recovered month, or None if not reached within the horizon."""
    for point in points:
        if point.has_recovered:
            return point.month
    return None
