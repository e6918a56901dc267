from __future__ import annotations

import math
from numbers import Real

from stress_app.exceptions import InvalidInput


def require_number(value: object, label: str) -> float:
    """Coerce *value* to float, raising InvalidInput for non-numeric or non-finite input."""
    # bool is a Real subclass; an allocation of True is a caller bug
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInput(f"{label} must be numeric, got {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise InvalidInput(f"{label} must be finite, got {value!r}")
    return number


def percent_of(amount: float, base: float) -> float:
    """*amount* as a percentage of *base*; 0.0 when there is no base to measure against."""
    if base == 0:
        return 0.0
    return amount / base * 100
