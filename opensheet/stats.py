"""Extended statistical spreadsheet functions."""

from __future__ import annotations

import math
from typing import Callable, Iterable, Optional

_EPSILON = 1e-12


def _to_float(value: object) -> Optional[float]:
    if isinstance(value, (bool, int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _numbers(args: Iterable[object]) -> list[float]:
    return [v for v in map(_to_float, args) if v is not None]


def _is_null(value: float) -> bool:
    return abs(value) <= _EPSILON


def geomean(args) -> float:
    """Geometric mean of the positive numeric arguments; 0.0 if there are none."""
    positives = [v for v in _numbers(args) if v > 0]
    if not positives:
        return 0.0
    return math.exp(sum(map(math.log, positives)) / len(positives))


def harmean(args) -> float:
    """Harmonic mean of the non-zero numeric arguments; 0.0 if undefined."""
    values = [v for v in _numbers(args) if not _is_null(v)]
    recip_sum = sum(1.0 / v for v in values)
    if not values or _is_null(recip_sum):
        return 0.0
    return len(values) / recip_sum


def skew(args) -> float:
    """Sample skewness; 0.0 for fewer than three values or zero spread."""
    vals = _numbers(args)
    n = len(vals)
    if n < 3:
        return 0.0
    mean = sum(vals) / n
    m2 = sum((v - mean) ** 2 for v in vals) / n
    m3 = sum((v - mean) ** 3 for v in vals) / n
    sd = math.sqrt(m2)
    if _is_null(sd):
        return 0.0
    return (n / ((n - 1.0) * (n - 2.0))) * (m3 / sd**3)


def kurt(args) -> float:
    """Sample-corrected excess kurtosis; 0.0 for fewer than four values."""
    vals = _numbers(args)
    n = len(vals)
    if n < 4:
        return 0.0
    mean = sum(vals) / n
    m2 = sum((v - mean) ** 2 for v in vals) / n
    m4 = sum((v - mean) ** 4 for v in vals) / n
    if _is_null(m2):
        return 0.0
    corr = (n * (n + 1.0)) / ((n - 1.0) * (n - 2.0) * (n - 3.0))
    bias = 3.0 * (n - 1.0) * (n - 1.0) / ((n - 2.0) * (n - 3.0))
    return corr * (m4 / (m2 * m2)) * n - bias


FORMULAS: dict[str, Callable[[Iterable[object]], float]] = {
    "GEOMEAN": geomean,
    "HARMEAN": harmean,
    "SKEW": skew,
    "KURT": kurt,
}