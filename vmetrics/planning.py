"""Metric planning: percentage-of-em targets to font-unit metrics."""

import math
from decimal import ROUND_FLOOR, Decimal
from numbers import Integral

from .config import INT16_MAX, INT16_MIN
from .errors import ContainerMalformed, MetricOutOfRange
from .models import VerticalMetrics


def _round(value: Decimal) -> int:
    """Round halves toward +inf: floor(x + 0.5), so 900.5 -> 901 and -2.5 -> -2."""
    return int((value + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))


def _to_decimal(name: str, value: float) -> Decimal:
    if isinstance(value, bool) or not math.isfinite(float(value)):
        raise MetricOutOfRange(
            f"{name} must be a finite number, got {value!r}", field=name, value=value
        )
    # str() keeps the shortest decimal form, so 90.05 stays 90.05
    return Decimal(str(value))


def ensure_int16(name: str, value: int) -> int:
    """Return ``value`` if it fits a signed 16-bit field, else raise MetricOutOfRange."""
    if not INT16_MIN <= value <= INT16_MAX:
        raise MetricOutOfRange(
            f"{name} {value} is outside the signed 16-bit range "
            f"[{INT16_MIN}, {INT16_MAX}]",
            field=name,
            value=value,
        )
    return value


def validate_upm(units_per_em) -> int:
    if (
        isinstance(units_per_em, bool)
        or not isinstance(units_per_em, Integral)
        or units_per_em <= 0
    ):
        raise ContainerMalformed(
            f"unitsPerEm must be a positive integer, got {units_per_em!r}"
        )
    return int(units_per_em)


def compute_metrics(
    units_per_em: int,
    ascent_percent: float,
    descent_percent: float,
    line_gap_units: float,
) -> VerticalMetrics:
    """Compute ascent/descent/line gap in font units.

    Args:
        units_per_em: Em size from the head table (positive integer)
        ascent_percent: Ascent as a percentage of the em size (>= 0)
        descent_percent: Descent as an unsigned percentage of the em size;
            the sign of the input is ignored
        line_gap_units: Line gap in font units

    Returns:
        VerticalMetrics with ascent >= 0 and descent <= 0

    Raises:
        MetricOutOfRange: if any value does not fit a signed 16-bit field,
            or an input is not finite, or ascent_percent is negative
        ContainerMalformed: if units_per_em is not a positive integer
    """
    upm = Decimal(validate_upm(units_per_em))
    ascent_pct = _to_decimal("ascent", ascent_percent)
    descent_pct = _to_decimal("descent", descent_percent)
    gap = _to_decimal("line gap", line_gap_units)

    if ascent_pct < 0:
        raise MetricOutOfRange(
            f"ascent percentage must be non-negative, got {ascent_percent}",
            field="ascent",
            value=ascent_percent,
        )

    ascent = _round(upm * ascent_pct / 100)
    # Unsigned input, stored negative
    descent = -_round(upm * abs(descent_pct) / 100)
    line_gap = _round(gap)

    return VerticalMetrics(
        ascent=ensure_int16("ascent", ascent),
        descent=ensure_int16("descent", descent),
        line_gap=ensure_int16("line gap", line_gap),
    )


def span_percent(metrics: VerticalMetrics, units_per_em: int) -> float:
    """Total vertical span (ascent + |descent| + line gap) as % of UPM."""
    span = metrics.ascent + abs(metrics.descent) + metrics.line_gap
    return (span / float(units_per_em)) * 100 if units_per_em > 0 else 0.0
