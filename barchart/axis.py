from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import TYPE_CHECKING, Any, Iterable

from barchart.datum import Datum

if TYPE_CHECKING:
    from barchart.attributes import BarChartAttributes


LOGGER = logging.getLogger(__name__)

DEFAULT_TARGET_GRID_COUNT = 7.0
NICE_FACTORS = (1, 2, 5)
# 10.0 ** 309 overflows; spans this small are treated as one step of 1e-300.
_MIN_EXPONENT = -300
# Ratios this close to an integer count as that integer (1.2 / 0.2 is 5.999999999999999).
_RATIO_SNAP = 1e-9


@dataclass(frozen=True)
class AxisRange:
    """Y-axis bounds for a bar chart plus the gridline values inside them.

    The range always straddles zero. ``interval`` is the gridline spacing, one of
    ``{1, 2, 5} * 10**k``, or ``None`` when the fallback range is in use.
    """

    min_value: float
    max_value: float
    grid_values: tuple[float, ...] = ()
    interval: float | None = None

    @property
    def span(self) -> float:
        return self.max_value - self.min_value

    @property
    def is_fallback(self) -> bool:
        return self.interval is None


FALLBACK_AXIS_RANGE = AxisRange(min_value=0.0, max_value=1.0, grid_values=(), interval=None)


def compute_axis_range(
    values: Iterable[Any],
    *,
    y_min: float | None = None,
    y_max: float | None = None,
    target_grid_count: float = DEFAULT_TARGET_GRID_COUNT,
) -> AxisRange:
    target = float(target_grid_count)
    if not target > 1.0:
        raise ValueError("target_grid_count must be > 1")

    numbers = [_value_of(v) for v in values]
    raw_min = float(y_min) if y_min is not None else min(numbers, default=0.0)
    raw_max = float(y_max) if y_max is not None else max(numbers, default=0.0)

    # Bars grow from a zero baseline, so zero is always on the axis.
    min_value = min(0.0, raw_min)
    max_value = max(0.0, raw_max)

    span = max_value - min_value
    if span == 0.0 or not math.isfinite(span):
        LOGGER.debug("degenerate y range [%r, %r]; using fallback axis", raw_min, raw_max)
        return FALLBACK_AXIS_RANGE

    factor, exponent = _choose_interval(span, target)
    interval = _scaled(factor, exponent)
    start = math.ceil(_ratio(min_value, factor, exponent))
    end = math.floor(_ratio(max_value, factor, exponent))
    grid_values = tuple(_scaled(i * factor, exponent) for i in range(start, end + 1))
    return AxisRange(min_value=min_value, max_value=max_value, grid_values=grid_values, interval=interval)


def make_y_axis_range(data: Iterable[Datum], attributes: "BarChartAttributes") -> AxisRange:
    return compute_axis_range(
        data,
        y_min=attributes.y_min,
        y_max=attributes.y_max,
        target_grid_count=attributes.target_grid_count,
    )


def _choose_interval(span: float, target: float) -> tuple[int, int]:
    """Return ``(factor, exponent)`` of the finest nice interval whose gridline count fits ``target``."""

    exponent = 0
    while exponent > _MIN_EXPONENT and span / _scaled(1, exponent) + 1 < target:
        exponent -= 1
    while True:
        for factor in NICE_FACTORS:
            if _ratio(span, factor, exponent) + 1 <= target:
                return factor, exponent
        exponent += 1


def _scaled(multiple: int, exponent: int) -> float:
    # Divide for negative exponents so 3 * 2e-2 comes out as 0.06, not 0.06000000000000001.
    if exponent >= 0:
        return float(multiple) * 10.0**exponent
    return float(multiple) / 10.0 ** (-exponent)


def _value_of(item: Any) -> float:
    if isinstance(item, Datum):
        return item.value
    return float(item)


def _ratio(value: float, factor: int, exponent: int) -> float:
    """``value`` measured in intervals of ``factor * 10**exponent``, snapped to an integer when within float noise."""

    ratio = value / _scaled(factor, exponent)
    nearest = round(ratio)
    if abs(ratio - nearest) <= _RATIO_SNAP * max(1.0, abs(ratio)):
        return float(nearest)
    return ratio
