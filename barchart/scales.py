from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
import math

import numpy as np

from barchart.axis import AxisRange
from barchart.errors import ChartDataError


SCIENTIFIC_ABOVE = 1e9
SCIENTIFIC_BELOW = 1e-6


@dataclass(frozen=True)
class ValueTransform:
    """Affine map ``pixel_y = a * value + b`` from data values to screen rows (y grows downward)."""

    a: float
    b: float

    def to_pixel(self, value: float) -> float:
        return self.a * float(value) + self.b


def build_value_transform(axis: AxisRange, top: float, bottom: float) -> ValueTransform:
    span = axis.span
    if span == 0:
        raise ValueError("axis span must be non-zero")
    a = (top - bottom) / span
    b = (bottom * axis.max_value - top * axis.min_value) / span
    return ValueTransform(a=a, b=b)


def map_values(values: np.ndarray, transform: ValueTransform) -> np.ndarray:
    return np.asarray(values, dtype=np.float64) * transform.a + transform.b


def format_tick(value: float, *, step: float | None = None) -> str:
    """Shortest decimal text for ``value``; with ``step``, use as many decimals as the step needs.

    Magnitudes of 1e9 and above, or below 1e-6, come out in scientific notation
    (``2.0000e+09``) without digit grouping. Pass a ``grid_value_format`` or
    ``data_value_format`` template such as ``"{:,.0f}"`` to group large values.
    """

    if not math.isfinite(value):
        return str(value)
    decimals = 6
    if step is not None and math.isfinite(step) and step > 0:
        if abs(value) <= step * 1e-9:
            value = 0.0
        decimals = _decimals_from_step(step)
    magnitude = abs(value)
    if magnitude and (magnitude >= SCIENTIFIC_ABOVE or magnitude < SCIENTIFIC_BELOW):
        return f"{value:.4e}"
    text = f"{value:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_ticks_for_axis(
    ticks: np.ndarray | tuple[float, ...],
    *,
    step: float | None = None,
    template: str | None = None,
) -> list[str]:
    values = np.asarray(ticks, dtype=np.float64)
    if values.size == 0:
        return []
    if template is not None:
        return [format_value(float(v), template=template) for v in values]
    if step is None:
        if values.size == 1:
            return [format_tick(float(values[0]))]
        step = float(abs(values[1] - values[0]))
    return [format_tick(float(v), step=step) for v in values]


def format_value(value: float, *, template: str | None = None) -> str:
    if template is None:
        return format_tick(value)
    try:
        return template.format(value)
    except (ValueError, IndexError, KeyError) as exc:
        raise ChartDataError(f"invalid format template {template!r}: {exc}") from exc


def _decimals_from_step(step: float) -> int:
    exponent = Decimal(repr(step)).normalize().as_tuple().exponent
    return min(12, max(0, -int(exponent)))
