from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from barchart.attributes import BarChartAttributes
from barchart.axis import AxisRange
from barchart.datum import Datum
from barchart.errors import ChartDataError
from barchart.raster import text_size
from barchart.scales import format_ticks_for_axis, format_value


TextMeasure = Callable[[str, float], tuple[int, int]]


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def union(self, other: "Rect") -> "Rect":
        return Rect(
            left=min(self.left, other.left),
            top=min(self.top, other.top),
            right=max(self.right, other.right),
            bottom=max(self.bottom, other.bottom),
        )

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    def as_xywh(self) -> tuple[int, int, int, int]:
        x0 = int(round(self.left))
        y0 = int(round(self.top))
        return (x0, y0, int(round(self.right)) - x0, int(round(self.bottom)) - y0)

    def as_clip(self) -> tuple[int, int, int, int]:
        return (int(round(self.left)), int(round(self.top)), int(round(self.right)), int(round(self.bottom)))


@dataclass(frozen=True)
class ChartLayout:
    """Pixel regions of one bar chart frame plus the measured label texts."""

    width: float
    height: float
    axis_area: Rect
    plot_area: Rect
    data_label_area: Rect
    data_value_area: Rect
    grid_line_area: Rect
    grid_value_area: Rect
    data_labels: tuple[str, ...]
    data_label_sizes: tuple[tuple[int, int], ...]
    data_value_texts: tuple[str, ...]
    data_value_sizes: tuple[tuple[int, int], ...]
    grid_value_texts: tuple[str, ...]
    grid_value_sizes: tuple[tuple[int, int], ...]
    total_data_width: float
    min_scroll_offset: float

    def clamp_scroll(self, offset: float) -> float:
        return max(min(offset, 0.0), self.min_scroll_offset)


def compute_layout(
    width: float,
    height: float,
    data: Sequence[Datum],
    axis: AxisRange,
    attributes: BarChartAttributes,
    *,
    measure: TextMeasure | None = None,
) -> ChartLayout:
    if width <= 1 or height <= 1:
        raise ChartDataError("chart width/height must be > 1")
    if measure is None:
        measure = _font_measure(attributes.font_family)

    data_labels = tuple(datum.label for datum in data)
    data_label_sizes = tuple(measure(label, attributes.data_label_text_size) for label in data_labels)
    max_data_label_h = max((h for _, h in data_label_sizes), default=0)

    grid_value_texts = tuple(
        format_ticks_for_axis(axis.grid_values, step=axis.interval, template=attributes.grid_value_format)
    )
    grid_value_sizes = tuple(measure(text, attributes.grid_value_text_size) for text in grid_value_texts)
    max_grid_value_w = max((w for w, _ in grid_value_sizes), default=0)

    data_value_texts = tuple(format_value(datum.value, template=attributes.data_value_format) for datum in data)
    data_value_sizes = tuple(measure(text, attributes.data_label_text_size) for text in data_value_texts)
    max_data_value_h = max((h for _, h in data_value_sizes), default=0)

    # Shift the y axis right for the grid values and up for the data labels.
    axis_area = Rect(
        left=float(max_grid_value_w) + attributes.padding,
        top=0.0,
        right=float(width),
        bottom=float(height) - max_data_label_h,
    )

    # Reserve room for value labels above positive bars and below negative ones.
    pos_space = max_data_value_h if any(datum.value >= 0 for datum in data) else 0
    neg_space = max_data_value_h if any(datum.value < 0 for datum in data) else 0
    plot_area = Rect(
        left=axis_area.left,
        top=axis_area.top + pos_space,
        right=axis_area.right,
        bottom=axis_area.bottom - neg_space,
    )
    if plot_area.width <= 1 or plot_area.height <= 1:
        raise ChartDataError("chart too small for plot area")

    data_label_area = Rect(
        left=axis_area.left,
        top=axis_area.bottom,
        right=axis_area.right,
        bottom=axis_area.bottom + max_data_label_h,
    )
    data_value_area = axis_area
    grid_line_area = plot_area
    grid_value_area = Rect(
        left=0.0,
        top=grid_line_area.top,
        right=grid_line_area.left - attributes.padding,
        bottom=grid_line_area.bottom,
    )

    total_data_width = attributes.bar_interval * len(data)
    min_scroll_offset = min(plot_area.width - total_data_width, 0.0)

    return ChartLayout(
        width=float(width),
        height=float(height),
        axis_area=axis_area,
        plot_area=plot_area,
        data_label_area=data_label_area,
        data_value_area=data_value_area,
        grid_line_area=grid_line_area,
        grid_value_area=grid_value_area,
        data_labels=data_labels,
        data_label_sizes=data_label_sizes,
        data_value_texts=data_value_texts,
        data_value_sizes=data_value_sizes,
        grid_value_texts=grid_value_texts,
        grid_value_sizes=grid_value_sizes,
        total_data_width=total_data_width,
        min_scroll_offset=min_scroll_offset,
    )


def _font_measure(font_family: str) -> TextMeasure:
    def measure(text: str, font_size_px: float) -> tuple[int, int]:
        return text_size(text, font_family=font_family, font_size_px=font_size_px)

    return measure
