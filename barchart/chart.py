from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any, Sequence

import numpy as np
from PIL import Image

from barchart.adapters import normalize_data
from barchart.attributes import BarChartAttributes
from barchart.axis import AxisRange, make_y_axis_range
from barchart.compile import WriteBatch, compile_frame_batch, compile_scroll_batch
from barchart.datum import Datum
from barchart.errors import ChartDataError
from barchart.layout import ChartLayout, Rect, TextMeasure, compute_layout
from barchart.raster import draw_hline, draw_text, draw_vline, fill_rect, new_canvas
from barchart.scales import build_value_transform


LOGGER = logging.getLogger(__name__)


@dataclass
class BarChart:
    """Horizontally scrollable bar chart drawn into an RGBA frame.

    The y axis always contains zero and its gridlines come from
    :func:`barchart.axis.compute_axis_range`. Bars are laid out left to right,
    one per ``attributes.bar_interval`` pixels; when they do not fit, the chart
    scrolls horizontally with :meth:`scroll_by`.
    """

    data: Any = ()
    attributes: BarChartAttributes = field(default_factory=BarChartAttributes)
    measure: TextMeasure | None = None
    scroll_offset: float = 0.0
    _last_layout: ChartLayout | None = field(default=None, init=False, repr=False)
    _last_frame_rgba: np.ndarray | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.data = normalize_data(self.data)
        if self.scroll_offset > 0:
            raise ValueError("scroll_offset must be <= 0")

    def set_data(self, values: Any, labels: Sequence[Any] | None = None) -> "BarChart":
        self.data = normalize_data(values, labels)
        self.scroll_offset = 0.0
        self._last_layout = None
        return self

    def set_attributes(self, attributes: BarChartAttributes) -> "BarChart":
        self.attributes = attributes
        self._last_layout = None
        return self

    def axis_range(self) -> AxisRange:
        return make_y_axis_range(self.data, self.attributes)

    def layout(self, width: float, height: float) -> ChartLayout:
        layout = compute_layout(width, height, self.data, self.axis_range(), self.attributes, measure=self.measure)
        self._last_layout = layout
        # A resize can shrink the scrollable distance below the current offset.
        self.scroll_offset = layout.clamp_scroll(self.scroll_offset)
        return layout

    def last_layout(self) -> ChartLayout | None:
        return self._last_layout

    def scroll_by(self, delta: float) -> float:
        """Move the bars by ``delta`` pixels (negative scrolls right) and return the applied change."""

        layout = self._last_layout
        if layout is None:
            raise ChartDataError("chart must be laid out before scrolling")
        previous = self.scroll_offset
        self.scroll_offset = layout.clamp_scroll(previous + float(delta))
        applied = self.scroll_offset - previous
        if applied != delta:
            LOGGER.debug("scroll clamped: requested=%r applied=%r offset=%r", delta, applied, self.scroll_offset)
        return applied

    def is_scroll_at_edge(self) -> bool:
        layout = self._last_layout
        if layout is None:
            return True
        return self.scroll_offset == 0.0 or self.scroll_offset == layout.min_scroll_offset

    def bar_rects(self, layout: ChartLayout) -> list[Rect]:
        axis = self.axis_range()
        plot = layout.plot_area
        transform = build_value_transform(axis, plot.top, plot.bottom)
        bar_interval = self.attributes.bar_interval
        bar_width = self.attributes.bar_width
        x_start = plot.left + (bar_interval - bar_width) / 2.0
        rects: list[Rect] = []
        for index, datum in enumerate(self.data):
            t = transform.a * datum.value
            y = t + transform.b
            bar_top = min(y, transform.b)
            bar_left = x_start + bar_interval * index + self.scroll_offset
            rects.append(Rect(left=bar_left, top=bar_top, right=bar_left + bar_width, bottom=bar_top + abs(t)))
        return rects

    def render(self, width: int, height: int) -> np.ndarray:
        layout = self.layout(width, height)
        attrs = self.attributes
        canvas = new_canvas(int(width), int(height), color=attrs.background_color)

        self._draw_axis(canvas, layout.axis_area)
        self._draw_data(canvas, layout)
        self._draw_grid(canvas, layout, self.axis_range())

        self._last_frame_rgba = canvas.copy()
        return canvas

    def _draw_axis(self, canvas: np.ndarray, area: Rect) -> None:
        color = self.attributes.axis_line_color
        x = min(int(round(area.left)), canvas.shape[1] - 1)
        y_top = int(round(area.top))
        y_bottom = min(int(round(area.bottom)), canvas.shape[0] - 1)
        x_right = min(int(round(area.right)), canvas.shape[1]) - 1
        draw_vline(canvas, x, y_top, y_bottom, color)
        draw_hline(canvas, x + 1, x_right, y_bottom, color)

    def _draw_data(self, canvas: np.ndarray, layout: ChartLayout) -> None:
        attrs = self.attributes
        clip = layout.plot_area.union(layout.data_label_area).union(layout.data_value_area).as_clip()
        for datum, rect, (label_w, _), value_text, (value_w, value_h), label in zip(
            self.data,
            self.bar_rects(layout),
            layout.data_label_sizes,
            layout.data_value_texts,
            layout.data_value_sizes,
            layout.data_labels,
            strict=True,
        ):
            fill_rect(
                canvas,
                int(round(rect.left)),
                int(round(rect.top)),
                int(round(rect.right)),
                int(round(rect.bottom)),
                attrs.bar_color,
                clip=clip,
            )

            label_left = rect.left + attrs.bar_width / 2.0 - label_w / 2.0
            draw_text(
                canvas,
                int(round(label_left)),
                int(round(layout.data_label_area.top)),
                label,
                attrs.data_label_text_color,
                font_family=attrs.font_family,
                font_size_px=attrs.data_label_text_size,
                clip=clip,
            )

            value_left = rect.left + (attrs.bar_width - value_w) / 2.0
            value_top = rect.top - value_h if datum.value >= 0 else rect.bottom
            draw_text(
                canvas,
                int(round(value_left)),
                int(round(value_top)),
                value_text,
                attrs.data_label_text_color,
                font_family=attrs.font_family,
                font_size_px=attrs.data_label_text_size,
                clip=clip,
            )

    def _draw_grid(self, canvas: np.ndarray, layout: ChartLayout, axis: AxisRange) -> None:
        attrs = self.attributes
        lines = layout.grid_line_area
        values = layout.grid_value_area
        transform = build_value_transform(axis, lines.top, lines.bottom)
        x0 = int(round(lines.left))
        x1 = min(int(round(lines.right)), canvas.shape[1]) - 1
        for grid_value, text, (text_w, text_h) in zip(
            axis.grid_values,
            layout.grid_value_texts,
            layout.grid_value_sizes,
            strict=True,
        ):
            y = transform.to_pixel(grid_value)
            row = min(int(round(y)), canvas.shape[0] - 1)
            draw_hline(canvas, x0, x1, row, attrs.grid_line_color)
            draw_text(
                canvas,
                int(round(values.right - text_w)),
                int(round(y - text_h / 2.0)),
                text,
                attrs.grid_value_text_color,
                font_family=attrs.font_family,
                font_size_px=attrs.grid_value_text_size,
            )

    def last_frame(self) -> np.ndarray | None:
        return self._last_frame_rgba

    def compile_frame(self, width: int, height: int) -> WriteBatch:
        return compile_frame_batch(self.render(width, height))

    def compile_scroll_patch(self, width: int, height: int) -> WriteBatch:
        """Re-render and emit only the region that moves when the chart scrolls."""

        frame = self.render(width, height)
        layout = self._last_layout
        assert layout is not None
        return compile_scroll_batch(frame, layout)

    def save_png(self, path: str | Path, width: int, height: int) -> Path:
        out = Path(path)
        Image.fromarray(self.render(width, height)).save(out)
        return out


def bar_chart(
    data: Sequence[Datum] | Any = (),
    *,
    labels: Sequence[Any] | None = None,
    attributes: BarChartAttributes | None = None,
) -> BarChart:
    chart = BarChart(attributes=attributes if attributes is not None else BarChartAttributes())
    chart.set_data(data, labels)
    return chart
