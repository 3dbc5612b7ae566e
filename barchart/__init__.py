from barchart.adapters import normalize_data
from barchart.attributes import BarChartAttributes, chart_attributes_from_mapping, parse_color
from barchart.axis import AxisRange, FALLBACK_AXIS_RANGE, compute_axis_range, make_y_axis_range
from barchart.chart import BarChart, bar_chart
from barchart.datum import Datum
from barchart.errors import ChartDataError
from barchart.layout import ChartLayout, Rect, compute_layout
from barchart.scales import ValueTransform, build_value_transform

__all__ = [
    "AxisRange",
    "BarChart",
    "BarChartAttributes",
    "ChartDataError",
    "ChartLayout",
    "Datum",
    "FALLBACK_AXIS_RANGE",
    "Rect",
    "ValueTransform",
    "bar_chart",
    "build_value_transform",
    "chart_attributes_from_mapping",
    "compute_axis_range",
    "compute_layout",
    "make_y_axis_range",
    "normalize_data",
    "parse_color",
]
