from __future__ import annotations


class ChartDataError(ValueError):
    """Raised when caller input cannot be turned into chart data or configuration."""
