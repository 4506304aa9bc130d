"""Price-series preparation for the exchange detail chart."""

from .models import ChartPoint, ChartSeries, LineConfig, TimeSeriesType
from .timeseries import LINE_CONFIGS, prepare_chart_series

__all__ = [
    "LINE_CONFIGS",
    "ChartPoint",
    "ChartSeries",
    "LineConfig",
    "TimeSeriesType",
    "prepare_chart_series",
]
