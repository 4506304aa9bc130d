"""Preparation of upstream price time-series for the chart renderer."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from ..exceptions import TimeSeriesError
from ..redaction import sanitize_text
from .models import ChartPoint, ChartSeries, LineConfig, TimeSeriesType

DEFAULT_MAX_POINTS = 50

LINE_CONFIGS: tuple[LineConfig, ...] = (
    LineConfig(key="close", color="#2563eb", label="Close Price"),
    LineConfig(key="open", color="#16a34a", label="Open Price"),
    LineConfig(key="high", color="#9333ea", label="High"),
    LineConfig(key="low", color="#dc2626", label="Low"),
)


def prepare_chart_series(
    payload: Any,
    series_type: TimeSeriesType,
    *,
    max_points: int = DEFAULT_MAX_POINTS,
    fallback_symbol: str = "",
    logger: logging.Logger | None = None,
) -> ChartSeries:
    """Turn a TIME_SERIES_* document into its most recent points, oldest first."""
    log = logger or logging.getLogger("market_status_board.charts")
    if max_points <= 0:
        raise ValueError("max_points must be > 0")
    if not isinstance(payload, dict):
        raise TimeSeriesError("Time series payload must be a JSON object.")

    error_message = payload.get("Error Message")
    if error_message:
        raise TimeSeriesError(sanitize_text(str(error_message)))
    meta = payload.get("Meta Data")
    if not isinstance(meta, dict):
        raise TimeSeriesError("Invalid data received from API: missing 'Meta Data'.")

    series = payload.get(series_type.series_key)
    if not isinstance(series, dict):
        raise TimeSeriesError(f"No time series data found for key {series_type.series_key!r}.")

    points: list[ChartPoint] = []
    for day, values in series.items():
        if not isinstance(values, dict):
            continue
        try:
            points.append(ChartPoint.model_validate({"date": day, **values}))
        except ValidationError as exc:
            log.warning("Skipping unparsable bar %s: %d error(s)", day, exc.error_count())
    if not points:
        raise TimeSeriesError("No data available for this time period.")

    points.sort(key=lambda point: point.date)
    return ChartSeries(
        symbol=str(meta.get("2. Symbol") or fallback_symbol),
        last_refreshed=str(meta.get("3. Last Refreshed") or "N/A"),
        series_type=series_type,
        points=points[-max_points:],
    )
