"""Typed models for prepared price series."""

from __future__ import annotations

import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TimeSeriesType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def function_name(self) -> str:
        return f"TIME_SERIES_{self.name}"

    @property
    def series_key(self) -> str:
        return _SERIES_KEYS[self]


_SERIES_KEYS = {
    TimeSeriesType.DAILY: "Time Series (Daily)",
    TimeSeriesType.WEEKLY: "Weekly Time Series",
    TimeSeriesType.MONTHLY: "Monthly Time Series",
}


class LineConfig(BaseModel):
    """One plotted price line."""

    key: str
    color: str
    label: str


class ChartPoint(BaseModel):
    """One OHLCV bar keyed by trading date."""

    model_config = ConfigDict(populate_by_name=True)

    date: dt.date
    open: float = Field(alias="1. open")
    high: float = Field(alias="2. high")
    low: float = Field(alias="3. low")
    close: float = Field(alias="4. close")
    volume: int = Field(alias="5. volume")


class ChartSeries(BaseModel):
    """Most recent points of one symbol's series, oldest first."""

    symbol: str
    last_refreshed: str
    series_type: TimeSeriesType
    points: list[ChartPoint] = Field(default_factory=list)
