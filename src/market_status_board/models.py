"""Shared typed models for exchange status records."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RawExchangeRecord(BaseModel):
    """One exchange entry as reported by the upstream market-status feed.

    Field aliases follow the upstream JSON (``local_open``, ``current_status``),
    so records validate straight from the payload.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    market_type: str = Field(description="Equity, Forex, Cryptocurrency, ...")
    region: str = Field(description="Region label, may join several exchanges")
    primary_exchanges: str = Field(description="Comma-joined exchange codes")
    local_open: str = Field(description="HH:MM in the exchange's own timezone")
    local_close: str = Field(description="HH:MM in the exchange's own timezone")
    status_hint: str = Field(
        alias="current_status",
        description="Upstream-reported status, only used as a fallback",
    )
    notes: str = Field(default="")


class NormalizedExchangeRecord(RawExchangeRecord):
    """Exchange entry with viewer-local trading hours and a live status flag."""

    viewer_trading_hours: str = Field(
        description="'HH:MM-HH:MM' in the viewer's timezone, or '24h'",
    )
    is_open_now: bool

    @classmethod
    def from_raw(
        cls,
        raw: RawExchangeRecord,
        *,
        viewer_trading_hours: str,
        is_open_now: bool,
    ) -> NormalizedExchangeRecord:
        """Copy every raw field verbatim and attach the derived values."""
        return cls(
            **raw.model_dump(),
            viewer_trading_hours=viewer_trading_hours,
            is_open_now=is_open_now,
        )
