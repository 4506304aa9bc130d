"""Refresh coordinator tying a data source, the normalizer and the view model."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from .exceptions import MarketDataError
from .hours.normalizer import TimezoneNormalizer, aware_instant
from .sources import MarketStatusSource
from .table.view_model import MarketListViewModel, PageView

DEFAULT_REFRESH_INTERVAL_SECONDS = 300


@dataclass(frozen=True, slots=True)
class BoardSnapshot:
    page: PageView
    last_refresh_at: datetime | None
    last_error: str | None
    source_count: int


class MarketBoard:
    """Pull complete batches and keep the market table's derived view current.

    Scheduling belongs to the caller; ``is_refresh_due`` only reports whether
    the configured interval has elapsed.
    """

    def __init__(
        self,
        source: MarketStatusSource,
        normalizer: TimezoneNormalizer,
        view_model: MarketListViewModel,
        *,
        refresh_interval_seconds: int = DEFAULT_REFRESH_INTERVAL_SECONDS,
        logger: logging.Logger | None = None,
    ) -> None:
        self.source = source
        self.normalizer = normalizer
        self.view_model = view_model
        self.refresh_interval_seconds = refresh_interval_seconds
        self.logger = logger or logging.getLogger("market_status_board.board")
        self.last_refresh_at: datetime | None = None
        self.last_error: str | None = None

    def refresh(self, now: datetime | None = None) -> BoardSnapshot:
        """Replace the displayed list with a freshly normalized batch.

        A failing source leaves the previous list in place and records the
        error for the presentation layer.
        """
        instant = aware_instant(now)
        try:
            raw_records = self.source.fetch_batch()
        except MarketDataError as exc:
            self.last_error = str(exc)
            self.logger.error("Market status refresh failed: %s", exc)
            return self.snapshot()

        normalized = self.normalizer.normalize_batch(raw_records, now=instant)
        self.view_model.load_batch(normalized)
        self.last_refresh_at = instant
        self.last_error = None
        if not normalized:
            self.logger.warning("Market status refresh returned no markets.")
        else:
            open_count = sum(1 for record in normalized if record.is_open_now)
            self.logger.info(
                "Market status refreshed: markets=%d open=%d",
                len(normalized),
                open_count,
            )
        return self.snapshot()

    def is_refresh_due(self, now: datetime | None = None) -> bool:
        if self.last_refresh_at is None:
            return True
        instant = aware_instant(now)
        elapsed = (instant - self.last_refresh_at).total_seconds()
        return elapsed >= self.refresh_interval_seconds

    def snapshot(self) -> BoardSnapshot:
        return BoardSnapshot(
            page=self.view_model.page_view(),
            last_refresh_at=self.last_refresh_at,
            last_error=self.last_error,
            source_count=len(self.view_model.records),
        )
