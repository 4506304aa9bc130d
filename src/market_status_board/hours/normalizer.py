"""Exchange trading-hours normalization into the viewer's timezone."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, time, tzinfo
from enum import Enum

from ..exceptions import ConversionFailure
from ..models import NormalizedExchangeRecord, RawExchangeRecord
from .timezones import REGION_TIMEZONES, load_zone, timezone_name_for_region

ALWAYS_OPEN_HOURS = "24h"
ALWAYS_OPEN_START = "00:00"
ALWAYS_OPEN_END = "23:59"

_CLOCK_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


class WindowKind(str, Enum):
    """Shape of an exchange's daily trading window."""

    ALWAYS = "always"
    NORMAL = "normal"
    WRAPS = "wraps"


@dataclass(frozen=True, slots=True)
class NormalizationResult:
    """Normalized record plus whether the timezone conversion succeeded."""

    record: NormalizedExchangeRecord
    converted: bool
    window: WindowKind | None = None
    error: str | None = None


def parse_clock_time(value: str) -> time:
    """Parse a zero-padded 24-hour ``HH:MM`` string."""
    match = _CLOCK_RE.match(value)
    if match is None:
        raise ConversionFailure(f"Unparsable trading time {value!r}; expected HH:MM.")
    return time(int(match.group(1)), int(match.group(2)))


def classify_window(local_open: str, local_close: str) -> WindowKind:
    """Decide once whether a window is continuous, same-day, or wraps midnight."""
    if local_open == ALWAYS_OPEN_START and local_close == ALWAYS_OPEN_END:
        return WindowKind.ALWAYS
    if parse_clock_time(local_close) < parse_clock_time(local_open):
        return WindowKind.WRAPS
    return WindowKind.NORMAL


def is_window_open(
    kind: WindowKind,
    open_at: datetime,
    close_at: datetime,
    now: datetime,
) -> bool:
    """Evaluate the open flag; all three instants share the exchange's calendar day."""
    if kind is WindowKind.ALWAYS:
        return True
    if kind is WindowKind.WRAPS:
        return now >= open_at or now <= close_at
    return open_at <= now <= close_at


def fallback_record(raw: RawExchangeRecord) -> NormalizedExchangeRecord:
    """Unconverted hours with the upstream status hint as the open flag."""
    return NormalizedExchangeRecord.from_raw(
        raw,
        viewer_trading_hours=f"{raw.local_open}-{raw.local_close}",
        is_open_now=raw.status_hint.lower() == "open",
    )


class TimezoneNormalizer:
    """Convert exchange-local trading hours to viewer time and derive live status."""

    def __init__(
        self,
        viewer_timezone: tzinfo,
        *,
        region_timezones: Mapping[str, str] = REGION_TIMEZONES,
        logger: logging.Logger | None = None,
    ) -> None:
        self.viewer_timezone = viewer_timezone
        self.region_timezones = region_timezones
        self.logger = logger or logging.getLogger("market_status_board.normalizer")

    def normalize(
        self,
        raw: RawExchangeRecord,
        *,
        now: datetime | None = None,
    ) -> NormalizedExchangeRecord:
        return self.normalize_with_result(raw, now=now).record

    def normalize_batch(
        self,
        records: Iterable[RawExchangeRecord],
        *,
        now: datetime | None = None,
    ) -> list[NormalizedExchangeRecord]:
        """Normalize a whole batch against a single instant."""
        instant = aware_instant(now)
        return [self.normalize(raw, now=instant) for raw in records]

    def normalize_with_result(
        self,
        raw: RawExchangeRecord,
        *,
        now: datetime | None = None,
    ) -> NormalizationResult:
        """Normalize one record, degrading to the fallback shape on any conversion error."""
        instant = aware_instant(now)
        try:
            kind = classify_window(raw.local_open, raw.local_close)
            if kind is WindowKind.ALWAYS:
                record = NormalizedExchangeRecord.from_raw(
                    raw,
                    viewer_trading_hours=ALWAYS_OPEN_HOURS,
                    is_open_now=True,
                )
            else:
                record = self._convert(raw, kind, instant)
        except (ConversionFailure, ArithmeticError, ValueError) as exc:
            self.logger.warning(
                "Trading hours conversion failed for region=%s open=%s close=%s: %s",
                raw.region,
                raw.local_open,
                raw.local_close,
                exc,
            )
            return NormalizationResult(
                record=fallback_record(raw),
                converted=False,
                error=str(exc),
            )
        return NormalizationResult(record=record, converted=True, window=kind)

    def _convert(
        self,
        raw: RawExchangeRecord,
        kind: WindowKind,
        instant: datetime,
    ) -> NormalizedExchangeRecord:
        exchange_tz = load_zone(timezone_name_for_region(raw.region, self.region_timezones))
        exchange_now = instant.astimezone(exchange_tz)
        today = exchange_now.date()
        open_at = datetime.combine(today, parse_clock_time(raw.local_open), tzinfo=exchange_tz)
        close_at = datetime.combine(today, parse_clock_time(raw.local_close), tzinfo=exchange_tz)

        is_open = is_window_open(kind, open_at, close_at, exchange_now)
        viewer_open = open_at.astimezone(self.viewer_timezone).strftime("%H:%M")
        viewer_close = close_at.astimezone(self.viewer_timezone).strftime("%H:%M")
        return NormalizedExchangeRecord.from_raw(
            raw,
            viewer_trading_hours=f"{viewer_open}-{viewer_close}",
            is_open_now=is_open,
        )


def aware_instant(now: datetime | None) -> datetime:
    """Current UTC time for None; naive datetimes are read as UTC."""
    if now is None:
        return datetime.now(UTC)
    if now.tzinfo is None:
        return now.replace(tzinfo=UTC)
    return now
