"""Trading-hours normalization tests: window shapes, DST, and fallback path."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any
from zoneinfo import ZoneInfo

import pytest

from market_status_board.exceptions import ConversionFailure
from market_status_board.hours.normalizer import (
    TimezoneNormalizer,
    WindowKind,
    classify_window,
    is_window_open,
    parse_clock_time,
)
from market_status_board.models import RawExchangeRecord


def _raw(**overrides: Any) -> RawExchangeRecord:
    payload = {
        "market_type": "Equity",
        "region": "United States",
        "primary_exchanges": "NASDAQ, NYSE, AMEX, BATS",
        "local_open": "09:30",
        "local_close": "16:00",
        "current_status": "closed",
        "notes": "",
    }
    payload.update(overrides)
    return RawExchangeRecord.model_validate(payload)


def _normalizer(viewer: str = "UTC", **kwargs: Any) -> TimezoneNormalizer:
    return TimezoneNormalizer(
        ZoneInfo(viewer),
        logger=logging.getLogger("test_normalizer"),
        **kwargs,
    )


def test_parse_clock_time_requires_zero_padded_24h() -> None:
    assert parse_clock_time("09:05").hour == 9
    assert parse_clock_time("23:59").minute == 59
    for bad in ("9:30", "24:00", "12:60", "not-a-time", "", "09:30:00"):
        with pytest.raises(ConversionFailure):
            parse_clock_time(bad)


def test_classify_window_tags_each_shape() -> None:
    assert classify_window("00:00", "23:59") is WindowKind.ALWAYS
    assert classify_window("09:30", "16:00") is WindowKind.NORMAL
    assert classify_window("22:00", "02:00") is WindowKind.WRAPS


def test_is_window_open_wrapping_branch() -> None:
    tz = ZoneInfo("Asia/Tokyo")
    open_at = datetime(2026, 3, 2, 22, 0, tzinfo=tz)
    close_at = datetime(2026, 3, 2, 2, 0, tzinfo=tz)
    late_evening = datetime(2026, 3, 2, 23, 30, tzinfo=tz)
    after_midnight = datetime(2026, 3, 2, 1, 0, tzinfo=tz)
    mid_morning = datetime(2026, 3, 2, 10, 0, tzinfo=tz)
    assert is_window_open(WindowKind.WRAPS, open_at, close_at, late_evening)
    assert is_window_open(WindowKind.WRAPS, open_at, close_at, after_midnight)
    assert not is_window_open(WindowKind.WRAPS, open_at, close_at, mid_morning)


def test_midnight_crossing_market_open_late_evening_closed_mid_morning() -> None:
    normalizer = _normalizer()
    raw = _raw(region="Japan", local_open="22:00", local_close="02:00")

    # 14:30 UTC == 23:30 in Tokyo
    late = normalizer.normalize(raw, now=datetime(2026, 3, 2, 14, 30, tzinfo=UTC))
    # 01:00 UTC == 10:00 in Tokyo
    morning = normalizer.normalize(raw, now=datetime(2026, 3, 2, 1, 0, tzinfo=UTC))

    assert late.is_open_now is True
    assert morning.is_open_now is False
    assert late.viewer_trading_hours == "13:00-17:00"


def test_normal_window_converts_to_viewer_timezone() -> None:
    normalizer = _normalizer("Europe/London")
    raw = _raw()

    # 15:00 UTC == 11:00 in New York (EDT)
    record = normalizer.normalize(raw, now=datetime(2026, 7, 15, 15, 0, tzinfo=UTC))

    assert record.viewer_trading_hours == "14:30-21:00"
    assert record.is_open_now is True


def test_dst_gap_between_exchange_and_viewer_is_respected() -> None:
    # US daylight time has started (2026-03-08) but UK has not (2026-03-29).
    normalizer = _normalizer("Europe/London")
    record = normalizer.normalize(_raw(), now=datetime(2026, 3, 16, 12, 0, tzinfo=UTC))

    assert record.viewer_trading_hours == "13:30-20:00"
    assert record.is_open_now is False


def test_open_flag_uses_exchange_calendar_day_not_viewer_day() -> None:
    normalizer = _normalizer("America/Los_Angeles")
    raw = _raw(region="Japan", local_open="09:00", local_close="15:00")

    # 01:00 UTC on March 2 is 10:00 March 2 in Tokyo but still March 1 in Los Angeles.
    record = normalizer.normalize(raw, now=datetime(2026, 3, 2, 1, 0, tzinfo=UTC))

    assert record.is_open_now is True
    assert record.viewer_trading_hours == "16:00-22:00"


def test_close_boundary_is_inclusive() -> None:
    normalizer = _normalizer()
    raw = _raw(region="Global", local_open="08:00", local_close="16:00")
    assert normalizer.normalize(raw, now=datetime(2026, 3, 2, 16, 0, tzinfo=UTC)).is_open_now
    assert normalizer.normalize(raw, now=datetime(2026, 3, 2, 8, 0, tzinfo=UTC)).is_open_now
    assert not normalizer.normalize(
        raw, now=datetime(2026, 3, 2, 16, 0, 1, tzinfo=UTC)
    ).is_open_now


def test_always_open_sentinel_ignores_clock() -> None:
    normalizer = _normalizer("Asia/Kolkata")
    raw = _raw(market_type="Forex", region="Global", local_open="00:00", local_close="23:59")

    for hour in (0, 7, 12, 23):
        now = datetime(2026, 3, 2, hour, tzinfo=UTC)
        result = normalizer.normalize_with_result(raw, now=now)
        assert result.record.viewer_trading_hours == "24h"
        assert result.record.is_open_now is True
        assert result.converted is True
        assert result.window is WindowKind.ALWAYS


def test_unmapped_region_defaults_to_utc() -> None:
    normalizer = _normalizer("Asia/Tokyo")
    raw = _raw(region="Atlantis", local_open="09:00", local_close="17:00")

    record = normalizer.normalize(raw, now=datetime(2026, 3, 2, 12, 0, tzinfo=UTC))

    assert record.viewer_trading_hours == "18:00-02:00"
    assert record.is_open_now is True


def test_unparsable_time_falls_back_to_status_hint(caplog: pytest.LogCaptureFixture) -> None:
    normalizer = _normalizer()
    raw = _raw(local_open="not-a-time", current_status="Open")

    with caplog.at_level(logging.WARNING, logger="test_normalizer"):
        result = normalizer.normalize_with_result(
            raw, now=datetime(2026, 3, 2, 3, 0, tzinfo=UTC)
        )

    assert result.converted is False
    assert result.error is not None and "not-a-time" in result.error
    assert result.window is None
    assert result.record.viewer_trading_hours == "not-a-time-16:00"
    assert result.record.is_open_now is True
    assert "conversion failed" in caplog.text


def test_fallback_with_closed_hint_reports_closed() -> None:
    normalizer = _normalizer()
    record = normalizer.normalize(
        _raw(local_close="4pm", current_status="closed"),
        now=datetime(2026, 7, 15, 15, 0, tzinfo=UTC),
    )
    assert record.viewer_trading_hours == "09:30-4pm"
    assert record.is_open_now is False


def test_unknown_timezone_in_table_falls_back() -> None:
    normalizer = _normalizer(region_timezones={"Mars": "Mars/Olympus_Mons"})
    result = normalizer.normalize_with_result(
        _raw(region="Mars", current_status="OPEN"),
        now=datetime(2026, 3, 2, 12, 0, tzinfo=UTC),
    )
    assert result.converted is False
    assert result.record.viewer_trading_hours == "09:30-16:00"
    assert result.record.is_open_now is True


def test_normalization_is_idempotent_and_copies_raw_fields() -> None:
    normalizer = _normalizer("Europe/Berlin")
    raw = _raw(notes="Half day on Black Friday")
    now = datetime(2026, 7, 15, 15, 0, tzinfo=UTC)

    first = normalizer.normalize(raw, now=now)
    second = normalizer.normalize(raw, now=now)

    assert first == second
    copied = first.model_dump(exclude={"viewer_trading_hours", "is_open_now"})
    assert copied == raw.model_dump()


def test_naive_instant_is_treated_as_utc() -> None:
    normalizer = _normalizer()
    raw = _raw()
    aware = normalizer.normalize(raw, now=datetime(2026, 7, 15, 15, 0, tzinfo=UTC))
    naive = normalizer.normalize(raw, now=datetime(2026, 7, 15, 15, 0))
    assert aware == naive


def test_normalize_batch_keeps_order_and_handles_empty() -> None:
    normalizer = _normalizer()
    now = datetime(2026, 7, 15, 15, 0, tzinfo=UTC)
    batch = [_raw(region="Japan"), _raw(region="United States"), _raw(local_open="bad")]

    records = normalizer.normalize_batch(batch, now=now)

    assert [record.region for record in records] == ["Japan", "United States", "United States"]
    assert records[2].viewer_trading_hours == "bad-16:00"
    assert normalizer.normalize_batch([], now=now) == []


def test_zone_naming_a_tzdata_directory_falls_back() -> None:
    normalizer = _normalizer(region_timezones={"Americas": "America"})
    result = normalizer.normalize_with_result(
        _raw(region="Americas", current_status="open"),
        now=datetime(2026, 3, 2, 12, 0, tzinfo=UTC),
    )
    assert result.converted is False
    assert result.record.viewer_trading_hours == "09:30-16:00"
    assert result.record.is_open_now is True
