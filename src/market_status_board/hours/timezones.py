"""Region to exchange timezone lookup and viewer timezone detection."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import UTC, datetime, tzinfo
from types import MappingProxyType
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..exceptions import ConversionFailure

DEFAULT_TIMEZONE = "UTC"

# Region labels as reported by the upstream MARKET_STATUS feed.
REGION_TIMEZONES: Mapping[str, str] = MappingProxyType(
    {
        "United States": "America/New_York",
        "Canada": "America/Toronto",
        "United Kingdom": "Europe/London",
        "Germany": "Europe/Berlin",
        "France": "Europe/Paris",
        "Spain": "Europe/Madrid",
        "Portugal": "Europe/Lisbon",
        "Japan": "Asia/Tokyo",
        "India": "Asia/Kolkata",
        "Mainland China": "Asia/Shanghai",
        "Hong Kong": "Asia/Hong_Kong",
        "Brazil": "America/Sao_Paulo",
        "Mexico": "America/Mexico_City",
        "South Africa": "Africa/Johannesburg",
        "Global": "UTC",
    }
)


def primary_region(region: str) -> str:
    """Return the region label before any '-' separator, trimmed."""
    return region.split("-", 1)[0].strip()


def timezone_name_for_region(
    region: str,
    table: Mapping[str, str] = REGION_TIMEZONES,
) -> str:
    """Look up the IANA zone name for a region label, falling back to UTC."""
    label = region.strip()
    if label in table:
        return table[label]
    primary = primary_region(label)
    if primary in table:
        return table[primary]
    return DEFAULT_TIMEZONE


def load_zone(name: str) -> ZoneInfo:
    """Load an IANA zone, raising ConversionFailure for unknown identifiers."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise ConversionFailure(f"Unknown timezone {name!r}: {exc}") from exc


def build_region_table(overrides: Mapping[str, str] | None = None) -> Mapping[str, str]:
    """Merge configured overrides over the built-in region table."""
    if not overrides:
        return REGION_TIMEZONES
    merged = dict(REGION_TIMEZONES)
    merged.update({region.strip(): zone for region, zone in overrides.items()})
    return MappingProxyType(merged)


def detect_viewer_timezone(name: str | None = None) -> tzinfo:
    """Resolve the viewer's timezone.

    An explicit IANA name wins, then a ``TZ`` environment variable naming a
    known zone, then the host's configured local offset.
    """
    if name:
        return load_zone(name)
    env_name = os.environ.get("TZ", "").strip().lstrip(":")
    if env_name:
        try:
            return ZoneInfo(env_name)
        except (ZoneInfoNotFoundError, ValueError, OSError):
            pass
    return datetime.now(UTC).astimezone().tzinfo or UTC
