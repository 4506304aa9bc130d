"""Exchange trading-hours conversion and live open/closed status."""

from .normalizer import NormalizationResult, TimezoneNormalizer, WindowKind
from .timezones import REGION_TIMEZONES, build_region_table, detect_viewer_timezone

__all__ = [
    "REGION_TIMEZONES",
    "NormalizationResult",
    "TimezoneNormalizer",
    "WindowKind",
    "build_region_table",
    "detect_viewer_timezone",
]
