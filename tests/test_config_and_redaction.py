"""Settings validation and log redaction tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from market_status_board.config import load_settings
from market_status_board.exceptions import ConfigError
from market_status_board.redaction import REDACTED, sanitize_for_logging, sanitize_text

_ENV_KEYS = (
    "APP_ENV",
    "MARKET_STATUS_FILE",
    "VIEWER_TIMEZONE",
    "MARKET_PAGE_SIZE",
    "MARKET_REFRESH_INTERVAL_SECONDS",
    "REGION_TIMEZONE_OVERRIDES",
    "CHART_MAX_POINTS",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    settings = load_settings()
    assert settings.page_size == 10
    assert settings.refresh_interval_seconds == 300
    assert settings.chart_max_points == 50
    assert settings.viewer_timezone is None
    assert settings.region_timezone_overrides == {}
    assert settings.safe_summary()["viewer_timezone"] == "auto"


def test_environment_values_are_parsed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VIEWER_TIMEZONE", "Asia/Tokyo")
    monkeypatch.setenv("MARKET_PAGE_SIZE", "25")
    monkeypatch.setenv("REGION_TIMEZONE_OVERRIDES", '{"Canada": "America/Vancouver"}')
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.viewer_timezone == "Asia/Tokyo"
    assert settings.page_size == 25
    assert settings.region_timezone_overrides == {"Canada": "America/Vancouver"}
    assert settings.log_level == "DEBUG"


def test_dotenv_file_is_read(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("MARKET_PAGE_SIZE=5\n", encoding="utf-8")
    assert load_settings().page_size == 5


def test_empty_viewer_timezone_means_auto(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VIEWER_TIMEZONE", "  ")
    assert load_settings().viewer_timezone is None


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("MARKET_PAGE_SIZE", "0"),
        ("MARKET_REFRESH_INTERVAL_SECONDS", "-1"),
        ("CHART_MAX_POINTS", "0"),
        ("VIEWER_TIMEZONE", "Not/AZone"),
        ("REGION_TIMEZONE_OVERRIDES", '{"Canada": "Not/AZone"}'),
        ("LOG_LEVEL", "chatty"),
        ("APP_ENV", "qa"),
    ],
)
def test_invalid_values_raise_config_error(
    monkeypatch: pytest.MonkeyPatch, key: str, value: str
) -> None:
    monkeypatch.setenv(key, value)
    with pytest.raises(ConfigError):
        load_settings()


def test_sanitize_text_masks_api_keys() -> None:
    url = "https://www.alphavantage.co/query?function=MARKET_STATUS&apikey=ABC123"
    assert "ABC123" not in sanitize_text(url)
    assert sanitize_text(url).endswith(f"apikey={REDACTED}")
    assert "XYZ" not in sanitize_text("api_key: XYZ, other=1")


def test_sanitize_for_logging_masks_sensitive_keys() -> None:
    sanitized = sanitize_for_logging({"apikey": "ABC", "nested": [{"token": "T"}], "ok": 1})
    assert sanitized == {"apikey": REDACTED, "nested": [{"token": REDACTED}], "ok": 1}


def test_directory_timezone_is_reported_as_unknown(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VIEWER_TIMEZONE", "America")
    with pytest.raises(ConfigError, match="not a known timezone"):
        load_settings()
