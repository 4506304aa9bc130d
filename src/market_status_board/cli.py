"""Market status CLI: normalize a saved MARKET_STATUS document and print one page."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .board import BoardSnapshot, MarketBoard
from .config import load_settings
from .exceptions import ConfigError, ConversionFailure
from .hours import TimezoneNormalizer, build_region_table, detect_viewer_timezone
from .log_setup import setup_logger
from .sources import JsonFileMarketStatusSource
from .table import MarketListViewModel, SortDirection, SortKey, navigation_hint

_SORT_CHOICES = {key.name.lower().replace("_", "-"): key for key in SortKey}
_COLUMNS = (
    SortKey.REGION,
    SortKey.MARKET_TYPE,
    SortKey.EXCHANGES,
    SortKey.TRADING_HOURS,
    SortKey.STATUS,
)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Show global exchange open/closed status in your local time."
    )
    parser.add_argument(
        "--file",
        type=Path,
        default=None,
        help="Saved MARKET_STATUS JSON document (defaults to MARKET_STATUS_FILE).",
    )
    parser.add_argument("--search", default="", help="Filter by region, market type or exchange.")
    parser.add_argument(
        "--sort",
        action="append",
        choices=sorted(_SORT_CHOICES),
        default=[],
        help="Sort column; repeat the same column to flip direction.",
    )
    parser.add_argument("--page", type=int, default=1, help="1-based page number.")
    parser.add_argument(
        "--viewer-tz",
        default=None,
        help="IANA timezone to display trading hours in (defaults to VIEWER_TIMEZONE/host).",
    )
    return parser.parse_args(argv)


def _sort_indicator(snapshot: BoardSnapshot, key: SortKey) -> str:
    if snapshot.page.sort_key is not key:
        return ""
    return " ▲" if snapshot.page.sort_direction is SortDirection.ASCENDING else " ▼"


def _print_page(console: Console, snapshot: BoardSnapshot) -> None:
    page = snapshot.page
    table = Table(title="Market Status")
    for key in _COLUMNS:
        table.add_column(key.label + _sort_indicator(snapshot, key), overflow="fold")
    table.add_column("Link", overflow="fold")

    if page.is_empty:
        console.print(table)
        console.print("No markets found")
        return

    for record in page.records:
        status = "[green]OPEN[/green]" if record.is_open_now else "[red]CLOSED[/red]"
        hint = navigation_hint(record)
        link = hint.path + (f"?{hint.query}" if hint.query else "")
        table.add_row(
            escape(record.region),
            escape(record.market_type),
            escape(record.primary_exchanges),
            escape(record.viewer_trading_hours),
            status,
            escape(link),
        )
    console.print(table)
    console.print(f"Showing {page.range_label} | page {page.page_number}/{page.total_pages}")
    if page.total_pages > 1:
        markers = [
            f"[{marker}]" if marker == page.page_number else str(marker)
            for marker in page.page_numbers
        ]
        console.print(" ".join(markers), markup=False)


def main(argv: Sequence[str] | None = None) -> int:
    """Run one refresh and render the requested page."""
    args = parse_args(argv)
    logger = setup_logger()
    console = Console()

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2
    logger.setLevel(settings.log_level)
    logger.info("Settings loaded: %s", settings.safe_summary())

    try:
        viewer_tz = detect_viewer_timezone(args.viewer_tz or settings.viewer_timezone)
    except ConversionFailure as exc:
        logger.error("Invalid viewer timezone: %s", exc)
        return 2

    view_model = MarketListViewModel(page_size=settings.page_size)
    normalizer = TimezoneNormalizer(
        viewer_tz,
        region_timezones=build_region_table(settings.region_timezone_overrides),
    )
    exit_code = 0
    try:
        with JsonFileMarketStatusSource(args.file or settings.market_status_file) as source:
            board = MarketBoard(
                source,
                normalizer,
                view_model,
                refresh_interval_seconds=settings.refresh_interval_seconds,
            )
            snapshot = board.refresh()
            if snapshot.last_error is not None:
                console.print(f"[red]Error:[/red] {escape(snapshot.last_error)}")
                return 4

            view_model.set_search_query(args.search)
            for name in args.sort:
                view_model.set_sort(_SORT_CHOICES[name])
            view_model.set_page(args.page)
            _print_page(console, board.snapshot())
    except Exception as exc:  # pragma: no cover - unexpected failure
        exit_code = 99
        logger.exception("Unexpected failure: %s", exc)
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
