"""Chart CLI: prepare a saved TIME_SERIES_* document and print its points."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.table import Table

from .charts import LINE_CONFIGS, ChartSeries, TimeSeriesType, prepare_chart_series
from .config import load_settings
from .exceptions import ConfigError, TimeSeriesError
from .log_setup import setup_logger


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(description="Print a prepared price series for one symbol.")
    parser.add_argument("file", type=Path, help="Saved TIME_SERIES_* JSON document.")
    parser.add_argument(
        "--type",
        choices=[series_type.value for series_type in TimeSeriesType],
        default=TimeSeriesType.DAILY.value,
        help="Series granularity contained in the document.",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Override number of most recent points kept (CHART_MAX_POINTS).",
    )
    parser.add_argument("--symbol", default="", help="Symbol shown when metadata lacks one.")
    return parser.parse_args(argv)


def _print_series(console: Console, series: ChartSeries) -> None:
    table = Table(title=f"{series.symbol} ({series.series_type.value})")
    table.add_column("Date")
    for line in LINE_CONFIGS:
        table.add_column(line.label, justify="right", style=line.color)
    table.add_column("Volume", justify="right")
    for point in series.points:
        table.add_row(
            point.date.isoformat(),
            *(f"{getattr(point, line.key):.2f}" for line in LINE_CONFIGS),
            str(point.volume),
        )
    console.print(table)
    console.print(f"Last Updated: {series.last_refreshed}")


def main(argv: Sequence[str] | None = None) -> int:
    """Load, prepare and render one price series."""
    args = parse_args(argv)
    logger = setup_logger()
    console = Console()

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2
    logger.setLevel(settings.log_level)

    max_points = args.limit if args.limit is not None else settings.chart_max_points
    if max_points <= 0:
        logger.error("--limit must be > 0.")
        return 2

    try:
        payload = json.loads(args.file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.error("Failed reading time series file %s: %s", args.file, exc)
        return 4

    try:
        series = prepare_chart_series(
            payload,
            TimeSeriesType(args.type),
            max_points=max_points,
            fallback_symbol=args.symbol,
            logger=logger,
        )
    except TimeSeriesError as exc:
        logger.error("Time series unavailable: %s", exc)
        console.print(f"Error: {exc}", markup=False)
        return 4

    _print_series(console, series)
    return 0


if __name__ == "__main__":
    sys.exit(main())
