"""Market-status data sources handing complete batches to the board."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from .exceptions import MarketDataError
from .market_status import parse_market_status_payload
from .models import RawExchangeRecord


class MarketStatusSource(ABC):
    """Base contract for anything that supplies a full market-status batch."""

    @abstractmethod
    def fetch_batch(self) -> list[RawExchangeRecord]:
        """Return a complete replacement batch of raw exchange records."""

    def close(self) -> None:
        """Release source resources."""


class JsonFileMarketStatusSource(MarketStatusSource):
    """Reads a saved MARKET_STATUS document from disk."""

    def __init__(self, path: Path, logger: logging.Logger | None = None) -> None:
        self.path = path
        self.logger = logger or logging.getLogger("market_status_board.sources")

    def __enter__(self) -> JsonFileMarketStatusSource:
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()

    def fetch_batch(self) -> list[RawExchangeRecord]:
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise MarketDataError(
                f"Failed reading market status file {self.path}: {exc}"
            ) from exc
        except ValueError as exc:
            raise MarketDataError(
                f"Market status file {self.path} is not valid JSON: {exc}"
            ) from exc
        records = parse_market_status_payload(payload, logger=self.logger)
        self.logger.info("Loaded %d market record(s) from %s", len(records), self.path)
        return records
