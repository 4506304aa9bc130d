"""Parsing of upstream MARKET_STATUS documents into raw exchange records."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from .exceptions import MarketDataError
from .models import RawExchangeRecord
from .redaction import sanitize_text

_NOTICE_KEYS = ("Error Message", "Information", "Note")


def parse_market_status_payload(
    payload: Any,
    *,
    logger: logging.Logger | None = None,
) -> list[RawExchangeRecord]:
    """Validate a ``{"endpoint": ..., "markets": [...]}`` document.

    Entries that are not objects or fail validation are skipped with a
    warning; an empty ``markets`` list is a valid batch.
    """
    log = logger or logging.getLogger("market_status_board.market_status")
    if not isinstance(payload, dict):
        raise MarketDataError(
            f"Unexpected market status payload type {type(payload).__name__}; expected object."
        )

    markets = payload.get("markets")
    if markets is None:
        for key in _NOTICE_KEYS:
            notice = payload.get(key)
            if isinstance(notice, str) and notice.strip():
                raise MarketDataError(f"Market status unavailable: {sanitize_text(notice)}")
        raise MarketDataError("Market status payload missing 'markets' list.")
    if not isinstance(markets, list):
        raise MarketDataError(
            f"Market status 'markets' must be a list, got {type(markets).__name__}."
        )

    records: list[RawExchangeRecord] = []
    for index, entry in enumerate(markets):
        if not isinstance(entry, dict):
            log.warning(
                "Skipping market entry %d: expected object, got %s",
                index,
                type(entry).__name__,
            )
            continue
        try:
            records.append(RawExchangeRecord.model_validate(entry))
        except ValidationError as exc:
            log.warning(
                "Skipping market entry %d (region=%s): %d validation error(s)",
                index,
                entry.get("region", "?"),
                exc.error_count(),
            )
    return records
