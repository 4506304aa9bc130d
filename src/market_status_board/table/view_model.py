"""Search, sort and pagination state over normalized exchange records."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum
from typing import Literal

from ..models import NormalizedExchangeRecord

DEFAULT_PAGE_SIZE = 10
ELLIPSIS = "..."

PageMarker = int | Literal["..."]


class SortKey(str, Enum):
    """Sortable table columns."""

    REGION = "region"
    MARKET_TYPE = "market_type"
    EXCHANGES = "primary_exchanges"
    TRADING_HOURS = "viewer_trading_hours"
    STATUS = "status"

    @property
    def label(self) -> str:
        return _SORT_LABELS[self]


_SORT_LABELS = {
    SortKey.REGION: "Region",
    SortKey.MARKET_TYPE: "Market Type",
    SortKey.EXCHANGES: "Exchanges",
    SortKey.TRADING_HOURS: "Trading Hours (Your Time)",
    SortKey.STATUS: "Status",
}


class SortDirection(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"

    def toggled(self) -> SortDirection:
        if self is SortDirection.ASCENDING:
            return SortDirection.DESCENDING
        return SortDirection.ASCENDING


@dataclass(frozen=True, slots=True)
class ViewState:
    """Immutable snapshot of the table's filter, sort and page selection."""

    search_query: str = ""
    sort_key: SortKey = SortKey.STATUS
    sort_direction: SortDirection = SortDirection.DESCENDING
    page_number: int = 1
    page_size: int = DEFAULT_PAGE_SIZE


@dataclass(frozen=True, slots=True)
class PageView:
    """Everything the presentation layer needs to draw one page."""

    records: tuple[NormalizedExchangeRecord, ...]
    page_number: int
    total_pages: int
    filtered_count: int
    range_label: str
    sort_key: SortKey
    sort_direction: SortDirection
    page_numbers: tuple[PageMarker, ...]

    @property
    def is_empty(self) -> bool:
        return self.filtered_count == 0


def matches_query(record: NormalizedExchangeRecord, query: str) -> bool:
    """Case-insensitive substring match on region, market type and exchanges."""
    if not query:
        return True
    needle = query.lower()
    return (
        needle in record.region.lower()
        or needle in record.market_type.lower()
        or needle in record.primary_exchanges.lower()
    )


def sort_records(
    records: Iterable[NormalizedExchangeRecord],
    key: SortKey,
    direction: SortDirection,
) -> list[NormalizedExchangeRecord]:
    """Stable sort; status sorts as an open/closed partition, not by label."""
    descending = direction is SortDirection.DESCENDING
    if key is SortKey.STATUS:
        # Descending puts open markets first.
        return sorted(records, key=lambda record: record.is_open_now != descending)
    return sorted(records, key=lambda record: getattr(record, key.value), reverse=descending)


def compact_page_numbers(current: int, total: int) -> tuple[PageMarker, ...]:
    """Pager entries: first, last, neighbours of current, '...' two steps away."""
    pages: list[PageMarker] = []
    for page in range(1, total + 1):
        if page in (1, total) or current - 1 <= page <= current + 1:
            pages.append(page)
        elif page in (current - 2, current + 2):
            pages.append(ELLIPSIS)
    return tuple(pages)


class MarketListViewModel:
    """Derive the displayed page of exchanges from the source list and ViewState.

    Mutators replace the ViewState wholesale and drop the memoized
    filter/sort result, so every read reflects the latest committed list.
    """

    def __init__(
        self,
        records: Iterable[NormalizedExchangeRecord] = (),
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be > 0")
        self._records: tuple[NormalizedExchangeRecord, ...] = tuple(records)
        self._state = ViewState(page_size=page_size)
        self._ordered: tuple[NormalizedExchangeRecord, ...] | None = None

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def records(self) -> tuple[NormalizedExchangeRecord, ...]:
        return self._records

    def load_batch(self, records: Iterable[NormalizedExchangeRecord]) -> None:
        """Replace the source list; selections survive and the page is re-clamped."""
        self._records = tuple(records)
        self._ordered = None
        self._commit(page_number=self._state.page_number)

    def set_search_query(self, text: str) -> None:
        self._ordered = None
        self._commit(search_query=text, page_number=1)

    def set_sort(self, key: SortKey | str) -> None:
        """Toggle direction on the active column, otherwise sort ascending by `key`."""
        key = SortKey(key)
        if key is self._state.sort_key:
            direction = self._state.sort_direction.toggled()
        else:
            direction = SortDirection.ASCENDING
        self._ordered = None
        self._commit(sort_key=key, sort_direction=direction, page_number=1)

    def set_page(self, page_number: int) -> None:
        self._commit(page_number=page_number)

    def next_page(self) -> None:
        self.set_page(self._state.page_number + 1)

    def previous_page(self) -> None:
        self.set_page(self._state.page_number - 1)

    def filtered_records(self) -> tuple[NormalizedExchangeRecord, ...]:
        """Filtered and sorted records across all pages."""
        if self._ordered is None:
            state = self._state
            matched = [r for r in self._records if matches_query(r, state.search_query)]
            self._ordered = tuple(sort_records(matched, state.sort_key, state.sort_direction))
        return self._ordered

    @property
    def filtered_count(self) -> int:
        return len(self.filtered_records())

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.filtered_count / self._state.page_size))

    @property
    def has_previous(self) -> bool:
        return self._state.page_number > 1

    @property
    def has_next(self) -> bool:
        return self._state.page_number < self.total_pages

    def visible_page(self) -> tuple[NormalizedExchangeRecord, ...]:
        size = self._state.page_size
        start = (self._state.page_number - 1) * size
        return self.filtered_records()[start : start + size]

    @property
    def current_range(self) -> tuple[int, int]:
        """1-based inclusive bounds of the visible slice, (0, 0) when empty."""
        count = self.filtered_count
        if count == 0:
            return (0, 0)
        start = (self._state.page_number - 1) * self._state.page_size + 1
        end = min(start + self._state.page_size - 1, count)
        return (start, end)

    @property
    def current_range_label(self) -> str:
        start, end = self.current_range
        return f"{start}-{end} of {self.filtered_count}"

    def page_numbers(self) -> tuple[PageMarker, ...]:
        return compact_page_numbers(self._state.page_number, self.total_pages)

    def page_view(self) -> PageView:
        return PageView(
            records=self.visible_page(),
            page_number=self._state.page_number,
            total_pages=self.total_pages,
            filtered_count=self.filtered_count,
            range_label=self.current_range_label,
            sort_key=self._state.sort_key,
            sort_direction=self._state.sort_direction,
            page_numbers=self.page_numbers(),
        )

    def _commit(self, *, page_number: int, **changes: object) -> None:
        self._state = replace(self._state, **changes)
        clamped = min(max(page_number, 1), self.total_pages)
        self._state = replace(self._state, page_number=clamped)
