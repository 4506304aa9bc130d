"""Detail-view navigation hints derived from exchange records."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from ..hours.timezones import primary_region
from ..models import RawExchangeRecord

_WHITESPACE_RE = re.compile(r"\s+")

# Representative listed symbols charted on each region's detail view.
MARKET_SYMBOLS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "United States": ("IBM",),
        "United Kingdom": ("TSCO.LON",),
        "Canada": ("SHOP.TRT", "GPV.TRV"),
        "Germany": ("MBG.DEX",),
        "India": ("RELIANCE.BSE",),
        "Mainland China": ("600104.SHH", "000002.SHZ"),
    }
)


@dataclass(frozen=True, slots=True)
class NavigationHint:
    region_slug: str
    exchange_slug: str
    symbols: tuple[str, ...] = ()

    @property
    def path(self) -> str:
        return f"/exchange/{self.region_slug}/{self.exchange_slug}"

    @property
    def query(self) -> str:
        if not self.symbols:
            return ""
        return "symbols=" + ",".join(self.symbols)


def slugify(label: str) -> str:
    """Trim, lower-case and collapse whitespace runs into single hyphens."""
    return _WHITESPACE_RE.sub("-", label.strip().lower())


def first_exchange(primary_exchanges: str) -> str:
    return primary_exchanges.split(",", 1)[0].strip()


def symbols_for_region(region: str) -> tuple[str, ...]:
    label = region.strip()
    if label in MARKET_SYMBOLS:
        return MARKET_SYMBOLS[label]
    return MARKET_SYMBOLS.get(primary_region(label), ())


def navigation_hint(record: RawExchangeRecord) -> NavigationHint:
    """Build the detail-route target for one exchange row."""
    return NavigationHint(
        region_slug=slugify(primary_region(record.region)),
        exchange_slug=slugify(first_exchange(record.primary_exchanges)),
        symbols=symbols_for_region(record.region),
    )
