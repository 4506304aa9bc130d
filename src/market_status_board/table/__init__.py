"""Market table presentation state."""

from .navigation import NavigationHint, navigation_hint
from .view_model import MarketListViewModel, PageView, SortDirection, SortKey, ViewState

__all__ = [
    "MarketListViewModel",
    "NavigationHint",
    "PageView",
    "SortDirection",
    "SortKey",
    "ViewState",
    "navigation_hint",
]
