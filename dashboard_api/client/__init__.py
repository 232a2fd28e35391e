"""Client-side state store, snapshot loader and view helpers."""
from .loader import DashboardClient, DashboardConnectionError
from .store import MAX_STREAMED_ITEMS, CommunicationFilter, DashboardStore

__all__ = [
    "MAX_STREAMED_ITEMS",
    "CommunicationFilter",
    "DashboardClient",
    "DashboardConnectionError",
    "DashboardStore",
]
