"""Roman broadcast API: wire messages, HTTP client and broadcast id storage."""

from src.roman.client import BroadcastClient, DownstreamCallError
from src.roman.store import InMemoryBroadcastStore, LastBroadcastStore

__all__ = [
    "BroadcastClient",
    "DownstreamCallError",
    "InMemoryBroadcastStore",
    "LastBroadcastStore",
]
