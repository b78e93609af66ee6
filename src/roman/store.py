"""Storage of the most recent broadcast id per sender."""

from __future__ import annotations

from typing import Protocol


class LastBroadcastStore(Protocol):
    def get(self, user_id: str) -> str | None: ...

    def set(self, user_id: str, broadcast_id: str) -> None: ...


class InMemoryBroadcastStore:
    """Process-lifetime mapping of user id to last broadcast id.

    Only the latest id is kept per user; concurrent broadcasts from the same
    user resolve last-write-wins in completion order.
    """

    def __init__(self) -> None:
        self._ids: dict[str, str] = {}

    def get(self, user_id: str) -> str | None:
        return self._ids.get(user_id)

    def set(self, user_id: str, broadcast_id: str) -> None:
        self._ids[user_id] = broadcast_id

    def __len__(self) -> int:
        return len(self._ids)
