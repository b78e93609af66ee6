"""Detached broadcast-and-ring sequence.

Stages, run outside the webhook request:
1. Send the prepared wire message to the broadcast endpoint
2. Record the returned broadcast id for the sender
3. Send a call-start message so subscribers' phones ring

Any failure stops the sequence and is only logged; the webhook caller
has already been answered.
"""

from __future__ import annotations

import asyncio
import logging

from src.models import WireMessage
from src.roman.client import BroadcastClient
from src.roman.store import LastBroadcastStore
from src.roman.wire import wire_call_start

logger = logging.getLogger(__name__)


class BroadcastSequencer:
    """Spawns and tracks background broadcast tasks."""

    def __init__(self, client: BroadcastClient, store: LastBroadcastStore) -> None:
        self._client = client
        self._store = store
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def schedule(
        self,
        message: WireMessage,
        app_key: str,
        user_id: str,
        message_id: str,
    ) -> asyncio.Task[None]:
        """Start the sequence without waiting for it."""
        task = asyncio.create_task(
            self.run(message, app_key, user_id, message_id),
            name=f"broadcast-{message_id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def run(
        self,
        message: WireMessage,
        app_key: str,
        user_id: str,
        message_id: str,
    ) -> None:
        correlation = {"userId": user_id, "messageId": message_id}
        try:
            broadcast_id = await self._client.send_broadcast(message, app_key)
            logger.debug(
                "Broadcast sent, received broadcast id %s. Storing for user %s",
                broadcast_id,
                user_id,
                extra={**correlation, "broadcastId": broadcast_id},
            )
            self._store.set(user_id, broadcast_id)

            await self._client.send_message(wire_call_start(), app_key)
            logger.debug(
                "Call started for broadcast %s",
                broadcast_id,
                extra={**correlation, "broadcastId": broadcast_id},
            )
        except Exception:
            logger.exception(
                "An exception occurred during %s broadcast for messageId %s.",
                message.type,
                message_id,
                extra=correlation,
            )

    async def join(self) -> None:
        """Wait for every in-flight sequence to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
