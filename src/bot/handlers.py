"""Handlers for the conversation events sent to the roman webhook."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from src.bot.broadcast import BroadcastSequencer
from src.models import (
    AssetPayload,
    CallEventPayload,
    EmptyPayload,
    InboundEvent,
    TextMessage,
    TextPayload,
    WireMessage,
)
from src.roman.client import BroadcastClient
from src.roman.store import LastBroadcastStore
from src.roman.wire import wire_attachment_from_asset, wire_call_drop, wire_text

logger = logging.getLogger(__name__)

HELP_MESSAGE = (
    "`/broadcast message` to broadcast the message to users and ring their phones\n"
    "`/stats` metrics of the last broadcast\n"
    "`/version` to print current application version."
)
SUBSCRIPTION_CONFIRMED = "Subscription confirmed."
BROADCAST_QUEUED = "Broadcast queued for execution. Use /stats to see the broadcast metrics."
ASSET_BROADCAST_QUEUED = "Audio broadcast queued for execution. Use /stats to see the metrics."

BROADCAST_COMMAND = "/broadcast"


def is_broadcast_command(text: str) -> bool:
    """`/broadcast` followed by exactly one separating whitespace character."""
    separator = text[len(BROADCAST_COMMAND):len(BROADCAST_COMMAND) + 1]
    return text.startswith(BROADCAST_COMMAND) and separator.isspace()


@dataclass(frozen=True)
class HandlerContext:
    """Per-request input of every handler."""

    event: InboundEvent
    is_user_admin: bool
    api_key: str

    @property
    def correlation(self) -> dict[str, str]:
        return {"userId": self.event.user_id, "messageId": self.event.message_id}


class EventHandlers:
    """One handler per recognised event kind."""

    def __init__(
        self,
        client: BroadcastClient,
        store: LastBroadcastStore,
        sequencer: BroadcastSequencer,
        version_reader: Callable[[], str],
    ) -> None:
        self._client = client
        self._store = store
        self._sequencer = sequencer
        self._read_version = version_reader

    async def handle_init(self, ctx: HandlerContext, payload: EmptyPayload) -> TextMessage:
        return wire_text(HELP_MESSAGE if ctx.is_user_admin else SUBSCRIPTION_CONFIRMED)

    async def handle_new_text(
        self, ctx: HandlerContext, payload: TextPayload,
    ) -> TextMessage | None:
        event = ctx.event
        text = payload.text or ""
        reply: str | None = None

        if ctx.is_user_admin:
            if text.startswith("/help"):
                reply = HELP_MESSAGE
            elif is_broadcast_command(text):
                logger.info("Executing text broadcast. Sending text.", extra=ctx.correlation)
                self._sequencer.schedule(
                    wire_text(text[len(BROADCAST_COMMAND) + 1:]),
                    ctx.api_key,
                    event.user_id,
                    event.message_id,
                )
                reply = BROADCAST_QUEUED
            elif text.startswith("/stats"):
                reply = await self.broadcast_stats(ctx.api_key, self._store.get(event.user_id))

        # available to every user, and replaces any admin reply above
        if text.startswith("/version"):
            reply = self._read_version()

        logger.debug(
            "Responding with: %s",
            f'"{reply}"' if reply else "no message.",
            extra=ctx.correlation,
        )
        return wire_text(reply) if reply else None

    async def handle_call(
        self, ctx: HandlerContext, payload: CallEventPayload,
    ) -> WireMessage | None:
        call = payload.call
        # drop the call once somebody accepted and joined it
        reply = wire_call_drop() if call is not None and call.resp is True else None
        logger.debug(
            "Handling a call: %s.",
            "dropping" if reply else "ignoring",
            extra=ctx.correlation,
        )
        return reply

    async def handle_asset(
        self, ctx: HandlerContext, payload: AssetPayload,
    ) -> TextMessage | None:
        if not ctx.is_user_admin:
            return None

        event = ctx.event
        if not payload.attachment:
            logger.warning("Asset event without attachment data, ignoring.", extra=ctx.correlation)
            return None

        logger.debug("Handling asset broadcast - creating message.", extra=ctx.correlation)
        message = wire_attachment_from_asset(payload)

        logger.debug("Broadcasting the asset.", extra=ctx.correlation)
        self._sequencer.schedule(message, ctx.api_key, event.user_id, event.message_id)
        return wire_text(ASSET_BROADCAST_QUEUED)

    async def broadcast_stats(self, api_key: str, broadcast_id: str | None = None) -> str:
        logger.debug(
            "Retrieving broadcast stats for broadcast %s.",
            broadcast_id,
            extra={"broadcastId": broadcast_id},
        )
        report = await self._client.get_stats(api_key, broadcast_id)
        return report.render()
