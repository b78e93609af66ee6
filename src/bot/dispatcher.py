"""Routes an inbound conversation event to its handler."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel, ValidationError

from src.bot.handlers import EventHandlers, HandlerContext
from src.models import (
    AssetPayload,
    CallEventPayload,
    EmptyPayload,
    EventType,
    InboundEvent,
    TenantAuth,
    TextPayload,
    WireMessage,
)

logger = logging.getLogger(__name__)

Handler = Callable[[HandlerContext, Any], Awaitable[WireMessage | None]]


class CommandDispatcher:
    """Total mapping from event type to handler; unknown types produce no reply.

    Each route pairs a handler with the payload model of its event kind. The
    payload is validated only after the route is chosen, so fields of other
    kinds never reject an event.
    """

    def __init__(self, handlers: EventHandlers) -> None:
        self._routes: dict[EventType, tuple[type[BaseModel], Handler]] = {
            EventType.INIT: (EmptyPayload, handlers.handle_init),
            EventType.NEW_TEXT: (TextPayload, handlers.handle_new_text),
            EventType.CALL: (CallEventPayload, handlers.handle_call),
            EventType.AUDIO_NEW: (AssetPayload, handlers.handle_asset),
            EventType.NEW_IMAGE: (AssetPayload, handlers.handle_asset),
            EventType.FILE_NEW: (AssetPayload, handlers.handle_asset),
            EventType.ASSET_DATA: (AssetPayload, handlers.handle_asset),
        }

    async def dispatch(self, event: InboundEvent, tenant: TenantAuth) -> WireMessage | None:
        ctx = HandlerContext(
            event=event,
            is_user_admin=tenant.is_admin(event.user_id),
            api_key=tenant.api_key,
        )
        logger.info("Handling message type %s.", event.type, extra=ctx.correlation)

        route = self._routes.get(event.event_type)
        if route is None:
            return None

        payload_model, handler = route
        try:
            payload = event.payload(payload_model)
        except ValidationError as exc:
            logger.warning(
                "Malformed %s payload, ignoring: %s",
                event.type,
                exc.error_count(),
                extra=ctx.correlation,
            )
            return None
        return await handler(ctx, payload)
