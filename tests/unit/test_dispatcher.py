"""Tests for event-type dispatch."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.bot.dispatcher import CommandDispatcher
from src.bot.handlers import EventHandlers
from src.models import AssetPayload, CallEventPayload, EmptyPayload, TextPayload
from tests.conftest import ADMIN_ID, APP_KEY, USER_ID, make_event, make_tenant


def _make_dispatcher() -> tuple[CommandDispatcher, MagicMock]:
    handlers = MagicMock(spec=EventHandlers)
    for name in ("handle_init", "handle_new_text", "handle_call", "handle_asset"):
        setattr(handlers, name, AsyncMock(return_value=name))
    return CommandDispatcher(handlers), handlers


class TestCommandDispatcher:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("event_type", "handler_name"),
        [
            ("conversation.init", "handle_init"),
            ("conversation.new_text", "handle_new_text"),
            ("conversation.call", "handle_call"),
            ("conversation.audio.new", "handle_asset"),
            ("conversation.new_image", "handle_asset"),
            ("conversation.file.new", "handle_asset"),
            ("conversation.asset.data", "handle_asset"),
        ],
    )
    async def test_routes_by_type(self, event_type: str, handler_name: str) -> None:
        dispatcher, handlers = _make_dispatcher()
        result = await dispatcher.dispatch(make_event(type=event_type), make_tenant())
        assert result == handler_name
        getattr(handlers, handler_name).assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("event_type", "handler_name", "payload_model"),
        [
            ("conversation.init", "handle_init", EmptyPayload),
            ("conversation.new_text", "handle_new_text", TextPayload),
            ("conversation.call", "handle_call", CallEventPayload),
            ("conversation.file.new", "handle_asset", AssetPayload),
        ],
    )
    async def test_handler_receives_payload_of_its_kind(
        self, event_type: str, handler_name: str, payload_model: type,
    ) -> None:
        dispatcher, handlers = _make_dispatcher()
        await dispatcher.dispatch(make_event(type=event_type), make_tenant())
        payload = getattr(handlers, handler_name).await_args.args[1]
        assert type(payload) is payload_model

    @pytest.mark.asyncio
    async def test_text_payload_carries_text(self) -> None:
        dispatcher, handlers = _make_dispatcher()
        await dispatcher.dispatch(make_event(text="/stats"), make_tenant())
        assert handlers.handle_new_text.await_args.args[1] == TextPayload(text="/stats")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("event_type", "fields", "handler_name"),
        [
            ("conversation.call", {"call": "x"}, "handle_call"),
            ("conversation.new_text", {"text": {"data": "hi"}}, "handle_new_text"),
            ("conversation.audio.new", {"attachment": {"id": "a"}}, "handle_asset"),
            ("conversation.audio.new", {"attachment": "QUJD", "levels": [0.5]}, "handle_asset"),
        ],
    )
    async def test_malformed_payload_is_dropped(
        self, event_type: str, fields: dict, handler_name: str,
    ) -> None:
        dispatcher, handlers = _make_dispatcher()
        event = make_event(type=event_type, **fields)
        assert await dispatcher.dispatch(event, make_tenant()) is None
        getattr(handlers, handler_name).assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "fields",
        [{"call": "x"}, {"text": {"data": "hi"}}, {"attachment": {"id": "a"}}, {"levels": [0.5]}],
    )
    async def test_unknown_type_ignores_payload_shape(self, fields: dict) -> None:
        dispatcher, handlers = _make_dispatcher()
        event = make_event(type="conversation.reaction", **fields)
        assert await dispatcher.dispatch(event, make_tenant()) is None
        for name in ("handle_init", "handle_new_text", "handle_call", "handle_asset"):
            getattr(handlers, name).assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "event_type",
        ["conversation.bot_request", "conversation.reaction", "", "CONVERSATION.INIT"],
    )
    async def test_unknown_type_is_noop(self, event_type: str) -> None:
        dispatcher, handlers = _make_dispatcher()
        assert await dispatcher.dispatch(make_event(type=event_type), make_tenant()) is None
        for name in ("handle_init", "handle_new_text", "handle_call", "handle_asset"):
            getattr(handlers, name).assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("user_id", "is_admin"), [(ADMIN_ID, True), (USER_ID, False)])
    async def test_context_carries_admin_flag_and_key(self, user_id: str, is_admin: bool) -> None:
        dispatcher, handlers = _make_dispatcher()
        await dispatcher.dispatch(make_event(userId=user_id), make_tenant())
        ctx = handlers.handle_new_text.await_args.args[0]
        assert ctx.is_user_admin is is_admin
        assert ctx.api_key == APP_KEY
        assert ctx.event.user_id == user_id
