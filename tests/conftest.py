"""Shared test fixtures for the roman broadcast bridge."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from src.models import InboundEvent, TenantAuth
from src.roman.client import BroadcastClient

ADMIN_ID = "admin-user"
USER_ID = "regular-user"
TOKEN = "tenant-token-123"
APP_KEY = "app-key-abc"
ROMAN_URL = "http://roman.test"


@pytest.fixture
def auth_config(tmp_path: Path) -> Path:
    """Write a tenant configuration with one complete and one incomplete entry."""
    path = tmp_path / "auth.json"
    path.write_text(json.dumps({
        TOKEN: {"admins": [ADMIN_ID], "appKey": APP_KEY},
        "incomplete-token": {"admins": [ADMIN_ID]},
    }))
    return path


@pytest.fixture
def tenant() -> TenantAuth:
    return make_tenant()


# --- Factory functions for test data ---


def make_tenant(**kwargs: Any) -> TenantAuth:
    """Factory for TenantAuth with sensible defaults."""
    defaults: dict[str, Any] = {
        "admins": [ADMIN_ID],
        "appKey": APP_KEY,
    }
    defaults.update(kwargs)
    return TenantAuth.model_validate(defaults)


def make_event(**kwargs: Any) -> InboundEvent:
    """Factory for InboundEvent with sensible defaults (wire field names)."""
    defaults: dict[str, Any] = {
        "type": "conversation.new_text",
        "userId": ADMIN_ID,
        "messageId": "msg-1",
        "text": "",
    }
    defaults.update(kwargs)
    return InboundEvent.model_validate(defaults)


class RomanStub:
    """Records requests to the broadcast API and answers from a handler."""

    def __init__(
        self,
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
    ) -> None:
        self.requests: list[httpx.Request] = []
        self._handler = handler or self.default_handler
        self._next_id = 0

    def default_handler(self, request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            self._next_id += 1
            return httpx.Response(200, json={"broadcastId": f"b-{self._next_id}"})
        return httpx.Response(200, json={"report": [{"type": "Delivered", "count": 3}]})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def posted(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests if r.method == "POST"]

    def client(self) -> BroadcastClient:
        return BroadcastClient(
            ROMAN_URL,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(self)),
        )


@pytest.fixture
def roman_stub() -> RomanStub:
    return RomanStub()
