"""FastAPI webhook application for the roman broadcast bridge."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from src.auth.resolver import AuthError, AuthResolver
from src.bot.broadcast import BroadcastSequencer
from src.bot.dispatcher import CommandDispatcher
from src.bot.handlers import EventHandlers
from src.models import InboundEvent, wire_payload
from src.roman.client import DEFAULT_ROMAN_URL, BroadcastClient
from src.roman.store import InMemoryBroadcastStore, LastBroadcastStore
from src.server.logs import configure_logging
from src.server.middleware import RequestLoggingMiddleware
from src.version import read_version

logger = logging.getLogger(__name__)


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    configure_logging(
        os.environ.get("LOG_LEVEL", "INFO"),
        os.environ.get("LOG_FORMAT", "json"),
    )
    auth_path = os.environ["AUTH_CONFIGURATION_PATH"]
    roman_url = os.environ.get("ROMAN_URL", DEFAULT_ROMAN_URL)
    release_file = os.environ.get("RELEASE_FILE_PATH")
    return create_app(
        AuthResolver(auth_path),
        BroadcastClient(roman_url),
        version_reader=lambda: read_version(release_file),
    )


def create_app(
    auth_resolver: AuthResolver,
    broadcast_client: BroadcastClient | None = None,
    store: LastBroadcastStore | None = None,
    version_reader: Callable[[], str] = read_version,
) -> FastAPI:
    """Create the webhook app with its broadcast collaborators."""
    client = broadcast_client or BroadcastClient()
    broadcast_store = store if store is not None else InMemoryBroadcastStore()
    sequencer = BroadcastSequencer(client, broadcast_store)
    dispatcher = CommandDispatcher(
        EventHandlers(client, broadcast_store, sequencer, version_reader),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Server up and running on localhost:%s",
            os.environ.get("PORT", "8080"),
            extra={"version": version_reader()},
        )
        yield
        await sequencer.join()
        await client.aclose()

    app = FastAPI(docs_url=None, redoc_url=None, lifespan=lifespan)
    app.state.store = broadcast_store
    app.state.sequencer = sequencer

    @app.get("/status")
    async def status() -> Response:
        return Response(status_code=200)

    @app.get("/version")
    async def version() -> dict[str, str]:
        return {"version": version_reader()}

    @app.post("/roman")
    async def roman(request: Request) -> Response:
        try:
            tenant = await auth_resolver.authenticate(request.headers.get("authorization"))
        except AuthError as e:
            return Response(status_code=e.status_code)

        try:
            event = InboundEvent.model_validate(json.loads(await request.body()))
        except (json.JSONDecodeError, ValidationError):
            return JSONResponse({"error": "Invalid event payload"}, status_code=422)

        reply = await dispatcher.dispatch(event, tenant)
        if reply is None:
            return Response(status_code=200)
        return JSONResponse(wire_payload(reply), status_code=200)

    app.add_middleware(RequestLoggingMiddleware)

    return app
