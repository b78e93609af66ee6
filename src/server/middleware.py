"""ASGI middleware for request timing and unhandled-exception logging."""

from __future__ import annotations

import logging
import time

from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

# Paths that are not request-logged (liveness checks)
QUIET_PATHS = {"/status"}


class RequestLoggingMiddleware:
    """Logs url, status and duration of every request, including failed ones."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        if request.url.path in QUIET_PATHS:
            await self.app(scope, receive, send)
            return

        status_code = 500

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        start = time.perf_counter()
        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            if not isinstance(exc, HTTPException):
                logger.exception("Unhandled exception in the application!")
            raise
        finally:
            duration_mls = int((time.perf_counter() - start) * 1000)
            logger.info(
                "Request to %s took %dmls with status code %d.",
                request.url,
                duration_mls,
                status_code,
                extra={
                    "log_type": "HTTP",
                    "url": str(request.url),
                    "method": request.method,
                    "durationMls": duration_mls,
                    "statusCode": status_code,
                    "ip": request.client.host if request.client else None,
                },
            )
