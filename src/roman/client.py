"""HTTP client for the Roman broadcast API.

Calls used:
- POST {base}broadcast sends one wire message to every subscriber and
  returns the broadcast id. The ring reuses this endpoint and ignores
  the reply body.
- GET {base}broadcast[?id=...] returns the delivery report.

Every non-2xx response raises DownstreamCallError after the request is
logged. Calls that read the body (broadcast send, stats) also reject empty or
non-JSON bodies; the ring call only needs a 2xx status.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from src.models import BroadcastStatsReport, WireMessage, wire_payload

logger = logging.getLogger(__name__)

DEFAULT_ROMAN_URL = "https://roman.integrations.zinfra.io/"


class DownstreamCallError(Exception):
    """Raised when a call to the broadcast API does not succeed."""

    def __init__(
        self,
        method: str,
        url: str,
        status_code: int | None = None,
        body: object = None,
    ) -> None:
        self.method = method
        self.url = url
        self.status_code = status_code
        self.body = body
        super().__init__(f"Request to {url} was not successful.")


def normalize_base_url(base_url: str) -> str:
    return base_url if base_url.endswith("/") else f"{base_url}/"


class BroadcastClient:
    """Sends broadcasts and fetches broadcast stats with a tenant app key."""

    def __init__(
        self,
        base_url: str = DEFAULT_ROMAN_URL,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.broadcast_url = f"{normalize_base_url(base_url)}broadcast"
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def send_broadcast(self, message: WireMessage, app_key: str) -> str:
        """Broadcast a wire message and return the id assigned to it."""
        body = await self._request(
            "POST",
            self.broadcast_url,
            app_key,
            json=wire_payload(message),
        )
        broadcast_id = body.get("broadcastId") if isinstance(body, dict) else None
        if not broadcast_id:
            raise DownstreamCallError("POST", self.broadcast_url, 200, body)
        return str(broadcast_id)

    async def send_message(self, message: WireMessage, app_key: str) -> None:
        """Post a wire message whose reply carries nothing we need, such as a ring."""
        await self._request(
            "POST",
            self.broadcast_url,
            app_key,
            expect_body=False,
            json=wire_payload(message),
        )

    async def get_stats(
        self, app_key: str, broadcast_id: str | None = None,
    ) -> BroadcastStatsReport:
        """Fetch the report of one broadcast, or the tenant default when no id is given."""
        params = {"id": broadcast_id} if broadcast_id else None
        body = await self._request("GET", self.broadcast_url, app_key, params=params)
        try:
            return BroadcastStatsReport.model_validate(body)
        except ValidationError as exc:
            logger.warning(
                "Unexpected stats payload.",
                extra={"httpUrl": self.broadcast_url, "httpBody": body},
            )
            raise DownstreamCallError("GET", self.broadcast_url, 200, body) from exc

    async def _request(
        self,
        method: str,
        url: str,
        app_key: str,
        expect_body: bool = True,
        **kwargs: Any,
    ) -> Any:
        headers = {"app-key": app_key}
        try:
            resp = await self._client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning(
                "Request could not be sent!",
                extra={"httpMethod": method, "httpUrl": url, "error": str(exc)},
            )
            raise DownstreamCallError(method, url) from exc
        if not expect_body and resp.is_success:
            return None
        return self._receive_json_or_raise(method, resp)

    @staticmethod
    def _receive_json_or_raise(method: str, resp: httpx.Response) -> Any:
        if resp.is_success and resp.content:
            try:
                return resp.json()
            except json.JSONDecodeError:
                pass

        body: object = resp.text
        try:
            body = json.loads(resp.text)
        except json.JSONDecodeError:
            pass

        url = str(resp.request.url)
        logger.warning(
            "Request was not successful!",
            extra={
                "httpMethod": method,
                "httpUrl": url,
                "httpStatus": resp.status_code,
                "httpBody": body,
            },
        )
        raise DownstreamCallError(method, url, resp.status_code, body)
