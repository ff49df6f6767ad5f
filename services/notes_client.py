"""
Async client for the expert-notes REST API.

Mirrors what the browser does: trims and upper-cases symbol/market before
sending, and turns any non-2xx into NotesBackendError carrying the server's
message (or the HTTP status when the body has none).
"""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

import httpx

from services.errors import NotesBackendError

logger = logging.getLogger(__name__)

DEFAULT_NOTES_API_BASE_URL = "http://localhost:8000/api"


def _error_message(response: httpx.Response) -> str:
    fallback = f"HTTP error! status: {response.status_code}"
    try:
        data = response.json()
    except ValueError:
        return fallback
    if isinstance(data, dict):
        message = data.get("message") or data.get("detail")
        if isinstance(message, str) and message:
            return message
    return fallback


def _handle_response(response: httpx.Response) -> Any:
    if not response.is_success:
        raise NotesBackendError(_error_message(response), status_code=response.status_code)
    if response.status_code == 204:
        return None
    try:
        return response.json()
    except ValueError as exc:
        raise NotesBackendError("Notes service returned a non-JSON response", status_code=response.status_code) from exc


class NotesClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout_s: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._transport = transport

    @staticmethod
    def from_env(*, transport: Optional[httpx.AsyncBaseTransport] = None) -> "NotesClient":
        return NotesClient(
            os.getenv("NOTES_API_BASE_URL") or DEFAULT_NOTES_API_BASE_URL,
            timeout_s=float(os.getenv("NOTES_API_TIMEOUT_S", "15")),
            transport=transport,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout_s,
            transport=self._transport,
        ) as client:
            try:
                response = await client.request(method, path, **kwargs)
            except httpx.HTTPError as exc:
                logger.warning("notes_client.transport_error method=%s path=%s err=%s", method, path, type(exc).__name__)
                raise NotesBackendError(f"Notes service unreachable: {exc}") from exc
        return _handle_response(response)

    async def list_notes(self, symbol: str, market: str = "") -> List[Dict[str, Any]]:
        params = {"symbol": symbol.strip().upper()}
        if market.strip():
            params["market"] = market.strip().upper()
        return await self._request("GET", "/notes", params=params)

    async def add_note(self, *, symbol: str, market: str, person: str, opinion: str) -> Dict[str, Any]:
        body = {"symbol": symbol, "market": market, "person": person, "opinion": opinion}
        return await self._request("POST", "/notes", json=body)

    async def delete_note(self, note_id: str) -> None:
        await self._request("DELETE", f"/notes/{note_id}")
