"""
HTTP transport for the Dhan REST API.

Sends one JSON request and returns the decoded JSON body, or raises
TransportError carrying the upstream status/message when Dhan provides one.
No retries happen here.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx

from .config import Settings
from .exceptions import TransportError

logger = logging.getLogger(__name__)


def extract_upstream_message(body: Any) -> Optional[str]:
    """Pick the most specific error text out of a Dhan error body."""
    if not isinstance(body, dict):
        return None
    remarks = body.get("remarks") if isinstance(body.get("remarks"), dict) else {}
    for candidate in (
        body.get("message"),
        body.get("errorMessage"),
        remarks.get("error_message"),
        remarks.get("errorMessage"),
        body.get("error"),
        body.get("detail"),
    ):
        if isinstance(candidate, str) and candidate.strip():
            return candidate
    return None


def _error_code(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    remarks = body.get("remarks") if isinstance(body.get("remarks"), dict) else {}
    code = body.get("errorCode") or remarks.get("error_code") or remarks.get("errorCode")
    return str(code) if code else None


class DhanTransport:
    """Stateless apart from read-only settings; safe to share between callers."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self._settings = settings
        # Injected transport (e.g. httpx.MockTransport) replaces the network.
        self._transport = transport

    @property
    def settings(self) -> Settings:
        return self._settings

    def headers(self, send_json: bool = True) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "access-token": self._settings.access_token,
        }
        if send_json:
            headers["Content-Type"] = "application/json"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        json_body: Optional[Dict[str, Any]] = None,
        send_json: bool = True,
        error_context: str = "Request failed",
    ) -> Any:
        logger.debug("[transport] %s %s", method, path)
        try:
            async with httpx.AsyncClient(
                base_url=self._settings.base_url,
                timeout=self._settings.timeout_s,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method,
                    path,
                    headers=self.headers(send_json),
                    json=json_body if send_json else None,
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            body = _safe_json(e.response)
            upstream = extract_upstream_message(body)
            detail = upstream or e.response.reason_phrase or f"HTTP {e.response.status_code}"
            logger.warning("[transport] %s %s -> HTTP %s: %s", method, path, e.response.status_code, detail)
            raise TransportError(
                f"{error_context}: {detail}",
                status_code=e.response.status_code,
                upstream_message=upstream,
            ) from e
        except httpx.HTTPError as e:
            logger.warning("[transport] %s %s failed: %s", method, path, e)
            raise TransportError(f"{error_context}: {str(e) or repr(e)}") from e

        if not response.content:
            return None
        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise TransportError(
                f"{error_context}: Invalid JSON response from API",
                status_code=response.status_code,
            ) from e

        # Dhan occasionally reports failures inside a 2xx body.
        if isinstance(data, dict) and data.get("status") == "failure":
            upstream = extract_upstream_message(data) or "Unknown error from API"
            code = _error_code(data)
            message = f"DhanHQ Error {code}: {upstream}" if code else upstream
            raise TransportError(
                f"{error_context}: {message}",
                status_code=response.status_code,
                upstream_message=upstream,
            )
        return data


def _safe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
