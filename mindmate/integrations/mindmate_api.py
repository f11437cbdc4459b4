"""MindMate REST API — shared HTTP plumbing for the adapters.

One short-lived httpx.AsyncClient per call. Transport errors and
non-success statuses are turned into the caller's RemoteFailure subclass,
carrying the server's own message when it sent one.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from mindmate.config import settings
from mindmate.ports.errors import RemoteFailure

logger = logging.getLogger(__name__)

SUCCESS_STATUSES = (200, 201, 204)


def _headers() -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if settings.MINDMATE_API_TOKEN:
        headers["Authorization"] = f"Bearer {settings.MINDMATE_API_TOKEN}"
    return headers


def _server_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return ""
    if isinstance(data, dict):
        return str(data.get("message") or data.get("error") or "")
    return ""


async def request_json(
    method: str,
    path: str,
    *,
    error_cls: type[RemoteFailure],
    json: dict | None = None,
    expected: tuple[int, ...] = SUCCESS_STATUSES,
) -> Any:
    """Send one request to the MindMate API and return the decoded body.

    Returns None for an empty or non-JSON body. Raises error_cls on any
    transport failure or a status outside `expected`. Never retries.
    """
    try:
        async with httpx.AsyncClient(
            base_url=settings.MINDMATE_API_URL,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            headers=_headers(),
        ) as client:
            resp = await client.request(method, path, json=json)
    except httpx.HTTPError as exc:
        logger.error("%s %s failed: %s", method, path, exc)
        raise error_cls(f"Could not reach the server: {exc}") from exc

    if resp.status_code not in expected:
        message = _server_message(resp) or f"{method} {path} returned {resp.status_code}"
        logger.error("%s %s -> %d: %s", method, path, resp.status_code, message)
        raise error_cls(message, status_code=resp.status_code)

    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return None
