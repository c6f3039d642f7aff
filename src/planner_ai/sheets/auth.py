# src/planner_ai/sheets/auth.py

"""
Service-account auth for the Sheets reader.

Credentials come from GOOGLE_CREDENTIALS (base64 or raw service-account JSON) or from a
key file (credentials.json by default). google-auth signs the JWT grant; the token
request itself goes through httpx so tests can swap the transport.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import json
import logging
from pathlib import Path
from typing import Any, Mapping

import google.auth.exceptions
import google.auth.transport
import httpx
from google.oauth2 import service_account

from .reader import SheetsError

logger = logging.getLogger(__name__)

SHEETS_READONLY_SCOPE = "https://www.googleapis.com/auth/spreadsheets.readonly"


class _HttpxAuthResponse(google.auth.transport.Response):
    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    @property
    def status(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> Mapping[str, str]:
        return self._response.headers

    @property
    def data(self) -> bytes:
        return self._response.content


class HttpxAuthRequest(google.auth.transport.Request):
    """google-auth transport backed by a blocking httpx.Client."""

    def __init__(self, *, timeout: float = 20.0, transport: httpx.BaseTransport | None = None) -> None:
        self._timeout = timeout
        self._transport = transport

    def __call__(self, url, method="GET", body=None, headers=None, timeout=None, **kwargs):
        try:
            with httpx.Client(timeout=timeout or self._timeout, transport=self._transport) as client:
                resp = client.request(method, url, content=body, headers=headers)
        except httpx.HTTPError as e:
            raise google.auth.exceptions.TransportError(e) from e
        return _HttpxAuthResponse(resp)


def load_service_account_info(raw: str) -> dict[str, Any]:
    """Parse GOOGLE_CREDENTIALS: base64-encoded JSON, or the JSON itself."""
    text = (raw or "").strip()
    if not text.startswith("{"):
        try:
            text = base64.b64decode(text, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ValueError("GOOGLE_CREDENTIALS is neither JSON nor base64-encoded JSON.") from e
    try:
        info = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError("GOOGLE_CREDENTIALS does not contain valid JSON.") from e
    if not isinstance(info, dict) or not info.get("client_email") or not info.get("private_key"):
        raise ValueError("GOOGLE_CREDENTIALS is not a service-account key.")
    return info


def build_service_account_credentials(
    *,
    credentials_json: str | None = None,
    credentials_file: str | Path | None = None,
) -> service_account.Credentials | None:
    """Inline credentials win over the key file; a missing file means "not configured"."""
    scopes = [SHEETS_READONLY_SCOPE]
    if credentials_json and credentials_json.strip():
        info = load_service_account_info(credentials_json)
        return service_account.Credentials.from_service_account_info(info, scopes=scopes)

    if credentials_file:
        path = Path(credentials_file).expanduser()
        if path.is_file():
            return service_account.Credentials.from_service_account_file(str(path), scopes=scopes)
    return None


class ServiceAccountTokenSource:
    """Hands out a valid access token, refreshing it when it is missing or expired."""

    def __init__(
        self,
        credentials: Any,
        *,
        timeout: float = 20.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._credentials = credentials
        self._request = HttpxAuthRequest(timeout=timeout, transport=transport)
        self._lock = asyncio.Lock()

    @property
    def credentials(self) -> Any:
        return self._credentials

    async def token(self) -> str:
        async with self._lock:
            if not self._credentials.valid:
                try:
                    await asyncio.to_thread(self._credentials.refresh, self._request)
                except google.auth.exceptions.GoogleAuthError as e:
                    raise SheetsError(f"Google service-account token refresh failed: {e}") from e
                logger.info("Refreshed Google access token (expires %s UTC)", self._credentials.expiry)
            return self._credentials.token


def create_token_source(
    settings: Any,
    *,
    transport: httpx.BaseTransport | None = None,
) -> ServiceAccountTokenSource | None:
    credentials = build_service_account_credentials(
        credentials_json=getattr(settings, "google_credentials", None),
        credentials_file=getattr(settings, "google_credentials_file", None),
    )
    if credentials is None:
        return None
    logger.info("Using Google service account %s", credentials.service_account_email)
    return ServiceAccountTokenSource(
        credentials,
        timeout=float(getattr(settings, "http_timeout_seconds", 20.0) or 20.0),
        transport=transport,
    )
