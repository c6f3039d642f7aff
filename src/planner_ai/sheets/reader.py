# src/planner_ai/sheets/reader.py

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from ..core.ports import Rows, TableReader, TokenSource

logger = logging.getLogger(__name__)

TASK_COLUMNS = "A2:D"


class SheetsError(RuntimeError):
    """Transport/authorization failure while reading a spreadsheet."""


def _rows_from_payload(data: Any) -> Rows:
    values = data.get("values") if isinstance(data, dict) else None
    if not isinstance(values, list):
        return []
    rows: Rows = []
    for row in values:
        if isinstance(row, list):
            rows.append(["" if cell is None else str(cell) for cell in row])
        else:
            rows.append([])
    return rows


class GoogleSheetsReader:
    """
    Read-only client for the Sheets v4 values API.

    Auth, first match wins:
    - `token_source`: service-account credentials, refreshed before they expire,
    - `access_token`: a ready OAuth access token,
    - `api_key`: link-shared sheets only.
    `transport` is passed to httpx.AsyncClient (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        access_token: str | None = None,
        token_source: TokenSource | None = None,
        base_url: str = "https://sheets.googleapis.com",
        timeout: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = (api_key or "").strip() or None
        self._access_token = (access_token or "").strip() or None
        self._token_source = token_source
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def _auth(self) -> tuple[dict[str, str], dict[str, str]]:
        headers: dict[str, str] = {}
        params: dict[str, str] = {}
        if self._token_source is not None:
            headers["Authorization"] = f"Bearer {await self._token_source.token()}"
        elif self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"
        elif self._api_key:
            params["key"] = self._api_key
        else:
            raise SheetsError(
                "No Google credentials configured. Set PLANNER_GOOGLE_CREDENTIALS, "
                "PLANNER_GOOGLE_API_KEY or PLANNER_GOOGLE_ACCESS_TOKEN."
            )
        return headers, params

    async def _get_json(self, path: str, extra_params: dict[str, str] | None = None) -> Any:
        headers, params = await self._auth()
        if extra_params:
            params.update(extra_params)
        url = f"{self._base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.get(url, headers=headers, params=params)
                resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SheetsError(
                f"Sheets API returned {e.response.status_code} for {path}: {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            raise SheetsError(f"Sheets API request failed for {path}: {e}") from e

        try:
            return resp.json()
        except ValueError as e:
            raise SheetsError(f"Sheets API returned invalid JSON for {path}") from e

    async def read_rows(self, spreadsheet_id: str, range_a1: str) -> Rows:
        if not spreadsheet_id:
            raise SheetsError("Spreadsheet id is empty.")
        path = f"/v4/spreadsheets/{quote(spreadsheet_id, safe='')}/values/{quote(range_a1, safe='!:')}"
        data = await self._get_json(path)
        rows = _rows_from_payload(data)
        logger.info("Read %d row(s) from range %s", len(rows), range_a1)
        return rows

    async def first_sheet_title(self, spreadsheet_id: str) -> str:
        path = f"/v4/spreadsheets/{quote(spreadsheet_id, safe='')}"
        data = await self._get_json(path, {"fields": "sheets(properties(title))"})
        sheets = data.get("sheets") if isinstance(data, dict) else None
        if isinstance(sheets, list) and sheets:
            title = ((sheets[0] or {}).get("properties") or {}).get("title")
            if isinstance(title, str) and title:
                return title
        raise SheetsError("No sheet tabs found in spreadsheet.")


async def resolve_task_range(reader: TableReader, settings: Any) -> str:
    """Explicit range, else '<sheet_name>!A2:D', else the first tab's A2:D."""
    explicit = (getattr(settings, "sheet_range", "") or "").strip()
    if explicit:
        return explicit
    sheet_name = (getattr(settings, "sheet_name", "") or "").strip()
    if sheet_name:
        return f"{sheet_name}!{TASK_COLUMNS}"
    title = await reader.first_sheet_title(settings.spreadsheet_id)
    return f"{title}!{TASK_COLUMNS}"
