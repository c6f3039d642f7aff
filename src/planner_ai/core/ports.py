# src/planner_ai/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the sheet reader, LLM provider and delivery transport swappable and makes
testing easier.
"""

from typing import TYPE_CHECKING, Awaitable, Protocol

if TYPE_CHECKING:
    from .models import RoutineSnapshot

Rows = list[list[str]]


class TableReader(Protocol):
    """Tabular-source transport (Google Sheets in production)."""

    def read_rows(self, spreadsheet_id: str, range_a1: str) -> Awaitable[Rows]: ...

    def first_sheet_title(self, spreadsheet_id: str) -> Awaitable[str]: ...


class LLMClient(Protocol):
    """Blocking single-shot completion client (OpenAI/OpenRouter-compatible)."""

    def complete(self, prompt: str) -> str: ...


class OutboundMessenger(Protocol):
    """
    Delivery-side port: how the pass sends text outward.

    `to` is transport specific (a phone number for WhatsApp); None means the
    connector's configured default recipient.
    """

    def send_text(self, *, text: str, to: str | None = None) -> Awaitable[None]: ...


class SnapshotStore(Protocol):
    """Per-dataset change-detection state. Implementations must be safe to share."""

    def get(self, name: str) -> RoutineSnapshot | None: ...

    def put(self, name: str, snapshot: RoutineSnapshot) -> None: ...


class TokenSource(Protocol):
    """Supplies a currently valid OAuth access token (refreshing as needed)."""

    def token(self) -> Awaitable[str]: ...
