# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field


class FakeTableReader:
    """
    In-memory TableReader.

    tables maps (spreadsheet_id, range) -> rows; failures maps the same keys to an
    exception raised on read. Every read is recorded in `reads`.
    """

    def __init__(
        self,
        tables: dict[tuple[str, str], list[list[str]]] | None = None,
        *,
        first_sheet: str = "Sheet1",
        failures: dict[tuple[str, str], Exception] | None = None,
    ) -> None:
        self.tables = dict(tables or {})
        self.failures = dict(failures or {})
        self.first_sheet = first_sheet
        self.reads: list[tuple[str, str]] = []

    async def read_rows(self, spreadsheet_id: str, range_a1: str) -> list[list[str]]:
        key = (spreadsheet_id, range_a1)
        self.reads.append(key)
        if key in self.failures:
            raise self.failures[key]
        return [list(row) for row in self.tables.get(key, [])]

    async def first_sheet_title(self, spreadsheet_id: str) -> str:
        return self.first_sheet


class FakeLLMClient:
    """
    Deterministic LLM client for unit tests.

    - Captures prompts for assertions
    - Returns next_text, or raises `error` when set
    """

    def __init__(self, next_text: str = "ok", error: Exception | None = None) -> None:
        self.next_text = next_text
        self.error = error
        self.prompts: list[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.next_text


@dataclass(slots=True)
class SentMessage:
    text: str
    to: str | None


@dataclass(slots=True)
class FakeMessenger:
    """
    Fake OutboundMessenger. When `fail` is set every send raises it (nothing is recorded).
    """

    sent: list[SentMessage] = field(default_factory=list)
    fail: Exception | None = None

    async def send_text(self, *, text: str, to: str | None = None) -> None:
        if self.fail is not None:
            raise self.fail
        self.sent.append(SentMessage(text=text, to=to))

    @property
    def texts(self) -> list[str]:
        return [m.text for m in self.sent]
