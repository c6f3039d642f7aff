# src/planner_ai/connectors/console.py

from __future__ import annotations

import logging
import sys
from datetime import datetime
from typing import TextIO

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


class ConsoleMessenger:
    """OutboundMessenger that prints messages instead of sending them (--dry-run)."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self.printed = 0

    async def send_text(self, *, text: str, to: str | None = None) -> None:
        out = self._stream or sys.stdout
        target = f" -> {to}" if to else ""
        out.write(f"[{_ts_local()}] [DRY-RUN]{target}\n{text}\n\n")
        out.flush()
        self.printed += 1
        logger.info("Dry-run message printed (%d chars)", len(text))
