# src/planner_ai/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires concrete implementations (Sheets reader + service-account auth, LLM, messenger) into a PlannerService.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..connectors.console import ConsoleMessenger
from ..connectors.whatsapp import WhatsAppMessenger
from ..core.changes import ChangeDetector, InMemorySnapshotStore
from ..core.ports import LLMClient, OutboundMessenger, TokenSource
from ..core.service import PlannerService
from ..llm.client import OpenRouterLLMClient
from ..llm.prose import ProseFormatter
from ..sheets.auth import create_token_source
from ..sheets.reader import GoogleSheetsReader

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def create_llm_client(settings) -> LLMClient | None:
    """OpenRouter client, or None (plain fallback formatting) when it cannot be configured."""
    try:
        return OpenRouterLLMClient(settings)
    except Exception as e:
        logger.warning("LLM disabled, messages will use plain formatting: %s", e)
        return None


def create_token_source_or_none(settings) -> TokenSource | None:
    """Service-account token source, or None when no usable credentials are configured."""
    try:
        return create_token_source(settings)
    except (ValueError, OSError) as e:
        logger.error("Google service-account credentials could not be loaded: %s", e)
        return None


def create_messenger(settings, *, dry_run: bool = False) -> OutboundMessenger:
    if dry_run:
        return ConsoleMessenger()
    return WhatsAppMessenger(
        phone_number_id=settings.whatsapp_phone_number_id,
        token=settings.whatsapp_token,
        recipient=settings.recipient_phone,
        api_version=settings.whatsapp_api_version,
        base_url=settings.graph_base_url,
        timeout=settings.http_timeout_seconds,
    )


def create_service(*, settings=None, dry_run: bool = False) -> PlannerService:
    """
    Build a PlannerService from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    reader = GoogleSheetsReader(
        api_key=settings.google_api_key,
        access_token=settings.google_access_token,
        token_source=create_token_source_or_none(settings),
        base_url=settings.sheets_base_url,
        timeout=settings.http_timeout_seconds,
    )

    return PlannerService(
        settings,
        reader=reader,
        messenger=create_messenger(settings, dry_run=dry_run),
        prose=ProseFormatter(create_llm_client(settings), name=settings.recipient_name or "there"),
        detector=ChangeDetector(InMemorySnapshotStore()),
    )
