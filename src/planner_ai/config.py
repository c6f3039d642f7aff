# src/planner_ai/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time; validate() is called explicitly at startup.
- Every variable uses the PLANNER_ prefix, and the historical unprefixed names
  (SPREADSHEET_ID, WHATSAPP_TOKEN, ...) are still honoured as fallbacks.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from .core.dates import get_zone
from .scheduler import parse_cron
from .sheets.auth import load_service_account_info

ENV_PREFIX = "PLANNER"


class ConfigError(RuntimeError):
    """Required settings are missing or invalid."""


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    parts = [p.strip() for p in raw.replace(",", " ").split() if p.strip()]
    return parts


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Schedule ----
    timezone: str
    cron_schedule: str
    scheduler_poll_seconds: float

    # ---- Task sheet ----
    spreadsheet_id: str
    sheet_range: str
    sheet_name: str

    # ---- Routine sheet ----
    routine_spreadsheet_id: str
    routine_range: str

    # ---- Google Sheets API ----
    google_credentials: Optional[str]
    google_credentials_file: Path
    google_api_key: Optional[str]
    google_access_token: Optional[str]
    sheets_base_url: str

    # ---- WhatsApp Cloud API ----
    whatsapp_phone_number_id: str
    whatsapp_token: str
    whatsapp_api_version: str
    graph_base_url: str
    recipient_phone: str
    recipient_name: str

    # ---- LLM / OpenRouter ----
    openrouter_api_key: Optional[str]
    openrouter_base_url: str
    llm_models: List[str]
    extra_headers: Dict[str, str]

    # ---- Timeouts ----
    http_timeout_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "planner-ai") or "planner-ai"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/planner"))

        timezone = (_first_env(_k("TIMEZONE"), "TIMEZONE", default="Asia/Dhaka") or "").strip()
        cron_schedule = (_first_env(_k("CRON_SCHEDULE"), "CRON_SCHEDULE", default="00 8 * * *") or "").strip()
        scheduler_poll_seconds = _env_float(_k("SCHEDULER_POLL_SECONDS"), 30.0)

        spreadsheet_id = (_first_env(_k("SPREADSHEET_ID"), "SPREADSHEET_ID", default="") or "").strip()
        sheet_range = (_first_env(_k("SHEET_RANGE"), "SHEET_RANGE", default="") or "").strip()
        sheet_name = (_first_env(_k("SHEET_NAME"), "SHEET_NAME", default="") or "").strip()

        routine_spreadsheet_id = (
            _first_env(_k("ROUTINE_SPREADSHEET_ID"), "ROUTINE_SPREADSHEET_ID", default="") or ""
        ).strip()
        routine_range = _env(_k("ROUTINE_RANGE"), "Sheet1!A1:G30").strip() or "Sheet1!A1:G30"

        google_credentials = _first_env(_k("GOOGLE_CREDENTIALS"), "GOOGLE_CREDENTIALS", default=None)
        google_credentials_file = _env_path(_k("GOOGLE_CREDENTIALS_FILE"), Path("credentials.json"))
        google_api_key = _first_env(_k("GOOGLE_API_KEY"), "GOOGLE_API_KEY", default=None)
        google_access_token = _first_env(_k("GOOGLE_ACCESS_TOKEN"), "GOOGLE_ACCESS_TOKEN", default=None)
        sheets_base_url = _env(_k("SHEETS_BASE_URL"), "https://sheets.googleapis.com")

        whatsapp_phone_number_id = (
            _first_env(_k("WHATSAPP_PHONE_NUMBER_ID"), "PHONE_NUMBER_ID", default="") or ""
        ).strip()
        whatsapp_token = (_first_env(_k("WHATSAPP_TOKEN"), "WHATSAPP_TOKEN", default="") or "").strip()
        whatsapp_api_version = _env(_k("WHATSAPP_API_VERSION"), "v21.0")
        graph_base_url = _env(_k("GRAPH_BASE_URL"), "https://graph.facebook.com")
        recipient_phone = (_first_env(_k("RECIPIENT_PHONE"), "YOUR_PHONE", default="") or "").strip()
        recipient_name = _env(_k("RECIPIENT_NAME"), "").strip()

        openrouter_api_key = _first_env(_k("OPENROUTER_API_KEY"), "OPENROUTER_API_KEY", default=None)
        openrouter_base_url = _env(_k("OPENROUTER_BASE_URL"), "https://openrouter.ai/api/v1")

        extra_headers = {
            "HTTP-Referer": _env(_k("HTTP_REFERER"), "https://example.com"),
            "X-Title": _env(_k("APP_TITLE"), app_name),
        }

        llm_models = _env_list(
            _k("LLM_MODELS"),
            [
                "google/gemini-2.5-flash-lite-preview-09-2025",
                "qwen/qwen-2.5-72b-instruct:free",
            ],
        )

        http_timeout_seconds = _env_float(_k("HTTP_TIMEOUT_SECONDS"), 20.0)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            timezone=timezone,
            cron_schedule=cron_schedule,
            scheduler_poll_seconds=scheduler_poll_seconds,
            spreadsheet_id=spreadsheet_id,
            sheet_range=sheet_range,
            sheet_name=sheet_name,
            routine_spreadsheet_id=routine_spreadsheet_id,
            routine_range=routine_range,
            google_credentials=google_credentials,
            google_credentials_file=google_credentials_file,
            google_api_key=google_api_key,
            google_access_token=google_access_token,
            sheets_base_url=sheets_base_url,
            whatsapp_phone_number_id=whatsapp_phone_number_id,
            whatsapp_token=whatsapp_token,
            whatsapp_api_version=whatsapp_api_version,
            graph_base_url=graph_base_url,
            recipient_phone=recipient_phone,
            recipient_name=recipient_name,
            openrouter_api_key=openrouter_api_key,
            openrouter_base_url=openrouter_base_url,
            llm_models=llm_models,
            extra_headers=extra_headers,
            http_timeout_seconds=http_timeout_seconds,
        )

    def has_google_credentials(self) -> bool:
        return bool(
            (self.google_credentials or "").strip()
            or self.google_credentials_file.is_file()
            or (self.google_api_key or "").strip()
            or (self.google_access_token or "").strip()
        )

    def missing_required(self) -> List[str]:
        required = {
            "spreadsheet_id": self.spreadsheet_id,
            "google_credentials": self.has_google_credentials(),
            "whatsapp_phone_number_id": self.whatsapp_phone_number_id,
            "whatsapp_token": self.whatsapp_token,
            "recipient_phone": self.recipient_phone,
        }
        return [name for name, value in required.items() if not value]

    def validate(self) -> None:
        """Fail fast on missing delivery/source settings, unreadable credentials or a bad schedule."""
        missing = self.missing_required()
        if missing:
            raise ConfigError(f"Missing required settings: {', '.join(missing)}")

        if (self.google_credentials or "").strip():
            try:
                load_service_account_info(self.google_credentials)
            except ValueError as e:
                raise ConfigError(str(e)) from e

        try:
            parse_cron(self.cron_schedule)
        except ValueError as e:
            raise ConfigError(f"Invalid CRON_SCHEDULE: {self.cron_schedule!r} ({e})") from e

        try:
            get_zone(self.timezone)
        except ValueError as e:
            raise ConfigError(str(e)) from e


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
