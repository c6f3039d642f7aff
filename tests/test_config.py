# tests/test_config.py

from __future__ import annotations

import base64
import dataclasses
from pathlib import Path

import pytest

from planner_ai.config import ConfigError, Settings

_ENV_NAMES = [
    "SPREADSHEET_ID",
    "SHEET_RANGE",
    "SHEET_NAME",
    "ROUTINE_SPREADSHEET_ID",
    "GOOGLE_CREDENTIALS",
    "GOOGLE_API_KEY",
    "GOOGLE_ACCESS_TOKEN",
    "PHONE_NUMBER_ID",
    "WHATSAPP_TOKEN",
    "YOUR_PHONE",
    "OPENROUTER_API_KEY",
    "TIMEZONE",
    "CRON_SCHEDULE",
]

_PREFIXED = [
    "SPREADSHEET_ID",
    "SHEET_RANGE",
    "SHEET_NAME",
    "ROUTINE_SPREADSHEET_ID",
    "ROUTINE_RANGE",
    "GOOGLE_CREDENTIALS",
    "GOOGLE_API_KEY",
    "GOOGLE_ACCESS_TOKEN",
    "WHATSAPP_PHONE_NUMBER_ID",
    "WHATSAPP_TOKEN",
    "RECIPIENT_PHONE",
    "RECIPIENT_NAME",
    "OPENROUTER_API_KEY",
    "TIMEZONE",
    "CRON_SCHEDULE",
    "LLM_MODELS",
    "SCHEDULER_POLL_SECONDS",
]


@pytest.fixture()
def clean_env(monkeypatch, tmp_path):
    monkeypatch.setenv("PLANNER_GOOGLE_CREDENTIALS_FILE", str(tmp_path / "no-credentials.json"))
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    for suffix in _PREFIXED:
        monkeypatch.delenv(f"PLANNER_{suffix}", raising=False)
    return monkeypatch


def _complete(monkeypatch) -> None:
    monkeypatch.setenv("PLANNER_SPREADSHEET_ID", "sheet")
    monkeypatch.setenv("PLANNER_GOOGLE_API_KEY", "k-123")
    monkeypatch.setenv("PLANNER_WHATSAPP_PHONE_NUMBER_ID", "123")
    monkeypatch.setenv("PLANNER_WHATSAPP_TOKEN", "tok")
    monkeypatch.setenv("PLANNER_RECIPIENT_PHONE", "+8801711000000")


def test_defaults(clean_env) -> None:
    s = Settings.from_env()

    assert s.timezone == "Asia/Dhaka"
    assert s.cron_schedule == "00 8 * * *"
    assert s.routine_range == "Sheet1!A1:G30"
    assert s.whatsapp_api_version == "v21.0"
    assert s.scheduler_poll_seconds == 30.0
    assert s.missing_required() == [
        "spreadsheet_id",
        "google_credentials",
        "whatsapp_phone_number_id",
        "whatsapp_token",
        "recipient_phone",
    ]


def test_unprefixed_names_are_fallbacks(clean_env) -> None:
    clean_env.setenv("SPREADSHEET_ID", "legacy-sheet")
    clean_env.setenv("PHONE_NUMBER_ID", "999")
    clean_env.setenv("YOUR_PHONE", "8801")
    clean_env.setenv("TIMEZONE", "Europe/Berlin")
    clean_env.setenv("PLANNER_SPREADSHEET_ID", "new-sheet")

    s = Settings.from_env()

    assert s.spreadsheet_id == "new-sheet"
    assert s.whatsapp_phone_number_id == "999"
    assert s.recipient_phone == "8801"
    assert s.timezone == "Europe/Berlin"


def test_list_and_float_parsing(clean_env) -> None:
    clean_env.setenv("PLANNER_LLM_MODELS", "a/model, b/model  c/model")
    clean_env.setenv("PLANNER_SCHEDULER_POLL_SECONDS", "not-a-number")

    s = Settings.from_env()

    assert s.llm_models == ["a/model", "b/model", "c/model"]
    assert s.scheduler_poll_seconds == 30.0


def test_validate_accepts_complete_config(clean_env) -> None:
    _complete(clean_env)
    Settings.from_env().validate()


def test_validate_reports_missing_settings(clean_env) -> None:
    clean_env.setenv("PLANNER_SPREADSHEET_ID", "sheet")
    with pytest.raises(ConfigError, match="whatsapp_token"):
        Settings.from_env().validate()


def test_validate_rejects_bad_cron_and_timezone(clean_env) -> None:
    _complete(clean_env)
    base = Settings.from_env()

    with pytest.raises(ConfigError, match="Invalid CRON_SCHEDULE"):
        dataclasses.replace(base, cron_schedule="every morning").validate()

    with pytest.raises(ConfigError, match="Unknown timezone"):
        dataclasses.replace(base, timezone="Mars/Olympus").validate()


def test_service_account_credentials_satisfy_and_are_checked(clean_env) -> None:
    _complete(clean_env)
    clean_env.delenv("PLANNER_GOOGLE_API_KEY")
    key_file = Path(__file__).parent / "data" / "service_account.json"

    clean_env.setenv("GOOGLE_CREDENTIALS", base64.b64encode(key_file.read_bytes()).decode("ascii"))
    Settings.from_env().validate()

    clean_env.setenv("GOOGLE_CREDENTIALS", "definitely-not-a-key")
    with pytest.raises(ConfigError, match="GOOGLE_CREDENTIALS"):
        Settings.from_env().validate()

    clean_env.delenv("GOOGLE_CREDENTIALS")
    clean_env.setenv("PLANNER_GOOGLE_CREDENTIALS_FILE", str(key_file))
    assert Settings.from_env().missing_required() == []
