# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Use .env (local, gitignored).

Unprefixed names in brackets are accepted as fallbacks.
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "PLANNER_APP_NAME": "App display name (default: planner-ai).",
    "PLANNER_LOG_LEVEL": "Console logging level (default: INFO).",
    "PLANNER_DATA_DIR": "Local data directory for logs (default: .local/planner).",
    # Schedule
    "PLANNER_TIMEZONE": "[TIMEZONE] User timezone for 'today' and timestamps (default: Asia/Dhaka).",
    "PLANNER_CRON_SCHEDULE": "[CRON_SCHEDULE] 5-field cron in the user timezone (default: 00 8 * * *).",
    "PLANNER_SCHEDULER_POLL_SECONDS": "Max sleep between scheduler checks (default: 30).",
    # Task sheet
    "PLANNER_SPREADSHEET_ID": "[SPREADSHEET_ID] Task spreadsheet id (required).",
    "PLANNER_SHEET_RANGE": "[SHEET_RANGE] Explicit A1 range, e.g. Tasks!A2:D.",
    "PLANNER_SHEET_NAME": "[SHEET_NAME] Tab name; range becomes <name>!A2:D. Default: first tab.",
    # Routine sheet
    "PLANNER_ROUTINE_SPREADSHEET_ID": "[ROUTINE_SPREADSHEET_ID] Routine grid spreadsheet id (empty => routine path off).",
    "PLANNER_ROUTINE_RANGE": "Routine grid range (default: Sheet1!A1:G30).",
    # Google Sheets API
    "PLANNER_GOOGLE_CREDENTIALS": "[GOOGLE_CREDENTIALS] Service-account key JSON, base64-encoded or raw (preferred auth).",
    "PLANNER_GOOGLE_CREDENTIALS_FILE": "Service-account key file used when GOOGLE_CREDENTIALS is unset (default: credentials.json).",
    "PLANNER_GOOGLE_API_KEY": "[GOOGLE_API_KEY] API key for link-shared sheets.",
    "PLANNER_GOOGLE_ACCESS_TOKEN": "[GOOGLE_ACCESS_TOKEN] Static OAuth access token; expires, so only for short runs.",
    "PLANNER_SHEETS_BASE_URL": "Sheets API base URL (default: https://sheets.googleapis.com).",
    # WhatsApp Cloud API
    "PLANNER_WHATSAPP_PHONE_NUMBER_ID": "[PHONE_NUMBER_ID] Sender phone number id (required).",
    "PLANNER_WHATSAPP_TOKEN": "[WHATSAPP_TOKEN] Cloud API bearer token (required).",
    "PLANNER_WHATSAPP_API_VERSION": "Graph API version (default: v21.0).",
    "PLANNER_GRAPH_BASE_URL": "Graph API base URL (default: https://graph.facebook.com).",
    "PLANNER_RECIPIENT_PHONE": "[YOUR_PHONE] Recipient phone; non-digits are stripped (required).",
    "PLANNER_RECIPIENT_NAME": "Name used to address the recipient in messages.",
    # LLM / OpenRouter
    "PLANNER_OPENROUTER_API_KEY": "[OPENROUTER_API_KEY] Enables LLM prose; plain text is used without it.",
    "PLANNER_OPENROUTER_BASE_URL": "OpenRouter base URL (default: https://openrouter.ai/api/v1).",
    "PLANNER_LLM_MODELS": "Comma/space separated list of models to try in order.",
    "PLANNER_HTTP_REFERER": "Optional OpenRouter metadata header.",
    "PLANNER_APP_TITLE": "Optional OpenRouter metadata header title.",
    # Timeouts
    "PLANNER_HTTP_TIMEOUT_SECONDS": "Timeout for Sheets and WhatsApp requests (default: 20). LLM calls get twice this.",
}
