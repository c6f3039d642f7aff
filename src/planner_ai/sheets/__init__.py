"""Google Sheets access (values API over httpx)."""
