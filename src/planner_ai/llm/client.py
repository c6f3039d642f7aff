# src/planner_ai/llm/client.py

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

import httpx
import openai
from openai import OpenAI

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You write short, friendly WhatsApp messages for a personal planner. "
    "Plain text only: no markdown, no emojis, no tables."
)

# How long a model that answered 404 is skipped.
UNAVAILABLE_MODEL_BENCH_SECONDS = 3600.0


def _failure_kind(exc: Exception) -> str:
    """Classify an SDK error: auth | unavailable | rate_limit | network | other."""
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return "auth"
    if isinstance(exc, openai.NotFoundError):
        return "unavailable"
    if isinstance(exc, openai.RateLimitError):
        return "rate_limit"
    if isinstance(exc, (openai.APIConnectionError, httpx.TimeoutException)):
        return "network"
    return "other"


def _extract_text(response: Any) -> str:
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, TypeError):
        return ""
    return content.strip() if isinstance(content, str) else ""


class OpenRouterLLMClient:
    """
    Blocking completion client for OpenRouter (OpenAI-compatible API).

    Models from PLANNER_LLM_MODELS are tried in order until one returns text.
    A 404 benches the model for an hour; rate limits, network errors and empty
    answers move on to the next model; an auth error stops immediately.

    `client` replaces the OpenAI SDK instance (tests).
    """

    def __init__(self, settings: Any, *, client: Any | None = None) -> None:
        api_key = (getattr(settings, "openrouter_api_key", None) or "").strip()
        base_url = (getattr(settings, "openrouter_base_url", "") or "").strip()

        if not api_key:
            raise RuntimeError("OpenRouter API key is not set (PLANNER_OPENROUTER_API_KEY).")
        if not base_url:
            raise RuntimeError("OpenRouter base URL is not set (PLANNER_OPENROUTER_BASE_URL).")

        self._models: List[str] = [m.strip() for m in (getattr(settings, "llm_models", None) or []) if m.strip()]
        if not self._models:
            raise RuntimeError("LLM model list is empty (PLANNER_LLM_MODELS).")

        self._headers: Dict[str, str] = dict(getattr(settings, "extra_headers", {}) or {})
        self._benched_until: dict[str, float] = {}

        if client is None:
            read_timeout = float(getattr(settings, "http_timeout_seconds", 20.0) or 20.0) * 2
            # max_retries=0: a failing model falls through to the next one instead of retrying.
            client = OpenAI(
                base_url=base_url,
                api_key=api_key,
                timeout=httpx.Timeout(read_timeout, connect=5.0),
                max_retries=0,
            )
        self._client = client

    @property
    def models(self) -> List[str]:
        return list(self._models)

    def _available_models(self) -> List[str]:
        now = time.monotonic()
        return [m for m in self._models if self._benched_until.get(m, 0.0) <= now]

    def complete(self, prompt: str) -> str:
        last_error: Optional[Exception] = None
        last_kind = "other"

        for model in self._available_models():
            started = time.monotonic()
            try:
                response = self._client.chat.completions.create(
                    model=model,
                    extra_headers=self._headers or None,
                    messages=[
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                )
            except Exception as e:
                kind = _failure_kind(e)
                if kind == "auth":
                    raise RuntimeError("OpenRouter rejected the API key.") from e
                if kind == "unavailable":
                    self._benched_until[model] = time.monotonic() + UNAVAILABLE_MODEL_BENCH_SECONDS
                logger.warning("LLM model %s failed (%s: %s)", model, kind, e.__class__.__name__)
                last_error, last_kind = e, kind
                continue

            text = _extract_text(response)
            if text:
                logger.info("LLM answer from %s in %.2fs", model, time.monotonic() - started)
                return text

            logger.warning("LLM model %s returned no content", model)
            last_error, last_kind = RuntimeError(f"Model returned no content: {model}"), "empty"

        if last_error is None:
            raise RuntimeError("No LLM model is currently available.")
        if last_kind == "rate_limit":
            raise RuntimeError("All LLM models are rate-limited.") from last_error
        if last_kind == "network":
            raise RuntimeError("LLM request failed on the network.") from last_error
        raise RuntimeError("All LLM models failed.") from last_error
