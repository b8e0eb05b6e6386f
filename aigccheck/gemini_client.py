"""HTTP client for the Gemini content-generation API with retries and caching."""

from __future__ import annotations

import copy
import json
import time
import urllib.error
import urllib.request
from typing import Any

from aigccheck.gemini_cache import Cache
from aigccheck.gemini_config import (
    GeminiConfig,
    GeminiError,
    GeminiTimeoutError,
    InvalidResponseError,
    NoResponseError,
    NotEnabledError,
)


class GeminiClient:
    """Sends prompts to Gemini and returns the generated text."""

    def __init__(self, config: GeminiConfig) -> None:
        cfg = copy.deepcopy(config)
        cfg.load_from_env()
        cfg.validate()
        self.config = cfg
        self.cache: Cache | None = Cache(cfg.cache) if cfg.cache.enabled else None

    def generate_content(self, prompt: str) -> str:
        """Generate text for ``prompt``.

        Raises NotEnabledError when the client is disabled or has no API key,
        NoResponseError when the API returns no candidates, and GeminiError
        when every attempt fails.
        """
        if not self.config.is_enabled():
            raise NotEnabledError()

        if self.cache is not None:
            cached = self.cache.get(prompt)
            if cached is not None:
                return cached

        payload = self._build_payload(prompt)
        response: dict[str, Any] = {}
        last_error: GeminiError | None = None

        for attempt in range(self.config.retry.max_attempts):
            if attempt > 0:
                time.sleep(self.calculate_backoff(attempt))
            try:
                response = self._do_request(payload)
            except GeminiError as exc:
                last_error = exc
                continue
            last_error = None
            break

        if last_error is not None:
            raise last_error

        candidates = response.get("candidates") or []
        if not candidates:
            raise NoResponseError()

        result = "".join(_candidate_parts(candidates[0]))

        if self.cache is not None:
            self.cache.set(prompt, result)
        return result

    def calculate_backoff(self, attempt: int) -> float:
        """Delay in seconds before retry number ``attempt``."""
        retry = self.config.retry
        backoff = retry.initial_backoff
        for _ in range(attempt):
            backoff *= retry.multiplier
            if backoff > retry.max_backoff:
                backoff = retry.max_backoff
                break
        return backoff

    def close(self) -> None:
        """Release cached responses."""
        if self.cache is not None:
            self.cache.clear()

    def _build_payload(self, prompt: str) -> dict[str, Any]:
        generation_config: dict[str, Any] = {}
        if self.config.temperature:
            generation_config["temperature"] = self.config.temperature
        if self.config.max_tokens:
            generation_config["maxOutputTokens"] = self.config.max_tokens
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }

    def _do_request(self, payload: dict[str, Any]) -> dict[str, Any]:
        url = (
            f"{self.config.endpoint}/models/{self.config.model}"
            f":generateContent?key={self.config.api_key}"
        )
        request = urllib.request.Request(
            url,
            data=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with urllib.request.urlopen(request, timeout=self.config.timeout) as resp:
                status = getattr(resp, "status", 200)
                body = resp.read()
        except urllib.error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="replace")
            raise GeminiError(f"API error: status={exc.code}, body={detail}") from exc
        except TimeoutError as exc:
            raise GeminiTimeoutError(f"request failed: {exc}") from exc
        except (urllib.error.URLError, OSError) as exc:
            raise GeminiError(f"request failed: {exc}") from exc

        text = body.decode("utf-8", errors="replace")
        if status != 200:
            raise GeminiError(f"API error: status={status}, body={text}")

        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise GeminiError(f"failed to parse response: {exc}") from exc
        if not isinstance(data, dict):
            raise InvalidResponseError("failed to parse response: expected a JSON object")

        error = data.get("error")
        if error:
            message = error.get("message", "") if isinstance(error, dict) else str(error)
            raise GeminiError(f"API error: {message}")
        return data


def _candidate_parts(candidate: Any) -> list[str]:
    if not isinstance(candidate, dict):
        raise InvalidResponseError()
    content = candidate.get("content") or {}
    if not isinstance(content, dict):
        raise InvalidResponseError()
    parts = content.get("parts") or []
    return [str(part.get("text") or "") for part in parts if isinstance(part, dict)]