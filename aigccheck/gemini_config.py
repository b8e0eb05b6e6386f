"""Settings and error types for the Gemini semantic-analysis client."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_MODEL = "gemini-pro"
DEFAULT_TEMPERATURE = 0.3
DEFAULT_MAX_TOKENS = 500
DEFAULT_TIMEOUT = 30.0
DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta"


class GeminiError(Exception):
    """Base class for Gemini client errors."""

    default_message = "gemini: error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class MissingAPIKeyError(GeminiError):
    default_message = "gemini: API key is required"


class NotEnabledError(GeminiError):
    default_message = "gemini: not enabled"


class NoResponseError(GeminiError):
    default_message = "gemini: no response from API"


class InvalidResponseError(GeminiError):
    default_message = "gemini: invalid response format"


class RateLimitedError(GeminiError):
    default_message = "gemini: rate limited"


class GeminiTimeoutError(GeminiError, TimeoutError):
    default_message = "gemini: request timeout"


class ContentBlockedError(GeminiError):
    default_message = "gemini: content blocked by safety filters"


@dataclass
class RetryConfig:
    """Retry policy; backoff durations are in seconds."""

    max_attempts: int = 3
    initial_backoff: float = 1.0
    max_backoff: float = 30.0
    multiplier: float = 2.0


@dataclass
class CacheConfig:
    """Response cache settings; ttl is in seconds."""

    enabled: bool = True
    ttl: float = 3600.0
    max_entries: int = 1000


@dataclass
class GeminiConfig:
    """Gemini API settings; timeout is in seconds."""

    enabled: bool = False
    api_key: str = ""
    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout: float = DEFAULT_TIMEOUT
    retry: RetryConfig = field(default_factory=RetryConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    endpoint: str = DEFAULT_ENDPOINT

    def load_from_env(self) -> None:
        """Apply GEMINI_API_KEY and GEMINI_ENABLED from the environment."""
        api_key = os.environ.get("GEMINI_API_KEY", "")
        if api_key:
            self.api_key = api_key
        if os.environ.get("GEMINI_ENABLED") == "true":
            self.enabled = True

    def validate(self) -> None:
        """Check an enabled config and replace out-of-range values with defaults.

        Raises MissingAPIKeyError when enabled without an API key.
        """
        if not self.enabled:
            return
        if not self.api_key:
            raise MissingAPIKeyError()
        if not self.model:
            self.model = DEFAULT_MODEL
        if not 0 <= self.temperature <= 1:
            self.temperature = DEFAULT_TEMPERATURE
        if self.max_tokens <= 0:
            self.max_tokens = DEFAULT_MAX_TOKENS
        if self.timeout <= 0:
            self.timeout = DEFAULT_TIMEOUT

    def is_enabled(self) -> bool:
        """True when enabled and an API key is set."""
        return self.enabled and bool(self.api_key)


def default_gemini_config() -> GeminiConfig:
    """A fresh config holding the default settings."""
    return GeminiConfig()