import pytest

from aigccheck.gemini_config import (
    ContentBlockedError,
    GeminiConfig,
    GeminiError,
    GeminiTimeoutError,
    MissingAPIKeyError,
    NoResponseError,
    NotEnabledError,
    default_gemini_config,
)


def test_default_config():
    cfg = default_gemini_config()
    assert cfg.model == "gemini-pro"
    assert cfg.temperature == 0.3
    assert cfg.timeout == 30.0
    assert cfg.cache.enabled is True
    assert cfg.enabled is False
    assert cfg.max_tokens == 500
    assert cfg.endpoint == "https://generativelanguage.googleapis.com/v1beta"
    assert cfg.retry.max_attempts == 3
    assert cfg.retry.initial_backoff == 1.0
    assert cfg.retry.max_backoff == 30.0
    assert cfg.retry.multiplier == 2.0
    assert cfg.cache.ttl == 3600.0
    assert cfg.cache.max_entries == 1000


def test_default_configs_are_independent():
    first = default_gemini_config()
    first.cache.enabled = False
    assert default_gemini_config().cache.enabled is True


def test_validate_disabled_needs_nothing():
    cfg = GeminiConfig(enabled=False, api_key="")
    assert cfg.validate() is None


def test_validate_enabled_without_key_raises():
    cfg = GeminiConfig(enabled=True, api_key="")
    with pytest.raises(MissingAPIKeyError):
        cfg.validate()


def test_validate_valid_config():
    cfg = GeminiConfig(
        enabled=True,
        api_key="placeholder",
        model="gemini-pro",
        temperature=0.3,
        max_tokens=500,
        timeout=30.0,
    )
    cfg.validate()
    assert cfg.model == "gemini-pro"
    assert cfg.temperature == 0.3


def test_validate_fixes_bad_values():
    cfg = GeminiConfig(
        enabled=True, api_key="placeholder", model="", temperature=1.5, max_tokens=0, timeout=-1
    )
    cfg.validate()
    assert cfg.model == "gemini-pro"
    assert cfg.temperature == 0.3
    assert cfg.max_tokens == 500
    assert cfg.timeout == 30.0


@pytest.mark.parametrize(
    "enabled, api_key, expected",
    [
        (True, "placeholder", True),
        (True, "", False),
        (False, "placeholder", False),
        (False, "", False),
    ],
)
def test_is_enabled(enabled, api_key, expected):
    assert GeminiConfig(enabled=enabled, api_key=api_key).is_enabled() is expected


def test_load_from_env(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "placeholder")
    monkeypatch.setenv("GEMINI_ENABLED", "true")
    cfg = GeminiConfig()
    cfg.load_from_env()
    assert cfg.api_key == "placeholder"
    assert cfg.enabled is True


def test_load_from_env_ignores_other_values(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("GEMINI_ENABLED", "yes")
    cfg = GeminiConfig(api_key="token")
    cfg.load_from_env()
    assert cfg.api_key == "token"
    assert cfg.enabled is False


def test_error_messages_and_hierarchy():
    assert str(MissingAPIKeyError()) == "gemini: API key is required"
    assert str(NotEnabledError()) == "gemini: not enabled"
    assert str(NoResponseError()) == "gemini: no response from API"
    assert str(ContentBlockedError()) == "gemini: content blocked by safety filters"
    assert issubclass(NotEnabledError, GeminiError)
    assert issubclass(GeminiTimeoutError, TimeoutError)
    assert str(NotEnabledError("custom")) == "custom"