import io
import json
import urllib.error
from unittest.mock import patch

import pytest

from aigccheck.gemini_client import GeminiClient
from aigccheck.gemini_config import (
    CacheConfig,
    GeminiConfig,
    GeminiError,
    MissingAPIKeyError,
    NoResponseError,
    NotEnabledError,
    RetryConfig,
)


class _FakeResponse:
    def __init__(self, payload, status=200):
        self._body = json.dumps(payload).encode("utf-8")
        self.status = status

    def read(self):
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def _reply(*texts):
    return _FakeResponse(
        {"candidates": [{"content": {"parts": [{"text": t} for t in texts]}}]}
    )


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_ENABLED", raising=False)


def _enabled_config(**kwargs):
    return GeminiConfig(
        enabled=True,
        api_key="placeholder",
        retry=RetryConfig(max_attempts=3, initial_backoff=0.0, max_backoff=0.0, multiplier=2.0),
        **kwargs,
    )


def test_disabled_client_is_created_with_cache():
    client = GeminiClient(GeminiConfig(enabled=False))
    assert client.cache is not None
    assert client.config.enabled is False


def test_generate_content_not_enabled():
    client = GeminiClient(GeminiConfig(enabled=False))
    with pytest.raises(NotEnabledError):
        client.generate_content("test prompt")


def test_enabled_without_key_raises():
    with pytest.raises(MissingAPIKeyError):
        GeminiClient(GeminiConfig(enabled=True, api_key=""))


def test_env_key_is_applied(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "token")
    client = GeminiClient(GeminiConfig(enabled=True))
    assert client.config.api_key == "token"
    assert client.config.is_enabled()


def test_caller_config_is_not_mutated(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "token")
    original = GeminiConfig(enabled=True)
    GeminiClient(original)
    assert original.api_key == ""


def test_calculate_backoff():
    client = GeminiClient(GeminiConfig())
    assert client.calculate_backoff(0) == 1.0
    assert client.calculate_backoff(1) == 2.0
    assert client.calculate_backoff(3) == 8.0
    assert client.calculate_backoff(10) == 30.0


def test_generate_content_joins_parts_and_builds_request():
    client = GeminiClient(_enabled_config())
    with patch("urllib.request.urlopen", return_value=_reply("Hello, ", "world")) as mocked:
        assert client.generate_content("prompt") == "Hello, world"
    request = mocked.call_args[0][0]
    assert request.full_url.endswith("/models/gemini-pro:generateContent?key=placeholder")
    body = json.loads(request.data.decode("utf-8"))
    assert body["contents"][0]["parts"][0]["text"] == "prompt"
    assert body["generationConfig"] == {"temperature": 0.3, "maxOutputTokens": 500}


def test_generate_content_uses_cache():
    client = GeminiClient(_enabled_config())
    with patch("urllib.request.urlopen", side_effect=[_reply("first"), _reply("second")]) as mocked:
        assert client.generate_content("same") == "first"
        assert client.generate_content("same") == "first"
    assert mocked.call_count == 1


def test_generate_content_without_cache_calls_again():
    client = GeminiClient(_enabled_config(cache=CacheConfig(enabled=False)))
    with patch("urllib.request.urlopen", side_effect=[_reply("first"), _reply("second")]) as mocked:
        assert client.generate_content("same") == "first"
        assert client.generate_content("same") == "second"
    assert mocked.call_count == 2


def test_http_error_is_retried_then_raised():
    client = GeminiClient(_enabled_config())

    def fail(*args, **kwargs):
        raise urllib.error.HTTPError("http://example.com", 500, "err", {}, io.BytesIO(b"boom"))

    with patch("urllib.request.urlopen", side_effect=fail) as mocked:
        with pytest.raises(GeminiError, match="status=500, body=boom"):
            client.generate_content("p")
    assert mocked.call_count == 3


def test_retry_then_success():
    client = GeminiClient(_enabled_config())
    error = urllib.error.HTTPError("http://example.com", 503, "err", {}, io.BytesIO(b"busy"))
    with patch("urllib.request.urlopen", side_effect=[error, _reply("ok")]) as mocked:
        assert client.generate_content("p") == "ok"
    assert mocked.call_count == 2


def test_no_candidates_raises_no_response():
    client = GeminiClient(_enabled_config())
    with patch("urllib.request.urlopen", return_value=_FakeResponse({"candidates": []})):
        with pytest.raises(NoResponseError):
            client.generate_content("p")


def test_api_error_in_body():
    client = GeminiClient(_enabled_config(retry=RetryConfig(max_attempts=1)))
    payload = {"error": {"code": 429, "message": "quota exceeded", "status": "X"}}
    with patch("urllib.request.urlopen", return_value=_FakeResponse(payload)):
        with pytest.raises(GeminiError, match="API error: quota exceeded"):
            client.generate_content("p")


def test_zero_attempts_gives_no_response():
    client = GeminiClient(_enabled_config(retry=RetryConfig(max_attempts=0)))
    with patch("urllib.request.urlopen") as mocked:
        with pytest.raises(NoResponseError):
            client.generate_content("p")
    assert mocked.call_count == 0


def test_close_clears_cache():
    client = GeminiClient(_enabled_config())
    with patch("urllib.request.urlopen", return_value=_reply("x")):
        client.generate_content("p")
    assert len(client.cache) == 1
    client.close()
    assert len(client.cache) == 0