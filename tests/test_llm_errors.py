import time

import httpx
import openai
import pytest

from lessonsmith.services import llm as llm_service
from lessonsmith.settings import settings

REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _raiser(exc):
    def fake_llm_sync(messages, **kw):
        raise exc
    return fake_llm_sync


@pytest.mark.parametrize("exc, status, error", [
    (openai.RateLimitError("rate", response=httpx.Response(429, request=REQUEST), body=None),
     429, "OpenAI quota/rate limit exceeded."),
    (openai.AuthenticationError("auth", response=httpx.Response(401, request=REQUEST), body=None),
     502, "OpenAI auth failed. Check OPENAI_API_KEY."),
    (openai.APITimeoutError(request=REQUEST),
     504, "The generation service timed out. Please try again."),
    (openai.InternalServerError("down", response=httpx.Response(500, request=REQUEST), body=None),
     502, "The generation service failed. Please try again."),
])
def test_provider_errors_are_mapped(client, monkeypatch, exc, status, error):
    monkeypatch.setattr(llm_service, "_llm_sync", _raiser(exc))
    r = client.post("/api/generate-report", json={"topic": "Bees"})
    assert r.status_code == status
    assert r.json() == {"success": False, "error": error}


def test_slow_provider_times_out(client, monkeypatch):
    def slow(messages, **kw):
        time.sleep(0.5)
        return "too late"

    monkeypatch.setattr(llm_service, "_llm_sync", slow)
    monkeypatch.setattr(settings, "LLM_TIMEOUT", 0.05)
    r = client.post("/api/generate-quiz", json={"topic": "Bees", "types": ["mcq"]})
    assert r.status_code == 504
    assert r.json() == {"success": False, "error": "The generation service timed out. Please try again."}
