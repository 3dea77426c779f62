import asyncio, json
from loguru import logger
from openai import OpenAI, APIError, APITimeoutError, AuthenticationError, RateLimitError
from ..settings import settings
from ..errors import ExternalServiceError

_client: OpenAI | None = None

MOCK_REPORT = """# Mock Report

This is a **MOCK** report with *emphasis* and a __key term__.

## Key Points

* First point
* Second point

1. Step one
2. Step two

| Term | Meaning |
|---|---|
| Mock | Canned output |
"""

MOCK_QUIZ = {
    "topic": "Networking",
    "difficulty": "medium",
    "questions": [
        {"type": "mcq", "question": "Which layer handles routing on the Internet?",
         "options": ["Physical", "Data Link", "Network", "Transport"], "correctAnswer": 2},
        {"type": "oneword", "question": "Which protocol resolves names to IP addresses?", "answer": "DNS"},
        {"type": "flashcard", "question": "What is latency?", "answer": "Delay before transfer begins."},
    ],
}


def client() -> OpenAI:
    global _client
    if _client is None:
        _client = OpenAI(api_key=settings.OPENAI_API_KEY, timeout=settings.LLM_TIMEOUT)
    return _client


def _llm_sync(messages, *, max_tokens=2000, temperature=0.7):
    if settings.MOCK_MODE:
        sys = (messages[0].get("content", "") if messages else "").lower()
        if "json" in sys:
            return "```json\n" + json.dumps(MOCK_QUIZ) + "\n```"
        return MOCK_REPORT
    resp = client().chat.completions.create(
        model=settings.OPENAI_MODEL,
        messages=messages,
        max_tokens=max_tokens,
        temperature=temperature,
    )
    return resp.choices[0].message.content or ""


async def llm(messages, **kw) -> str:
    """Run one chat completion off the event loop, translating provider failures."""
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(_llm_sync, messages, **kw),
            timeout=settings.LLM_TIMEOUT,
        )
    except AuthenticationError:
        logger.error("[llm] OpenAI auth failed")
        raise ExternalServiceError("OpenAI auth failed. Check OPENAI_API_KEY.")
    except RateLimitError:
        logger.warning("[llm] OpenAI quota/rate limit exceeded")
        raise ExternalServiceError("OpenAI quota/rate limit exceeded.", status_code=429)
    except (APITimeoutError, asyncio.TimeoutError):
        logger.warning(f"[llm] no response within {settings.LLM_TIMEOUT}s")
        raise ExternalServiceError("The generation service timed out. Please try again.", status_code=504)
    except APIError as e:
        logger.error(f"[llm] OpenAI API error: {getattr(e, 'message', str(e))}")
        raise ExternalServiceError()
