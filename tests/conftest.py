import os

# must be set before lessonsmith.settings is imported
os.environ["MOCK_MODE"] = "1"
os.environ["RATE_LIMIT_ENABLED"] = "0"
os.environ.pop("OPENAI_API_KEY", None)

import fitz
import pytest
from fastapi.testclient import TestClient

from lessonsmith.main import app
from lessonsmith.services import sessions


@pytest.fixture
def client():
    sessions.clear()
    with TestClient(app) as c:
        yield c
    sessions.clear()


@pytest.fixture
def quiz_payload():
    return {
        "topic": "Geography",
        "difficulty": "easy",
        "questions": [
            {"type": "mcq", "question": "Largest ocean?",
             "options": ["Atlantic", "Indian", "Pacific", "Arctic"], "correctAnswer": 2},
            {"type": "oneword", "question": "Capital of France?", "answer": "Paris"},
            {"type": "flashcard", "question": "Longest river?", "answer": "The Nile"},
        ],
    }


@pytest.fixture
def pdf_text():
    def extract(data: bytes) -> str:
        # without TEXT_PRESERVE_LIGATURES, so "fi" comes back as two letters
        with fitz.open("pdf", data) as doc:
            return "".join(page.get_text(flags=fitz.TEXT_PRESERVE_WHITESPACE) for page in doc)
    return extract
