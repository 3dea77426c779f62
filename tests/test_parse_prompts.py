import json

import pytest

from lessonsmith.errors import ParseError
from lessonsmith.schemas import FlashcardQuestion, McqQuestion, OneWordQuestion, QuizRequest, ReportRequest
from lessonsmith.services.parse import parse_quiz
from lessonsmith.services.prompts import question_counts, quiz_prompt, report_prompt


def test_parse_quiz_strips_code_fences(quiz_payload):
    quiz = parse_quiz("```json\n" + json.dumps(quiz_payload) + "\n```")
    assert quiz.topic == "Geography"
    assert [type(q) for q in quiz.questions] == [McqQuestion, OneWordQuestion, FlashcardQuestion]


@pytest.mark.parametrize("raw", [
    "not json at all",
    "[]",
    json.dumps({"questions": [{"type": "essay", "question": "?"}]}),
    json.dumps({"questions": [{"type": "mcq", "question": "?", "options": ["a", "b"], "correctAnswer": 0}]}),
    json.dumps({"questions": [{"type": "mcq", "question": "?", "options": ["a", "b", "c", "d"], "correctAnswer": 4}]}),
    json.dumps({"questions": [{"type": "mcq", "question": "?", "options": ["a", "b", "c", "d"], "correctAnswer": True}]}),
])
def test_parse_quiz_rejects_bad_payloads(raw):
    with pytest.raises(ParseError):
        parse_quiz(raw)


@pytest.mark.parametrize("types,total,expected", [
    (["mcq"], 10, {"mcq": 10}),
    (["mcq", "oneword"], 10, {"mcq": 6, "oneword": 4}),
    (["mcq", "oneword"], 5, {"mcq": 3, "oneword": 2}),
    (["mcq", "oneword", "flashcard"], 10, {"mcq": 5, "oneword": 3, "flashcard": 2}),
    (["flashcard", "flashcard"], 4, {"flashcard": 4}),
    ([], 4, {}),
])
def test_question_counts(types, total, expected):
    assert question_counts(types, total) == expected


def test_quiz_prompt_mentions_counts():
    req = QuizRequest(topic="Volcanoes", types=["mcq", "flashcard"], numQuestions=5, difficulty="hard")
    prompt = quiz_prompt(req)
    assert "hard difficulty quiz about \"Volcanoes\"" in prompt
    assert "3 multiple choice questions with 4 options each, 2 flashcard-style Q&A pairs" in prompt


def test_report_prompt_formatting_options():
    plain = report_prompt(ReportRequest(topic="Bees", length="short"))
    assert "500-800 words" in plain
    assert "pipe tables" not in plain
    rich = report_prompt(ReportRequest(topic="Bees", length="long", formatting=["tables", "headings"]))
    assert "2000+ words" in rich
    assert "pipe tables" in rich and "## for main sections" in rich
