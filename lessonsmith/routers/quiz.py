from datetime import datetime, timezone
import io
from dataclasses import asdict
from fastapi import APIRouter
from fastapi.responses import StreamingResponse
from loguru import logger

from ..schemas import Quiz, QuizRequest, AnswerRequest, McqQuestion, OneWordQuestion, FlashcardQuestion
from ..errors import InputError, ParseError
from ..settings import settings
from ..services.llm import llm
from ..services.parse import parse_quiz
from ..services.prompts import QUIZ_SYSTEM, quiz_prompt
from ..services.pdf import quiz_pdf
from ..services.quiz_engine import QuizSession, QuizStatus, percentage
from ..services import sessions

router = APIRouter(prefix="/api")


@router.post("/generate-quiz")
async def generate_quiz(req: QuizRequest):
    req.topic = req.topic.strip()
    if not req.topic:
        raise InputError("Please enter a topic for the quiz.")
    if not req.types:
        raise InputError("Please select at least one quiz type.")
    if req.numQuestions < 1: req.numQuestions = 1
    if req.numQuestions > settings.MAX_QUESTIONS: req.numQuestions = settings.MAX_QUESTIONS

    logger.info(f"[quiz] generating topic={req.topic!r} types={req.types} n={req.numQuestions}")
    raw_quiz = await llm(
        [
            {"role": "system", "content": QUIZ_SYSTEM},
            {"role": "user", "content": quiz_prompt(req)},
        ],
        max_tokens=4000, temperature=0.4
    )

    try:
        quiz = parse_quiz(raw_quiz)
    except ParseError as e:
        logger.warning(f"[quiz] invalid JSON from model, repairing: {e.__cause__}")
        repaired = await llm(
            [
                {"role": "system", "content": QUIZ_SYSTEM},
                {"role": "user", "content": "Repair strictly to schema (4 options per mcq):\n" + raw_quiz},
            ],
            max_tokens=4000, temperature=0.0
        )
        quiz = parse_quiz(repaired)

    if len(quiz.questions) > req.numQuestions:
        logger.warning(f"[quiz] model returned {len(quiz.questions)} questions, keeping {req.numQuestions}")
        quiz.questions = quiz.questions[:req.numQuestions]

    return {
        "success": True,
        **quiz.model_dump(),
        "metadata": {
            "generatedAt": datetime.now(timezone.utc).isoformat(),
            "requestedTypes": req.types,
            "requestedQuestions": req.numQuestions,
        },
    }


@router.post("/download-quiz")
async def download_quiz(quiz: Quiz):
    data = await quiz_pdf(quiz)
    logger.info(f"[quiz] download questions={len(quiz.questions)} bytes={len(data)}")
    headers = {"Content-Disposition": 'attachment; filename="quiz.pdf"'}
    return StreamingResponse(io.BytesIO(data), media_type="application/pdf", headers=headers)


# ---------- interactive play-through ----------

def _question_view(q) -> dict:
    """What the player may see: never the answer, except a flashcard's back."""
    if isinstance(q, McqQuestion):
        return {"type": q.type, "question": q.question, "options": q.options}
    if isinstance(q, OneWordQuestion):
        return {"type": q.type, "question": q.question}
    if isinstance(q, FlashcardQuestion):
        return {"type": q.type, "question": q.question, "answer": q.answer}
    raise TypeError(f"unknown question type: {q!r}")


def session_view(session_id: str, s: QuizSession) -> dict:
    view = {
        "sessionId": session_id,
        "topic": s.quiz.topic,
        "status": s.status.value,
        "index": s.index,
        "total": s.total,
    }
    if s.status is QuizStatus.IN_PROGRESS:
        view.update(
            question=_question_view(s.current),
            answer=s.answers.get(s.index),
            progress=percentage(s.index + 1, s.total),
            canGoBack=s.index > 0,
            isLast=s.is_last,
        )
    else:
        view["result"] = asdict(s.result())
    return view


@router.post("/quiz/sessions")
async def start_session(quiz: Quiz):
    session_id, s = sessions.open_session(quiz)
    logger.info(f"[quiz] session {session_id} started, {s.total} questions")
    return session_view(session_id, s)


@router.get("/quiz/sessions/{session_id}")
async def get_session(session_id: str):
    return session_view(session_id, sessions.get_session(session_id))


@router.post("/quiz/sessions/{session_id}/answer")
async def submit_answer(session_id: str, req: AnswerRequest):
    s = sessions.get_session(session_id)
    index = s.index if req.index is None else req.index
    accepted = s.submit_answer(index, req.value)
    return {**session_view(session_id, s), "accepted": accepted}


@router.post("/quiz/sessions/{session_id}/next")
async def next_question(session_id: str):
    s = sessions.get_session(session_id)
    s.advance()
    return session_view(session_id, s)


@router.post("/quiz/sessions/{session_id}/previous")
async def previous_question(session_id: str):
    s = sessions.get_session(session_id)
    s.retreat()
    return session_view(session_id, s)


@router.post("/quiz/sessions/{session_id}/finish")
async def finish_quiz(session_id: str):
    s = sessions.get_session(session_id)
    s.finish()
    r = s.result()
    logger.info(f"[quiz] session {session_id} finished {r.score}/{r.total} ({r.percentage}%)")
    return session_view(session_id, s)


@router.post("/quiz/sessions/{session_id}/retake")
async def retake_quiz(session_id: str):
    s = sessions.get_session(session_id)
    s.retake()
    return session_view(session_id, s)


@router.delete("/quiz/sessions/{session_id}")
async def close_session(session_id: str):
    sessions.close_session(session_id)
    return {"deleted": True, "id": session_id}
