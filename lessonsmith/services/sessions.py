import uuid
from collections import OrderedDict
from loguru import logger
from ..settings import settings
from ..schemas import Quiz
from ..errors import SessionNotFound
from .quiz_engine import QuizSession

# In-memory only; a session lives as long as its quiz view.
_sessions: "OrderedDict[str, QuizSession]" = OrderedDict()


def open_session(quiz: Quiz) -> tuple[str, QuizSession]:
    session_id = uuid.uuid4().hex
    session = QuizSession(quiz)
    session.start()
    _sessions[session_id] = session
    while len(_sessions) > settings.MAX_SESSIONS:
        old_id, _ = _sessions.popitem(last=False)
        logger.info(f"[sessions] evicted {old_id}")
    return session_id, session


def get_session(session_id: str) -> QuizSession:
    try:
        return _sessions[session_id]
    except KeyError:
        raise SessionNotFound()


def close_session(session_id: str) -> None:
    if _sessions.pop(session_id, None) is None:
        raise SessionNotFound()


def clear() -> None:
    _sessions.clear()
