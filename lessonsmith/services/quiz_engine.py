from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Union

from ..errors import QuizStateError, ValidationError
from ..schemas import FlashcardQuestion, McqQuestion, OneWordQuestion, Quiz

Answer = Union[int, str]


class QuizStatus(str, enum.Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


# (lower bound, tier, message template), checked top to bottom
TIERS = (
    (90, "excellent", "🎉 Excellent work! You have a great understanding of {topic}!"),
    (70, "good", "👍 Good job! You have a solid grasp of {topic}!"),
    (50, "average", "📚 Not bad! Consider reviewing {topic} to improve your understanding."),
    (0, "needs work", "💪 Keep studying! {topic} requires more practice."),
)


@dataclass(frozen=True)
class QuizResult:
    score: int
    total: int
    percentage: int
    tier: str
    message: str


def is_correct(question, answer: Answer | None) -> bool:
    if isinstance(question, McqQuestion):
        return isinstance(answer, int) and answer == question.correctAnswer
    if isinstance(question, OneWordQuestion):
        return isinstance(answer, str) and (
            answer.strip().casefold() == question.answer.strip().casefold()
        )
    if isinstance(question, FlashcardQuestion):
        # flashcards count engagement, not correctness
        return True
    raise TypeError(f"unknown question type: {question!r}")


def score_answers(questions, answers: dict[int, Answer]) -> int:
    return sum(1 for i, q in enumerate(questions) if is_correct(q, answers.get(i)))


def percentage(score: int, total: int) -> int:
    if total <= 0:
        return 0
    # half-up, not banker's rounding
    return int(math.floor(100 * score / total + 0.5))


def performance(pct: int, topic: str) -> tuple[str, str]:
    for bound, tier, template in TIERS:
        if pct >= bound:
            return tier, template.format(topic=topic)
    _, tier, template = TIERS[-1]
    return tier, template.format(topic=topic)


class QuizSession:
    def __init__(self, quiz: Quiz):
        self.quiz = quiz
        self.status = QuizStatus.IDLE
        self.index = 0
        self.answers: dict[int, Answer] = {}
        self.score = 0

    @property
    def total(self) -> int:
        return len(self.quiz.questions)

    @property
    def current(self):
        if self.status is not QuizStatus.IN_PROGRESS:
            return None
        return self.quiz.questions[self.index]

    @property
    def is_last(self) -> bool:
        return self.index == self.total - 1

    def _require(self, status: QuizStatus, action: str):
        if self.status is not status:
            raise QuizStateError(f"Cannot {action} while the quiz is {self.status.value}.")

    def start(self):
        self.index = 0
        self.answers = {}
        self.score = 0
        self.status = QuizStatus.IN_PROGRESS
        if self.total == 0:
            self._score_and_close()

    def submit_answer(self, index: int, value) -> bool:
        """Record `value` for question `index`. Returns False when it is ignored."""
        if self.status is not QuizStatus.IN_PROGRESS or not 0 <= index < self.total:
            return False
        question = self.quiz.questions[index]
        if isinstance(question, McqQuestion):
            if isinstance(value, bool) or not isinstance(value, int):
                return False
            if not 0 <= value < len(question.options):
                return False
        elif isinstance(question, OneWordQuestion):
            if not isinstance(value, str) or not value.strip():
                return False
        elif isinstance(question, FlashcardQuestion):
            return False
        else:
            raise TypeError(f"unknown question type: {question!r}")
        self.answers[index] = value
        return True

    def advance(self):
        self._require(QuizStatus.IN_PROGRESS, "move to the next question")
        question = self.current
        if isinstance(question, OneWordQuestion):
            answer = self.answers.get(self.index)
            if not isinstance(answer, str) or not answer.strip():
                raise ValidationError()
        self.index += 1
        if self.index == self.total:
            self._score_and_close()

    def retreat(self):
        self._require(QuizStatus.IN_PROGRESS, "go back")
        if self.index == 0:
            raise QuizStateError("Already at the first question.")
        self.index -= 1

    def finish(self):
        self._require(QuizStatus.IN_PROGRESS, "finish")
        if not self.is_last:
            raise QuizStateError("Finish is only available on the last question.")
        self._score_and_close()

    def retake(self):
        self._require(QuizStatus.FINISHED, "retake")
        self.start()

    def _score_and_close(self):
        self.score = score_answers(self.quiz.questions, self.answers)
        self.index = self.total
        self.status = QuizStatus.FINISHED

    def result(self) -> QuizResult:
        self._require(QuizStatus.FINISHED, "show results")
        pct = percentage(self.score, self.total)
        tier, message = performance(pct, self.quiz.topic)
        return QuizResult(
            score=self.score, total=self.total, percentage=pct, tier=tier, message=message
        )
