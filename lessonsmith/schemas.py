from typing import Annotated, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, model_validator


class McqQuestion(BaseModel):
    type: Literal["mcq"] = "mcq"
    question: str
    options: List[str]
    correctAnswer: StrictInt

    @model_validator(mode="after")
    def _check_options(self):
        if len(self.options) != 4:
            raise ValueError("mcq needs exactly 4 options")
        if not 0 <= self.correctAnswer < len(self.options):
            raise ValueError("correctAnswer must index into options")
        return self


class OneWordQuestion(BaseModel):
    type: Literal["oneword"] = "oneword"
    question: str
    answer: str


class FlashcardQuestion(BaseModel):
    type: Literal["flashcard"] = "flashcard"
    question: str
    answer: str


Question = Annotated[
    Union[McqQuestion, OneWordQuestion, FlashcardQuestion],
    Field(discriminator="type"),
]


class Quiz(BaseModel):
    topic: str = "Untitled"
    difficulty: str = "medium"
    questions: List[Question]


# ---------- requests ----------

QuestionType = Literal["mcq", "oneword", "flashcard"]


class ReportRequest(BaseModel):
    topic: str = ""
    length: Literal["short", "medium", "long"] = "medium"
    format: str = "paragraph"
    formatting: List[str] = Field(default_factory=list)


class QuizRequest(BaseModel):
    topic: str = ""
    types: List[QuestionType] = Field(default_factory=list)
    numQuestions: int = 10
    difficulty: str = "medium"


class RenderRequest(BaseModel):
    content: str
    target: Literal["html", "docBlocks"] = "html"


class DownloadReportRequest(BaseModel):
    content: str
    format: Literal["pdf", "docx"] = "pdf"


class AnswerRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    value: Union[StrictInt, StrictStr, None] = None
    index: Optional[int] = None
