import json, re
import pydantic
from ..schemas import Quiz
from ..errors import ParseError

def _clean(s: str) -> str:
    return re.sub(r"```(json|JSON)?|```", "", s or "").strip()

def parse_quiz(s: str) -> Quiz:
    try:
        data = json.loads(_clean(s))
        return Quiz.model_validate(data)
    except (json.JSONDecodeError, pydantic.ValidationError) as e:
        raise ParseError() from e
