import math
from ..schemas import QuizRequest, ReportRequest

LENGTH_GUIDE = {
    "short": "500-800 words",
    "medium": "1000-1500 words",
    "long": "2000+ words",
}

REPORT_SYSTEM = "You write well-structured, factual educational reports in markdown."

QUIZ_SYSTEM = (
    "Return only valid JSON with no extra text. "
    "Schema: {\"topic\":\"...\",\"difficulty\":\"...\",\"questions\":["
    "{\"type\":\"mcq\",\"question\":\"...\",\"options\":[\"A\",\"B\",\"C\",\"D\"],\"correctAnswer\":0},"
    "{\"type\":\"oneword\",\"question\":\"...\",\"answer\":\"...\"},"
    "{\"type\":\"flashcard\",\"question\":\"...\",\"answer\":\"...\"}]}."
)

TYPE_LABELS = {
    "mcq": "multiple choice questions with 4 options each",
    "oneword": "one-word answer questions",
    "flashcard": "flashcard-style Q&A pairs",
}


def question_counts(types: list[str], total: int) -> dict[str, int]:
    """Split `total` questions over the selected types, first type getting the most."""
    types = list(dict.fromkeys(types))
    if not types:
        return {}
    if len(types) == 1:
        return {types[0]: total}
    if len(types) == 2:
        first = math.ceil(total * 0.6)
        return {types[0]: first, types[1]: total - first}
    first = math.ceil(total * 0.5)
    second = math.ceil(total * 0.3)
    return {types[0]: first, types[1]: second, types[2]: total - first - second}


def report_prompt(req: ReportRequest) -> str:
    options = set(req.formatting)
    lines = [
        "- Use markdown formatting for structure",
        "- Use clear section headings (## for main sections, ### for subsections)" if "headings" in options else "",
        "- Use **bold** for important terms and concepts",
        "- Use *italics* for emphasis",
        "- Use __underline__ for key definitions",
        "- Include bullet points (* item) where appropriate" if "bullet" in options else "",
        "- Use numbered lists for sequential information" if "numbered" in options else "",
        "- Include pipe tables for data comparison where relevant" if "tables" in options else "",
        "- Include an introduction, main content sections, and conclusion",
        "- Ensure proper paragraph breaks for readability",
    ]
    requirements = "\n".join(l for l in lines if l)
    return (
        f"Create a comprehensive report about \"{req.topic}\" that is {LENGTH_GUIDE[req.length]}.\n\n"
        f"Format Requirements:\n{requirements}\n\n"
        "The report should be educational and factual, covering key aspects of the topic in depth."
    )


def quiz_prompt(req: QuizRequest) -> str:
    counts = question_counts(req.types, req.numQuestions)
    wanted = ", ".join(f"{n} {TYPE_LABELS[t]}" for t, n in counts.items() if n > 0)
    return (
        f"Create a {req.difficulty} difficulty quiz about \"{req.topic}\" "
        f"with exactly {req.numQuestions} questions total.\n\n"
        f"Include exactly: {wanted}\n\n"
        f"Create questions in the exact order and quantities specified above. "
        f"Do not exceed {req.numQuestions} total questions. "
        f"Set \"topic\" to \"{req.topic}\" and \"difficulty\" to \"{req.difficulty}\". "
        "Test understanding rather than memorization."
    )
