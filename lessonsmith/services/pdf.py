import asyncio, html, io
import fitz  # PyMuPDF
from loguru import logger
from ..settings import settings
from ..errors import ExternalServiceError
from ..schemas import Quiz, McqQuestion, OneWordQuestion, FlashcardQuestion
from .markdown import render

MARGIN = 72  # 1in

REPORT_CSS = """
body { font-family: sans-serif; line-height: 1.6; color: #333; }
h1, h2, h3 { color: #2c3e50; margin-top: 24px; margin-bottom: 12px; }
h1 { font-size: 24px; }
h2 { font-size: 19px; }
h3 { font-size: 16px; color: #34495e; }
p { margin-bottom: 12px; text-align: justify; }
li { margin-bottom: 6px; }
strong { color: #2c3e50; }
em { color: #7f8c8d; }
u { color: #e74c3c; }
table { border-collapse: collapse; margin: 16px 0; }
th, td { border: 1px solid #bdc3c7; padding: 6px; text-align: left; }
th { background-color: #ecf0f1; font-weight: bold; }
"""

QUIZ_CSS = """
body { font-family: sans-serif; line-height: 1.5; }
.quiz-header { text-align: center; margin-bottom: 24px; }
.question { margin-bottom: 18px; }
.question-title { font-weight: bold; margin-bottom: 6px; }
.option { margin-left: 20px; }
.answer-space { margin-left: 20px; }
"""


def _stamp(pdf: bytes, text: str) -> bytes:
    doc = fitz.open("pdf", pdf)
    try:
        for page in doc:
            page.insert_text((5, 12), text, fontsize=8, color=(0, 0, 0), fill_opacity=0.3)
        return doc.tobytes()
    finally:
        doc.close()


def html_to_pdf(body: str, css: str) -> bytes:
    """Lay out an HTML fragment on A4 pages and return the PDF bytes."""
    story = fitz.Story(html=body, user_css=css)
    buf = io.BytesIO()
    writer = fitz.DocumentWriter(buf)
    mediabox = fitz.paper_rect("a4")
    where = mediabox + (MARGIN, MARGIN, -MARGIN, -MARGIN)
    more = 1
    while more:
        device = writer.begin_page(mediabox)
        more, _ = story.place(where)
        story.draw(device)
        writer.end_page()
    writer.close()
    return _stamp(buf.getvalue(), settings.WATERMARK_TEXT)


def quiz_html(quiz: Quiz) -> str:
    esc = lambda s: html.escape(str(s), quote=False)
    parts = [
        '<div class="quiz-header">'
        f"<h1>{esc(quiz.topic)}</h1>"
        f"<p>Difficulty: {esc(quiz.difficulty)} | Questions: {len(quiz.questions)}</p>"
        "</div>"
    ]
    key = []
    for n, q in enumerate(quiz.questions, start=1):
        body = f'<div class="question-title">{n}. {esc(q.question)}</div>'
        if isinstance(q, McqQuestion):
            body += "".join(f'<div class="option">○ {esc(o)}</div>' for o in q.options)
            key.append(f"<p>{n}. {esc(q.options[q.correctAnswer])}</p>")
        elif isinstance(q, OneWordQuestion):
            body += '<div class="answer-space">Answer: _________________</div>'
            key.append(f"<p>{n}. {esc(q.answer)}</p>")
        elif isinstance(q, FlashcardQuestion):
            key.append(f"<p>{n}. {esc(q.answer)}</p>")
        parts.append(f'<div class="question">{body}</div>')
    parts.append('<h2 style="page-break-before: always">Answer Key</h2>')
    parts.extend(key)
    return "\n".join(parts)


async def report_pdf(content: str) -> bytes:
    try:
        return await asyncio.to_thread(html_to_pdf, render(content, "html"), REPORT_CSS)
    except Exception as e:
        logger.exception(f"[pdf] report render failed: {e}")
        raise ExternalServiceError("Failed to generate download")


async def quiz_pdf(quiz: Quiz) -> bytes:
    try:
        return await asyncio.to_thread(html_to_pdf, quiz_html(quiz), QUIZ_CSS)
    except Exception as e:
        logger.exception(f"[pdf] quiz render failed: {e}")
        raise ExternalServiceError("Failed to generate quiz download")
