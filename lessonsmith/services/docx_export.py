"""Word export of a rendered report."""

import asyncio, io
from docx import Document
from docx.shared import Pt
from loguru import logger

from ..settings import settings
from ..errors import ExternalServiceError
from .markdown import Block, HeadingBlock, ListBlock, ParagraphBlock, Run, TableBlock, render


def _add_runs(paragraph, runs: list[Run], *, bold: bool = False):
    for r in runs:
        run = paragraph.add_run(r.text)
        run.bold = bold or r.bold
        run.italic = r.italic
        run.underline = r.underline
    return paragraph


def _add_table(doc, block: TableBlock):
    # ragged rows: widest row decides the column count, short rows stay blank
    cols = max([len(block.header)] + [len(r) for r in block.rows])
    table = doc.add_table(rows=1 + len(block.rows), cols=cols)
    table.style = "Table Grid"
    for c, cell in enumerate(block.header):
        _add_runs(table.rows[0].cells[c].paragraphs[0], cell, bold=True)
    for r, row in enumerate(block.rows, start=1):
        for c, cell in enumerate(row):
            _add_runs(table.rows[r].cells[c].paragraphs[0], cell)


def _add_block(doc, block: Block):
    if isinstance(block, HeadingBlock):
        _add_runs(doc.add_heading(level=block.level), block.runs)
    elif isinstance(block, ParagraphBlock):
        _add_runs(doc.add_paragraph(), block.runs)
    elif isinstance(block, ListBlock):
        for item in block.items:
            if block.ordered:
                p = doc.add_paragraph(style="List Paragraph")
                p.add_run(f"{item.ordinal}. ")
            else:
                p = doc.add_paragraph(style="List Bullet")
            _add_runs(p, item.runs)
    elif isinstance(block, TableBlock):
        if block.header or block.rows:
            _add_table(doc, block)
    else:
        raise TypeError(f"unknown block: {block!r}")


def build_docx(blocks: list[Block]) -> bytes:
    doc = Document()
    header = doc.sections[0].header.paragraphs[0]
    mark = header.add_run(settings.WATERMARK_TEXT)
    mark.bold = True
    mark.font.size = Pt(7)

    for block in blocks:
        _add_block(doc, block)

    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


async def report_docx(content: str) -> bytes:
    try:
        return await asyncio.to_thread(build_docx, render(content, "docBlocks"))
    except Exception as e:
        logger.exception(f"[docx] report build failed: {e}")
        raise ExternalServiceError("Failed to generate download")
