# Malformed input never raises; unmatched lines become paragraph text.

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class Run:
    text: str
    bold: bool = False
    italic: bool = False
    underline: bool = False


@dataclass
class HeadingBlock:
    level: int
    runs: list[Run]
    kind: str = field(default="heading", init=False)


@dataclass
class ParagraphBlock:
    runs: list[Run]
    kind: str = field(default="paragraph", init=False)


@dataclass
class ListItem:
    runs: list[Run]
    ordinal: str | None = None


@dataclass
class ListBlock:
    ordered: bool
    items: list[ListItem]
    kind: str = field(default="list", init=False)


@dataclass
class TableBlock:
    header: list[list[Run]]
    rows: list[list[list[Run]]]
    kind: str = field(default="table", init=False)


Block = Union[HeadingBlock, ParagraphBlock, ListBlock, TableBlock]

# `**` must be tried before `*` so bold is never read as two italics.
_INLINE = re.compile(r"\*\*(.+?)\*\*|\*(.+?)\*|__(.+?)__")
_HEADINGS = (("### ", 3), ("## ", 2), ("# ", 1))
_ORDERED = re.compile(r"^(\d+)\. (.*)$")
_SEPARATOR_CELL = re.compile(r"^[\s:]*-[-\s:]*$")


def parse_inline(text: str) -> list[Run]:
    runs: list[Run] = []
    pos = 0
    for m in _INLINE.finditer(text):
        if m.start() > pos:
            runs.append(Run(text[pos:m.start()]))
        bold, italic, underline = m.groups()
        if bold is not None:
            runs.append(Run(bold, bold=True))
        elif italic is not None:
            runs.append(Run(italic, italic=True))
        else:
            runs.append(Run(underline, underline=True))
        pos = m.end()
    if pos < len(text):
        runs.append(Run(text[pos:]))
    return runs


def plain_text(runs: list[Run]) -> str:
    return "".join(r.text for r in runs)


def split_cells(line: str) -> list[str]:
    cells = [c.strip() for c in line.strip().split("|")]
    # outer pipes leave empty strings at either end
    if cells and not cells[0]:
        cells = cells[1:]
    if cells and not cells[-1]:
        cells = cells[:-1]
    return cells


def _is_pipe_line(line: str) -> bool:
    return "|" in line and bool(line.strip())


def _is_separator(line: str) -> bool:
    cells = split_cells(line)
    return bool(cells) and all(_SEPARATOR_CELL.match(c) for c in cells)


def _table_at(lines: list[str], i: int) -> tuple[TableBlock | None, int]:
    """Return the table starting at line `i` and the index after it, if any."""
    j = i
    while j < len(lines) and _is_pipe_line(lines[j]):
        j += 1
    span = lines[i:j]
    if len(span) < 3 or not _is_separator(span[1]):
        return None, i

    header = [parse_inline(c) for c in split_cells(span[0])]
    rows = []
    for line in span[2:]:
        cells = split_cells(line)
        if cells:
            rows.append([parse_inline(c) for c in cells])
    return TableBlock(header=header, rows=rows), j


def _heading(line: str) -> HeadingBlock | None:
    for prefix, level in _HEADINGS:
        if line.startswith(prefix):
            return HeadingBlock(level=level, runs=parse_inline(line[len(prefix):].strip()))
    return None


def _list_item(line: str) -> tuple[bool, ListItem] | None:
    if line.startswith("* "):
        return False, ListItem(runs=parse_inline(line[2:].strip()))
    m = _ORDERED.match(line)
    if m:
        return True, ListItem(runs=parse_inline(m.group(2).strip()), ordinal=m.group(1))
    return None


def parse_blocks(source: str) -> list[Block]:
    lines = (source or "").splitlines()
    blocks: list[Block] = []
    paragraph: list[str] = []
    current_list: ListBlock | None = None

    def flush_paragraph():
        if paragraph:
            blocks.append(ParagraphBlock(runs=parse_inline(" ".join(paragraph))))
            paragraph.clear()

    i = 0
    while i < len(lines):
        line = lines[i]

        if _is_pipe_line(line):
            table, end = _table_at(lines, i)
            if table is not None:
                flush_paragraph()
                current_list = None
                blocks.append(table)
                i = end
                continue

        if not line.strip():
            flush_paragraph()
            current_list = None
            i += 1
            continue

        heading = _heading(line)
        if heading is not None:
            flush_paragraph()
            current_list = None
            blocks.append(heading)
            i += 1
            continue

        item = _list_item(line)
        if item is not None:
            flush_paragraph()
            ordered, list_item = item
            if current_list is None or current_list.ordered != ordered:
                current_list = ListBlock(ordered=ordered, items=[])
                blocks.append(current_list)
            current_list.items.append(list_item)
            i += 1
            continue

        current_list = None
        paragraph.append(line.strip())
        i += 1

    flush_paragraph()
    return blocks


# ---------- html ----------

def runs_to_html(runs: list[Run]) -> str:
    out = []
    for r in runs:
        text = html.escape(r.text, quote=False)
        if r.bold:
            text = f"<strong>{text}</strong>"
        elif r.italic:
            text = f"<em>{text}</em>"
        elif r.underline:
            text = f"<u>{text}</u>"
        out.append(text)
    return "".join(out)


def _block_html(block: Block, table_class: str) -> str:
    if isinstance(block, HeadingBlock):
        return f"<h{block.level}>{runs_to_html(block.runs)}</h{block.level}>"
    if isinstance(block, ParagraphBlock):
        return f"<p>{runs_to_html(block.runs)}</p>"
    if isinstance(block, ListBlock):
        if block.ordered:
            items = "".join(
                f'<li value="{it.ordinal}">{runs_to_html(it.runs)}</li>' for it in block.items
            )
            return f"<ol>{items}</ol>"
        items = "".join(f"<li>{runs_to_html(it.runs)}</li>" for it in block.items)
        return f"<ul>{items}</ul>"
    if isinstance(block, TableBlock):
        head = "".join(f"<th>{runs_to_html(c)}</th>" for c in block.header)
        body = "".join(
            "<tr>" + "".join(f"<td>{runs_to_html(c)}</td>" for c in row) + "</tr>"
            for row in block.rows
        )
        return (
            f'<table class="{table_class}"><thead><tr>{head}</tr></thead>'
            f"<tbody>{body}</tbody></table>"
        )
    raise TypeError(f"unknown block: {block!r}")


def render_html(blocks: list[Block], *, table_class: str = "report-table") -> str:
    return "\n".join(_block_html(b, table_class) for b in blocks)


def render(source: str, target: str = "html"):
    """Render markdown-subset text to an HTML fragment or a list of blocks."""
    blocks = parse_blocks(source)
    if target == "html":
        return render_html(blocks)
    if target == "docBlocks":
        return blocks
    raise ValueError(f"unknown render target: {target}")
