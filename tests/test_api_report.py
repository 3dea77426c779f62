import io

import docx

from lessonsmith.errors import ExternalServiceError
from lessonsmith.routers import report as report_router

REPORT = """# Solar Power

Solar panels turn **light** into *electricity*.

## Types

* Monocrystalline
* Polycrystalline

1. Install
2. Connect

| Type | Efficiency |
|---|---|
| Mono | 22% |
| Poly |
"""


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["ok"] is True and r.json()["mock"] is True


def test_generate_report_mock(client):
    r = client.post("/api/generate-report", json={"topic": "  Bees ", "length": "short", "formatting": ["bullet"]})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["content"].startswith("# Mock Report")
    assert body["metadata"]["topic"] == "Bees"
    assert body["metadata"]["length"] == "short"
    assert "generatedAt" in body["metadata"]


def test_generate_report_requires_topic(client):
    r = client.post("/api/generate-report", json={"topic": "   "})
    assert r.status_code == 400
    assert r.json() == {"success": False, "error": "Please enter a topic for the report."}


def test_generate_report_bad_length_is_input_error(client):
    r = client.post("/api/generate-report", json={"topic": "Bees", "length": "epic"})
    assert r.status_code == 400
    assert r.json()["success"] is False
    assert "length" in r.json()["error"]


def test_generate_report_service_failure(client, monkeypatch):
    async def boom(*a, **kw):
        raise ExternalServiceError()
    monkeypatch.setattr(report_router, "llm", boom)
    r = client.post("/api/generate-report", json={"topic": "Bees"})
    assert r.status_code == 502
    assert r.json()["success"] is False


def test_render_html(client):
    r = client.post("/api/render", json={"content": "# T\n\n**b**", "target": "html"})
    assert r.json() == {"success": True, "html": "<h1>T</h1>\n<p><strong>b</strong></p>"}


def test_render_doc_blocks(client):
    r = client.post("/api/render", json={"content": REPORT, "target": "docBlocks"})
    blocks = r.json()["blocks"]
    assert [b["kind"] for b in blocks] == ["heading", "paragraph", "heading", "list", "list", "table"]
    assert blocks[1]["runs"][1] == {"text": "light", "bold": True, "italic": False, "underline": False}
    assert blocks[4]["ordered"] is True
    assert blocks[4]["items"][0]["ordinal"] == "1"


def test_download_report_pdf(client, pdf_text):
    r = client.post("/api/download-report", json={"content": REPORT, "format": "pdf"})
    assert r.status_code == 200
    assert r.headers["content-type"] == "application/pdf"
    assert 'filename="report.pdf"' in r.headers["content-disposition"]
    assert r.content.startswith(b"%PDF")
    text = pdf_text(r.content)
    assert "Solar Power" in text
    assert "LessonSmith" in text


def test_download_report_docx(client):
    r = client.post("/api/download-report", json={"content": REPORT, "format": "docx"})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/vnd.openxmlformats")
    doc = docx.Document(io.BytesIO(r.content))
    texts = [p.text for p in doc.paragraphs]
    assert "Solar Power" in texts
    assert "Solar panels turn light into electricity." in texts
    assert "1. Install" in texts
    bold = [run.text for p in doc.paragraphs for run in p.runs if run.bold]
    assert "light" in bold
    [table] = doc.tables
    assert [c.text for c in table.rows[0].cells] == ["Type", "Efficiency"]
    assert [c.text for c in table.rows[2].cells] == ["Poly", ""]
    assert doc.sections[0].header.paragraphs[0].text == "LessonSmith"


def test_download_report_empty_content(client):
    r = client.post("/api/download-report", json={"content": "  ", "format": "pdf"})
    assert r.status_code == 400
