from datetime import datetime, timezone
import io
from dataclasses import asdict
from fastapi import APIRouter
from fastapi.responses import StreamingResponse
from loguru import logger

from ..schemas import ReportRequest, RenderRequest, DownloadReportRequest
from ..errors import InputError
from ..services.llm import llm
from ..services.prompts import REPORT_SYSTEM, report_prompt
from ..services.markdown import render
from ..services.pdf import report_pdf
from ..services.docx_export import report_docx

router = APIRouter(prefix="/api")

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@router.post("/generate-report")
async def generate_report(req: ReportRequest):
    req.topic = req.topic.strip()
    if not req.topic:
        raise InputError("Please enter a topic for the report.")

    logger.info(f"[report] generating topic={req.topic!r} length={req.length}")
    content = await llm(
        [
            {"role": "system", "content": REPORT_SYSTEM},
            {"role": "user", "content": report_prompt(req)},
        ],
        max_tokens=4000, temperature=0.7
    )
    return {
        "success": True,
        "content": content,
        "metadata": {
            "topic": req.topic,
            "length": req.length,
            "format": req.format,
            "generatedAt": datetime.now(timezone.utc).isoformat(),
        },
    }


@router.post("/render")
async def render_report(req: RenderRequest):
    out = render(req.content, req.target)
    if req.target == "html":
        return {"success": True, "html": out}
    return {"success": True, "blocks": [asdict(b) for b in out]}


@router.post("/download-report")
async def download_report(req: DownloadReportRequest):
    if not req.content.strip():
        raise InputError("Nothing to download.")

    if req.format == "pdf":
        data = await report_pdf(req.content)
        media_type = "application/pdf"
    else:
        data = await report_docx(req.content)
        media_type = DOCX_MEDIA_TYPE

    logger.info(f"[report] download format={req.format} bytes={len(data)}")
    headers = {"Content-Disposition": f'attachment; filename="report.{req.format}"'}
    return StreamingResponse(io.BytesIO(data), media_type=media_type, headers=headers)
