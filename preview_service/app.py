"""
Preview Service - FastAPI application for the resume builder.

Provides endpoints for pagination, page rendering and PDF export
(Playwright/Chromium), the Gemini text features, Pix payments and
resume persistence.
"""

import json
import logging
from datetime import datetime
from io import BytesIO
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import HTMLResponse, JSONResponse, Response, StreamingResponse
from pydantic import Field, ValidationError

from curriculo.common.config import Config
from curriculo.common.error_handling import (
    ExportInProgressError,
    StorageError,
    UpstreamServiceError,
)
from curriculo.common.logger import setup_logging
from curriculo.common.repositories import InProgressResume, get_resume_repository
from curriculo.common.types import CamelModel, ItemType, ResumeData, demo_resume
from curriculo.pagination import PageData, PaginationScheduler, Paginator
from curriculo.pagination.measurement import MeasurementSurface
from curriculo.rendering.browser import BrowserProvider
from curriculo.rendering.pdf_export import PdfExporter, export_filename
from curriculo.rendering.preview import render_page_html
from curriculo.services import (
    PaymentGateway,
    PriceTier,
    TextEnhancementService,
    extract_pdf_text,
)
from version import __version__

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Curriculo Preview Service",
    version=__version__,
    description="Resume pagination, preview rendering and PDF export using Playwright/Chromium"
)

# Shared collaborators (the browser itself is launched lazily)
_browsers = BrowserProvider()
_paginator = Paginator(MeasurementSurface(_browsers))
_exporter = PdfExporter(_browsers, _paginator)
_text_service = TextEnhancementService()
_payments = PaymentGateway()

# Playwright readiness state
_browser_ready = False
_browser_error: Optional[str] = None


# ============================================================================
# Lifecycle
# ============================================================================

@app.on_event("startup")
async def validate_browser_on_startup():
    """
    Launch the shared Chromium once on startup.

    The service won't report as healthy if Playwright can't render.
    """
    global _browser_ready, _browser_error

    setup_logging(Config.LOG_LEVEL, Config.LOG_FORMAT)
    logger.info(f"Preview Service {__version__} starting")
    logger.info(Config.summary())

    try:
        browser = await _browsers.get_browser()
        page = await browser.new_page()
        await page.set_content("<html><body><h1>Test</h1></body></html>")
        await page.close()
        _browser_ready = True
        _browser_error = None
        logger.info("✅ Chromium ready")
    except Exception as e:
        _browser_ready = False
        _browser_error = str(e)
        logger.error(f"❌ Playwright validation failed: {_browser_error}")
        logger.error("Pagination will fall back to single pages until this is resolved.")


@app.on_event("shutdown")
async def close_browser_on_shutdown():
    await _browsers.close()


# ============================================================================
# Error mapping
# ============================================================================

@app.exception_handler(UpstreamServiceError)
async def upstream_error_handler(request: Request, exc: UpstreamServiceError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(ExportInProgressError)
async def export_in_progress_handler(request: Request, exc: ExportInProgressError):
    return JSONResponse(status_code=409, content={"message": str(exc)})


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(f"Storage failure on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"message": "Falha ao acessar os dados salvos."})


# ============================================================================
# Request/Response Models
# ============================================================================

class HealthResponse(CamelModel):
    """Health check response."""
    status: str = "healthy"
    timestamp: datetime
    version: str
    browser_ready: bool = True
    browser_error: Optional[str] = None
    export_in_progress: bool = False


class RenderPageRequest(CamelModel):
    """One paginated page to render."""
    page: PageData
    page_index: int = Field(0, ge=0, description="0 renders the header block")
    demo_mode: bool = False


class EnhanceTextRequest(CamelModel):
    prompt: str = ""


class SuggestSkillsRequest(CamelModel):
    job_title: str = ""
    experience: str = ""
    existing_skills: List[str] = Field(default_factory=list)


class PdfTextRequest(CamelModel):
    full_text: str = ""


class CreatePaymentRequest(CamelModel):
    is_discounted: bool = False


class SaveResumeRequest(CamelModel):
    resume_data: ResumeData
    editing_id: Optional[str] = Field(None, description="savedAt of the resume being re-exported")


class DeleteItemRequest(CamelModel):
    resume_data: ResumeData
    item_type: ItemType
    item_id: str


# ============================================================================
# Health Check Endpoint
# ============================================================================

@app.get("/health", response_model=HealthResponse, response_model_by_alias=True)
async def health_check() -> HealthResponse:
    """
    Health check endpoint for container orchestration.

    Returns HTTP 503 if Chromium could not be launched on startup.
    """
    if not _browser_ready:
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "timestamp": datetime.utcnow().isoformat(),
                "version": __version__,
                "browserReady": False,
                "browserError": _browser_error,
                "message": "Preview service is unhealthy - Playwright/Chromium not available"
            }
        )

    return HealthResponse(
        timestamp=datetime.utcnow(),
        version=__version__,
        browser_ready=True,
        export_in_progress=_exporter.is_processing,
    )


# ============================================================================
# Pagination / Rendering Endpoints
# ============================================================================

@app.post("/paginate")
async def paginate(document: ResumeData, demo_mode: bool = False) -> List[Dict[str, Any]]:
    """
    Split a Document into A4 pages.

    Never fails: on any layout error the whole Document is returned as a
    single page.
    """
    pages = await _paginator.paginate(document, demo_mode=demo_mode)
    return [page.to_wire() for page in pages]


@app.post("/render-page", response_class=HTMLResponse)
async def render_page(request: RenderPageRequest) -> HTMLResponse:
    """Render one paginated page as a standalone HTML document."""
    html = render_page_html(
        request.page,
        is_first_page=request.page_index == 0,
        demo_mode=request.demo_mode,
    )
    return HTMLResponse(content=html)


@app.post("/export-pdf")
async def export_pdf(document: ResumeData):
    """
    Paginate and print a Document to a multi-page A4 PDF.

    Raises:
        HTTPException: 409 while another export runs, 500 for rendering failures
    """
    try:
        pdf_bytes = await _exporter.export(document)
    except ExportInProgressError:
        raise
    except Exception as e:
        logger.error(f"PDF export failed: {str(e)}")
        raise HTTPException(status_code=500, detail=f"PDF generation failed: {str(e)}")

    filename = export_filename(document)
    return StreamingResponse(
        BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@app.websocket("/ws/paginate")
async def paginate_live(websocket: WebSocket):
    """
    Live pagination while the user edits.

    The client sends {"document": {...}, "demoMode": false} on every edit;
    edits are debounced and only the result of the latest edit is sent
    back as {"runId": N, "pages": [...]}.
    """
    await websocket.accept()

    async def publish(pages: List[PageData]) -> None:
        await websocket.send_json({
            "runId": scheduler.completed_run_id,
            "pages": [page.to_wire() for page in pages],
        })

    scheduler = PaginationScheduler(_paginator, on_result=publish)
    try:
        while True:
            try:
                message = json.loads(await websocket.receive_text())
            except json.JSONDecodeError:
                message = None
            if not isinstance(message, dict):
                await websocket.send_json({"message": "Invalid message: expected a JSON object"})
                continue
            try:
                document = ResumeData.model_validate(message.get("document") or {})
            except ValidationError as e:
                await websocket.send_json({"message": f"Invalid document: {e.error_count()} error(s)"})
                continue
            scheduler.submit(document, demo_mode=bool(message.get("demoMode", False)))
    except WebSocketDisconnect:
        logger.info("Live pagination client disconnected")
    finally:
        await scheduler.aclose()


# ============================================================================
# Document Endpoints
# ============================================================================

@app.get("/demo-resume")
async def get_demo_resume() -> Dict[str, Any]:
    """Sample Document shown before the user starts editing."""
    return demo_resume().model_dump(by_alias=True)


@app.post("/delete-item")
async def delete_item(request: DeleteItemRequest) -> Dict[str, Any]:
    """Remove one experience/education/course/language entry by id."""
    updated = request.resume_data.delete_item(request.item_type, request.item_id)
    return updated.model_dump(by_alias=True)


# ============================================================================
# Text Enhancement Endpoints
# ============================================================================

@app.post("/enhance-text")
def enhance_text(request: EnhanceTextRequest) -> Dict[str, str]:
    """Rewrite a passage in a more professional register."""
    try:
        text = _text_service.enhance(request.prompt)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"text": text}


@app.post("/suggest-skills")
def suggest_skills(request: SuggestSkillsRequest) -> Dict[str, List[str]]:
    """Suggest skills for the desired job title (empty for a blank title)."""
    skills = _text_service.suggest_skills(
        request.job_title,
        request.experience,
        existing_skills=request.existing_skills,
    )
    return {"skills": skills}


@app.post("/analyze-pdf")
def analyze_pdf(request: PdfTextRequest) -> Dict[str, Any]:
    """Extract work history from Carteira de Trabalho text."""
    try:
        experiences = _text_service.extract_experiences(request.full_text)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"experiences": [exp.model_dump(by_alias=True) for exp in experiences]}


@app.post("/analyze-resume-pdf")
def analyze_resume_pdf(request: PdfTextRequest) -> Dict[str, Any]:
    """Extract a partial Document from the text of an existing resume."""
    try:
        return _text_service.extract_resume(request.full_text)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/extract-pdf-text")
async def extract_text(request: Request) -> Dict[str, str]:
    """Extract the text layer of an uploaded PDF (raw request body)."""
    pdf_bytes = await request.body()
    try:
        full_text = extract_pdf_text(pdf_bytes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"fullText": full_text}


# ============================================================================
# Payment Endpoints
# ============================================================================

@app.post("/create-pix-payment")
def create_pix_payment(request: CreatePaymentRequest) -> Dict[str, Any]:
    """Create a Pix charge (discounted when re-exporting an edited resume)."""
    tier = PriceTier.DISCOUNTED if request.is_discounted else PriceTier.STANDARD
    payment = _payments.create_payment(tier)
    return payment.model_dump(by_alias=True)


@app.get("/get-payment-status")
def get_payment_status(paymentId: Optional[str] = None) -> Dict[str, str]:
    """Poll a Pix charge: pending, succeeded or error."""
    try:
        status = _payments.get_status(paymentId or "")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"status": status.value}


# ============================================================================
# Persistence Endpoints
# ============================================================================

@app.get("/progress")
def get_progress() -> Dict[str, Any]:
    """In-progress resume, 404 when the user has none."""
    progress = get_resume_repository().get_progress()
    if progress is None:
        raise HTTPException(status_code=404, detail="No resume in progress")
    return progress.model_dump(by_alias=True)


@app.put("/progress", status_code=204)
def save_progress(progress: InProgressResume) -> Response:
    get_resume_repository().save_progress(progress)
    return Response(status_code=204)


@app.delete("/progress", status_code=204)
def clear_progress() -> Response:
    get_resume_repository().clear_progress()
    return Response(status_code=204)


@app.get("/resumes")
def list_resumes() -> List[Dict[str, Any]]:
    return [resume.model_dump(by_alias=True) for resume in get_resume_repository().list_saved()]


@app.post("/resumes", status_code=201)
def save_resume(request: SaveResumeRequest) -> Dict[str, Any]:
    """
    Keep a paid resume. The in-progress record is cleared afterwards since
    the wizard starts over.
    """
    repository = get_resume_repository()
    saved = repository.save_resume(request.resume_data, editing_id=request.editing_id)
    repository.clear_progress()
    return saved.model_dump(by_alias=True)


@app.delete("/resumes/{saved_at}", status_code=204)
def delete_resume(saved_at: str) -> Response:
    if not get_resume_repository().delete_saved(saved_at):
        raise HTTPException(status_code=404, detail="Resume not found")
    return Response(status_code=204)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=Config.SERVICE_HOST, port=Config.SERVICE_PORT)
