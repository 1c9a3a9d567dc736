"""
HTML to PDF Service - FastAPI application.

Routes:
    GET  /             health check and endpoint listing
    POST /html-to-pdf  convert posted HTML to a PDF download
    GET  /test-pdf     render a built-in sample document
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import PDFServiceSettings, get_settings
from .generator import PDFGenerator, RenderFailure
from .logger import get_logger
from .middleware import BodySizeLimitMiddleware, RequestIdMiddleware
from .options import USAGE_HINT, RenderRequest, available_options
from .templates import build_sample_html

logger = get_logger(__name__)

ENDPOINTS = {
    "html-to-pdf": "POST /html-to-pdf - Convert HTML content to PDF",
    "health": "GET / - Health check",
    "test": "GET /test-pdf - Generate test PDF",
}

AVAILABLE_ROUTES = ["GET /", "POST /html-to-pdf", "GET /test-pdf"]


def pdf_response(pdf: bytes, filename: str) -> Response:
    """Binary PDF download; Content-Length is set from the body."""
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


@asynccontextmanager
async def render_slot(request: Request) -> AsyncIterator[None]:
    """
    Hold an admission slot for the duration of a render.

    No-op unless MAX_CONCURRENT_RENDERS is configured. When every slot is
    taken the request is rejected with 503 rather than queued.
    """
    semaphore: Optional[asyncio.Semaphore] = request.app.state.render_slots
    if semaphore is None:
        yield
        return

    if semaphore.locked():
        get_logger(__name__, _request_id(request)).warning(
            "PDF service overloaded, rejecting request"
        )
        raise HTTPException(
            status_code=503,
            detail={
                "error": "Service overloaded",
                "details": "Too many concurrent PDF operations.",
            },
        )

    async with semaphore:
        yield


def create_app(
    settings: Optional[PDFServiceSettings] = None,
    generator: Optional[PDFGenerator] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Service configuration; defaults to the cached process settings
        generator: PDF generator; defaults to a Playwright-backed generator

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(f"HTML to PDF server running on port {settings.port}")
        logger.info(f"Health check: http://localhost:{settings.port}/")
        logger.info(f"PDF API: POST http://localhost:{settings.port}/html-to-pdf")
        logger.info(f"Test PDF: GET http://localhost:{settings.port}/test-pdf")
        yield
        logger.info("Shutting down, in-flight renders are not drained")

    app = FastAPI(
        title="HTML to PDF Service",
        version=__version__,
        description="Convert HTML content to PDF using Playwright/Chromium",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.generator = generator or PDFGenerator(settings)
    app.state.render_slots = (
        asyncio.Semaphore(settings.max_concurrent_renders)
        if settings.concurrency_limited
        else None
    )

    app.add_middleware(BodySizeLimitMiddleware, max_body_size=settings.max_body_size_bytes)
    app.add_middleware(RequestIdMiddleware)

    # ========================================================================
    # Error handlers
    # ========================================================================

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Wrong method on a known path is reported the same as an unknown path
        if exc.status_code in (404, 405):
            return JSONResponse(
                status_code=404,
                content={"error": "Endpoint not found", "available": AVAILABLE_ROUTES},
            )
        if isinstance(exc.detail, dict):
            content = exc.detail
        else:
            content = {"error": str(exc.detail)}
        return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid request body",
                "details": "; ".join(
                    f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
                    for err in exc.errors()
                ),
                "usage": USAGE_HINT,
            },
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        get_logger(__name__, _request_id(request)).exception(f"Unhandled error: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "details": str(exc)},
        )

    # ========================================================================
    # Routes
    # ========================================================================

    @app.get("/")
    async def health_check():
        """Health check; any 200 means the service is up."""
        return {
            "message": "HTML to PDF server is running",
            "endpoints": ENDPOINTS,
        }

    @app.post("/html-to-pdf")
    async def html_to_pdf(request: Request, body: Optional[RenderRequest] = Body(None)):
        """
        Convert posted HTML to a PDF download.

        Returns 400 with a usage hint when ``html`` is missing or empty and
        500 with the render error when every attempt fails.
        """
        if body is None or not body.html:
            return JSONResponse(
                status_code=400,
                content={
                    "error": "HTML content is required",
                    "usage": USAGE_HINT,
                    "availableOptions": available_options(),
                },
            )

        request_id = _request_id(request)
        log = get_logger(__name__, request_id)
        log.info(f"Converting HTML to PDF ({len(body.html)} characters)")

        async with render_slot(request):
            try:
                pdf = await request.app.state.generator.generate(
                    body.html, body.options, request_id=request_id
                )
            except RenderFailure as e:
                log.error(f"Server error: {e}")
                return JSONResponse(
                    status_code=500,
                    content={"error": "Failed to generate PDF", "details": str(e)},
                )

        return pdf_response(pdf, "document.pdf")

    @app.get("/test-pdf")
    async def test_pdf(request: Request):
        """Render the built-in sample document."""
        request_id = _request_id(request)
        log = get_logger(__name__, request_id)
        log.info("Generating test PDF")

        async with render_slot(request):
            try:
                pdf = await request.app.state.generator.generate(
                    build_sample_html(), request_id=request_id
                )
            except RenderFailure as e:
                log.error(f"Test PDF error: {e}")
                return JSONResponse(
                    status_code=500,
                    content={"error": "Failed to generate test PDF", "details": str(e)},
                )

        return pdf_response(pdf, "test-document.pdf")

    return app


app = create_app()
