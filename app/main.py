"""
FastAPI service for on-demand deal PDF generation.

Endpoints:
- GET  /health        liveness check
- POST /generate-pdf  run the pipeline for one deal (x-api-key protected)
"""

from fastapi import FastAPI, Header, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from typing import Callable, Optional
import logging
import os
import secrets
import time

from app.api_schemas import ErrorResponse, GeneratePdfResponse, HealthResponse, parse_deal_id
from app.config import MODE_SERVICE, Settings, load_settings
from app.services.pipeline import DealPdfPipeline, build_pipeline

logger = logging.getLogger("app.service")

PipelineFactory = Callable[[Settings], DealPdfPipeline]


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def _api_key_ok(settings: Settings, provided: Optional[str]) -> bool:
    expected = settings.endpoint_api_key or ""
    if not expected or not provided:
        return False
    return secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def create_app(
    settings: Optional[Settings] = None,
    pipeline_factory: PipelineFactory = build_pipeline,
) -> FastAPI:
    """
    Build the service. Without explicit settings they are loaded from the
    environment at startup, which fails fast on missing secrets.
    """
    app = FastAPI(
        title="Deal PDF Generator",
        description="Renders HubSpot deal bundles to PDF and records the file URL on the deal",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.pipeline_factory = pipeline_factory

    @app.on_event("startup")
    async def startup_event():
        """Load and validate configuration."""
        if app.state.settings is None:
            app.state.settings = load_settings(MODE_SERVICE)

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(ok=True)

    # The body is read raw so auth runs before any parsing; the pipeline itself
    # runs in the threadpool, one per request.
    @app.post(
        "/generate-pdf",
        response_model=GeneratePdfResponse,
        responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def generate_pdf(request: Request, x_api_key: Optional[str] = Header(None)):
        settings: Optional[Settings] = request.app.state.settings
        if settings is None:
            return _error(500, "Service is not configured")
        if not _api_key_ok(settings, x_api_key):
            return _error(401, "Unauthorized")

        deal_id = parse_deal_id(await request.body())
        if not deal_id:
            return _error(400, "Missing dealId")

        t0 = time.perf_counter()
        try:
            pipeline = request.app.state.pipeline_factory(settings)
            outcome = await run_in_threadpool(pipeline.run, deal_id)
        except Exception as e:
            logger.exception(
                "generate_pdf",
                extra={"deal_id": deal_id, "outcome": "error", "latency_ms": int((time.perf_counter() - t0) * 1000)},
            )
            return _error(500, str(e) or e.__class__.__name__)

        logger.info(
            "generate_pdf",
            extra={"deal_id": deal_id, "outcome": "success", "latency_ms": int((time.perf_counter() - t0) * 1000)},
        )
        return GeneratePdfResponse(dealId=outcome.deal_id, pdfUrl=outcome.pdf_url)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve with uvicorn on $PORT."""
    import uvicorn

    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
    settings = load_settings(MODE_SERVICE)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
