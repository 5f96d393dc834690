"""
Deal PDF pipeline orchestration.

Steps:
1. Fetch the deal bundle from HubSpot
2. Render the bundle to HTML
3. Convert the HTML to PDF
4. Upload the PDF to HubSpot Files
5. Record the file URL on the deal (pdf_url, pdf_statut=GENERE)

Any failure aborts the run. Before the error is surfaced, the deal is marked
pdf_statut=ECHEC on a best-effort basis: that write-back never raises.
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Protocol

from app.config import Settings
from app.schemas import DealBundle
from app.services.document_renderer import render_deal_document
from app.services.filenames import derive_pdf_filename
from app.services.hubspot_client import HubSpotClient, HubSpotConfig
from app.services.hubspot_files import HubSpotFilesClient, UploadOptions
from app.services.pdf_generator import PdfConverter, get_pdf_converter


logger = logging.getLogger("app.pipeline")

STATUS_FIELD = "pdf_statut"
URL_FIELD = "pdf_url"
STATUS_GENERATED = "GENERE"
STATUS_FAILED = "ECHEC"


class PipelineStage(str, enum.Enum):
    FETCHING = "fetching"
    RENDERING = "rendering"
    CONVERTING = "converting"
    UPLOADING = "uploading"
    RECORDING = "recording"
    DONE = "done"
    FAILED = "failed"


class RecordStore(Protocol):
    def fetch_bundle(self, deal_id: str) -> DealBundle:
        ...

    def patch_fields(self, deal_id: str, fields: Mapping[str, Any]) -> None:
        ...


class FileUploader(Protocol):
    def upload(self, content: bytes, filename: str, options: Optional[UploadOptions] = None) -> str:
        ...


@dataclass(frozen=True)
class PipelineOutcome:
    deal_id: str
    pdf_url: str
    filename: str


class DealPdfPipeline:
    def __init__(
        self,
        record_store: RecordStore,
        converter: PdfConverter,
        uploader: FileUploader,
        upload_options: Optional[UploadOptions] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.record_store = record_store
        self.converter = converter
        self.uploader = uploader
        self.upload_options = upload_options or UploadOptions()
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def _enter(self, deal_id: str, stage: PipelineStage) -> PipelineStage:
        logger.info("pipeline", extra={"deal_id": deal_id, "stage": stage.value})
        return stage

    def run(self, deal_id: str) -> PipelineOutcome:
        """Generate, upload and record the deal PDF. Re-raises the first failure."""
        t0 = time.perf_counter()
        stage = PipelineStage.FETCHING
        try:
            stage = self._enter(deal_id, PipelineStage.FETCHING)
            bundle = self.record_store.fetch_bundle(deal_id)
            filename = derive_pdf_filename(bundle, deal_id)

            stage = self._enter(deal_id, PipelineStage.RENDERING)
            html = render_deal_document(bundle, generated_at=self.clock())

            stage = self._enter(deal_id, PipelineStage.CONVERTING)
            pdf_bytes = self.converter.convert(html)

            stage = self._enter(deal_id, PipelineStage.UPLOADING)
            pdf_url = self.uploader.upload(pdf_bytes, filename, self.upload_options)

            stage = self._enter(deal_id, PipelineStage.RECORDING)
            self.record_store.patch_fields(deal_id, {URL_FIELD: pdf_url, STATUS_FIELD: STATUS_GENERATED})
        except Exception as e:
            logger.error(
                "pipeline",
                extra={
                    "deal_id": deal_id,
                    "stage": PipelineStage.FAILED.value,
                    "failed_at": stage.value,
                    "outcome": "failed",
                    "error": str(e),
                    "latency_ms": int((time.perf_counter() - t0) * 1000),
                },
            )
            self.mark_failed(deal_id)
            raise

        self._enter(deal_id, PipelineStage.DONE)
        logger.info(
            "pipeline",
            extra={
                "deal_id": deal_id,
                "outcome": "success",
                "pdf_url": pdf_url,
                "latency_ms": int((time.perf_counter() - t0) * 1000),
            },
        )
        return PipelineOutcome(deal_id=deal_id, pdf_url=pdf_url, filename=filename)

    def mark_failed(self, deal_id: str) -> bool:
        """
        Best-effort, non-propagating: set pdf_statut=ECHEC on the deal.

        Returns True when the patch went through. Errors are logged and
        discarded so the original pipeline failure is what gets reported.
        """
        try:
            self.record_store.patch_fields(deal_id, {STATUS_FIELD: STATUS_FAILED})
        except Exception as e:
            logger.warning("mark_failed", extra={"deal_id": deal_id, "outcome": "error", "error": str(e)})
            return False
        return True


def build_pipeline(settings: Settings) -> DealPdfPipeline:
    """Wire the pipeline to HubSpot and the configured PDF engine."""
    hubspot = HubSpotConfig(
        token=settings.hubspot_token,
        base_url=settings.hubspot_base_url,
        timeout_seconds=settings.http_timeout_seconds,
    )
    return DealPdfPipeline(
        record_store=HubSpotClient(hubspot),
        converter=get_pdf_converter(settings.pdf_engine, timeout_ms=settings.render_timeout_ms),
        uploader=HubSpotFilesClient(hubspot),
        upload_options=UploadOptions(
            access=settings.files_access,
            folder_id=settings.files_folder_id,
            folder_path=settings.files_folder_path,
            overwrite=settings.files_overwrite,
        ),
    )
