"""
Error taxonomy for the deal PDF pipeline.

Each stage raises its own error type so callers (batch job, HTTP service)
can report the original failure after the compensating write-back.
"""

from __future__ import annotations

from typing import Any, Optional


class DealPdfError(RuntimeError):
    """Base class for every domain error raised by this package."""


class AuthConfigError(DealPdfError):
    """A required secret or configuration value is missing or malformed."""


class _HttpFailure(DealPdfError):
    """Failure carrying the remote status code and response body."""

    label = "request failed"

    def __init__(self, status_code: Optional[int], body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        status = status_code if status_code is not None else "no response"
        super().__init__(f"{self.label}: {status} {body}".rstrip())


class RecordFetchFailure(_HttpFailure):
    label = "HubSpot deal fetch failed"


class NotFound(RecordFetchFailure):
    label = "HubSpot deal not found"


class EmptyBundle(DealPdfError):
    """The deal exists but `pdf_donnees_json` is empty or absent."""


class MalformedBundle(DealPdfError):
    """`pdf_donnees_json` is not a JSON object."""


class RenderFailure(DealPdfError):
    """The PDF engine could not produce a document."""


class UploadFailure(_HttpFailure):
    label = "HubSpot file upload failed"


class MissingUrlInResponse(DealPdfError):
    def __init__(self, payload: Any) -> None:
        self.payload = payload
        super().__init__(f"Upload ok but no file URL in response: {payload!r}")


class RecordPatchFailure(_HttpFailure):
    label = "HubSpot deal patch failed"
