"""
API request/response schemas for the PDF service.

Field names follow the public contract (camelCase), bundle schema lives in
`app/schemas.py`.
"""

from __future__ import annotations

import json
from typing import Optional, Union

from pydantic import BaseModel, Field, StrictInt, StrictStr, ValidationError


class GeneratePdfRequest(BaseModel):
    dealId: Optional[Union[StrictStr, StrictInt]] = Field(None, description="HubSpot deal id")

    def normalized_deal_id(self) -> str:
        return str(self.dealId if self.dealId is not None else "").strip()


def parse_deal_id(raw: bytes) -> str:
    """
    Deal id from a raw request body, or "" when the body is not JSON, not an
    object, or carries a non-scalar dealId.
    """
    try:
        payload = json.loads(raw or b"null")
        request = GeneratePdfRequest.model_validate(payload if payload is not None else {})
    except (ValueError, ValidationError):
        return ""
    return request.normalized_deal_id()


class GeneratePdfResponse(BaseModel):
    dealId: str
    pdfUrl: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    ok: bool = True
