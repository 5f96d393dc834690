"""
HubSpot CRM client (deals only).

Implements the two calls the pipeline needs:
- read the `pdf_donnees_json` property of a deal and decode it as a bundle
- partially update deal properties (pdf_url / pdf_statut)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

import requests

from app.config import HUBSPOT_BASE_URL
from app.exceptions import (
    EmptyBundle,
    MalformedBundle,
    NotFound,
    RecordFetchFailure,
    RecordPatchFailure,
)
from app.schemas import DealBundle


logger = logging.getLogger("app.hubspot")

BUNDLE_PROPERTY = "pdf_donnees_json"


@dataclass(frozen=True)
class HubSpotConfig:
    token: str
    base_url: str = HUBSPOT_BASE_URL
    timeout_seconds: float = 30.0


class HubSpotClient:
    def __init__(self, config: HubSpotConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.config.token}"}

    def _deal_url(self, deal_id: str) -> str:
        # One path segment, whatever the id contains. Dots are escaped too so
        # urllib3 cannot fold a "." or ".." id into the parent path.
        segment = quote(str(deal_id), safe="").replace(".", "%2E")
        return f"{self.config.base_url}/crm/v3/objects/deals/{segment}"

    def fetch_bundle(self, deal_id: str) -> DealBundle:
        """
        Fetch and decode the deal's PDF data bundle.

        Raises:
            NotFound: the deal does not exist (404)
            RecordFetchFailure: any other non-2xx response or transport error
            EmptyBundle: the property is absent or empty
            MalformedBundle: the property is not a JSON object
        """
        try:
            resp = self.session.get(
                self._deal_url(deal_id),
                params={"properties": BUNDLE_PROPERTY},
                headers=self._headers(),
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as e:
            raise RecordFetchFailure(None, str(e)) from e

        if resp.status_code == 404:
            raise NotFound(resp.status_code, resp.text)
        if not resp.ok:
            raise RecordFetchFailure(resp.status_code, resp.text)

        try:
            data = resp.json()
        except ValueError as e:
            raise RecordFetchFailure(resp.status_code, resp.text) from e

        props = data.get("properties") if isinstance(data, dict) else None
        raw = props.get(BUNDLE_PROPERTY) if isinstance(props, dict) else None
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            raise EmptyBundle(f"Deal {deal_id} has empty {BUNDLE_PROPERTY}")

        try:
            decoded = json.loads(raw) if isinstance(raw, str) else raw
        except ValueError as e:
            raise MalformedBundle(f"Deal {deal_id} has invalid JSON in {BUNDLE_PROPERTY}: {e}") from e
        if not isinstance(decoded, dict):
            raise MalformedBundle(f"Deal {deal_id} {BUNDLE_PROPERTY} is not a JSON object")

        logger.info("fetch_bundle", extra={"deal_id": deal_id, "outcome": "success"})
        return DealBundle.model_validate(decoded)

    def patch_fields(self, deal_id: str, fields: Mapping[str, Any]) -> None:
        """Partially update deal properties. Raises RecordPatchFailure on non-2xx."""
        try:
            resp = self.session.patch(
                self._deal_url(deal_id),
                json={"properties": dict(fields)},
                headers={**self._headers(), "Content-Type": "application/json"},
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as e:
            raise RecordPatchFailure(None, str(e)) from e

        if not resp.ok:
            raise RecordPatchFailure(resp.status_code, resp.text)
        logger.info("patch_fields", extra={"deal_id": deal_id, "fields": sorted(fields)})
