"""
HubSpot Files API (v3) upload client.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from app.config import DEFAULT_FILES_ACCESS
from app.exceptions import MissingUrlInResponse, UploadFailure
from app.services.hubspot_client import HubSpotConfig


logger = logging.getLogger("app.hubspot")

# HubSpot has returned the public link under each of these names over time.
URL_FIELDS = ("url", "friendlyUrl", "friendly_url")


@dataclass(frozen=True)
class UploadOptions:
    access: str = DEFAULT_FILES_ACCESS
    folder_id: Optional[str] = None
    folder_path: Optional[str] = None
    overwrite: bool = False


def extract_file_url(payload: Any) -> Optional[str]:
    if not isinstance(payload, dict):
        return None
    for key in URL_FIELDS:
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


class HubSpotFilesClient:
    def __init__(self, config: HubSpotConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()

    def upload(self, content: bytes, filename: str, options: Optional[UploadOptions] = None) -> str:
        """
        Upload a PDF and return its public URL.

        Raises:
            UploadFailure: non-2xx response or transport error
            MissingUrlInResponse: success response without a usable URL field
        """
        opts = options or UploadOptions()
        file_options: Dict[str, Any] = {"access": opts.access}
        if opts.overwrite:
            file_options["overwrite"] = True

        data: Dict[str, str] = {"options": json.dumps(file_options)}
        if opts.folder_id:
            data["folderId"] = str(opts.folder_id)
        if opts.folder_path:
            data["folderPath"] = opts.folder_path

        try:
            resp = self.session.post(
                f"{self.config.base_url}/files/v3/files",
                files={"file": (filename, content, "application/pdf")},
                data=data,
                headers={"Authorization": f"Bearer {self.config.token}"},
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as e:
            raise UploadFailure(None, str(e)) from e

        if not resp.ok:
            raise UploadFailure(resp.status_code, resp.text)

        try:
            payload = resp.json()
        except ValueError:
            raise MissingUrlInResponse(resp.text)

        url = extract_file_url(payload)
        if not url:
            raise MissingUrlInResponse(payload)
        logger.info("upload", extra={"pdf_filename": filename, "outcome": "success"})
        return url
