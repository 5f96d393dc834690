"""
Runtime configuration.

Settings are read from the environment once, at process start, and passed
explicitly to the pipeline and the HTTP app.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from app.exceptions import AuthConfigError


HUBSPOT_BASE_URL = "https://api.hubapi.com"
DEFAULT_FILES_ACCESS = "PUBLIC_NOT_INDEXABLE"

MODE_BATCH = "batch"
MODE_SERVICE = "service"
PDF_ENGINES = ("chromium", "weasyprint")

_TRUTHY = ("1", "true", "TRUE", "True", "yes", "YES")


@dataclass(frozen=True)
class Settings:
    hubspot_token: str
    deal_id: Optional[str] = None
    endpoint_api_key: Optional[str] = None
    files_folder_id: Optional[str] = None
    files_folder_path: Optional[str] = None
    files_access: str = DEFAULT_FILES_ACCESS
    files_overwrite: bool = False
    hubspot_base_url: str = HUBSPOT_BASE_URL
    pdf_engine: str = "chromium"
    render_timeout_ms: int = 30_000
    http_timeout_seconds: float = 30.0
    port: int = 3000


def _get(env: Mapping[str, str], name: str) -> Optional[str]:
    value = (env.get(name) or "").strip()
    return value or None


def _require(env: Mapping[str, str], name: str, description: str) -> str:
    value = _get(env, name)
    if not value:
        raise AuthConfigError(f"Missing env {name} ({description})")
    return value


def _number(env: Mapping[str, str], name: str, default, cast):
    raw = _get(env, name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError:
        raise AuthConfigError(f"Invalid value for {name}: {raw!r}")


def load_settings(mode: str, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build validated settings for `mode` ("batch" or "service").

    Raises AuthConfigError when a value required by the mode is missing.
    """
    env = os.environ if environ is None else environ
    if mode not in (MODE_BATCH, MODE_SERVICE):
        raise ValueError(f"Unknown mode: {mode}")

    token = _require(env, "HUBSPOT_TOKEN", "HubSpot private app token")
    deal_id = _get(env, "DEAL_ID")
    api_key = _get(env, "ENDPOINT_API_KEY")
    if mode == MODE_BATCH and not deal_id:
        raise AuthConfigError("Missing env DEAL_ID (deal to process)")
    if mode == MODE_SERVICE and not api_key:
        raise AuthConfigError("Missing env ENDPOINT_API_KEY (shared secret for x-api-key)")
    engine = (_get(env, "PDF_ENGINE") or "chromium").lower()
    if engine not in PDF_ENGINES:
        raise AuthConfigError(f"Invalid value for PDF_ENGINE: {engine!r}")

    return Settings(
        hubspot_token=token,
        deal_id=deal_id,
        endpoint_api_key=api_key,
        files_folder_id=_get(env, "HUBSPOT_FILES_FOLDER_ID"),
        files_folder_path=_get(env, "HUBSPOT_FILES_FOLDER_PATH"),
        files_access=_get(env, "HUBSPOT_FILES_ACCESS") or DEFAULT_FILES_ACCESS,
        files_overwrite=(_get(env, "HUBSPOT_FILES_OVERWRITE") or "") in _TRUTHY,
        hubspot_base_url=(_get(env, "HUBSPOT_BASE_URL") or HUBSPOT_BASE_URL).rstrip("/"),
        pdf_engine=engine,
        render_timeout_ms=_number(env, "PDF_RENDER_TIMEOUT_MS", 30_000, int),
        http_timeout_seconds=_number(env, "HTTP_TIMEOUT_SECONDS", 30.0, float),
        port=_number(env, "PORT", 3000, int),
    )
