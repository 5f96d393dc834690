"""
Storage-safe PDF filenames derived from a deal bundle.
"""

from __future__ import annotations

import re

from app.schemas import DealBundle, display


MAX_FILENAME_LENGTH = 120
PDF_EXTENSION = ".pdf"
UNKNOWN_CONTACT = "unknown contact"

_FORBIDDEN = re.compile(r'[/\\?%*:|"<>]')
_WHITESPACE = re.compile(r"\s+")


def sanitize_filename(name: str, max_length: int = MAX_FILENAME_LENGTH) -> str:
    """
    Strip path-unsafe characters, collapse whitespace and cap the length.

    Idempotent: sanitizing an already sanitized name returns it unchanged.
    """
    cleaned = _FORBIDDEN.sub("", name or "")
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    # Re-strip after truncation so a cut never leaves a trailing space.
    return cleaned[:max_length].strip()


def derive_pdf_filename(bundle: DealBundle, deal_id: str) -> str:
    """
    `"<deal name> - <contact name>.pdf"`, falling back to the deal id / unknown
    contact. The whole name, extension included, fits in MAX_FILENAME_LENGTH.
    """
    deal_label = sanitize_filename(display(bundle.deal.dealname, "")) or sanitize_filename(str(deal_id))
    contact_label = sanitize_filename(bundle.contact.full_name() or "") or UNKNOWN_CONTACT
    stem = sanitize_filename(f"{deal_label} - {contact_label}", MAX_FILENAME_LENGTH - len(PDF_EXTENSION))
    return f"{stem}{PDF_EXTENSION}"
