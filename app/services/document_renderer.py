"""
Deal document rendering.

Turns a deal bundle into a self-contained HTML page (inline styles, no
external resources). Pure: the only varying part of the output is the
generation timestamp, which callers may pin via `generated_at`.
"""

import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from app.schemas import DealBundle, display


TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")
TEMPLATE_NAME = "deal_document.html"
EMPTY_ITEMS_TEXT = "Aucune ligne de produit associée."


def _build_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
    )
    env.filters["show"] = display
    return env


_env = _build_env()


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision, e.g. 2025-01-02T03:04:05.000Z."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def render_deal_document(
    bundle: Union[DealBundle, Dict[str, Any]],
    generated_at: Optional[datetime] = None,
) -> str:
    """
    Render the deal document.

    Args:
        bundle: DealBundle, or the raw decoded JSON mapping
        generated_at: Timestamp printed at the bottom (defaults to now, UTC)

    Returns:
        HTML string. Every interpolated field is HTML-escaped; absent fields
        render as "-".
    """
    if not isinstance(bundle, DealBundle):
        bundle = DealBundle.model_validate(bundle)
    moment = generated_at or datetime.now(timezone.utc)

    template = _env.get_template(TEMPLATE_NAME)
    return template.render(
        deal=bundle.deal,
        contact=bundle.contact,
        company=bundle.company,
        line_items=bundle.line_items,
        empty_items_text=EMPTY_ITEMS_TEXT,
        generated_at=format_timestamp(moment),
    )
