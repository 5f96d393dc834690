#!/usr/bin/env python3
"""
One-shot deal PDF job, for schedulers and workflow actions.

Reads HUBSPOT_TOKEN and DEAL_ID from the environment.
Usage: python -m app.batch

Exit codes: 0 success, 1 pipeline failure, 2 configuration error.
"""

import logging
import os
import sys
from typing import Callable, Mapping, Optional

from app.config import MODE_BATCH, Settings, load_settings
from app.exceptions import AuthConfigError
from app.services.pipeline import DealPdfPipeline, build_pipeline

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


def main(
    environ: Optional[Mapping[str, str]] = None,
    pipeline_factory: Callable[[Settings], DealPdfPipeline] = build_pipeline,
) -> int:
    try:
        settings = load_settings(MODE_BATCH, environ)
    except AuthConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG

    try:
        outcome = pipeline_factory(settings).run(settings.deal_id)
    except Exception as e:
        print(f"FAILED deal {settings.deal_id}: {e}", file=sys.stderr)
        return EXIT_FAILED

    print(f"OK pdfUrl: {outcome.pdf_url}")
    return EXIT_OK


def run() -> None:
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
    sys.exit(main())


if __name__ == "__main__":
    run()
