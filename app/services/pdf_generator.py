"""
HTML -> PDF conversion.

Two engines share the `convert(html) -> bytes` contract:
- chromium: headless Chromium driven by Playwright (default)
- weasyprint: pure-Python layout engine, no browser required
"""

import logging
from typing import Protocol

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from app.exceptions import RenderFailure


logger = logging.getLogger("app.pdf_generator")

CHROMIUM_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]
DEFAULT_TIMEOUT_MS = 30_000


class PdfConverter(Protocol):
    def convert(self, html: str) -> bytes:
        ...


class ChromiumPdfConverter:
    """Prints HTML to an A4 PDF in a fresh, isolated Chromium per call."""

    def __init__(self, timeout_ms: int = DEFAULT_TIMEOUT_MS):
        self.timeout_ms = timeout_ms

    def convert(self, html: str) -> bytes:
        try:
            with sync_playwright() as p:
                browser = p.chromium.launch(args=CHROMIUM_ARGS)
                try:
                    page = browser.new_page()
                    page.set_content(html, wait_until="networkidle", timeout=self.timeout_ms)
                    return page.pdf(format="A4", print_background=True)
                finally:
                    browser.close()
        except PlaywrightError as e:
            logger.warning("pdf_render", extra={"engine": "chromium", "outcome": "error"})
            raise RenderFailure(f"Chromium PDF rendering failed: {e}") from e


class WeasyPrintPdfConverter:
    """Renders HTML with WeasyPrint; no subprocess, nothing to release."""

    def convert(self, html: str) -> bytes:
        # Lazy import: WeasyPrint pulls in native libraries only this engine needs
        from weasyprint import HTML

        try:
            return HTML(string=html).write_pdf()
        except Exception as e:
            logger.warning("pdf_render", extra={"engine": "weasyprint", "outcome": "error"})
            raise RenderFailure(f"WeasyPrint PDF rendering failed: {e}") from e


def get_pdf_converter(engine: str = "chromium", timeout_ms: int = DEFAULT_TIMEOUT_MS) -> PdfConverter:
    name = (engine or "chromium").strip().lower()
    if name == "chromium":
        return ChromiumPdfConverter(timeout_ms=timeout_ms)
    if name == "weasyprint":
        return WeasyPrintPdfConverter()
    raise ValueError(f"Unknown PDF engine: {engine}")
