from __future__ import annotations
from typing import Optional
import asyncio
import logging

from playwright.async_api import async_playwright, Browser, Page, Playwright, Error as PlaywrightError

from projectgen.errors import RenderError

log = logging.getLogger("projectgen.render")

CHROMIUM_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]

FOOTER_TEMPLATE = (
    '<div style="font-size: 10pt; font-family: \'Times New Roman\'; width: 100%; '
    'text-align: center; padding-bottom: 10px;"><span class="pageNumber"></span></div>'
)

class RenderSession:
    """One headless Chromium with a single page. Must be closed by the caller."""

    def __init__(self, pw: Playwright, browser: Browser, page: Page, timeout_ms: int):
        self._pw = pw
        self._browser = browser
        self._page = page
        self.timeout_ms = timeout_ms

    async def load(self, html: str) -> None:
        try:
            await self._page.set_content(html, wait_until="domcontentloaded", timeout=self.timeout_ms)
        except PlaywrightError as e:
            raise RenderError(f"Failed to load document: {e}") from e

    async def pdf(self) -> bytes:
        # page.pdf() takes no timeout of its own
        try:
            data = await asyncio.wait_for(self._page.pdf(
                format="A4",
                margin={"top": "2cm", "bottom": "2cm", "left": "2cm", "right": "2cm"},
                print_background=True,
                display_header_footer=True,
                header_template="<div></div>",
                footer_template=FOOTER_TEMPLATE,
            ), self.timeout_ms / 1000)
        except asyncio.TimeoutError as e:
            raise RenderError(f"PDF printing timed out after {self.timeout_ms} ms") from e
        except PlaywrightError as e:
            raise RenderError(f"Failed to print PDF: {e}") from e
        return bytes(data)

    async def close(self) -> None:
        try:
            await self._browser.close()
        finally:
            await self._pw.stop()

class PdfRenderer:
    """Launches a fresh browser per job; sessions are not pooled."""

    def __init__(self, timeout_ms: int = 30000, headless: bool = True):
        self.timeout_ms = timeout_ms
        self.headless = headless

    async def open(self) -> RenderSession:
        pw = await async_playwright().start()
        browser: Optional[Browser] = None
        try:
            browser = await pw.chromium.launch(headless=self.headless, args=CHROMIUM_ARGS)
            page = await browser.new_page()
            page.set_default_timeout(self.timeout_ms)
        except Exception as e:
            if browser is not None:
                await browser.close()
            await pw.stop()
            raise RenderError(f"Failed to start browser: {e}") from e
        log.info("Browser session opened")
        return RenderSession(pw, browser, page, self.timeout_ms)
