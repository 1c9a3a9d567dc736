"""
Renderer engine interface and the Playwright/Chromium implementation.

The PDF generator only talks to the small interface defined here: launch an
isolated session, open a surface (page), load HTML, export a PDF, close
everything. Tests substitute an in-memory engine for the real browser.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from .config import PDFServiceSettings

logger = logging.getLogger(__name__)

CHROMIUM_ARGS: List[str] = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
]


class RenderSurface(ABC):
    """A single page inside a render session."""

    @abstractmethod
    async def load(self, html: str, timeout_ms: int) -> None:
        """Load HTML, returning once the DOM has been parsed."""

    @abstractmethod
    async def export_pdf(self, options: Dict[str, Any], timeout_ms: int) -> bytes:
        """Print the loaded document to PDF."""

    @abstractmethod
    def is_closed(self) -> bool:
        ...

    @abstractmethod
    async def close(self) -> None:
        ...


class RenderSession(ABC):
    """An isolated browser instance. Never shared between attempts."""

    @abstractmethod
    async def new_surface(self) -> RenderSurface:
        ...

    @abstractmethod
    async def close(self) -> None:
        ...


class RenderEngine(ABC):
    """Factory for isolated render sessions."""

    @abstractmethod
    async def launch(self) -> RenderSession:
        ...


class PlaywrightSurface(RenderSurface):
    """Playwright page wrapper."""

    def __init__(self, page):
        self._page = page

    async def load(self, html: str, timeout_ms: int) -> None:
        # Do not wait for subresources; a hanging image must not stall the render
        await self._page.set_content(html, wait_until="domcontentloaded", timeout=timeout_ms)

    async def export_pdf(self, options: Dict[str, Any], timeout_ms: int) -> bytes:
        # page.pdf() takes no timeout argument
        try:
            return await asyncio.wait_for(self._page.pdf(**options), timeout=timeout_ms / 1000)
        except asyncio.TimeoutError:
            raise TimeoutError(f"PDF export timed out after {timeout_ms}ms") from None

    def is_closed(self) -> bool:
        return self._page.is_closed()

    async def close(self) -> None:
        await self._page.close()


class PlaywrightSession(RenderSession):
    """One Playwright driver plus one Chromium process."""

    def __init__(self, playwright, browser):
        self._playwright = playwright
        self._browser = browser

    async def new_surface(self) -> RenderSurface:
        page = await self._browser.new_page()
        return PlaywrightSurface(page)

    async def close(self) -> None:
        try:
            await self._browser.close()
        finally:
            await self._playwright.stop()


class PlaywrightEngine(RenderEngine):
    """
    Chromium via Playwright.

    Every launch starts a fresh driver and browser process so that a wedged
    browser from a previous attempt, or a concurrent request, cannot affect
    this one.
    """

    def __init__(self, settings: PDFServiceSettings):
        self.settings = settings

    def launch_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {
            "headless": self.settings.headless,
            "args": list(CHROMIUM_ARGS),
            "timeout": self.settings.launch_timeout_ms,
        }
        if self.settings.browser_executable_path:
            options["executable_path"] = self.settings.browser_executable_path
        return options

    async def launch(self) -> RenderSession:
        # Import here to avoid loading Playwright when an in-memory engine is used
        from playwright.async_api import async_playwright

        playwright = await async_playwright().start()
        try:
            browser = await playwright.chromium.launch(**self.launch_options())
        except Exception:
            try:
                await playwright.stop()
            except Exception as stop_error:
                logger.warning(f"Error stopping Playwright after failed launch: {stop_error}")
            raise
        return PlaywrightSession(playwright, browser)
