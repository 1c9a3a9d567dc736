"""
PDF generation with retries around the browser lifecycle.

Each attempt launches its own browser, opens one page, loads the HTML,
waits a short settling delay and exports the PDF. The page and browser are
always closed before the attempt returns, whether it succeeded or not, so a
failed attempt never leaves a Chromium process behind.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Optional

from tenacity import AsyncRetrying, RetryError, stop_after_attempt, wait_fixed

from .config import PDFServiceSettings
from .engine import PlaywrightEngine, RenderEngine, RenderSession, RenderSurface
from .logger import RenderLogger, get_logger
from .options import PDFRenderOptions, merge_pdf_options


class RenderFailure(Exception):
    """
    All render attempts failed.

    The message is the last attempt's error message; the original exception
    is kept on ``cause``.
    """

    def __init__(self, cause: BaseException, attempts: int):
        super().__init__(str(cause) or cause.__class__.__name__)
        self.cause = cause
        self.attempts = attempts


class PDFGenerator:
    """
    Orchestrates HTML to PDF rendering against a RenderEngine.

    Args:
        settings: Service configuration (timeouts, delays, attempt count)
        engine: Renderer engine; defaults to Playwright/Chromium
        retry_sleep: Coroutine used for the wait between failed attempts
    """

    def __init__(
        self,
        settings: PDFServiceSettings,
        engine: Optional[RenderEngine] = None,
        retry_sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        self.settings = settings
        self.engine = engine or PlaywrightEngine(settings)
        self.retry_sleep = retry_sleep or asyncio.sleep

    async def generate(
        self,
        html: str,
        options: Optional[PDFRenderOptions] = None,
        max_attempts: Optional[int] = None,
        request_id: Optional[str] = None,
    ) -> bytes:
        """
        Render HTML to PDF bytes.

        Args:
            html: HTML document; callers must reject empty content first
            options: Client page options, merged over the defaults
            max_attempts: Overrides the configured attempt count
            request_id: Correlation id for log messages

        Returns:
            Raw PDF bytes

        Raises:
            RenderFailure: every attempt failed; carries the last error
            ValueError: max_attempts is below 1
        """
        attempts = self.settings.max_attempts if max_attempts is None else max_attempts
        if attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {attempts}")
        pdf_options = merge_pdf_options(options)
        log = get_logger(__name__, request_id=request_id)

        retrying = AsyncRetrying(
            stop=stop_after_attempt(attempts),
            wait=wait_fixed(self.settings.retry_delay_seconds),
            sleep=self.retry_sleep,
            before_sleep=lambda state: log.info(
                f"Waiting before retry attempt {state.attempt_number + 1}..."
            ),
        )

        try:
            async for attempt in retrying:
                with attempt:
                    return await self._render_once(
                        html,
                        pdf_options,
                        log.for_attempt(attempt.retry_state.attempt_number, attempts),
                    )
        except RetryError as e:
            cause = e.last_attempt.exception()
            log.error(f"PDF generation failed after {attempts} attempts: {cause}")
            raise RenderFailure(cause, attempts) from cause

    async def _render_once(
        self,
        html: str,
        pdf_options: Dict[str, Any],
        log: RenderLogger,
    ) -> bytes:
        """Run one attempt. Cleanup is finished before this returns or raises."""
        log.info("PDF generation attempt started")
        try:
            async with self._browser_page(log) as page:
                log.info("Setting page content...")
                await page.load(html, self.settings.content_load_timeout_ms)

                # Give fonts and deferred scripts a chance to run
                await asyncio.sleep(self.settings.settle_delay_seconds)

                log.info("Generating PDF...")
                pdf = await page.export_pdf(pdf_options, self.settings.pdf_timeout_ms)
        except Exception as e:
            log.error(f"PDF generation attempt failed: {e}")
            raise

        log.info(f"PDF generated successfully ({len(pdf)} bytes)")
        return pdf

    @asynccontextmanager
    async def _browser_page(self, log: RenderLogger) -> AsyncIterator[RenderSurface]:
        """Launch a browser and open a page; close both on every exit path."""
        session: Optional[RenderSession] = None
        page: Optional[RenderSurface] = None
        try:
            session = await self.engine.launch()
            page = await session.new_surface()
            yield page
        finally:
            if page is not None:
                try:
                    if not page.is_closed():
                        await page.close()
                except Exception as close_error:
                    log.warning(f"Error closing page: {close_error}")

            if session is not None:
                try:
                    await session.close()
                except Exception as browser_close_error:
                    log.warning(f"Error closing browser: {browser_close_error}")
