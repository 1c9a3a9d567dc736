"""
Shared fixtures for HTML to PDF service tests.

Provides an in-memory render engine that counts every browser and page it
opens and closes, so tests can assert that no attempt leaks a browser.
"""

from typing import Any, Dict, List, Optional

import pytest

from html_pdf_service.config import PDFServiceSettings
from html_pdf_service.engine import RenderEngine, RenderSession, RenderSurface

FAKE_PDF = b"%PDF-1.4 fake pdf content"


class FakeSurface(RenderSurface):
    def __init__(self, engine: "FakeEngine", attempt: int):
        self.engine = engine
        self.attempt = attempt
        self.closed = False
        self.loaded_html: Optional[str] = None

    async def load(self, html: str, timeout_ms: int) -> None:
        self.loaded_html = html
        self.engine.loads.append((html, timeout_ms))
        failure = self.engine.failure_for(self.attempt, "load")
        if failure:
            raise failure

    async def export_pdf(self, options: Dict[str, Any], timeout_ms: int) -> bytes:
        self.engine.exports.append((options, timeout_ms))
        failure = self.engine.failure_for(self.attempt, "export")
        if failure:
            raise failure
        return self.engine.pdf_bytes

    def is_closed(self) -> bool:
        return self.closed

    async def close(self) -> None:
        self.engine.page_close_calls += 1
        if self.engine.page_close_error:
            raise self.engine.page_close_error
        self.closed = True
        self.engine.open_pages -= 1


class FakeSession(RenderSession):
    def __init__(self, engine: "FakeEngine", attempt: int):
        self.engine = engine
        self.attempt = attempt

    async def new_surface(self) -> RenderSurface:
        failure = self.engine.failure_for(self.attempt, "new_surface")
        if failure:
            raise failure
        self.engine.open_pages += 1
        return FakeSurface(self.engine, self.attempt)

    async def close(self) -> None:
        self.engine.close_calls += 1
        self.engine.open_sessions -= 1
        if self.engine.browser_close_error:
            raise self.engine.browser_close_error


class FakeEngine(RenderEngine):
    """
    Render engine double.

    ``failures`` maps attempt number to (stage, exception). Stages are
    "launch", "new_surface", "load" and "export".
    """

    def __init__(self, failures=None, fail_always=None, pdf_bytes: bytes = FAKE_PDF):
        self.failures = failures or {}
        self.fail_always = fail_always
        self.pdf_bytes = pdf_bytes
        self.launch_calls = 0
        self.close_calls = 0
        self.page_close_calls = 0
        self.open_sessions = 0
        self.open_pages = 0
        self.loads: List = []
        self.exports: List = []
        self.page_close_error: Optional[Exception] = None
        self.browser_close_error: Optional[Exception] = None

    def failure_for(self, attempt: int, stage: str) -> Optional[Exception]:
        if self.fail_always and self.fail_always[0] == stage:
            return self.fail_always[1](attempt)
        planned = self.failures.get(attempt)
        if planned and planned[0] == stage:
            return planned[1]
        return None

    async def launch(self) -> RenderSession:
        self.launch_calls += 1
        attempt = self.launch_calls
        failure = self.failure_for(attempt, "launch")
        if failure:
            raise failure
        self.open_sessions += 1
        return FakeSession(self, attempt)


@pytest.fixture
def settings():
    """Settings with no settling or retry delay so tests run instantly."""
    return PDFServiceSettings(
        settle_delay_seconds=0,
        retry_delay_seconds=0,
        max_attempts=2,
    )


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def make_engine():
    """Factory for engines with planned failures."""
    return FakeEngine


@pytest.fixture
def fake_pdf():
    return FAKE_PDF
