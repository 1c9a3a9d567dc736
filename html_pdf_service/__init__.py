"""
HTML to PDF Service - Convert HTML markup to PDF documents.

Accepts HTML over HTTP and renders it with a headless Chromium browser
driven by Playwright. Each render runs in its own browser process with
bounded retries and guaranteed teardown.
"""

__version__ = "0.1.0"
