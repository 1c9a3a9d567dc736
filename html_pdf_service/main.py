"""
Console entry point: ``html-to-pdf-service``.

Loads and validates configuration, sets up logging and serves the app
with uvicorn. On SIGTERM/SIGINT the server stops after at most
SHUTDOWN_TIMEOUT_SECONDS; in-flight renders are abandoned.
"""

import sys

import uvicorn

from .app import create_app
from .config import get_settings, validate_config_on_startup
from .logger import setup_logging


def main() -> int:
    try:
        settings = get_settings()
    except Exception as e:
        print(f"Configuration validation failed: {e}", file=sys.stderr)
        return 1

    setup_logging(settings.log_level, settings.log_format)
    validate_config_on_startup()

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
        timeout_graceful_shutdown=settings.shutdown_timeout_seconds,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
