"""
PDF Service Configuration Module

Centralized configuration management with Pydantic validation.
All environment variables are validated at startup to catch misconfigurations early.
"""

import logging
from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PDFServiceSettings(BaseSettings):
    """
    HTML to PDF service configuration with validation.

    All settings can be overridden via environment variables.
    Settings are read once at startup and passed explicitly to the
    endpoint layer and the PDF generator.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # === Server ===
    host: str = Field(default="0.0.0.0", description="Interface to bind")
    port: int = Field(default=1234, ge=1, le=65535, description="Listening port")
    shutdown_timeout_seconds: int = Field(
        default=1,
        ge=0,
        le=60,
        description="Seconds to wait for in-flight requests on shutdown"
    )

    # === Browser ===
    browser_executable_path: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "BROWSER_EXECUTABLE_PATH", "PUPPETEER_EXECUTABLE_PATH", "browser_executable_path"
        ),
        description="Path to a host-provided Chromium binary"
    )
    skip_browser_download: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "PLAYWRIGHT_SKIP_BROWSER_DOWNLOAD",
            "PUPPETEER_SKIP_CHROMIUM_DOWNLOAD",
            "skip_browser_download",
        ),
        description="Browser is provided by the host rather than downloaded"
    )
    headless: bool = Field(
        default=True,
        validation_alias=AliasChoices("PLAYWRIGHT_HEADLESS", "headless"),
        description="Run Chromium headless"
    )

    # === Rendering ===
    max_attempts: int = Field(
        default=2,
        ge=1,
        le=10,
        validation_alias=AliasChoices("MAX_RENDER_ATTEMPTS", "max_attempts"),
        description="Render attempts per request (1-10)"
    )
    settle_delay_seconds: float = Field(
        default=2.0,
        ge=0,
        le=30,
        description="Pause after content load before PDF export"
    )
    retry_delay_seconds: float = Field(
        default=2.0,
        ge=0,
        le=60,
        description="Pause between failed attempts"
    )
    launch_timeout_ms: int = Field(
        default=60000,
        ge=1000,
        validation_alias=AliasChoices("BROWSER_LAUNCH_TIMEOUT_MS", "launch_timeout_ms"),
        description="Browser launch timeout in milliseconds"
    )
    content_load_timeout_ms: int = Field(
        default=15000,
        ge=1000,
        description="Timeout for loading HTML content in milliseconds"
    )
    pdf_timeout_ms: int = Field(
        default=30000,
        ge=1000,
        validation_alias=AliasChoices("PDF_EXPORT_TIMEOUT_MS", "pdf_timeout_ms"),
        description="Timeout for PDF export in milliseconds"
    )

    # === Limits ===
    max_body_size_mb: int = Field(
        default=50,
        ge=1,
        le=1024,
        description="Maximum request body size in megabytes"
    )
    max_concurrent_renders: int = Field(
        default=0,
        ge=0,
        le=100,
        description="Maximum simultaneous renders (0 = unlimited)"
    )

    # === Logging ===
    log_level: str = Field(default="INFO", description="DEBUG, INFO, WARNING or ERROR")
    log_format: str = Field(default="simple", description="simple or json")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a known value."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR"}
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"log_level must be one of: {', '.join(sorted(allowed))}")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format is simple or json."""
        v_lower = v.lower()
        if v_lower not in {"simple", "json"}:
            raise ValueError("log_format must be 'simple' or 'json'")
        return v_lower

    @field_validator("browser_executable_path")
    @classmethod
    def empty_path_is_unset(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    @property
    def max_body_size_bytes(self) -> int:
        return self.max_body_size_mb * 1024 * 1024

    @property
    def concurrency_limited(self) -> bool:
        """Check if an admission limit on renders is configured."""
        return self.max_concurrent_renders > 0

    def validate_runtime_config(self) -> List[str]:
        """
        Check for settings that are valid but likely to cause trouble.

        Returns list of warning messages.
        """
        issues = []

        if self.skip_browser_download and not self.browser_executable_path:
            issues.append(
                "WARNING: browser download skipped but BROWSER_EXECUTABLE_PATH is not set"
            )
        if not self.concurrency_limited:
            issues.append(
                "WARNING: MAX_CONCURRENT_RENDERS not set, each request launches its own browser"
            )
        if self.pdf_timeout_ms < self.content_load_timeout_ms:
            issues.append("WARNING: PDF export timeout is shorter than content load timeout")

        return issues


@lru_cache()
def get_settings() -> PDFServiceSettings:
    """
    Get cached settings instance.

    Settings are loaded once and cached for the life of the process.
    """
    return PDFServiceSettings()


def validate_config_on_startup() -> PDFServiceSettings:
    """
    Validate configuration at application startup.

    Raises ValueError with details if config is invalid.
    Logs warnings for non-critical issues.
    """
    logger = logging.getLogger(__name__)

    try:
        settings = get_settings()
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}") from e

    for issue in settings.validate_runtime_config():
        logger.warning(issue)

    logger.info(
        f"Configuration loaded: port={settings.port}, "
        f"max_attempts={settings.max_attempts}, "
        f"max_concurrent_renders={settings.max_concurrent_renders or 'unlimited'}"
    )
    return settings
