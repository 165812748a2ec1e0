"""Application configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import logging
import os

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_DATABASE_URL = "sqlite+pysqlite:///:memory:"
DEFAULT_IDE_SECRET = ""

logger = logging.getLogger(__name__)


def redact_secret(secret: str) -> str:
    """Return a non-recoverable placeholder for sensitive values."""
    if not secret:
        return "<empty>"
    return "<redacted>"


@dataclass(frozen=True)
class ApiSettings:
    """Runtime settings shared by resources and the entity layer."""

    log_level: str
    database_url: str
    ide_secret: str

    def safe_for_logging(self) -> dict[str, str]:
        """Return API settings safe for logs."""
        return {
            "log_level": self.log_level,
            "database_url": self.database_url,
            "ide_secret": redact_secret(self.ide_secret),
        }


@lru_cache(maxsize=1)
def get_api_settings() -> ApiSettings:
    """Load API settings from the environment."""
    return ApiSettings(
        log_level=os.getenv("SKYAPI_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        database_url=os.getenv("SKYAPI_DATABASE_URL", DEFAULT_DATABASE_URL),
        ide_secret=os.getenv("SKYAPI_IDE_SECRET", DEFAULT_IDE_SECRET),
    )


def configure_logging(settings: ApiSettings | None = None) -> None:
    """Apply the configured log level to the ``skyapi`` logger tree."""
    settings = settings or get_api_settings()
    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level `{settings.log_level}`")
    logging.getLogger("skyapi").setLevel(level)
    logger.info("Configured API settings=%s", settings.safe_for_logging())
    if not settings.ide_secret:
        logger.warning("SKYAPI_IDE_SECRET is empty; external identifiers can be forged")
