"""
Configuration - Environment-driven settings.

    LUDO_ENV          deployment name (default: development)
    LUDO_LOG_LEVEL    logging level name (default: INFO)
    ALLOWED_ORIGINS   comma-separated CORS origins (default: *)
    LUDO_BOARD_SIZE   side length of the served board geometry (default: 600)
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    """Process settings read once at startup."""
    env: str = "development"
    log_level: str = "INFO"
    allowed_origins: tuple[str, ...] = ("*",)
    board_size: float = 600.0

    @classmethod
    def from_env(cls) -> Settings:
        origins = os.getenv("ALLOWED_ORIGINS", "*").split(",")
        return cls(
            env=os.getenv("LUDO_ENV", "development"),
            log_level=os.getenv("LUDO_LOG_LEVEL", "INFO").upper(),
            allowed_origins=tuple(o.strip() for o in origins if o.strip()),
            board_size=float(os.getenv("LUDO_BOARD_SIZE", "600")),
        )


def configure_logging(level: str | int = "INFO") -> None:
    """Install a basic root handler for CLI and server runs."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
