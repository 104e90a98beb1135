"""Centralized configuration read from environment variables."""

import logging
import os


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    DATABASE_URL = os.environ.get("DATABASE_URL") or "sqlite:///./scoring.db"
    DATABASE_ECHO = _env_bool("DATABASE_ECHO", False)
    # Persisting a single scoring action. A timeout counts as a failed persist (rollback).
    PERSIST_TIMEOUT_SEC = float(os.environ.get("PERSIST_TIMEOUT_SEC", "5.0"))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


def configure_logging(level: str | None = None) -> None:
    """Set up root logging once for the process (no-op if handlers are already installed)."""
    logging.basicConfig(
        level=level or Config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
