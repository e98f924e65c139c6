"""Logging utilities shared by the embedding scripts and services."""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

logger = logging.getLogger(__name__)

_DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Libraries that log every HTTP request or model shard at INFO.
_NOISY_LOGGERS = ("sentence_transformers", "transformers", "huggingface_hub", "urllib3", "httpx", "filelock")


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        level = os.getenv("LOG_LEVEL") or logging.INFO
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise RuntimeError(f"Unknown log level: {level}")
        return resolved
    return level


def configure_logging(level: Union[int, str, None] = None, *, fmt: Optional[str] = None) -> None:
    """Configure root logging for console output.

    Uses the Google Cloud Logging handler when ``ENV=production`` and the
    library is installed; otherwise writes ``fmt`` lines to stdout. The level
    defaults to ``LOG_LEVEL`` from the environment, then INFO.
    """
    resolved = _resolve_level(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))

    if os.getenv("ENV") == "production":
        try:
            import google.cloud.logging
            client = google.cloud.logging.Client()
            client.setup_logging(log_level=resolved)
            logger.info("Configured Google Cloud Logging handler for production.")
            return
        except ImportError:
            logger.info("google-cloud-logging not found, using basicConfig even in production ENV.")

    logging.basicConfig(
        level=resolved,
        format=fmt or _DEFAULT_FORMAT,
        stream=sys.stdout,
        force=True,
    )


__all__ = ["configure_logging"]
