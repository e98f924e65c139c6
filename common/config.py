"""Configuration helpers for the embedding toolkit.

Settings are read from environment variables only and cached for the life
of the process; call ``get_settings.cache_clear()`` after changing the
environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Optional, Tuple

PROVIDERS = ("local", "vertex")

DEFAULT_MODELS = {
    "local": "sentence-transformers/all-MiniLM-L6-v2",
    "vertex": "gemini-embedding-001",
}

VERTEX_REQUIRED_VARS: Dict[str, str] = {
    "PROJECT_ID": "Google Cloud project id used for Vertex AI calls.",
    "REGION": "Default region for Vertex AI resources.",
}


@dataclass(frozen=True)
class Settings:
    """Runtime configuration loaded from environment variables."""

    embedding_provider: str = "local"
    embedding_model: str = DEFAULT_MODELS["local"]
    chunk_size: int = 1000
    chunk_overlap: int = 200
    log_level: str = "INFO"
    project_id: Optional[str] = None
    region: Optional[str] = None
    vertex_location: Optional[str] = None

    @property
    def location(self) -> Optional[str]:
        return self.vertex_location or self.region


def _get_env(name: str, *, required: bool = True) -> str:
    value = os.getenv(name)
    if required and not value:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value or ""


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {name} must be an integer, got {raw!r}") from exc


def validate_chunking(chunk_size: int, chunk_overlap: int) -> Tuple[int, int]:
    if chunk_size <= 0:
        raise RuntimeError("CHUNK_SIZE must be positive")
    if not 0 <= chunk_overlap < chunk_size:
        raise RuntimeError("CHUNK_OVERLAP must be non-negative and smaller than CHUNK_SIZE")
    return chunk_size, chunk_overlap


@lru_cache()
def get_settings() -> Settings:
    """Load :class:`Settings` from the environment."""

    provider = (os.getenv("EMBEDDING_PROVIDER") or "local").strip().lower()
    if provider not in PROVIDERS:
        raise RuntimeError(
            f"Unsupported EMBEDDING_PROVIDER {provider!r}; expected one of {', '.join(PROVIDERS)}"
        )

    chunk_size, chunk_overlap = validate_chunking(_get_int("CHUNK_SIZE", 1000), _get_int("CHUNK_OVERLAP", 200))

    vertex_values: Dict[str, str] = {}
    if provider == "vertex":
        vertex_values = {var.lower(): _get_env(var) for var in VERTEX_REQUIRED_VARS}

    return Settings(
        embedding_provider=provider,
        embedding_model=os.getenv("EMBEDDING_MODEL") or DEFAULT_MODELS[provider],
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        vertex_location=os.getenv("VERTEX_LOCATION"),
        **vertex_values,
    )


__all__ = ["Settings", "get_settings", "validate_chunking", "DEFAULT_MODELS", "PROVIDERS"]
