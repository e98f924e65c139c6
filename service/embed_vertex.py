"""Vertex AI embedding backend, selected with ``EMBEDDING_PROVIDER=vertex``."""

from __future__ import annotations

import asyncio
import hashlib
import logging
from dataclasses import dataclass, field
from typing import Dict, List

import vertexai
from vertexai.language_models import TextEmbeddingModel

from common.config import DEFAULT_MODELS, get_settings

MODEL_ID = DEFAULT_MODELS["vertex"]

logger = logging.getLogger(__name__)


def _hash_text(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


@dataclass
class VertexEmbeddingClient:
    """Client wrapper around Vertex AI text embeddings."""

    model_id: str = MODEL_ID
    _model: TextEmbeddingModel = field(init=False, repr=False)
    _cache: Dict[str, List[float]] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        settings = get_settings()
        if not settings.project_id:
            raise RuntimeError("Missing required environment variable: PROJECT_ID")
        vertexai.init(project=settings.project_id, location=settings.location)
        self._model = TextEmbeddingModel.from_pretrained(self.model_id)
        logger.info("Vertex embedding model %s ready in %s", self.model_id, settings.location)

    def embed_text(self, text: str) -> List[float]:
        """Embed one text, reusing the vector for text seen before."""
        key = _hash_text(text)
        if key not in self._cache:
            responses = self._model.get_embeddings([text])
            if not responses:
                raise RuntimeError(f"Vertex model {self.model_id} returned no embedding")
            self._cache[key] = list(responses[0].values)
        return self._cache[key]

    async def embed_query(self, text: str) -> List[float]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.embed_text, text)


__all__ = ["VertexEmbeddingClient", "MODEL_ID"]
