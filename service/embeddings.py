"""Text embedding provider and chunk splitting.

The default backend is a local ``sentence-transformers`` model that is
loaded on first use and kept in memory for the rest of the process. Setting
``EMBEDDING_PROVIDER=vertex`` swaps in :class:`service.embed_vertex.VertexEmbeddingClient`.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional, Protocol

from langchain_core.documents import Document
from langchain_text_splitters import RecursiveCharacterTextSplitter
from sentence_transformers import SentenceTransformer

from common.config import DEFAULT_MODELS, get_settings, validate_chunking

MODEL_ID = DEFAULT_MODELS["local"]

logger = logging.getLogger(__name__)


class EmbeddingClient(Protocol):
    async def embed_query(self, text: str) -> List[float]:
        ...


@dataclass
class LocalEmbeddingModel:
    """Lazily-loaded sentence-transformers model producing normalised vectors."""

    model_id: str = MODEL_ID
    _model: Optional[SentenceTransformer] = field(default=None, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def load(self) -> SentenceTransformer:
        # Executor threads may race on the first call.
        with self._lock:
            if self._model is None:
                logger.info("Loading embedding model %s", self.model_id)
                self._model = SentenceTransformer(self.model_id)
            return self._model

    def embed_text(self, text: str) -> List[float]:
        model = self.load()
        vector = model.encode(
            text,
            convert_to_numpy=True,
            normalize_embeddings=True,
            show_progress_bar=False,
        )
        return vector.tolist()

    async def embed_query(self, text: str) -> List[float]:
        """Embed ``text`` without blocking the running event loop."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.embed_text, text)


@lru_cache()
def get_embedding_client() -> EmbeddingClient:
    """Return the process-wide embedding backend for the configured provider."""

    settings = get_settings()
    if settings.embedding_provider == "vertex":
        from service.embed_vertex import VertexEmbeddingClient

        return VertexEmbeddingClient(model_id=settings.embedding_model)
    return LocalEmbeddingModel(model_id=settings.embedding_model)


async def get_embeddings(text: str) -> List[float]:
    try:
        return await get_embedding_client().embed_query(text)
    except Exception:
        logger.exception("Error generating embeddings")
        raise


async def split_text_into_chunks(
    text: str,
    chunk_size: Optional[int] = None,
    chunk_overlap: Optional[int] = None,
) -> List[Document]:
    """Split ``text`` into overlapping :class:`Document` chunks, in order.

    Sizes default to ``CHUNK_SIZE``/``CHUNK_OVERLAP`` from the settings
    (1000 and 200 characters). When only ``chunk_size`` is given, the
    default overlap is capped below it. Invalid pairs raise ``RuntimeError``.
    """

    settings = get_settings()
    if chunk_overlap is None:
        chunk_overlap = settings.chunk_overlap
        if chunk_size is not None:
            chunk_overlap = max(0, min(chunk_overlap, chunk_size - 1))
    if chunk_size is None:
        chunk_size = settings.chunk_size
    chunk_size, chunk_overlap = validate_chunking(chunk_size, chunk_overlap)
    splitter = RecursiveCharacterTextSplitter(chunk_size=chunk_size, chunk_overlap=chunk_overlap)
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, splitter.create_documents, [text])


__all__ = [
    "EmbeddingClient",
    "LocalEmbeddingModel",
    "MODEL_ID",
    "get_embedding_client",
    "get_embeddings",
    "split_text_into_chunks",
]
