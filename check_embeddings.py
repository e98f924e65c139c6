"""Smoke check: embed one sentence and report the vector and latency."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional, Sequence

from common.logging import configure_logging
from service.embeddings import get_embeddings

SAMPLE_TEXT = "Hello world"
PREVIEW_SIZE = 5

EmbeddingProvider = Callable[[str], Awaitable[Sequence[float]]]

logger = logging.getLogger("check_embeddings")


async def run_embedding_check(embed: Optional[EmbeddingProvider] = None) -> None:
    """Call the embedding provider once and log the outcome.

    Any provider error is logged, never raised.
    """
    embed = embed or get_embeddings
    try:
        logger.info("Starting embedding test...")
        start = time.perf_counter()
        embedding = await embed(SAMPLE_TEXT)
        elapsed_ms = round((time.perf_counter() - start) * 1000)
        logger.info("Success! Embedding length: %d", len(embedding))
        logger.info("Time taken: %d ms", elapsed_ms)
        logger.info("First %d values: %s", PREVIEW_SIZE, [float(value) for value in embedding[:PREVIEW_SIZE]])
    except Exception as exc:
        logger.error("Embedding test failed!")
        logger.error("%s", exc, exc_info=exc)


def main() -> None:
    configure_logging()
    asyncio.run(run_embedding_check())


if __name__ == "__main__":  # pragma: no cover
    main()
