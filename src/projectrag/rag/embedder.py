"""Chunk and document embedding orchestration."""

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from pydantic import BaseModel

from projectrag.exceptions import ProviderUnavailable

from .base import BaseEmbedding
from .document import DocumentChunk
from .vector import Vector

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _gather_or_cancel(*aws: Awaitable[T]) -> list[T]:
    """Run awaitables concurrently; if one raises, cancel and reap the others."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class EmbeddingOutcome(BaseModel):
    """Result of embedding one document's chunks and prefix.

    Attributes:
        chunks: Input chunks in the same order, with embeddings where the call succeeded
        embedding: Whole-document vector, or None if the call failed
        embedded_chunks: Number of chunks that received a vector
        failed_chunks: Number of chunks left without a vector
    """
    chunks: list[DocumentChunk]
    embedding: Optional[Vector] = None
    embedded_chunks: int = 0
    failed_chunks: int = 0


class ChunkEmbedder:
    """Attach embeddings to chunks and compute the whole-document vector.

    Each chunk is embedded by an independent provider call. A call that
    raises ``ProviderUnavailable`` leaves only that chunk without a vector;
    there are no retries. At most ``max_concurrency`` calls are in flight.
    """

    def __init__(
        self,
        embedding: BaseEmbedding,
        document_embedding_chars: int = 1000,
        max_concurrency: int = 4,
    ):
        """Initialize the chunk embedder.

        Args:
            embedding: Embedding provider
            document_embedding_chars: Content prefix length used for the document vector
            max_concurrency: Maximum concurrent provider calls
        """
        if document_embedding_chars <= 0:
            raise ValueError("document_embedding_chars must be positive")
        if max_concurrency <= 0:
            raise ValueError("max_concurrency must be positive")
        self.embedding = embedding
        self.document_embedding_chars = document_embedding_chars
        self.max_concurrency = max_concurrency

    async def _embed_or_none(self, text: str, semaphore: asyncio.Semaphore, label: str) -> Optional[Vector]:
        async with semaphore:
            try:
                return await self.embedding.embed(text)
            except ProviderUnavailable as e:
                logger.warning(f"Failed to generate embedding for {label}: {e}")
                return None

    async def embed_chunks(
        self,
        chunks: list[DocumentChunk],
        semaphore: Optional[asyncio.Semaphore] = None,
    ) -> list[DocumentChunk]:
        """Return the chunks with their embeddings populated.

        Args:
            chunks: Chunks from the chunker
            semaphore: Shared concurrency limit (a new one is created if omitted)

        Returns:
            New chunk objects, same order and offsets, embedding None on failure
        """
        semaphore = semaphore or asyncio.Semaphore(self.max_concurrency)
        vectors = await _gather_or_cancel(*(
            self._embed_or_none(chunk.text, semaphore, f"chunk {i}")
            for i, chunk in enumerate(chunks)
        ))
        return [
            chunk.model_copy(update={"embedding": vector})
            for chunk, vector in zip(chunks, vectors)
        ]

    async def embed_document(
        self,
        content: str,
        semaphore: Optional[asyncio.Semaphore] = None,
    ) -> Optional[Vector]:
        """Embed the first ``document_embedding_chars`` characters of the content."""
        semaphore = semaphore or asyncio.Semaphore(1)
        return await self._embed_or_none(content[:self.document_embedding_chars], semaphore, "document")

    async def embed(self, content: str, chunks: list[DocumentChunk]) -> EmbeddingOutcome:
        """Embed every chunk and the document prefix.

        Args:
            content: Full document content
            chunks: Chunks of that content

        Returns:
            EmbeddingOutcome with populated chunks and counts
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)
        embedded, document_vector = await _gather_or_cancel(
            self.embed_chunks(chunks, semaphore),
            self.embed_document(content, semaphore),
        )
        succeeded = sum(1 for chunk in embedded if chunk.embedding is not None)
        outcome = EmbeddingOutcome(
            chunks=embedded,
            embedding=document_vector,
            embedded_chunks=succeeded,
            failed_chunks=len(embedded) - succeeded,
        )
        if outcome.failed_chunks or document_vector is None:
            logger.warning(
                f"Embedding degraded: {outcome.failed_chunks}/{len(embedded)} chunks failed, "
                f"document vector {'missing' if document_vector is None else 'present'}"
            )
        return outcome
