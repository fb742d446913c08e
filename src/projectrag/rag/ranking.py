"""Cosine-similarity ranking of document chunks."""

from typing import Optional, Sequence

from .document import DocumentChunk, RankedChunk
from .vector import Vector, cosine_similarity


class SimilarityRanker:
    """Rank chunks by cosine similarity to a query vector.

    Chunks without an embedding never match. Chunks whose vector dimension
    differs from the query, and zero-magnitude vectors on either side, score
    0.0. Only scores strictly above ``threshold`` are returned.
    """

    def __init__(self, top_k: int = 5, threshold: float = 0.7):
        if top_k < 0:
            raise ValueError("top_k must not be negative")
        self.top_k = top_k
        self.threshold = threshold

    def score(self, query: Vector, chunks: Sequence[DocumentChunk]) -> list[RankedChunk]:
        """Score every embedded chunk, in chunk order, without filtering."""
        return [
            RankedChunk(
                chunk_index=index,
                similarity=cosine_similarity(query, chunk.embedding),
                text=chunk.text,
            )
            for index, chunk in enumerate(chunks)
            if chunk.embedding is not None
        ]

    def rank(
        self,
        query: Vector,
        chunks: Sequence[DocumentChunk],
        top_k: Optional[int] = None,
        threshold: Optional[float] = None,
    ) -> list[RankedChunk]:
        """Return the most similar chunks above the threshold.

        Args:
            query: Query embedding
            chunks: Chunks of one document
            top_k: Override for the maximum number of results
            threshold: Override for the minimum similarity (exclusive)

        Returns:
            Ranked chunks, highest similarity first; ties keep chunk order
        """
        top_k = self.top_k if top_k is None else top_k
        threshold = self.threshold if threshold is None else threshold
        # sorted() is stable, so equal scores stay in chunk order.
        ranked = sorted(self.score(query, chunks), key=lambda r: r.similarity, reverse=True)
        return [r for r in ranked if r.similarity > threshold][:top_k]


def rank_chunks(
    query: Vector,
    chunks: Sequence[DocumentChunk],
    top_k: int = 5,
    threshold: float = 0.7,
) -> list[RankedChunk]:
    """Rank chunks with a one-off ``SimilarityRanker``."""
    return SimilarityRanker(top_k=top_k, threshold=threshold).rank(query, chunks)
