"""Project-wide chunk retrieval."""

import logging
from typing import Optional

from projectrag.exceptions import ProviderUnavailable
from projectrag.rag.base import BaseEmbedding
from projectrag.rag.document import Document, RetrievedChunk
from projectrag.rag.ranking import SimilarityRanker
from projectrag.rag.vector import Vector, cosine_similarity
from projectrag.store.base import DocumentStore

logger = logging.getLogger(__name__)


class ProjectRetriever:
    """Retrieve the chunks of a project most similar to a query.

    Chunked documents are ranked chunk by chunk. Documents too short to be
    chunked are scored with their whole-document vector and contribute their
    full content. Documents without any vector never match.
    """

    def __init__(self, embedding: BaseEmbedding, store: DocumentStore, ranker: Optional[SimilarityRanker] = None):
        self.embedding = embedding
        self.store = store
        self.ranker = ranker or SimilarityRanker()

    def _rank_document(
        self,
        query_vector: Vector,
        document: Document,
        top_k: int,
        threshold: float,
    ) -> list[RetrievedChunk]:
        if document.chunks:
            return [
                RetrievedChunk(
                    document_id=document.id,
                    title=document.title,
                    chunk_index=r.chunk_index,
                    similarity=r.similarity,
                    text=r.text,
                )
                for r in self.ranker.rank(query_vector, document.chunks, top_k, threshold)
            ]
        if document.embedding is None:
            return []
        similarity = cosine_similarity(query_vector, document.embedding)
        if similarity <= threshold or top_k == 0:
            return []
        return [RetrievedChunk(
            document_id=document.id,
            title=document.title,
            similarity=similarity,
            text=document.content,
        )]

    async def retrieve(
        self,
        project_id: str,
        query: str,
        top_k: Optional[int] = None,
        threshold: Optional[float] = None,
    ) -> list[RetrievedChunk]:
        """Return the project's best matches for a query.

        Args:
            project_id: Project whose documents are searched
            query: Query text, typically the latest user message
            top_k: Override for the maximum number of results
            threshold: Override for the minimum similarity (exclusive)

        Returns:
            Matches across all documents, highest similarity first. Empty
            when the query cannot be embedded.
        """
        top_k = self.ranker.top_k if top_k is None else top_k
        threshold = self.ranker.threshold if threshold is None else threshold

        try:
            query_vector = await self.embedding.embed(query)
        except ProviderUnavailable as e:
            logger.warning(f"Query embedding failed, retrieving no context: {e}")
            return []

        documents = await self.store.list_by_project(project_id, include_embeddings=True)
        matches: list[RetrievedChunk] = []
        for document in documents:
            matches.extend(self._rank_document(query_vector, document, top_k, threshold))

        matches.sort(key=lambda m: m.similarity, reverse=True)
        logger.debug(f"Retrieved {len(matches)} candidate chunks from {len(documents)} documents")
        return matches[:top_k]
