"""Document ingestion and retrieval pipeline."""

import logging
import math
from typing import Optional

from pydantic import BaseModel

from projectrag.exceptions import DocumentNotFound, DocumentPermissionError
from projectrag.rag.base import BaseEmbedding
from projectrag.rag.chunking import FixedSizeChunker
from projectrag.rag.document import Document, RetrievedChunk
from projectrag.rag.embedder import ChunkEmbedder
from projectrag.rag.embeddings import create_embedding
from projectrag.rag.ranking import SimilarityRanker
from projectrag.rag.upload import UploadRequest, prepare_upload
from projectrag.retriever import ProjectRetriever
from projectrag.store import DocumentStore, create_store
from projectrag.utils.config import ProjectRAGConfig, RetrievalConfig, UploadConfig
from projectrag.utils.logging import set_log_level

logger = logging.getLogger(__name__)


def count_tokens(text: str) -> int:
    """Estimate token count for text (~4 characters per token)."""
    return math.ceil(len(text) / 4)


class IngestionResult(BaseModel):
    """Outcome of an upload.

    Attributes:
        document: The stored document, without vectors
        embedded_chunks: Chunks that received a vector
        failed_chunks: Chunks stored without a vector
        document_embedded: Whether the whole-document vector was produced
    """
    document: Document
    embedded_chunks: int = 0
    failed_chunks: int = 0
    document_embedded: bool = False


class RAGPipeline:
    """Complete document pipeline: upload, storage, retrieval and context."""

    def __init__(
        self,
        embedding: BaseEmbedding,
        store: DocumentStore,
        config: Optional[RetrievalConfig] = None,
        upload_config: Optional[UploadConfig] = None,
    ):
        """Initialize the pipeline.

        Args:
            embedding: Embedding provider shared by ingestion and retrieval
            store: Document store
            config: Chunking and ranking parameters
            upload_config: Upload limits
        """
        self.config = config or RetrievalConfig()
        self.upload_config = upload_config or UploadConfig()
        self.embedding = embedding
        self.store = store
        self.chunker = FixedSizeChunker(self.config.chunk_size)
        self.embedder = ChunkEmbedder(
            embedding,
            document_embedding_chars=self.config.document_embedding_chars,
            max_concurrency=self.config.max_concurrency,
        )
        self.ranker = SimilarityRanker(top_k=self.config.top_k, threshold=self.config.threshold)
        self.retriever = ProjectRetriever(embedding, store, self.ranker)

    @classmethod
    def from_config(cls, config: ProjectRAGConfig) -> "RAGPipeline":
        """Build a pipeline from configuration.

        Raises:
            ProviderUnavailable: If the embedding provider is misconfigured
        """
        set_log_level(config.log_level)
        return cls(
            embedding=create_embedding(config.provider),
            store=create_store(config.store),
            config=config.retrieval,
            upload_config=config.upload,
        )

    async def upload(self, request: UploadRequest) -> IngestionResult:
        """Validate, chunk, embed and store an uploaded document.

        Embedding failures never fail the upload; affected vectors are
        stored as absent.

        Raises:
            DocumentValidationError: If the title, content or file is invalid
        """
        prepared = prepare_upload(request, self.upload_config)
        chunks = self.chunker.chunk(prepared.content)
        outcome = await self.embedder.embed(prepared.content, chunks)

        document = Document(
            project_id=request.project_id,
            created_by=request.created_by,
            title=prepared.title,
            content=prepared.content,
            type=prepared.type,
            metadata=prepared.metadata,
            embedding=outcome.embedding,
            chunks=outcome.chunks,
        )
        await self.store.save(document)
        logger.info(
            f"Stored document {document.id} in project {document.project_id}: "
            f"{len(document.chunks)} chunks, {outcome.embedded_chunks} embedded"
        )
        return IngestionResult(
            document=document.without_embeddings(),
            embedded_chunks=outcome.embedded_chunks,
            failed_chunks=outcome.failed_chunks,
            document_embedded=outcome.embedding is not None,
        )

    async def get_document(self, project_id: str, document_id: str) -> Document:
        """Return a project document without vectors.

        Raises:
            DocumentNotFound: If the document is absent or belongs to another project
        """
        document = await self.store.get(document_id)
        if document is None or document.project_id != project_id:
            raise DocumentNotFound(document_id)
        return document

    async def list_documents(self, project_id: str) -> list[Document]:
        """Return a project's documents, newest first, without vectors."""
        return await self.store.list_by_project(project_id)

    async def delete_document(
        self,
        project_id: str,
        document_id: str,
        actor_id: str,
        project_owner_id: str,
    ) -> None:
        """Delete a document on behalf of the project owner or its creator.

        Raises:
            DocumentNotFound: If the document is absent or belongs to another project
            DocumentPermissionError: If the actor is neither owner nor creator
        """
        document = await self.get_document(project_id, document_id)
        if actor_id != project_owner_id and actor_id != document.created_by:
            raise DocumentPermissionError()
        await self.store.delete(document_id)
        logger.info(f"Deleted document {document_id} from project {project_id}")

    async def delete_project_documents(self, project_id: str) -> int:
        """Delete every document of a project being removed."""
        deleted = await self.store.delete_by_project(project_id)
        logger.info(f"Deleted {deleted} documents of project {project_id}")
        return deleted

    async def relevant_chunks(
        self,
        project_id: str,
        query: str,
        top_k: Optional[int] = None,
        threshold: Optional[float] = None,
    ) -> list[RetrievedChunk]:
        """Return the project context most similar to the query."""
        return await self.retriever.retrieve(project_id, query, top_k, threshold)

    async def build_context(self, project_id: str, query: str) -> str:
        """Format the relevant chunks of a project as prompt context.

        Blocks are added in ranking order until the next one would exceed
        ``max_context_tokens``. Returns an empty string when nothing matches.
        """
        blocks: list[str] = []
        used = 0
        for match in await self.relevant_chunks(project_id, query):
            block = f"[Source: {match.title}]\n{match.text}"
            tokens = count_tokens(block)
            if used + tokens > self.config.max_context_tokens:
                break
            blocks.append(block)
            used += tokens
        return "\n\n".join(blocks)
