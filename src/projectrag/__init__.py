"""
projectrag - Document chunking, embedding and relevance retrieval for project-scoped AI chat.
"""

from projectrag.exceptions import (
    DimensionMismatch,
    DocumentNotFound,
    DocumentPermissionError,
    DocumentValidationError,
    FileTooLarge,
    ProjectRAGError,
    ProviderUnavailable,
    UnsupportedFileType,
)
from projectrag.rag import (
    # Data structures
    Document,
    DocumentChunk,
    DocumentMetadata,
    DocumentType,
    RankedChunk,
    RetrievedChunk,
    Vector,
    cosine_similarity,
    # Components
    ChunkEmbedder,
    FixedSizeChunker,
    SimilarityRanker,
    rank_chunks,
    # Embeddings
    BaseEmbedding,
    DummyEmbedding,
    FakeEmbedding,
    LocalEmbedding,
    OpenAIEmbedding,
    create_embedding,
    # Uploads
    UploadRequest,
)
from projectrag.store import (
    DocumentStore,
    MemoryDocumentStore,
    RedisDocumentStore,
    SQLiteDocumentStore,
    create_store,
)
from projectrag.retriever import ProjectRetriever
from projectrag.pipeline import IngestionResult, RAGPipeline, count_tokens
from projectrag.utils.config import ProjectRAGConfig, load_config

__version__ = "0.1.0"
__all__ = [
    # Errors
    "ProjectRAGError",
    "ProviderUnavailable",
    "DimensionMismatch",
    "DocumentValidationError",
    "FileTooLarge",
    "UnsupportedFileType",
    "DocumentNotFound",
    "DocumentPermissionError",
    # Data structures
    "Document",
    "DocumentChunk",
    "DocumentMetadata",
    "DocumentType",
    "RankedChunk",
    "RetrievedChunk",
    "Vector",
    "cosine_similarity",
    # Components
    "ChunkEmbedder",
    "FixedSizeChunker",
    "SimilarityRanker",
    "rank_chunks",
    "BaseEmbedding",
    "DummyEmbedding",
    "FakeEmbedding",
    "LocalEmbedding",
    "OpenAIEmbedding",
    "create_embedding",
    "UploadRequest",
    # Storage
    "DocumentStore",
    "MemoryDocumentStore",
    "SQLiteDocumentStore",
    "RedisDocumentStore",
    "create_store",
    # Pipeline
    "ProjectRetriever",
    "RAGPipeline",
    "IngestionResult",
    "count_tokens",
    # Config
    "ProjectRAGConfig",
    "load_config",
]
