"""Chunking, embedding and similarity ranking for project documents.

This module provides:
- Document and chunk data structures with optional vectors
- A fixed-dimension Vector type and cosine similarity
- Fixed-size chunking
- Embedding providers (OpenAI, local, fake)
- Chunk embedding with per-chunk failure isolation
- Cosine-similarity ranking with a relevance threshold
- Upload validation and text extraction

Example:
    ```python
    from projectrag.rag import ChunkEmbedder, FakeEmbedding, FixedSizeChunker, SimilarityRanker

    chunker = FixedSizeChunker(chunk_size=1000)
    embedder = ChunkEmbedder(FakeEmbedding())

    chunks = chunker.chunk(content)
    outcome = await embedder.embed(content, chunks)

    query = await embedder.embedding.embed("What is the deadline?")
    matches = SimilarityRanker(top_k=5, threshold=0.7).rank(query, outcome.chunks)
    ```
"""

# Data structures
from .vector import Vector, cosine_similarity
from .document import (
    Document,
    DocumentChunk,
    DocumentMetadata,
    DocumentType,
    RankedChunk,
    RetrievedChunk,
)

# Base classes
from .base import BaseChunker, BaseEmbedding

# Chunking
from .chunking import FixedSizeChunker, TextSpan

# Embedding providers
from .embeddings import (
    DummyEmbedding,
    FakeEmbedding,
    LocalEmbedding,
    OpenAIEmbedding,
    create_embedding,
)

# Embedding orchestration
from .embedder import ChunkEmbedder, EmbeddingOutcome

# Ranking
from .ranking import SimilarityRanker, rank_chunks

# Uploads
from .upload import PreparedUpload, UploadRequest, extract_file_text, prepare_upload

__all__ = [
    # Data structures
    "Vector",
    "cosine_similarity",
    "Document",
    "DocumentChunk",
    "DocumentMetadata",
    "DocumentType",
    "RankedChunk",
    "RetrievedChunk",
    # Base classes
    "BaseChunker",
    "BaseEmbedding",
    # Chunking
    "FixedSizeChunker",
    "TextSpan",
    # Embeddings
    "DummyEmbedding",
    "FakeEmbedding",
    "LocalEmbedding",
    "OpenAIEmbedding",
    "create_embedding",
    # Orchestration
    "ChunkEmbedder",
    "EmbeddingOutcome",
    # Ranking
    "SimilarityRanker",
    "rank_chunks",
    # Uploads
    "PreparedUpload",
    "UploadRequest",
    "extract_file_text",
    "prepare_upload",
]
