"""Document and chunk data structures."""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .vector import Vector


class DocumentType(str, Enum):
    """How a document's content was supplied."""
    TEXT = "text"
    PDF = "pdf"
    URL = "url"


class DocumentMetadata(BaseModel):
    """Source details of a document; which fields are set depends on its type."""
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    url: Optional[str] = None


class DocumentChunk(BaseModel):
    """A contiguous slice of a document's content.

    Attributes:
        text: The chunk text, equal to ``content[start_index:end_index]``
        embedding: Embedding vector, or None when it was not generated or not loaded
        start_index: Start character offset in the document content
        end_index: End character offset (exclusive)
    """

    text: str
    embedding: Optional[Vector] = None
    start_index: int = Field(ge=0)
    end_index: int

    @model_validator(mode="after")
    def _check_offsets(self) -> "DocumentChunk":
        if self.end_index <= self.start_index:
            raise ValueError("end_index must be greater than start_index")
        if self.end_index - self.start_index != len(self.text):
            raise ValueError("Chunk offsets do not match chunk text length")
        return self

    def __repr__(self) -> str:
        content_preview = self.text[:30] + "..." if len(self.text) > 30 else self.text
        return (
            f"DocumentChunk([{self.start_index}:{self.end_index}], "
            f"embedded={self.embedding is not None}, text={content_preview!r})"
        )


class Document(BaseModel):
    """A project document with its chunks and embeddings.

    Attributes:
        id: Opaque document identifier
        project_id: Owning project
        created_by: Uploading user
        title: Display title (1 to 200 characters)
        content: Full raw text
        type: Source type of the content
        metadata: File or URL details
        embedding: Whole-document vector built from a prefix of the content
        chunks: Ordered chunks tiling ``content``; empty for short documents
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    project_id: str
    created_by: str
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    type: DocumentType = DocumentType.TEXT
    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)
    embedding: Optional[Vector] = None
    chunks: list[DocumentChunk] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @model_validator(mode="after")
    def _check_chunks(self) -> "Document":
        expected_start = 0
        for chunk in self.chunks:
            if chunk.start_index != expected_start:
                raise ValueError("Chunks must tile the content without gaps or overlaps")
            if self.content[chunk.start_index:chunk.end_index] != chunk.text:
                raise ValueError("Chunk text does not match document content")
            expected_start = chunk.end_index
        if self.chunks and expected_start != len(self.content):
            raise ValueError("Chunks must cover the whole content")
        return self

    def without_embeddings(self) -> "Document":
        """Return a copy with the document and chunk vectors dropped."""
        return self.model_copy(update={
            "embedding": None,
            "chunks": [chunk.model_copy(update={"embedding": None}) for chunk in self.chunks],
        })

    def __repr__(self) -> str:
        return f"Document(id={self.id!r}, title={self.title!r}, chunks={len(self.chunks)})"


class RankedChunk(BaseModel):
    """A chunk scored against a query vector."""
    chunk_index: int
    similarity: float
    text: str


class RetrievedChunk(BaseModel):
    """A ranked piece of project context.

    ``chunk_index`` is None when the whole-document vector was matched
    because the document was too short to be chunked.
    """
    document_id: str
    title: str
    chunk_index: Optional[int] = None
    similarity: float
    text: str

    def __repr__(self) -> str:
        return (
            f"RetrievedChunk(document_id={self.document_id!r}, "
            f"chunk_index={self.chunk_index}, similarity={self.similarity:.4f})"
        )
