"""Document chunking."""

from typing import NamedTuple

from .base import BaseChunker
from .document import DocumentChunk


class TextSpan(NamedTuple):
    """A half-open ``[start, end)`` slice of a document's content."""
    text: str
    start: int
    end: int


class FixedSizeChunker(BaseChunker):
    """Chunk content into fixed-size, non-overlapping pieces.

    Content no longer than ``chunk_size`` is not chunked at all; such
    documents are matched through their whole-document embedding instead.
    """

    def __init__(self, chunk_size: int = 1000):
        """Initialize the fixed-size chunker.

        Args:
            chunk_size: Characters per chunk
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size

    def split(self, content: str) -> list[TextSpan]:
        """Split content into fixed-size spans."""
        if len(content) <= self.chunk_size:
            return []

        spans = []
        for start in range(0, len(content), self.chunk_size):
            end = min(start + self.chunk_size, len(content))
            spans.append(TextSpan(content[start:end], start, end))
        return spans

    def chunk(self, content: str) -> list[DocumentChunk]:
        """Split content into chunks without embeddings."""
        return [
            DocumentChunk(text=span.text, start_index=span.start, end_index=span.end)
            for span in self.split(content)
        ]
