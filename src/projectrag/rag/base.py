"""Base classes and abstract interfaces for retrieval components."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .chunking import TextSpan
    from .vector import Vector


class BaseEmbedding(ABC):
    """Abstract base class for embedding providers.

    Embedding providers convert text into dense vector representations.
    Implementations are constructed explicitly and passed to the components
    that need them; they hold no process-wide state.
    """

    @abstractmethod
    async def embed(self, text: str) -> "Vector":
        """Embed a single piece of text.

        Callers bound the input length before calling.

        Args:
            text: Text to embed

        Returns:
            Embedding vector

        Raises:
            ProviderUnavailable: If the provider cannot produce a vector
        """
        pass

    @property
    @abstractmethod
    def dimension(self) -> Optional[int]:
        """Return the dimension of the embedding vectors, if known."""
        pass


class BaseChunker(ABC):
    """Abstract base class for content chunkers."""

    @abstractmethod
    def split(self, content: str) -> list["TextSpan"]:
        """Split content into ordered offset spans.

        Args:
            content: Raw document text

        Returns:
            Spans covering the content, or an empty list when no chunking is needed
        """
        pass
