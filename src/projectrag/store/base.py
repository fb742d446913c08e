"""Document store interface."""

from abc import ABC, abstractmethod
from typing import Optional

from projectrag.rag.document import Document


class DocumentStore(ABC):
    """Abstract base class for document storage backends.

    Reads return documents without their document and chunk vectors unless
    ``include_embeddings`` is requested. Each ``save`` is atomic for the
    document it writes.
    """

    @abstractmethod
    async def save(self, document: Document) -> str:
        """Save a document.

        Args:
            document: Document to save

        Returns:
            Document ID
        """
        pass

    @abstractmethod
    async def get(self, document_id: str, include_embeddings: bool = False) -> Optional[Document]:
        """Load a document by ID.

        Args:
            document_id: Document ID
            include_embeddings: Also load the document and chunk vectors

        Returns:
            Document or None if not found
        """
        pass

    @abstractmethod
    async def list_by_project(self, project_id: str, include_embeddings: bool = False) -> list[Document]:
        """List the documents of a project.

        Args:
            project_id: Project ID
            include_embeddings: Also load the document and chunk vectors

        Returns:
            List of documents (newest first)
        """
        pass

    @abstractmethod
    async def delete(self, document_id: str) -> bool:
        """Delete a document.

        Args:
            document_id: Document ID

        Returns:
            True if deleted
        """
        pass

    @abstractmethod
    async def delete_by_project(self, project_id: str) -> int:
        """Delete every document of a project.

        Args:
            project_id: Project ID

        Returns:
            Number of deleted documents
        """
        pass

    @abstractmethod
    async def count(self, project_id: Optional[str] = None) -> int:
        """Count documents, optionally within one project."""
        pass
