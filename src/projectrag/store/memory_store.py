"""In-memory document store."""

from typing import Optional

from projectrag.rag.document import Document

from .base import DocumentStore


class MemoryDocumentStore(DocumentStore):
    """In-memory document storage for testing and single-process use."""

    def __init__(self):
        self._documents: dict[str, Document] = {}

    def _read(self, document: Document, include_embeddings: bool) -> Document:
        copy = document.model_copy(deep=True)
        return copy if include_embeddings else copy.without_embeddings()

    async def save(self, document: Document) -> str:
        self._documents[document.id] = document.model_copy(deep=True)
        return document.id

    async def get(self, document_id: str, include_embeddings: bool = False) -> Optional[Document]:
        document = self._documents.get(document_id)
        if document is None:
            return None
        return self._read(document, include_embeddings)

    async def list_by_project(self, project_id: str, include_embeddings: bool = False) -> list[Document]:
        # Newest insertion first, then a stable sort on creation time.
        documents = [d for d in reversed(list(self._documents.values())) if d.project_id == project_id]
        documents.sort(key=lambda d: d.created_at, reverse=True)
        return [self._read(d, include_embeddings) for d in documents]

    async def delete(self, document_id: str) -> bool:
        return self._documents.pop(document_id, None) is not None

    async def delete_by_project(self, project_id: str) -> int:
        ids = [d.id for d in self._documents.values() if d.project_id == project_id]
        for document_id in ids:
            del self._documents[document_id]
        return len(ids)

    async def count(self, project_id: Optional[str] = None) -> int:
        if project_id is None:
            return len(self._documents)
        return sum(1 for d in self._documents.values() if d.project_id == project_id)
