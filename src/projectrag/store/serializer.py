"""Document record serialization shared by the storage backends.

A stored document is split into two JSON records: the document record
(everything except vectors) and the embeddings record (document vector and
one entry per chunk, ``null`` for a chunk whose embedding failed). Default
reads only touch the document record.
"""

import json
from typing import Any, Optional

from projectrag.rag.document import Document


def document_record(document: Document) -> dict[str, Any]:
    """Return the JSON-compatible record of a document without vectors."""
    record = document.model_dump(mode="json", exclude={"embedding", "chunks"})
    record["chunks"] = [
        {"text": c.text, "start_index": c.start_index, "end_index": c.end_index}
        for c in document.chunks
    ]
    return record


def embeddings_record(document: Document) -> dict[str, Any]:
    """Return the JSON-compatible record of a document's vectors."""
    return {
        "document": document.embedding.to_list() if document.embedding is not None else None,
        "chunks": [c.embedding.to_list() if c.embedding is not None else None for c in document.chunks],
    }


def document_from_records(
    record: dict[str, Any],
    embeddings: Optional[dict[str, Any]] = None,
) -> Document:
    """Rebuild a document from its records.

    Args:
        record: Document record
        embeddings: Embeddings record, or None to load without vectors

    Returns:
        Document
    """
    data = dict(record)
    chunks = [dict(c) for c in data.get("chunks", [])]
    if embeddings is not None:
        data["embedding"] = embeddings.get("document")
        chunk_vectors = embeddings.get("chunks") or []
        for chunk, vector in zip(chunks, chunk_vectors):
            chunk["embedding"] = vector
    data["chunks"] = chunks
    return Document.model_validate(data)


def dumps(record: dict[str, Any]) -> str:
    return json.dumps(record, ensure_ascii=False)


def loads(raw: str | bytes) -> dict[str, Any]:
    return json.loads(raw)
