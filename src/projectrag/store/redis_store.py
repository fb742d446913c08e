"""Redis backend for document storage."""

from typing import Optional

from projectrag.rag.document import Document

from . import serializer
from .base import DocumentStore


class RedisDocumentStore(DocumentStore):
    """Redis-based document storage.

    Each document is a hash with a ``record`` field and an ``embeddings``
    field; a sorted set per project orders its documents by creation time.
    Writes use a MULTI/EXEC transaction.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        key_prefix: str = "projectrag:",
    ):
        """Initialize Redis store.

        Args:
            redis_url: Redis connection URL
            key_prefix: Key prefix for all documents
        """
        self.redis_url = redis_url
        self.key_prefix = key_prefix
        self._client = None

    def _get_client(self):
        """Get or create Redis client."""
        if self._client is None:
            try:
                import redis.asyncio as redis
            except ImportError:
                raise ImportError(
                    "Redis store requires 'redis'. "
                    "Install it with: pip install projectrag[redis]"
                )
            self._client = redis.from_url(self.redis_url)
        return self._client

    def _get_key(self, document_id: str) -> str:
        return f"{self.key_prefix}document:{document_id}"

    def _get_project_key(self, project_id: str) -> str:
        return f"{self.key_prefix}project:{project_id}"

    async def save(self, document: Document) -> str:
        client = self._get_client()
        key = self._get_key(document.id)
        previous_project = await client.hget(key, "project_id")
        if isinstance(previous_project, bytes):
            previous_project = previous_project.decode()
        async with client.pipeline(transaction=True) as pipe:
            if previous_project is not None and previous_project != document.project_id:
                pipe.zrem(self._get_project_key(previous_project), document.id)
            pipe.hset(key, mapping={
                "project_id": document.project_id,
                "record": serializer.dumps(serializer.document_record(document)),
                "embeddings": serializer.dumps(serializer.embeddings_record(document)),
            })
            pipe.zadd(
                self._get_project_key(document.project_id),
                {document.id: document.created_at.timestamp()},
            )
            await pipe.execute()
        return document.id

    async def get(self, document_id: str, include_embeddings: bool = False) -> Optional[Document]:
        client = self._get_client()
        fields = ["record", "embeddings"] if include_embeddings else ["record"]
        values = await client.hmget(self._get_key(document_id), fields)
        if values[0] is None:
            return None
        embeddings = serializer.loads(values[1]) if include_embeddings and values[1] else None
        return serializer.document_from_records(serializer.loads(values[0]), embeddings)

    async def list_by_project(self, project_id: str, include_embeddings: bool = False) -> list[Document]:
        client = self._get_client()
        ids = await client.zrevrange(self._get_project_key(project_id), 0, -1)
        documents = []
        for raw_id in ids:
            document_id = raw_id.decode() if isinstance(raw_id, bytes) else raw_id
            document = await self.get(document_id, include_embeddings)
            if document:
                documents.append(document)
        return documents

    async def delete(self, document_id: str) -> bool:
        client = self._get_client()
        key = self._get_key(document_id)
        project_id = await client.hget(key, "project_id")
        if project_id is None:
            return False
        if isinstance(project_id, bytes):
            project_id = project_id.decode()
        async with client.pipeline(transaction=True) as pipe:
            pipe.delete(key)
            pipe.zrem(self._get_project_key(project_id), document_id)
            await pipe.execute()
        return True

    async def delete_by_project(self, project_id: str) -> int:
        client = self._get_client()
        project_key = self._get_project_key(project_id)
        ids = await client.zrange(project_key, 0, -1)
        if not ids:
            return 0
        keys = [self._get_key(i.decode() if isinstance(i, bytes) else i) for i in ids]
        async with client.pipeline(transaction=True) as pipe:
            pipe.delete(*keys)
            pipe.delete(project_key)
            deleted, _ = await pipe.execute()
        return deleted

    async def count(self, project_id: Optional[str] = None) -> int:
        client = self._get_client()
        if project_id is not None:
            return await client.zcard(self._get_project_key(project_id))
        total = 0
        async for _ in client.scan_iter(match=f"{self.key_prefix}document:*"):
            total += 1
        return total
