"""SQLite backend for document storage."""

import asyncio
import sqlite3
from typing import Optional

from projectrag.rag.document import Document

from . import serializer
from .base import DocumentStore


class SQLiteDocumentStore(DocumentStore):
    """SQLite-based document storage.

    Vectors live in their own column so that default reads never load
    them. Suitable for single-machine deployments.
    """

    def __init__(self, db_path: str = "projectrag.db"):
        """Initialize SQLite store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_table(self, conn: sqlite3.Connection) -> None:
        """Ensure the documents table exists."""
        conn.execute("""
            CREATE TABLE IF NOT EXISTS documents (
                id TEXT PRIMARY KEY,
                project_id TEXT NOT NULL,
                created_at TEXT NOT NULL,
                record TEXT NOT NULL,
                embeddings TEXT NOT NULL
            )
        """)
        conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_project_created
            ON documents(project_id, created_at DESC)
        """)
        conn.commit()

    def _row_to_document(self, row: sqlite3.Row, include_embeddings: bool) -> Document:
        embeddings = serializer.loads(row["embeddings"]) if include_embeddings else None
        return serializer.document_from_records(serializer.loads(row["record"]), embeddings)

    def _columns(self, include_embeddings: bool) -> str:
        return "record, embeddings" if include_embeddings else "record"

    async def save(self, document: Document) -> str:
        """Save a document in a single transaction."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._save_sync, document)
        return document.id

    def _save_sync(self, document: Document) -> None:
        conn = self._get_connection()
        try:
            self._ensure_table(conn)
            conn.execute(
                """
                INSERT OR REPLACE INTO documents
                (id, project_id, created_at, record, embeddings)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    document.id,
                    document.project_id,
                    document.created_at.isoformat(),
                    serializer.dumps(serializer.document_record(document)),
                    serializer.dumps(serializer.embeddings_record(document)),
                ),
            )
            conn.commit()
        finally:
            conn.close()

    async def get(self, document_id: str, include_embeddings: bool = False) -> Optional[Document]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._get_sync, document_id, include_embeddings)

    def _get_sync(self, document_id: str, include_embeddings: bool) -> Optional[Document]:
        conn = self._get_connection()
        try:
            self._ensure_table(conn)
            row = conn.execute(
                f"SELECT {self._columns(include_embeddings)} FROM documents WHERE id = ?",
                (document_id,),
            ).fetchone()
            if row:
                return self._row_to_document(row, include_embeddings)
            return None
        finally:
            conn.close()

    async def list_by_project(self, project_id: str, include_embeddings: bool = False) -> list[Document]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._list_sync, project_id, include_embeddings)

    def _list_sync(self, project_id: str, include_embeddings: bool) -> list[Document]:
        conn = self._get_connection()
        try:
            self._ensure_table(conn)
            rows = conn.execute(
                f"""
                SELECT {self._columns(include_embeddings)} FROM documents
                WHERE project_id = ?
                ORDER BY created_at DESC, rowid DESC
                """,
                (project_id,),
            ).fetchall()
            return [self._row_to_document(row, include_embeddings) for row in rows]
        finally:
            conn.close()

    async def delete(self, document_id: str) -> bool:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._delete_sync, "id", document_id) > 0

    async def delete_by_project(self, project_id: str) -> int:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._delete_sync, "project_id", project_id)

    def _delete_sync(self, column: str, value: str) -> int:
        conn = self._get_connection()
        try:
            self._ensure_table(conn)
            cursor = conn.execute(f"DELETE FROM documents WHERE {column} = ?", (value,))
            conn.commit()
            return cursor.rowcount
        finally:
            conn.close()

    async def count(self, project_id: Optional[str] = None) -> int:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._count_sync, project_id)

    def _count_sync(self, project_id: Optional[str]) -> int:
        conn = self._get_connection()
        try:
            self._ensure_table(conn)
            if project_id is None:
                row = conn.execute("SELECT COUNT(*) FROM documents").fetchone()
            else:
                row = conn.execute(
                    "SELECT COUNT(*) FROM documents WHERE project_id = ?", (project_id,)
                ).fetchone()
            return row[0]
        finally:
            conn.close()
