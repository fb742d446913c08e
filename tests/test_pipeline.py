"""Tests for the document pipeline and project retrieval."""

import pytest

from projectrag import (
    DocumentNotFound,
    DocumentPermissionError,
    DocumentValidationError,
    MemoryDocumentStore,
    ProjectRAGConfig,
    RAGPipeline,
    UploadRequest,
    count_tokens,
)
from projectrag.utils.config import EmbeddingProviderConfig, RetrievalConfig, StoreConfig

X_CHUNK = "x" * 1000
Y_CHUNK = "y" * 1000
SHORT = "short doc"

VECTORS = {
    X_CHUNK: [1.0, 0.0, 0.0],
    Y_CHUNK: [0.0, 1.0, 0.0],
    SHORT: [0.8, 0.6, 0.0],
    "q": [1.0, 0.0, 0.0],
}


def text_upload(title: str, content: str, project_id: str = "p1", created_by: str = "u1") -> UploadRequest:
    return UploadRequest(project_id=project_id, created_by=created_by, title=title, content=content)


@pytest.fixture
def pipeline(mapping_embedding, memory_store):
    """Pipeline over fixed vectors and an in-memory store."""
    return RAGPipeline(mapping_embedding(VECTORS), memory_store)


class TestUpload:
    """Tests for RAGPipeline.upload."""

    @pytest.mark.asyncio
    async def test_long_document_is_chunked(self, fake_embedding, memory_store):
        pipeline = RAGPipeline(fake_embedding, memory_store)
        result = await pipeline.upload(text_upload("Long", "z" * 2400))

        document = result.document
        assert [(c.start_index, c.end_index) for c in document.chunks] == [(0, 1000), (1000, 2000), (2000, 2400)]
        assert result.embedded_chunks == 3
        assert result.failed_chunks == 0
        assert result.document_embedded is True
        assert document.embedding is None

        stored = await memory_store.get(document.id, include_embeddings=True)
        assert stored.embedding is not None
        assert all(c.embedding is not None for c in stored.chunks)

    @pytest.mark.asyncio
    async def test_short_document_has_no_chunks(self, fake_embedding, memory_store):
        pipeline = RAGPipeline(fake_embedding, memory_store)
        result = await pipeline.upload(text_upload("Short", "y" * 500))

        assert result.document.chunks == []
        assert result.document_embedded is True

    @pytest.mark.asyncio
    async def test_partial_embedding_failure(self, flaky_embedding, memory_store):
        """Two failed chunks out of five still store the whole document."""
        content = "a" * 1000 + "b" * 1000 + "c" * 1000 + "d" * 1000 + "e" * 500
        pipeline = RAGPipeline(flaky_embedding({"b" * 1000, "d" * 1000}), memory_store)

        result = await pipeline.upload(text_upload("Letters", content))

        assert result.embedded_chunks == 3
        assert result.failed_chunks == 2
        stored = await memory_store.get(result.document.id, include_embeddings=True)
        assert len(stored.chunks) == 5
        assert [c.embedding is None for c in stored.chunks] == [False, True, False, True, False]
        assert stored.content == content

    @pytest.mark.asyncio
    async def test_provider_down(self, flaky_embedding, memory_store):
        """An unreachable provider never fails the upload."""
        content = "m" * 1500
        pipeline = RAGPipeline(flaky_embedding({content[:1000], content[1000:]}), memory_store)

        result = await pipeline.upload(text_upload("Offline", content))

        assert result.embedded_chunks == 0
        assert result.failed_chunks == 2
        assert result.document_embedded is False
        assert await memory_store.count("p1") == 1

    @pytest.mark.asyncio
    async def test_validation_error(self, pipeline, memory_store):
        with pytest.raises(DocumentValidationError, match="Title is required"):
            await pipeline.upload(text_upload("", "content"))
        assert await memory_store.count() == 0


class TestRetrieval:
    """Tests for project-wide retrieval."""

    @pytest.mark.asyncio
    async def test_chunks_and_whole_document_fallback(self, pipeline):
        """Chunk matches and short-document matches merge by similarity."""
        alpha = (await pipeline.upload(text_upload("Alpha", X_CHUNK + Y_CHUNK))).document
        beta = (await pipeline.upload(text_upload("Beta", SHORT))).document

        results = await pipeline.relevant_chunks("p1", "q")

        assert [(r.document_id, r.chunk_index) for r in results] == [(alpha.id, 0), (beta.id, None)]
        assert results[0].similarity == pytest.approx(1.0)
        assert results[0].text == X_CHUNK
        assert results[1].similarity == pytest.approx(0.8)
        assert results[1].text == SHORT
        assert results[1].title == "Beta"

    @pytest.mark.asyncio
    async def test_top_k_is_project_wide(self, pipeline):
        await pipeline.upload(text_upload("Alpha", X_CHUNK + Y_CHUNK))
        await pipeline.upload(text_upload("Beta", SHORT))

        results = await pipeline.relevant_chunks("p1", "q", top_k=1)

        assert len(results) == 1
        assert results[0].title == "Alpha"

    @pytest.mark.asyncio
    async def test_threshold_override(self, pipeline):
        await pipeline.upload(text_upload("Beta", SHORT))
        assert await pipeline.relevant_chunks("p1", "q", threshold=0.9) == []

    @pytest.mark.asyncio
    async def test_query_embedding_failure(self, pipeline):
        """A query that cannot be embedded yields no context."""
        await pipeline.upload(text_upload("Alpha", X_CHUNK + Y_CHUNK))
        assert await pipeline.relevant_chunks("p1", "unknown query") == []

    @pytest.mark.asyncio
    async def test_project_isolation(self, pipeline):
        await pipeline.upload(text_upload("Alpha", X_CHUNK + Y_CHUNK, project_id="p2"))
        assert await pipeline.relevant_chunks("p1", "q") == []
        assert len(await pipeline.relevant_chunks("p2", "q")) == 1

    @pytest.mark.asyncio
    async def test_unembedded_document_never_matches(self, mapping_embedding, memory_store):
        pipeline = RAGPipeline(mapping_embedding({"q": [1.0, 0.0]}), memory_store)
        await pipeline.upload(text_upload("Unknown", "text without a vector"))

        assert await pipeline.relevant_chunks("p1", "q", threshold=-1.0) == []


class TestBuildContext:
    """Tests for prompt context assembly."""

    @pytest.mark.asyncio
    async def test_formats_sources(self, pipeline):
        await pipeline.upload(text_upload("Alpha", X_CHUNK + Y_CHUNK))
        await pipeline.upload(text_upload("Beta", SHORT))

        context = await pipeline.build_context("p1", "q")

        assert context == f"[Source: Alpha]\n{X_CHUNK}\n\n[Source: Beta]\n{SHORT}"

    @pytest.mark.asyncio
    async def test_token_budget(self, mapping_embedding):
        first_block = count_tokens(f"[Source: Alpha]\n{X_CHUNK}")
        config = RetrievalConfig(max_context_tokens=first_block)
        pipeline = RAGPipeline(mapping_embedding(VECTORS), MemoryDocumentStore(), config)
        await pipeline.upload(text_upload("Alpha", X_CHUNK + Y_CHUNK))
        await pipeline.upload(text_upload("Beta", SHORT))

        assert await pipeline.build_context("p1", "q") == f"[Source: Alpha]\n{X_CHUNK}"

    @pytest.mark.asyncio
    async def test_budget_too_small(self, mapping_embedding):
        config = RetrievalConfig(max_context_tokens=10)
        pipeline = RAGPipeline(mapping_embedding(VECTORS), MemoryDocumentStore(), config)
        await pipeline.upload(text_upload("Alpha", X_CHUNK + Y_CHUNK))

        assert await pipeline.build_context("p1", "q") == ""

    @pytest.mark.asyncio
    async def test_no_matches(self, pipeline):
        assert await pipeline.build_context("p1", "q") == ""

    def test_count_tokens(self):
        assert count_tokens("") == 0
        assert count_tokens("abcd") == 1
        assert count_tokens("abcde") == 2


class TestDocumentManagement:
    """Tests for listing and deleting documents."""

    @pytest.mark.asyncio
    async def test_get_and_list(self, pipeline):
        first = (await pipeline.upload(text_upload("First", SHORT))).document
        await pipeline.upload(text_upload("Second", SHORT))

        loaded = await pipeline.get_document("p1", first.id)
        assert loaded.title == "First"
        assert loaded.embedding is None

        titles = [d.title for d in await pipeline.list_documents("p1")]
        assert titles == ["Second", "First"]

    @pytest.mark.asyncio
    async def test_get_from_other_project(self, pipeline):
        document = (await pipeline.upload(text_upload("First", SHORT))).document
        with pytest.raises(DocumentNotFound):
            await pipeline.get_document("p2", document.id)

    @pytest.mark.asyncio
    async def test_delete_by_creator(self, pipeline):
        document = (await pipeline.upload(text_upload("Mine", SHORT, created_by="alice"))).document

        await pipeline.delete_document("p1", document.id, actor_id="alice", project_owner_id="owner")

        with pytest.raises(DocumentNotFound):
            await pipeline.get_document("p1", document.id)

    @pytest.mark.asyncio
    async def test_delete_by_owner(self, pipeline):
        document = (await pipeline.upload(text_upload("Theirs", SHORT, created_by="alice"))).document
        await pipeline.delete_document("p1", document.id, actor_id="owner", project_owner_id="owner")
        assert await pipeline.list_documents("p1") == []

    @pytest.mark.asyncio
    async def test_delete_forbidden(self, pipeline):
        document = (await pipeline.upload(text_upload("Theirs", SHORT, created_by="alice"))).document

        with pytest.raises(DocumentPermissionError):
            await pipeline.delete_document("p1", document.id, actor_id="mallory", project_owner_id="owner")

        assert (await pipeline.get_document("p1", document.id)).id == document.id

    @pytest.mark.asyncio
    async def test_delete_missing(self, pipeline):
        with pytest.raises(DocumentNotFound):
            await pipeline.delete_document("p1", "missing", actor_id="owner", project_owner_id="owner")

    @pytest.mark.asyncio
    async def test_delete_project_documents(self, pipeline):
        await pipeline.upload(text_upload("One", SHORT))
        await pipeline.upload(text_upload("Two", SHORT))
        await pipeline.upload(text_upload("Other", SHORT, project_id="p2"))

        assert await pipeline.delete_project_documents("p1") == 2
        assert await pipeline.list_documents("p1") == []
        assert len(await pipeline.list_documents("p2")) == 1


class TestFromConfig:
    """Tests for RAGPipeline.from_config."""

    @pytest.mark.asyncio
    async def test_fake_provider_with_sqlite(self, tmp_path):
        config = ProjectRAGConfig(
            provider=EmbeddingProviderConfig(provider="fake", dimensions=8),
            store=StoreConfig(backend="sqlite", sqlite_path=str(tmp_path / "rag.db")),
            log_level="WARNING",
        )
        pipeline = RAGPipeline.from_config(config)

        document = (await pipeline.upload(text_upload("Hello", "hello world"))).document
        results = await pipeline.relevant_chunks("p1", "hello world")

        assert len(results) == 1
        assert results[0].document_id == document.id
        assert results[0].similarity == pytest.approx(1.0)


class TestModuleLayout:
    def test_top_level_modules(self):
        """The retriever and pipeline sit beside the rag package, not in it."""
        from projectrag.pipeline import RAGPipeline as PipelineClass
        from projectrag.retriever import ProjectRetriever

        assert PipelineClass is RAGPipeline
        assert ProjectRetriever.__module__ == "projectrag.retriever"
