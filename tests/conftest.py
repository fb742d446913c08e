"""
Test configuration and fixtures.
"""

import asyncio

import pytest

from projectrag import (
    BaseEmbedding,
    FakeEmbedding,
    MemoryDocumentStore,
    ProviderUnavailable,
    Vector,
)


class MappingEmbedding(BaseEmbedding):
    """Returns fixed vectors for known texts and fails for anything else."""

    def __init__(self, vectors: dict[str, list[float]]):
        self.vectors = vectors
        self.calls: list[str] = []

    @property
    def dimension(self) -> int:
        return len(next(iter(self.vectors.values())))

    async def embed(self, text: str) -> Vector:
        self.calls.append(text)
        if text not in self.vectors:
            raise ProviderUnavailable("no vector for text")
        return Vector(self.vectors[text])


class FlakyEmbedding(BaseEmbedding):
    """Deterministic embedding that fails for selected texts."""

    def __init__(self, fail_on: set[str], dimension: int = 8):
        self.fail_on = fail_on
        self._inner = FakeEmbedding(dimension=dimension)

    @property
    def dimension(self) -> int:
        return self._inner.dimension

    async def embed(self, text: str) -> Vector:
        if text in self.fail_on:
            raise ProviderUnavailable("simulated outage", status=503)
        return await self._inner.embed(text)


class SlowEmbedding(BaseEmbedding):
    """Records how many calls are in flight at once."""

    def __init__(self, delay: float = 0.01):
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def dimension(self) -> int:
        return 2

    async def embed(self, text: str) -> Vector:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            return Vector([1.0, float(len(text))])
        finally:
            self.in_flight -= 1


@pytest.fixture
def fake_embedding():
    """Deterministic 16-dimensional embedding."""
    return FakeEmbedding(dimension=16)


@pytest.fixture
def memory_store():
    """Empty in-memory document store."""
    return MemoryDocumentStore()


@pytest.fixture
def mapping_embedding():
    """Factory for MappingEmbedding."""
    return MappingEmbedding


@pytest.fixture
def flaky_embedding():
    """Factory for FlakyEmbedding."""
    return FlakyEmbedding


@pytest.fixture
def slow_embedding():
    """SlowEmbedding instance."""
    return SlowEmbedding()
