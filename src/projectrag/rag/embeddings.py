"""Embedding provider implementations."""

import asyncio
import hashlib
import logging
import random
from typing import Any, Optional, Sequence

import openai
from pydantic import ValidationError

from projectrag.exceptions import ProviderUnavailable
from projectrag.utils.config import EmbeddingProviderConfig

from .base import BaseEmbedding
from .vector import Vector

logger = logging.getLogger(__name__)


def _to_vector(values: Sequence[float], expected_dimension: Optional[int], source: str) -> Vector:
    try:
        vector = Vector(values)
    except ValidationError as e:
        raise ProviderUnavailable(f"{source} returned a malformed embedding") from e
    if expected_dimension is not None and vector.dimension != expected_dimension:
        raise ProviderUnavailable(
            f"{source} returned {vector.dimension} dimensions, expected {expected_dimension}"
        )
    return vector


class DummyEmbedding(BaseEmbedding):
    """A dummy embedding provider for testing.

    Returns zero vectors of a specified dimension.
    """

    def __init__(self, dimension: int = 384):
        self._dimension = dimension

    @property
    def dimension(self) -> int:
        return self._dimension

    async def embed(self, text: str) -> Vector:
        return Vector([0.0] * self._dimension)


class FakeEmbedding(BaseEmbedding):
    """Fake embedding that generates deterministic vectors from text.

    The same text and seed always produce the same vector, so ranking can be
    exercised without a network call.
    """

    def __init__(self, dimension: int = 384, seed: int = 42):
        self._dimension = dimension
        self.seed = seed

    @property
    def dimension(self) -> int:
        return self._dimension

    async def embed(self, text: str) -> Vector:
        digest = hashlib.sha256(f"{self.seed}:{text}".encode()).digest()
        rng = random.Random(int.from_bytes(digest[:8], "big"))
        return Vector([rng.uniform(-1.0, 1.0) for _ in range(self._dimension)])


class OpenAIEmbedding(BaseEmbedding):
    """OpenAI embedding provider.

    Every failure of the remote call is raised as ``ProviderUnavailable``
    with the HTTP status when one is known.
    """

    # Known model dimensions
    MODEL_DIMENSIONS = {
        "text-embedding-3-small": 1536,
        "text-embedding-3-large": 3072,
        "text-embedding-ada-002": 1536,
    }

    STATUS_MESSAGES = {
        401: "Invalid OpenAI API key. Please check your API key configuration.",
        429: "OpenAI rate limit exceeded. Please try again in a moment.",
        500: "OpenAI service is temporarily unavailable. Please try again later.",
        503: "OpenAI service is overloaded. Please try again later.",
    }

    def __init__(
        self,
        model: str = "text-embedding-ada-002",
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        dimensions: Optional[int] = None,
    ):
        """Initialize the OpenAI embedding provider.

        Args:
            model: Embedding model name
            api_key: OpenAI API key (the client falls back to OPENAI_API_KEY)
            base_url: Optional base URL for API
            dimensions: Requested output dimension (text-embedding-3 models only)
        """
        self.model = model
        self.api_key = api_key
        self.base_url = base_url
        self.dimensions = dimensions
        self._client: Optional[openai.AsyncOpenAI] = None

    @property
    def dimension(self) -> Optional[int]:
        return self.dimensions or self.MODEL_DIMENSIONS.get(self.model)

    def _get_client(self) -> openai.AsyncOpenAI:
        """Get or create the OpenAI client."""
        if self._client is None:
            kwargs: dict[str, Any] = {}
            if self.api_key:
                kwargs["api_key"] = self.api_key
            if self.base_url:
                kwargs["base_url"] = self.base_url
            try:
                self._client = openai.AsyncOpenAI(**kwargs)
            except openai.OpenAIError as e:
                raise ProviderUnavailable(f"OpenAI client could not be created: {e}") from e
        return self._client

    def _status_message(self, error: openai.APIStatusError) -> str:
        status = error.status_code
        if status in self.STATUS_MESSAGES:
            return self.STATUS_MESSAGES[status]
        if status == 400:
            return f"Invalid request to OpenAI: {error.message}"
        if status >= 500:
            return self.STATUS_MESSAGES[500]
        return f"OpenAI API error: {error.message}"

    async def embed(self, text: str) -> Vector:
        """Embed text with the OpenAI embeddings endpoint."""
        client = self._get_client()
        params: dict[str, Any] = {"model": self.model, "input": text}
        if self.dimensions:
            params["dimensions"] = self.dimensions

        try:
            response = await client.embeddings.create(**params)
        except openai.APIStatusError as e:
            raise ProviderUnavailable(self._status_message(e), status=e.status_code) from e
        except openai.APIConnectionError as e:
            raise ProviderUnavailable(f"OpenAI API connection failed: {e}") from e
        except openai.OpenAIError as e:
            raise ProviderUnavailable(f"OpenAI embedding error: {e}") from e

        if not response.data:
            raise ProviderUnavailable("OpenAI returned no embedding data")
        return _to_vector(response.data[0].embedding, self.dimension, "OpenAI")


class LocalEmbedding(BaseEmbedding):
    """Local embedding provider using sentence-transformers.

    Runs entirely on the local machine. Requires the 'local' extra.
    """

    MODEL_DIMENSIONS = {
        "all-MiniLM-L6-v2": 384,
        "all-mpnet-base-v2": 768,
        "paraphrase-multilingual-MiniLM-L12-v2": 384,
    }

    def __init__(
        self,
        model_name: str = "all-MiniLM-L6-v2",
        device: Optional[str] = None,
        normalize: bool = True,
    ):
        """Initialize the local embedding provider.

        Args:
            model_name: Name of the sentence-transformers model
            device: Device to run on (cuda, cpu, mps). Auto-detected if None.
            normalize: Whether to normalize embeddings
        """
        self.model_name = model_name
        self.device = device
        self.normalize = normalize
        self._model = None

    @property
    def dimension(self) -> Optional[int]:
        return self.MODEL_DIMENSIONS.get(self.model_name)

    def _get_model(self):
        """Get or load the sentence-transformers model."""
        if self._model is None:
            try:
                from sentence_transformers import SentenceTransformer
            except ImportError as e:
                raise ProviderUnavailable(
                    "Local embedding requires 'sentence-transformers'. "
                    "Install it with: pip install projectrag[local]"
                ) from e
            try:
                self._model = SentenceTransformer(self.model_name, device=self.device)
            except OSError as e:
                raise ProviderUnavailable(f"Could not load model '{self.model_name}': {e}") from e
        return self._model

    async def embed(self, text: str) -> Vector:
        model = self._get_model()
        loop = asyncio.get_running_loop()
        embedding = await loop.run_in_executor(
            None,
            lambda: model.encode(text, normalize_embeddings=self.normalize, convert_to_numpy=True),
        )
        return _to_vector(embedding.tolist(), self.dimension, "Local model")


def create_embedding(config: EmbeddingProviderConfig) -> BaseEmbedding:
    """
    Construct an embedding provider from configuration.

    Args:
        config: Provider configuration

    Returns:
        A ready-to-use embedding provider

    Raises:
        ProviderUnavailable: If the provider is inactive or its credentials are missing or malformed
    """
    if not config.is_active:
        raise ProviderUnavailable(
            f"{config.provider} provider exists but is not active. Please activate it in admin settings."
        )

    if config.provider == "openai":
        api_key = config.resolved_api_key()
        if not api_key:
            raise ProviderUnavailable(
                "No OpenAI provider configured. Please add OpenAI configuration in admin settings."
            )
        if not api_key.startswith("sk-"):
            raise ProviderUnavailable('Invalid OpenAI API key format. Must start with "sk-"')
        logger.info(f"Using OpenAI embedding model {config.model}")
        return OpenAIEmbedding(
            model=config.model,
            api_key=api_key,
            base_url=config.base_url,
            dimensions=config.dimensions,
        )
    elif config.provider == "local":
        # The config default names an OpenAI model.
        model_name = config.model if config.model not in OpenAIEmbedding.MODEL_DIMENSIONS else "all-MiniLM-L6-v2"
        logger.info(f"Using local embedding model {model_name}")
        return LocalEmbedding(model_name=model_name)
    elif config.provider == "fake":
        return FakeEmbedding(dimension=config.dimensions or 384)
    else:
        raise ProviderUnavailable(f"Unknown embedding provider: {config.provider}")
