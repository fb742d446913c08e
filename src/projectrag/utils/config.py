"""
Configuration utilities.
"""

import json
import os
from pathlib import Path
from typing import Literal, Optional

import yaml

from pydantic import BaseModel, Field


class Config(BaseModel):
    """Base configuration class."""

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        """Load configuration from YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    @classmethod
    def from_file(cls, path: str | Path) -> "Config":
        """Load configuration from file (YAML or JSON)."""
        path = Path(path)

        if path.suffix in (".yaml", ".yml"):
            return cls.from_yaml(path)
        elif path.suffix == ".json":
            with open(path) as f:
                data = json.load(f)
            return cls(**data)
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")


class RetrievalConfig(BaseModel):
    """Chunking and ranking parameters.

    The defaults are inherited tuning values, not measured optima.
    """
    chunk_size: int = Field(default=1000, gt=0)
    top_k: int = Field(default=5, ge=0)
    threshold: float = Field(default=0.7, ge=-1.0, le=1.0)
    document_embedding_chars: int = Field(default=1000, gt=0)
    max_concurrency: int = Field(default=4, gt=0)
    max_context_tokens: int = Field(default=3000, gt=0)


class EmbeddingProviderConfig(BaseModel):
    """Configuration for the embedding provider."""
    provider: Literal["openai", "local", "fake"] = "openai"
    model: str = "text-embedding-ada-002"
    api_key: str | None = None
    base_url: str | None = None
    dimensions: int | None = None
    is_active: bool = True

    def resolved_api_key(self) -> Optional[str]:
        """Return the configured key, falling back to OPENAI_API_KEY."""
        return self.api_key or os.environ.get("OPENAI_API_KEY")


class StoreConfig(BaseModel):
    """Configuration for the document store backend."""
    backend: Literal["memory", "sqlite", "redis"] = "memory"
    sqlite_path: str = "projectrag.db"
    redis_url: str = "redis://localhost:6379"
    key_prefix: str = "projectrag:"


class UploadConfig(BaseModel):
    """Limits applied to uploaded documents."""
    max_file_size: int = Field(default=5 * 1024 * 1024, gt=0)
    allowed_mime_types: list[str] = Field(
        default_factory=lambda: ["text/plain", "application/pdf", "text/markdown"]
    )
    max_title_length: int = Field(default=200, gt=0, le=200)


class ProjectRAGConfig(Config):
    """Top-level configuration."""
    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    provider: EmbeddingProviderConfig = Field(default_factory=EmbeddingProviderConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    upload: UploadConfig = Field(default_factory=UploadConfig)
    log_level: str = "INFO"


def load_config(path: str | Path = "projectrag.yaml") -> ProjectRAGConfig:
    """
    Load configuration from file.

    Args:
        path: Path to config file

    Returns:
        ProjectRAGConfig instance (defaults when the file does not exist)
    """
    path = Path(path)

    if not path.exists():
        return ProjectRAGConfig()

    return ProjectRAGConfig.from_file(path)
