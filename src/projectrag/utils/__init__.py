"""Utility helpers for projectrag."""

from .config import (
    Config,
    EmbeddingProviderConfig,
    ProjectRAGConfig,
    RetrievalConfig,
    StoreConfig,
    UploadConfig,
    load_config,
)
from .logging import get_logger, set_log_level

__all__ = [
    "Config",
    "EmbeddingProviderConfig",
    "ProjectRAGConfig",
    "RetrievalConfig",
    "StoreConfig",
    "UploadConfig",
    "load_config",
    "get_logger",
    "set_log_level",
]
