"""Environment-driven configuration."""

from common.config.documents import DocumentConfig
from common.config.storage import StorageConfig

__all__ = ["DocumentConfig", "StorageConfig"]
