"""ideaflow storage layer."""

from ideaflow.storage.base import StorageBackend
from ideaflow.storage.memory_store import MemoryStore

__all__ = ["MemoryStore", "StorageBackend"]
