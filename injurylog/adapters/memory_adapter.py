"""In-memory storage adapter for development and testing."""
import threading
from typing import Dict, Optional, Tuple

from injurylog.adapters.base import StorageAdapter, StoredBlob, AdapterRegistry
from injurylog.errors import ConflictError, NotFoundError
from injurylog.app_logging import get_logger

logger = get_logger(__name__)


class MemoryAdapter(StorageAdapter):
    """Process-local blob store with compare-and-swap writes."""

    def __init__(self, blobs: Optional[Dict[str, str]] = None, **kwargs):
        super().__init__(**kwargs)
        self._lock = threading.Lock()
        self._generation = 0
        self._blobs: Dict[str, Tuple[str, str]] = {}
        self.commits: list[Tuple[str, str]] = []
        for path, content in (blobs or {}).items():
            self._blobs[path] = (content, self._next_version())

    def _next_version(self) -> str:
        self._generation += 1
        return f"v{self._generation}"

    def get(self, path: str) -> StoredBlob:
        with self._lock:
            if path not in self._blobs:
                raise NotFoundError(path)
            content, version = self._blobs[path]
        return StoredBlob(content, version)

    def put(self, path: str, content: str, expected_version: Optional[str], message: str = "") -> str:
        with self._lock:
            current = self._blobs.get(path)
            current_version = current[1] if current else None
            if current_version != expected_version:
                logger.warning(f"Rejected write to {path}: expected {expected_version}, found {current_version}")
                raise ConflictError(path, expected_version)
            version = self._next_version()
            self._blobs[path] = (content, version)
            self.commits.append((path, message))
        logger.debug(f"Stored {path} at {version}")
        return version


AdapterRegistry.register("memory", MemoryAdapter)
