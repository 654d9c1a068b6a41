"""Base adapter protocol for blob storage backends."""
from abc import ABC, abstractmethod
from typing import Dict, List, NamedTuple, Optional


class StoredBlob(NamedTuple):
    """Blob content plus the version token it was read at."""

    content: str
    version: str


class StorageAdapter(ABC):
    """Abstract base class for storage adapters.

    Every read returns a version token and every write must present the token
    it last observed. A write against a stale token raises ``ConflictError``.
    """

    def __init__(self, **kwargs):
        self.adapter_name = self.__class__.__name__.replace("Adapter", "")

    @abstractmethod
    def get(self, path: str) -> StoredBlob:
        """Read a blob. Raises NotFoundError if it does not exist."""
        pass

    @abstractmethod
    def put(self, path: str, content: str, expected_version: Optional[str], message: str = "") -> str:
        """Replace a blob atomically and return its new version.

        ``expected_version`` is None when creating a blob that did not exist.
        Raises ConflictError if the stored version differs.
        """
        pass


class AdapterRegistry:
    """Registry for storage adapters."""

    _adapters: Dict[str, type] = {}

    @classmethod
    def register(cls, name: str, adapter_class: type):
        """Register a storage adapter."""
        cls._adapters[name] = adapter_class

    @classmethod
    def get_adapter(cls, name: str, **kwargs) -> StorageAdapter:
        """Get an instance of a storage adapter."""
        if name not in cls._adapters:
            raise ValueError(f"Unknown storage backend: {name}")
        return cls._adapters[name](**kwargs)

    @classmethod
    def list_adapters(cls) -> List[str]:
        """List available storage backends."""
        return list(cls._adapters.keys())
