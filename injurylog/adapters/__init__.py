"""Storage adapters."""
# Auto-register adapters
from injurylog.adapters.base import AdapterRegistry, StorageAdapter, StoredBlob
from injurylog.adapters.memory_adapter import MemoryAdapter
from injurylog.adapters.github_adapter import GitHubAdapter

__all__ = ["AdapterRegistry", "StorageAdapter", "StoredBlob", "MemoryAdapter", "GitHubAdapter"]
