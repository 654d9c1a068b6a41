"""Optimistic-concurrency updates of stored blobs."""
from typing import Any, Callable, NamedTuple, Optional

from injurylog.adapters.base import StorageAdapter
from injurylog.errors import ConflictError, NotFoundError
from injurylog.storage.codec import decode_log, encode_log
from injurylog.app_logging import get_logger

logger = get_logger(__name__)


class Snapshot(NamedTuple):
    data: Any
    version: Optional[str]


class CommitResult(NamedTuple):
    data: Any
    version: Optional[str]
    changed: bool
    attempts: int


class UpdateCoordinator:
    """Read-mutate-write cycles with compare-and-swap against the adapter.

    A commit reads the blob and its version, applies ``mutate_fn`` to the
    decoded value, and writes the result back against that version. If
    another writer got there first the whole cycle runs again on the fresh
    state, up to ``max_retries`` extra times, before the ConflictError is
    passed to the caller.
    """

    def __init__(self, adapter: StorageAdapter, max_retries: int = 3):
        self.adapter = adapter
        self.max_retries = max_retries

    def read(
        self,
        path: str,
        decode: Callable[[str], Any] = decode_log,
    ) -> Snapshot:
        """Decode the current blob. A missing blob decodes from empty content."""
        try:
            blob = self.adapter.get(path)
        except NotFoundError:
            logger.info(f"{path} not found, starting fresh")
            return Snapshot(decode(""), None)
        return Snapshot(decode(blob.content), blob.version)

    def commit(
        self,
        path: str,
        mutate_fn: Callable[[Any], Any],
        message: str = "",
        decode: Callable[[str], Any] = decode_log,
        encode: Callable[[Any], str] = encode_log,
    ) -> CommitResult:
        """Apply ``mutate_fn`` to the stored value and write it back.

        ``mutate_fn`` receives the decoded value and returns the new one. It
        may run more than once, so it must not have side effects. Nothing is
        written when the result equals what was read.
        """
        attempts = 0
        while True:
            attempts += 1
            current, version = self.read(path, decode)
            updated = mutate_fn(current)

            if updated == current:
                logger.info(f"No changes to {path}")
                return CommitResult(current, version, False, attempts)

            content = encode(updated)
            try:
                new_version = self.adapter.put(path, content, version, message)
            except ConflictError:
                if attempts > self.max_retries:
                    logger.error(f"Giving up on {path} after {attempts} conflicting attempts")
                    raise
                logger.warning(f"Conflict writing {path} (attempt {attempts}), re-reading")
                continue

            logger.info(f"Committed {path} (attempt {attempts})")
            return CommitResult(updated, new_version, True, attempts)
