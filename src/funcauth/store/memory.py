"""In-memory secret store for development and testing.

This implementation keeps records in a process-local dictionary. It can
replay the failure modes of a clustered store so the lifecycle logic can be
exercised without a cluster:

- ``fail_next`` queues errors to raise from the next calls of an operation
- ``stale_reads`` lets reads keep returning a deleted record for a while,
  mimicking a replica that has not yet observed the delete
"""

import logging
import threading
from collections import defaultdict, deque
from typing import Literal

from funcauth.store.protocol import (
    SecretConflictError,
    SecretNotFoundError,
    SecretRecord,
    SecretStoreError,
)

logger = logging.getLogger(__name__)

StoreOperation = Literal["create", "replace", "read", "delete"]


class InMemorySecretStore:
    """Secret store backed by a dictionary.

    Thread-safe: every operation holds an internal lock.

    Example:
        store = InMemorySecretStore()
        store.create_secret("pf-secret-abcde", {"token": b"t1"})
        store.fail_next("read", SecretStoreError("etcd timeout"))
    """

    def __init__(self, records: dict[str, dict[str, bytes]] | None = None):
        """Initialize the store.

        Args:
            records: Optional records to pre-populate
        """
        self._lock = threading.Lock()
        self._records: dict[str, dict[str, bytes]] = dict(records or {})
        self._tombstones: dict[str, dict[str, bytes]] = {}
        self._stale_budget: dict[str, int] = {}
        self._failures: dict[str, deque[Exception]] = defaultdict(deque)
        self.calls: list[tuple[StoreOperation, str]] = []

    # ----------------------------------------------------------------
    # Failure injection
    # ----------------------------------------------------------------

    def fail_next(self, operation: StoreOperation, error: Exception, times: int = 1) -> None:
        """Raise ``error`` from the next ``times`` calls of ``operation``.

        Args:
            operation: Operation to fail
            error: Exception to raise
            times: Number of consecutive calls to fail
        """
        with self._lock:
            self._failures[operation].extend([error] * times)

    def stale_reads(self, name: str, count: int) -> None:
        """Keep serving a deleted record for the next ``count`` reads.

        Args:
            name: Record name
            count: Number of stale reads to serve after deletion
        """
        with self._lock:
            self._stale_budget[name] = count

    # ----------------------------------------------------------------
    # SecretStore protocol
    # ----------------------------------------------------------------

    def create_secret(self, name: str, data: dict[str, bytes]) -> None:
        """Create a new record."""
        with self._lock:
            self._record_call("create", name)
            if name in self._records:
                raise SecretConflictError(name)
            self._records[name] = dict(data)
            self._tombstones.pop(name, None)
        logger.debug(f"Created secret {name}")

    def replace_secret(self, name: str, data: dict[str, bytes]) -> None:
        """Replace an existing record."""
        with self._lock:
            self._record_call("replace", name)
            if name not in self._records:
                raise SecretNotFoundError(name)
            self._records[name] = dict(data)
        logger.debug(f"Replaced secret {name}")

    def read_secret(self, name: str) -> SecretRecord:
        """Read a record, possibly a stale copy of a deleted one."""
        with self._lock:
            self._record_call("read", name)
            if name in self._records:
                return SecretRecord(name=name, data=dict(self._records[name]))

            if self._stale_budget.get(name, 0) > 0 and name in self._tombstones:
                self._stale_budget[name] -= 1
                return SecretRecord(name=name, data=dict(self._tombstones[name]))

            raise SecretNotFoundError(name)

    def delete_secret(self, name: str) -> None:
        """Delete a record."""
        with self._lock:
            self._record_call("delete", name)
            if name not in self._records:
                raise SecretNotFoundError(name)
            self._tombstones[name] = self._records.pop(name)
        logger.debug(f"Deleted secret {name}")

    # ----------------------------------------------------------------
    # Inspection helpers
    # ----------------------------------------------------------------

    def names(self) -> list[str]:
        """List the names of live records."""
        with self._lock:
            return sorted(self._records)

    def writes(self) -> list[tuple[StoreOperation, str]]:
        """Calls that mutate the store (create, replace, delete)."""
        return [c for c in self.calls if c[0] != "read"]

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._records

    def _record_call(self, operation: StoreOperation, name: str) -> None:
        """Log the call and raise any queued failure. Caller holds the lock."""
        self.calls.append((operation, name))
        queued = self._failures.get(operation)
        if queued:
            error = queued.popleft()
            if not isinstance(error, SecretStoreError):
                error = SecretStoreError(str(error), error)
            raise error
