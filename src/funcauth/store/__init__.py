"""Secret store boundary.

This module provides:
- SecretStore protocol consumed by the credential lifecycle manager
- InMemorySecretStore for development and testing, with failure injection
- KubernetesSecretStore backed by v1/Secret objects
- create_secret_store factory driven by settings

Example:
    from funcauth.store import get_secret_store

    store = get_secret_store()
    record = store.read_secret("pf-secret-abcde")
"""

from funcauth.store.manager import create_secret_store, get_secret_store, reset_secret_store
from funcauth.store.memory import InMemorySecretStore
from funcauth.store.protocol import (
    SecretConflictError,
    SecretNotFoundError,
    SecretRecord,
    SecretStore,
    SecretStoreError,
)

__all__ = [
    # Protocol
    "SecretStore",
    "SecretRecord",
    # Errors
    "SecretStoreError",
    "SecretNotFoundError",
    "SecretConflictError",
    # Implementations
    "InMemorySecretStore",
    # Factory
    "create_secret_store",
    "get_secret_store",
    "reset_secret_store",
]
