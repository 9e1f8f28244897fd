"""Secret store protocol and abstract interface.

This module defines the protocol that every secret store backend must follow
and the exceptions used to report store outcomes. Outcomes other than plain
success are signalled with exceptions:

- ``SecretConflictError`` when creating a name that already exists
- ``SecretNotFoundError`` when reading, replacing or deleting a missing name
- ``SecretStoreError`` for any other failure (assumed transient)
"""

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from funcauth.utils.exceptions import FuncAuthError


@dataclass(frozen=True, slots=True)
class SecretRecord:
    """A named record held by the secret store.

    Attributes:
        name: Record name, unique within the store's scope
        data: Field name to opaque byte payload
    """

    name: str
    data: dict[str, bytes] = field(default_factory=dict)


@runtime_checkable
class SecretStore(Protocol):
    """Protocol for secret store implementations.

    Backends are synchronous: every call blocks until the store answers.
    """

    def create_secret(self, name: str, data: dict[str, bytes]) -> None:
        """Create a new record.

        Args:
            name: Record name
            data: Record payload

        Raises:
            SecretConflictError: If a record with this name already exists
            SecretStoreError: If the store fails
        """
        ...

    def replace_secret(self, name: str, data: dict[str, bytes]) -> None:
        """Replace the payload of an existing record.

        Args:
            name: Record name
            data: New record payload

        Raises:
            SecretNotFoundError: If the record does not exist
            SecretStoreError: If the store fails
        """
        ...

    def read_secret(self, name: str) -> SecretRecord:
        """Read a record.

        Args:
            name: Record name

        Returns:
            The stored SecretRecord

        Raises:
            SecretNotFoundError: If the record does not exist
            SecretStoreError: If the store fails
        """
        ...

    def delete_secret(self, name: str) -> None:
        """Delete a record.

        Args:
            name: Record name

        Raises:
            SecretNotFoundError: If the record does not exist
            SecretStoreError: If the store fails
        """
        ...


class SecretStoreError(FuncAuthError):
    """Raised when the secret store reports a failure."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)


class SecretNotFoundError(SecretStoreError):
    """Raised when a record does not exist."""

    def __init__(self, name: str, cause: Exception | None = None):
        self.name = name
        super().__init__(f"Secret not found: {name}", cause)


class SecretConflictError(SecretStoreError):
    """Raised when creating a record whose name is already taken."""

    def __init__(self, name: str, cause: Exception | None = None):
        self.name = name
        super().__init__(f"Secret already exists: {name}", cause)
