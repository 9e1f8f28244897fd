"""Credential lifecycle exceptions."""

from typing import Literal

from funcauth.actions import SequenceResult
from funcauth.credentials.types import FunctionIdentity
from funcauth.utils.exceptions import FuncAuthError

CredentialOperation = Literal["create", "upsert", "delete"]

_DESCRIPTIONS: dict[str, str] = {
    "create": "create authentication secret",
    "upsert": "upsert authentication secret",
    "delete": "delete secrets",
}


class TokenExtractionError(FuncAuthError):
    """Raised when no token can be obtained from the caller.

    This signals that the caller intends anonymous access; it is an
    accepted outcome rather than a failure.
    """

    pass


class CredentialOperationError(FuncAuthError):
    """Raised when a credential operation exhausts its retries.

    The store is left in an unknown state, so callers should treat this as
    fatal for the control-plane operation in progress.
    """

    def __init__(
        self,
        operation: CredentialOperation,
        identity: FunctionIdentity,
        result: SequenceResult | None = None,
    ):
        self.operation = operation
        self.identity = identity
        self.result = result

        message = (
            f"Failed to {_DESCRIPTIONS[operation]} for function {identity.fully_qualified_name}"
        )
        if result is not None and result.last_error:
            message += f": {result.last_error}"
        super().__init__(message)
