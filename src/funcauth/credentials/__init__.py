"""Function credential lifecycle.

This module provides:
- CredentialLifecycleManager to provision, update and clean up the
  authentication secret of each function
- Pure resolution of mount and auth plugin configuration for workloads
- Bearer token extraction from caller authentication data

Example:
    from funcauth.credentials import FunctionIdentity, create_credential_manager

    manager = create_credential_manager()
    identity = FunctionIdentity("public", "default", "word-count")
    handle = manager.update(identity, existing_handle, auth_data)
"""

from funcauth.credentials.config import CredentialConfig
from funcauth.credentials.exceptions import CredentialOperationError, TokenExtractionError
from funcauth.credentials.manager import CredentialLifecycleManager, create_credential_manager
from funcauth.credentials.tokens import AuthenticationData, TokenExtractor, extract_bearer_token
from funcauth.credentials.types import (
    CredentialHandle,
    FunctionIdentity,
    MountSpec,
    PluginConfig,
    derive_secret_name,
    generate_secret_id,
)

__all__ = [
    # Manager
    "CredentialLifecycleManager",
    "create_credential_manager",
    "CredentialConfig",
    # Types
    "FunctionIdentity",
    "CredentialHandle",
    "MountSpec",
    "PluginConfig",
    "derive_secret_name",
    "generate_secret_id",
    # Tokens
    "AuthenticationData",
    "TokenExtractor",
    "extract_bearer_token",
    # Errors
    "CredentialOperationError",
    "TokenExtractionError",
]
