"""Credential lifecycle manager.

Provisions, rotates and revokes the authentication secret of a function.
Every store call happens inside an action run by the ActionRunner, which
owns retries and pacing. This module only decides what has to succeed and
how much failure is tolerable.

The store is eventually consistent across replicas, so deletion is confirmed
by reading the record back until it is gone. Each round deletes (tolerant)
and then verifies absence (gating). A confirmed absence in any round ends the
operation.

Callers must serialize lifecycle calls for the same function; two concurrent
updates could mint different ids and orphan a secret.

Example:
    manager = create_credential_manager()
    identity = FunctionIdentity("public", "default", "word-count")

    handle = manager.provision(identity, {"Authorization": "Bearer eyJ..."})
    pod_spec = manager.resolve_mount_config(handle).apply_to_pod_spec(pod_spec)
    manager.cleanup(identity, handle)
"""

from typing import Any

from funcauth.actions import Action, ActionResult, ActionRunner, ActionSequence, SequenceResult
from funcauth.config.settings import Settings
from funcauth.core.logging import LogContext, get_logger
from funcauth.credentials.config import CredentialConfig
from funcauth.credentials.exceptions import CredentialOperationError, TokenExtractionError
from funcauth.credentials.tokens import TokenExtractor, extract_bearer_token
from funcauth.credentials.types import (
    CredentialHandle,
    FunctionIdentity,
    MountSpec,
    PluginConfig,
    derive_secret_name,
    generate_secret_id,
)
from funcauth.observability.metrics import observe_credential_operation
from funcauth.store import SecretConflictError, SecretNotFoundError, SecretStore, SecretStoreError
from funcauth.store.manager import create_secret_store

logger = get_logger(__name__)


class CredentialLifecycleManager:
    """Manages the authentication secret of each function.

    Features:
    - Provisioning with a fresh random id per attempt
    - Upsert (create, falling back to replace on conflict) for updates
    - Downgrade to anonymous access when the caller stops presenting a token
    - Idempotent deletion confirmed by read-back
    - Pure mount and auth plugin resolution for the workload launcher
    """

    def __init__(
        self,
        store: SecretStore,
        config: CredentialConfig | None = None,
        token_extractor: TokenExtractor = extract_bearer_token,
        runner: ActionRunner | None = None,
    ):
        """Initialize the manager.

        Args:
            store: Secret store holding the credentials
            config: Retry and layout configuration
            token_extractor: Extracts a token from caller authentication data
            runner: Action runner (inject one with a no-op sleep in tests)
        """
        self.store = store
        self.config = config or CredentialConfig()
        self._extract_token = token_extractor
        self._runner = runner or ActionRunner()

    # ----------------------------------------------------------------
    # Lifecycle operations
    # ----------------------------------------------------------------

    def provision(self, identity: FunctionIdentity, token_source: Any) -> CredentialHandle | None:
        """Create a credential for a function registering for the first time.

        Args:
            identity: Function the credential belongs to
            token_source: Caller authentication data

        Returns:
            A handle for the new secret, or None if the caller is anonymous

        Raises:
            CredentialOperationError: If the secret could not be created
        """
        with (
            LogContext(function=identity.fully_qualified_name),
            observe_credential_operation("provision") as metric,
        ):
            token = self._token_or_none(token_source)
            if not token:
                metric["outcome"] = "anonymous"
                return None

            handle = self._create_secret(identity, token)
            logger.info("credential_provisioned", secret_name=self._secret_name(handle.secret_id))
            return handle

    def update(
        self,
        identity: FunctionIdentity,
        existing: CredentialHandle | None,
        token_source: Any,
    ) -> CredentialHandle | None:
        """Rotate a function's credential to the token presented by the caller.

        The existing secret id is kept when there is one. If the caller no
        longer presents a token, the existing secret is deleted and the
        function falls back to anonymous access.

        Args:
            identity: Function the credential belongs to
            existing: Handle persisted for the function, if any
            token_source: Caller authentication data

        Returns:
            The handle to persist, or None after a downgrade to anonymous

        Raises:
            CredentialOperationError: If the upsert or the deletion failed
        """
        with (
            LogContext(function=identity.fully_qualified_name),
            observe_credential_operation("update") as metric,
        ):
            if existing is not None and existing.secret_id.strip():
                secret_id = existing.secret_id
            else:
                secret_id = generate_secret_id(self.config.secret_id_length)

            try:
                token = self._extract_token(token_source)
            except TokenExtractionError as e:
                logger.info("credential_downgraded_to_anonymous", reason=str(e))
                metric["outcome"] = "anonymous"
                self.cleanup(identity, existing)
                return None

            if not token:
                metric["outcome"] = "unchanged"
                return existing

            secret_name = self._secret_name(secret_id)
            self._upsert_secret(identity, token, secret_name)
            logger.info("credential_upserted", secret_name=secret_name)
            return CredentialHandle(secret_id=secret_id)

    def cleanup(self, identity: FunctionIdentity, handle: CredentialHandle | None) -> None:
        """Delete a function's credential.

        Deleting a secret that is already gone succeeds.

        Args:
            identity: Function the credential belongs to
            handle: Handle persisted for the function, if any

        Raises:
            CredentialOperationError: If absence could not be confirmed
        """
        if handle is None:
            return

        with (
            LogContext(function=identity.fully_qualified_name),
            observe_credential_operation("cleanup") as metric,
        ):
            # A blank id must never reach the store
            if not handle.secret_id.strip():
                logger.warning("secret_id_blank")
                metric["outcome"] = "noop"
                return

            secret_name = self._secret_name(handle.secret_id)
            self.ensure_absent(identity, secret_name)
            logger.info("credential_deleted", secret_name=secret_name)

    def ensure_absent(self, identity: FunctionIdentity, secret_name: str) -> None:
        """Delete a secret and confirm it is gone.

        Runs up to ``delete_rounds`` rounds of a tolerant delete followed by
        a gating read-back, stopping at the first confirmed absence.

        Args:
            identity: Function the secret belongs to
            secret_name: Record name

        Raises:
            CredentialOperationError: If no round confirmed absence
        """
        fqfn = identity.fully_qualified_name
        delete = self._action(
            f"Deleting secrets for function {fqfn}",
            lambda: self._delete(secret_name),
            kind="delete",
            continue_on_failure=True,
        )
        verify = self._action(
            f"Waiting for secrets for function {fqfn} to complete deletion",
            lambda: self._verify_absent(secret_name),
            kind="verify_absent",
        )

        result: SequenceResult | None = None
        for round_number in range(1, self.config.delete_rounds + 1):
            result = self._runner.run(ActionSequence().add(delete).add(verify))
            if result.succeeded(verify.name):
                return
            logger.warning(
                "secret_deletion_unconfirmed",
                secret_name=secret_name,
                round=round_number,
                rounds=self.config.delete_rounds,
            )

        raise CredentialOperationError("delete", identity, result)

    # ----------------------------------------------------------------
    # Workload configuration
    # ----------------------------------------------------------------

    def resolve_mount_config(self, handle: CredentialHandle | None) -> MountSpec:
        """Describe how to mount a function's credential into its pods.

        Args:
            handle: Handle persisted for the function, if any

        Returns:
            MountSpec, empty when there is no handle
        """
        if handle is None:
            return MountSpec.empty()

        return MountSpec(
            volume_name=self.config.volume_name,
            secret_name=self._secret_name(handle.secret_id),
            mount_path=self.config.mount_path,
            read_only=True,
            default_mode=self.config.default_mode,
        )

    def resolve_auth_plugin_config(self, handle: CredentialHandle | None) -> PluginConfig:
        """Describe the client authentication plugin of a function.

        Args:
            handle: Handle persisted for the function, if any

        Returns:
            Token-file plugin config, or an anonymous config without a handle
        """
        if handle is None:
            return PluginConfig()

        return PluginConfig(
            plugin_identifier=self.config.auth_plugin,
            plugin_parameters=f"file://{self.config.token_file}",
        )

    # ----------------------------------------------------------------
    # Actions
    # ----------------------------------------------------------------

    def _create_secret(self, identity: FunctionIdentity, token: str) -> CredentialHandle:
        """Create a secret under a fresh random id."""
        payload = self._payload(token)

        def create() -> ActionResult:
            secret_id = generate_secret_id(self.config.secret_id_length)
            try:
                self.store.create_secret(self._secret_name(secret_id), payload)
            except SecretConflictError:
                return ActionResult.failed(f"Secret {secret_id} already present")
            except SecretStoreError as e:
                return ActionResult.failed(str(e))
            return ActionResult.ok(secret_id)

        action = self._action(
            f"Creating authentication secret for function {identity.fully_qualified_name}",
            create,
            kind="create",
        )
        result = self._runner.run(ActionSequence().add(action))
        if not result.succeeded(action.name):
            raise CredentialOperationError("create", identity, result)

        return CredentialHandle(secret_id=str(result.value_of(action.name)))

    def _upsert_secret(self, identity: FunctionIdentity, token: str, secret_name: str) -> None:
        """Create a secret, replacing it in the same attempt if it exists."""
        payload = self._payload(token)

        def upsert() -> ActionResult:
            try:
                self.store.create_secret(secret_name, payload)
            except SecretConflictError:
                try:
                    self.store.replace_secret(secret_name, payload)
                except SecretStoreError as e:
                    return ActionResult.failed(str(e))
            except SecretStoreError as e:
                return ActionResult.failed(str(e))
            return ActionResult.ok()

        action = self._action(
            f"Upsert authentication secret for function {identity.fully_qualified_name}",
            upsert,
            kind="upsert",
        )
        result = self._runner.run(ActionSequence().add(action))
        if not result.succeeded(action.name):
            raise CredentialOperationError("upsert", identity, result)

    def _delete(self, secret_name: str) -> ActionResult:
        try:
            self.store.delete_secret(secret_name)
        except SecretNotFoundError:
            logger.warning("secret_already_deleted", secret_name=secret_name)
        except SecretStoreError as e:
            return ActionResult.failed(str(e))
        return ActionResult.ok()

    def _verify_absent(self, secret_name: str) -> ActionResult:
        try:
            self.store.read_secret(secret_name)
        except SecretNotFoundError:
            return ActionResult.ok()
        except SecretStoreError as e:
            return ActionResult.failed(str(e))
        return ActionResult.failed(f"Secret {secret_name} still present")

    # ----------------------------------------------------------------
    # Helpers
    # ----------------------------------------------------------------

    def _action(
        self, name: str, operation: Any, kind: str, continue_on_failure: bool = False
    ) -> Action:
        return Action(
            name=name,
            operation=operation,
            max_attempts=self.config.max_attempts,
            delay=self.config.retry_delay,
            continue_on_failure=continue_on_failure,
            kind=kind,
        )

    def _token_or_none(self, token_source: Any) -> str | None:
        """Extract a token, treating extraction failure as anonymous access."""
        try:
            return self._extract_token(token_source)
        except TokenExtractionError as e:
            logger.warning("token_unavailable", reason=str(e))
            return None

    def _secret_name(self, secret_id: str) -> str:
        return derive_secret_name(secret_id, self.config.secret_name_prefix)

    def _payload(self, token: str) -> dict[str, bytes]:
        return {self.config.token_field: token.encode("utf-8")}


def create_credential_manager(
    settings: Settings | None = None,
    store: SecretStore | None = None,
) -> CredentialLifecycleManager:
    """Create a CredentialLifecycleManager from application settings.

    Args:
        settings: Settings to read (default: global settings)
        store: Secret store to use (default: built from settings)

    Returns:
        CredentialLifecycleManager instance
    """
    return CredentialLifecycleManager(
        store=store or create_secret_store(settings),
        config=CredentialConfig.from_settings(settings),
    )
