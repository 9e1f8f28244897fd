"""Credential types and data structures.

This module defines the values passed between the credential lifecycle
manager, the control plane that persists function metadata, and the
workload launcher that mounts credentials into function pods.
"""

import secrets
import string
from dataclasses import dataclass
from typing import Any

SECRET_NAME_PREFIX = "pf-secret-"
SECRET_ID_LENGTH = 5

_SECRET_ID_ALPHABET = string.ascii_lowercase + string.digits


def derive_secret_name(secret_id: str, prefix: str = SECRET_NAME_PREFIX) -> str:
    """Derive the store record name for a secret id.

    Args:
        secret_id: Opaque id held by a CredentialHandle
        prefix: Record name prefix

    Returns:
        ``prefix + secret_id``

    Raises:
        ValueError: If the id is empty
    """
    if not secret_id:
        raise ValueError("secret_id must not be empty")
    return prefix + secret_id


def generate_secret_id(length: int = SECRET_ID_LENGTH) -> str:
    """Generate a random lower-case alphanumeric secret id.

    No uniqueness check is made; a collision surfaces as a create conflict.

    Args:
        length: Number of characters

    Returns:
        Random id string
    """
    if length < 1:
        raise ValueError("Secret id length must be at least 1")
    return "".join(secrets.choice(_SECRET_ID_ALPHABET) for _ in range(length))


@dataclass(frozen=True, slots=True)
class FunctionIdentity:
    """Identity of a function: tenant, namespace and name.

    Attributes:
        tenant: Owning tenant
        namespace: Namespace within the tenant
        name: Function name
    """

    tenant: str
    namespace: str
    name: str

    @property
    def fully_qualified_name(self) -> str:
        """``tenant/namespace/name``."""
        return f"{self.tenant}/{self.namespace}/{self.name}"

    def __str__(self) -> str:
        return self.fully_qualified_name


@dataclass(frozen=True, slots=True)
class CredentialHandle:
    """Persisted marker that a function has a provisioned credential.

    Only the secret id is kept, never the token. A handle is meaningful only
    together with the FunctionIdentity that created it.

    Attributes:
        secret_id: Opaque id from which the record name is derived
    """

    secret_id: str

    def secret_name(self, prefix: str = SECRET_NAME_PREFIX) -> str:
        """Record name in the secret store."""
        return derive_secret_name(self.secret_id, prefix)

    def to_bytes(self) -> bytes:
        """Serialize for storage alongside the function metadata."""
        return self.secret_id.encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> "CredentialHandle":
        """Deserialize a handle stored with ``to_bytes``."""
        return cls(secret_id=data.decode("utf-8"))


@dataclass(frozen=True, slots=True)
class MountSpec:
    """How a credential is mounted into a workload.

    An empty spec (all fields None) means nothing is mounted.

    Attributes:
        volume_name: Name of the pod volume
        secret_name: Store record backing the volume
        mount_path: Directory the record is mounted at
        read_only: Whether the mount is read-only
        default_mode: File permission bits for mounted files
    """

    volume_name: str | None = None
    secret_name: str | None = None
    mount_path: str | None = None
    read_only: bool = True
    default_mode: int | None = None

    @classmethod
    def empty(cls) -> "MountSpec":
        """A spec that mounts nothing."""
        return cls()

    @property
    def is_empty(self) -> bool:
        """Whether this spec mounts nothing."""
        return self.secret_name is None

    def to_volume(self) -> dict[str, Any]:
        """Render the pod ``volumes`` entry."""
        secret: dict[str, Any] = {"secretName": self.secret_name}
        if self.default_mode is not None:
            secret["defaultMode"] = self.default_mode
        return {"name": self.volume_name, "secret": secret}

    def to_volume_mount(self) -> dict[str, Any]:
        """Render a container ``volumeMounts`` entry."""
        return {
            "name": self.volume_name,
            "mountPath": self.mount_path,
            "readOnly": self.read_only,
        }

    def apply_to_pod_spec(self, pod_spec: dict[str, Any]) -> dict[str, Any]:
        """Mount the credential into every container of a pod spec.

        Replaces the pod's volumes and each container's volume mounts. An
        empty spec leaves the pod spec untouched.

        Args:
            pod_spec: Pod spec manifest (modified in place)

        Returns:
            The same pod spec
        """
        if self.is_empty:
            return pod_spec

        pod_spec["volumes"] = [self.to_volume()]
        for container in pod_spec.get("containers", []):
            container["volumeMounts"] = [self.to_volume_mount()]
        return pod_spec


@dataclass(frozen=True, slots=True)
class PluginConfig:
    """Client authentication plugin used by the function runtime.

    Both fields unset means the function connects anonymously.

    Attributes:
        plugin_identifier: Authentication plugin class name
        plugin_parameters: Plugin parameter string
    """

    plugin_identifier: str | None = None
    plugin_parameters: str | None = None

    @property
    def is_anonymous(self) -> bool:
        """Whether no authentication plugin is configured."""
        return self.plugin_identifier is None and self.plugin_parameters is None

    def apply_to(self, auth_config: dict[str, Any]) -> dict[str, Any]:
        """Write this plugin into a runtime authentication config.

        Anonymous configs clear any previously configured plugin.

        Args:
            auth_config: Authentication config mapping (modified in place)

        Returns:
            The same mapping
        """
        auth_config["clientAuthenticationPlugin"] = self.plugin_identifier
        auth_config["clientAuthenticationParameters"] = self.plugin_parameters
        return auth_config
