"""Kubernetes secret store implementation.

Stores credentials as ``v1/Secret`` objects in a single namespace so they can
be mounted into function pods as volumes.
"""

import base64
import logging
from functools import cached_property
from typing import Any

from funcauth.store.protocol import (
    SecretConflictError,
    SecretNotFoundError,
    SecretRecord,
    SecretStoreError,
)

logger = logging.getLogger(__name__)

__all__ = ["KubernetesSecretStore"]

HTTP_NOT_FOUND = 404
HTTP_CONFLICT = 409


class KubernetesSecretStore:
    """Secret store using the Kubernetes core API.

    Status codes returned by the API server are mapped onto the store
    protocol: 409 becomes SecretConflictError, 404 becomes
    SecretNotFoundError and anything else becomes SecretStoreError.

    Example:
        store = KubernetesSecretStore(namespace="pulsar-functions")
        store.create_secret("pf-secret-abcde", {"token": b"eyJhbGciOi..."})
    """

    def __init__(
        self,
        namespace: str,
        core_api: Any | None = None,
        kubeconfig_path: str | None = None,
        labels: dict[str, str] | None = None,
    ):
        """Initialize the Kubernetes secret store.

        Args:
            namespace: Namespace the secrets live in
            core_api: Optional pre-built CoreV1Api client
            kubeconfig_path: Kubeconfig to load when not running in-cluster
            labels: Labels stamped on every created secret
        """
        if not namespace:
            raise ValueError("namespace is required for KubernetesSecretStore")

        self.namespace = namespace
        self.labels = dict(labels or {})
        self._kubeconfig_path = kubeconfig_path
        self._core_api = core_api

    @cached_property
    def _kubernetes(self) -> Any:
        """Lazy import of the kubernetes module."""
        try:
            import kubernetes  # type: ignore[import-untyped]

            return kubernetes
        except ImportError as e:
            raise ImportError(
                "kubernetes package is required for the Kubernetes secret store. "
                "Install it with: pip install kubernetes"
            ) from e

    @property
    def core_api(self) -> Any:
        """CoreV1Api client, created on first use."""
        if self._core_api is None:
            config = self._kubernetes.config
            if self._kubeconfig_path:
                config.load_kube_config(config_file=self._kubeconfig_path)
            else:
                try:
                    config.load_incluster_config()
                except config.ConfigException:
                    config.load_kube_config()
            self._core_api = self._kubernetes.client.CoreV1Api()
            logger.info(f"Connected to Kubernetes secrets in namespace {self.namespace}")
        return self._core_api

    def _api_exception(self) -> type[Exception]:
        return self._kubernetes.client.exceptions.ApiException

    def _build_secret(self, name: str, data: dict[str, bytes]) -> Any:
        """Build a V1Secret body; the API expects base64-encoded values."""
        client = self._kubernetes.client
        return client.V1Secret(
            metadata=client.V1ObjectMeta(name=name, labels=self.labels or None),
            data={key: base64.b64encode(value).decode("ascii") for key, value in data.items()},
        )

    def _translate(self, name: str, action: str, error: Exception) -> SecretStoreError:
        """Map an ApiException onto the store's exception hierarchy."""
        status = getattr(error, "status", None)
        if status == HTTP_NOT_FOUND:
            return SecretNotFoundError(name, error)
        if status == HTTP_CONFLICT:
            return SecretConflictError(name, error)

        body = getattr(error, "body", None)
        detail = body if body else str(error)
        return SecretStoreError(f"Failed to {action} secret {name}: {detail}", error)

    def create_secret(self, name: str, data: dict[str, bytes]) -> None:
        """Create a secret."""
        try:
            self.core_api.create_namespaced_secret(
                namespace=self.namespace,
                body=self._build_secret(name, data),
            )
        except self._api_exception() as e:
            raise self._translate(name, "create", e) from e

    def replace_secret(self, name: str, data: dict[str, bytes]) -> None:
        """Replace a secret's payload."""
        try:
            self.core_api.replace_namespaced_secret(
                name=name,
                namespace=self.namespace,
                body=self._build_secret(name, data),
            )
        except self._api_exception() as e:
            raise self._translate(name, "replace", e) from e

    def read_secret(self, name: str) -> SecretRecord:
        """Read a secret and decode its payload."""
        try:
            secret = self.core_api.read_namespaced_secret(name=name, namespace=self.namespace)
        except self._api_exception() as e:
            raise self._translate(name, "read", e) from e

        raw = secret.data or {}
        return SecretRecord(
            name=name,
            data={key: base64.b64decode(value) for key, value in raw.items()},
        )

    def delete_secret(self, name: str) -> None:
        """Delete a secret immediately, in the foreground."""
        # An empty name would address the whole collection
        if not name:
            raise ValueError("Refusing to delete a secret with an empty name")

        try:
            self.core_api.delete_namespaced_secret(
                name=name,
                namespace=self.namespace,
                grace_period_seconds=0,
                propagation_policy="Foreground",
            )
        except self._api_exception() as e:
            raise self._translate(name, "delete", e) from e
