"""Secret store factory and global instance management.

This module creates the configured secret store backend and manages the
process-wide store instance used by the control plane.
"""

import logging
import threading

from funcauth.config.settings import Settings, StoreBackend, get_settings
from funcauth.store.memory import InMemorySecretStore
from funcauth.store.protocol import SecretStore
from funcauth.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_secret_store: SecretStore | None = None
_init_lock = threading.Lock()


def create_secret_store(settings: Settings | None = None) -> SecretStore:
    """Create a secret store for the configured backend.

    Args:
        settings: Settings to read the backend from (default: global settings)

    Returns:
        A SecretStore implementation

    Raises:
        ConfigurationError: If the backend is misconfigured
    """
    settings = settings or get_settings()

    if settings.store_backend == StoreBackend.KUBERNETES:
        if not settings.kube_namespace:
            raise ConfigurationError("Kubernetes secret store requires FUNCAUTH_KUBE_NAMESPACE")

        from funcauth.store.kubernetes import KubernetesSecretStore

        logger.info(f"Using Kubernetes secret store in namespace {settings.kube_namespace}")
        return KubernetesSecretStore(
            namespace=settings.kube_namespace,
            kubeconfig_path=settings.kubeconfig_path,
            labels={"app.kubernetes.io/managed-by": "funcauth"},
        )

    logger.info("Using in-memory secret store")
    return InMemorySecretStore()


def get_secret_store() -> SecretStore:
    """Get the global secret store, creating it on first use.

    Returns:
        SecretStore instance
    """
    global _secret_store

    with _init_lock:
        if _secret_store is None:
            _secret_store = create_secret_store()
        return _secret_store


def reset_secret_store() -> None:
    """Drop the global secret store so the next call recreates it."""
    global _secret_store

    with _init_lock:
        _secret_store = None
