"""Unit tests for secret store factory functions."""

import pytest

from funcauth.config.settings import Settings, StoreBackend
from funcauth.store import (
    InMemorySecretStore,
    create_secret_store,
    get_secret_store,
    reset_secret_store,
)
from funcauth.store.kubernetes import KubernetesSecretStore
from funcauth.utils.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def reset_global_store():
    """Reset the global store around each test."""
    reset_secret_store()
    yield
    reset_secret_store()


class TestCreateSecretStore:
    """Tests for create_secret_store."""

    def test_memory_backend(self):
        """Test the memory backend yields an in-memory store."""
        store = create_secret_store(Settings(store_backend=StoreBackend.MEMORY))
        assert isinstance(store, InMemorySecretStore)

    def test_kubernetes_backend(self):
        """Test the Kubernetes backend is configured from settings."""
        store = create_secret_store(
            Settings(
                store_backend=StoreBackend.KUBERNETES,
                kube_namespace="pulsar-functions",
                kubeconfig_path="/tmp/kubeconfig",
            )
        )

        assert isinstance(store, KubernetesSecretStore)
        assert store.namespace == "pulsar-functions"
        assert store.labels == {"app.kubernetes.io/managed-by": "funcauth"}

    def test_kubernetes_backend_requires_namespace(self):
        """Test a missing namespace is a configuration error."""
        with pytest.raises(ConfigurationError, match="FUNCAUTH_KUBE_NAMESPACE"):
            create_secret_store(Settings(store_backend=StoreBackend.KUBERNETES))

    def test_backend_from_environment(self, monkeypatch):
        """Test the backend is read from FUNCAUTH_ environment variables."""
        monkeypatch.setenv("FUNCAUTH_STORE_BACKEND", "kubernetes")
        monkeypatch.setenv("FUNCAUTH_KUBE_NAMESPACE", "functions")

        store = create_secret_store()

        assert isinstance(store, KubernetesSecretStore)
        assert store.namespace == "functions"


class TestGlobalSecretStore:
    """Tests for the global store instance."""

    def test_get_secret_store_is_cached(self):
        """Test the same instance is returned until reset."""
        first = get_secret_store()
        assert get_secret_store() is first

        reset_secret_store()
        assert get_secret_store() is not first
