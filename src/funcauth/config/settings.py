"""Application settings loaded from environment variables."""

from enum import Enum
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreBackend(str, Enum):
    """Supported secret store backends."""

    MEMORY = "memory"
    KUBERNETES = "kubernetes"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FUNCAUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Configuration
    environment: Literal["development", "staging", "production", "test"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Secret store
    store_backend: StoreBackend = StoreBackend.MEMORY
    kube_namespace: str | None = None
    kubeconfig_path: str | None = None

    # Retry behaviour
    max_attempts: int = 5
    retry_delay_ms: int = 500
    delete_rounds: int = 2

    # Credential layout inside the workload
    mount_path: str = "/etc/auth"
    token_field: str = "token"
    secret_name_prefix: str = "pf-secret-"
    secret_id_length: int = 5
    volume_name: str = "function-auth"
    auth_plugin: str = "org.apache.pulsar.client.impl.auth.AuthenticationToken"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
