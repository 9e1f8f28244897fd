"""Credential lifecycle configuration."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from funcauth.config.settings import Settings, get_settings
from funcauth.credentials.types import SECRET_ID_LENGTH, SECRET_NAME_PREFIX

DEFAULT_AUTH_PLUGIN = "org.apache.pulsar.client.impl.auth.AuthenticationToken"


class CredentialConfig(BaseModel):
    """Configuration for credential provisioning and mounting."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=5, ge=1, description="Attempts per store action")
    retry_delay: float = Field(default=0.5, ge=0, description="Delay between attempts in seconds")
    delete_rounds: int = Field(
        default=2, ge=1, description="Delete-and-verify rounds before giving up"
    )
    mount_path: str = Field(default="/etc/auth", description="Directory the secret is mounted at")
    token_field: str = Field(
        default="token", min_length=1, description="Secret field holding the token"
    )
    secret_name_prefix: str = Field(
        default=SECRET_NAME_PREFIX, description="Prefix of secret record names"
    )
    secret_id_length: int = Field(
        default=SECRET_ID_LENGTH, ge=1, description="Length of random secret ids"
    )
    volume_name: str = Field(default="function-auth", description="Pod volume carrying the secret")
    default_mode: int = Field(default=0o400, description="Permission bits of mounted files")
    auth_plugin: str = Field(
        default=DEFAULT_AUTH_PLUGIN, description="Client authentication plugin"
    )

    @field_validator("mount_path")
    @classmethod
    def _absolute_mount_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError(f"mount_path must be absolute, got {value!r}")
        return value.rstrip("/") or "/"

    @property
    def token_file(self) -> str:
        """Path of the token file inside the workload."""
        return f"{self.mount_path.rstrip('/')}/{self.token_field}"

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "CredentialConfig":
        """Build the configuration from application settings."""
        settings = settings or get_settings()
        return cls(
            max_attempts=settings.max_attempts,
            retry_delay=settings.retry_delay_ms / 1000,
            delete_rounds=settings.delete_rounds,
            mount_path=settings.mount_path,
            token_field=settings.token_field,
            secret_name_prefix=settings.secret_name_prefix,
            secret_id_length=settings.secret_id_length,
            volume_name=settings.volume_name,
            auth_plugin=settings.auth_plugin,
        )
