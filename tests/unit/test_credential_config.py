"""Unit tests for credential configuration."""

import pytest
from pydantic import ValidationError

from funcauth.config.settings import Settings
from funcauth.credentials import CredentialConfig


class TestCredentialConfig:
    """Tests for CredentialConfig."""

    def test_defaults(self):
        """Test default retry budget and layout."""
        config = CredentialConfig()

        assert config.max_attempts == 5
        assert config.retry_delay == 0.5
        assert config.delete_rounds == 2
        assert config.mount_path == "/etc/auth"
        assert config.token_field == "token"
        assert config.secret_name_prefix == "pf-secret-"
        assert config.secret_id_length == 5
        assert config.token_file == "/etc/auth/token"

    def test_trailing_slash_stripped(self):
        """Test the mount path is normalised."""
        config = CredentialConfig(mount_path="/var/run/auth/")
        assert config.mount_path == "/var/run/auth"
        assert config.token_file == "/var/run/auth/token"

    def test_root_mount_path(self):
        """Test mounting at the filesystem root."""
        config = CredentialConfig(mount_path="/")
        assert config.token_file == "/token"

    def test_relative_mount_path_rejected(self):
        """Test relative mount paths are rejected."""
        with pytest.raises(ValidationError):
            CredentialConfig(mount_path="etc/auth")

    @pytest.mark.parametrize(
        "field,value",
        [
            ("max_attempts", 0),
            ("retry_delay", -0.1),
            ("delete_rounds", 0),
            ("secret_id_length", 0),
            ("token_field", ""),
        ],
    )
    def test_invalid_values(self, field, value):
        """Test out-of-range values are rejected."""
        with pytest.raises(ValidationError):
            CredentialConfig(**{field: value})

    def test_frozen(self):
        """Test the configuration is immutable."""
        config = CredentialConfig()
        with pytest.raises(ValidationError):
            config.max_attempts = 3

    def test_from_settings(self):
        """Test conversion from application settings."""
        settings = Settings(
            max_attempts=3,
            retry_delay_ms=250,
            delete_rounds=4,
            mount_path="/var/run/auth",
            token_field="jwt",
            secret_name_prefix="fn-secret-",
            secret_id_length=8,
        )

        config = CredentialConfig.from_settings(settings)

        assert config.max_attempts == 3
        assert config.retry_delay == 0.25
        assert config.delete_rounds == 4
        assert config.token_file == "/var/run/auth/jwt"
        assert config.secret_name_prefix == "fn-secret-"
        assert config.secret_id_length == 8

    def test_from_environment(self, monkeypatch):
        """Test the global settings are used by default."""
        monkeypatch.setenv("FUNCAUTH_MAX_ATTEMPTS", "7")
        monkeypatch.setenv("FUNCAUTH_MOUNT_PATH", "/secrets")

        config = CredentialConfig.from_settings()

        assert config.max_attempts == 7
        assert config.token_file == "/secrets/token"
