"""Configuration validation for startup checks.

Validates that the secret store and credential layout are configured
consistently before the control plane starts provisioning credentials.

Usage:
    from funcauth.config.validation import validate_or_raise

    # During startup
    validate_or_raise()
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from funcauth.config.settings import Settings, StoreBackend, get_settings
from funcauth.utils.exceptions import ConfigurationError


logger = logging.getLogger("funcauth.config")

# Kubernetes object names are DNS-1123 subdomains
_DNS_1123 = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")
_MIN_SAFE_ID_LENGTH = 5


class ValidationSeverity(str, Enum):
    """Severity of configuration validation issues."""

    ERROR = "error"  # Must be fixed, app cannot start
    WARNING = "warning"  # Should be fixed, app can start but may have issues


@dataclass
class ValidationResult:
    """Result of a configuration validation check."""

    field: str
    severity: ValidationSeverity
    message: str
    suggestion: str | None = None

    def __str__(self) -> str:
        prefix = "ERROR" if self.severity == ValidationSeverity.ERROR else "WARNING"
        result = f"[{prefix}] {self.field}: {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result


def validate_configuration(settings: Settings | None = None) -> list[ValidationResult]:
    """Validate application configuration.

    Runs all configuration checks and returns a list of validation results.

    Args:
        settings: Settings to validate (default: global settings)

    Returns:
        List of validation results (empty if all checks pass)
    """
    if settings is None:
        settings = get_settings()

    results: list[ValidationResult] = []

    results.extend(_validate_store(settings))
    results.extend(_validate_retries(settings))
    results.extend(_validate_layout(settings))
    results.extend(_validate_environment(settings))

    return results


def validate_or_raise(settings: Settings | None = None) -> None:
    """Validate configuration and raise if errors found.

    Args:
        settings: Settings to validate

    Raises:
        ConfigurationError: If any validation errors are found
    """
    results = validate_configuration(settings)
    errors = [r for r in results if r.severity == ValidationSeverity.ERROR]

    if errors:
        error_messages = "\n".join(str(e) for e in errors)
        raise ConfigurationError(f"Configuration validation failed:\n{error_messages}")

    warnings = [r for r in results if r.severity == ValidationSeverity.WARNING]
    for warning in warnings:
        logger.warning(str(warning))


# =============================================================================
# Validators
# =============================================================================


def _validate_store(settings: Settings) -> list[ValidationResult]:
    """Validate secret store configuration."""
    results: list[ValidationResult] = []

    if settings.store_backend == StoreBackend.KUBERNETES:
        if not settings.kube_namespace:
            results.append(
                ValidationResult(
                    field="kube_namespace",
                    severity=ValidationSeverity.ERROR,
                    message="Kubernetes backend requires a namespace",
                    suggestion="Set FUNCAUTH_KUBE_NAMESPACE to the functions namespace",
                )
            )
    elif settings.environment == "production":
        results.append(
            ValidationResult(
                field="store_backend",
                severity=ValidationSeverity.ERROR,
                message="In-memory secret store cannot be used in production",
                suggestion="Set FUNCAUTH_STORE_BACKEND=kubernetes",
            )
        )

    return results


def _validate_retries(settings: Settings) -> list[ValidationResult]:
    """Validate retry budget configuration."""
    results: list[ValidationResult] = []

    if settings.max_attempts < 1:
        results.append(
            ValidationResult(
                field="max_attempts",
                severity=ValidationSeverity.ERROR,
                message=f"Invalid attempt budget: {settings.max_attempts}",
                suggestion="Use at least 1 attempt per action",
            )
        )

    if settings.retry_delay_ms < 0:
        results.append(
            ValidationResult(
                field="retry_delay_ms",
                severity=ValidationSeverity.ERROR,
                message=f"Negative retry delay: {settings.retry_delay_ms}",
            )
        )

    if settings.delete_rounds < 1:
        results.append(
            ValidationResult(
                field="delete_rounds",
                severity=ValidationSeverity.ERROR,
                message=f"Invalid delete round count: {settings.delete_rounds}",
                suggestion="Use at least 1 delete-and-verify round",
            )
        )

    return results


def _validate_layout(settings: Settings) -> list[ValidationResult]:
    """Validate how secrets are named and mounted."""
    results: list[ValidationResult] = []

    if not settings.mount_path.startswith("/"):
        results.append(
            ValidationResult(
                field="mount_path",
                severity=ValidationSeverity.ERROR,
                message=f"Mount path must be absolute: {settings.mount_path}",
            )
        )

    # A prefix plus a lower-case alphanumeric id must form a valid object name
    probe_name = f"{settings.secret_name_prefix}a"
    if not _DNS_1123.match(probe_name):
        results.append(
            ValidationResult(
                field="secret_name_prefix",
                severity=ValidationSeverity.ERROR,
                message=f"Prefix produces invalid secret names: {settings.secret_name_prefix!r}",
                suggestion="Use lower-case letters, digits and '-' only",
            )
        )

    if settings.secret_id_length < 1:
        results.append(
            ValidationResult(
                field="secret_id_length",
                severity=ValidationSeverity.ERROR,
                message=f"Invalid secret id length: {settings.secret_id_length}",
            )
        )
    elif settings.secret_id_length < _MIN_SAFE_ID_LENGTH:
        results.append(
            ValidationResult(
                field="secret_id_length",
                severity=ValidationSeverity.WARNING,
                message=f"Secret id length {settings.secret_id_length} makes collisions likely",
                suggestion=f"Use at least {_MIN_SAFE_ID_LENGTH} characters",
            )
        )

    return results


def _validate_environment(settings: Settings) -> list[ValidationResult]:
    """Validate environment-specific settings."""
    results: list[ValidationResult] = []

    if settings.environment == "production" and settings.log_level == "DEBUG":
        results.append(
            ValidationResult(
                field="log_level",
                severity=ValidationSeverity.WARNING,
                message="DEBUG log level in production may expose sensitive data",
                suggestion="Use INFO or WARNING for production",
            )
        )

    return results


def get_configuration_summary(settings: Settings | None = None) -> dict[str, Any]:
    """Get a summary of current configuration (safe for logging).

    Args:
        settings: Settings to summarize

    Returns:
        Dictionary with configuration summary
    """
    if settings is None:
        settings = get_settings()

    return {
        "environment": settings.environment,
        "log_level": settings.log_level,
        "store_backend": settings.store_backend.value,
        "kube_namespace": settings.kube_namespace,
        "max_attempts": settings.max_attempts,
        "retry_delay_ms": settings.retry_delay_ms,
        "delete_rounds": settings.delete_rounds,
        "mount_path": settings.mount_path,
        "secret_id_length": settings.secret_id_length,
    }
