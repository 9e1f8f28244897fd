"""Configuration module for funcauth."""

from funcauth.config.settings import Settings, StoreBackend, get_settings
from funcauth.config.validation import (
    ValidationResult,
    ValidationSeverity,
    validate_configuration,
    validate_or_raise,
)

__all__ = [
    "Settings",
    "StoreBackend",
    "get_settings",
    "ValidationResult",
    "ValidationSeverity",
    "validate_configuration",
    "validate_or_raise",
]
