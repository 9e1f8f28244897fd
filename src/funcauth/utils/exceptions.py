"""Custom exceptions for funcauth."""


class FuncAuthError(Exception):
    """Base exception for all funcauth errors."""

    pass


class ConfigurationError(FuncAuthError):
    """Error in configuration or settings."""

    pass
