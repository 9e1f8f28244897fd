"""Utility modules for funcauth."""

from funcauth.utils.exceptions import ConfigurationError, FuncAuthError

__all__ = ["FuncAuthError", "ConfigurationError"]
