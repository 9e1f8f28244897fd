"""Core services and utilities for funcauth."""

from .logging import LogContext, get_logger, setup_logging

__all__ = [
    "LogContext",
    "get_logger",
    "setup_logging",
]
