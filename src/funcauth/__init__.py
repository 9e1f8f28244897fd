"""Per-function authentication credentials for a serverless runtime."""

__version__ = "0.1.0"
