"""Prometheus metrics for funcauth observability.

This module provides Prometheus metrics for monitoring:
- Action attempts made by the retry sequencer (outcome per attempt)
- Action durations including retry delays
- Credential lifecycle operations (provision, upsert, delete)
"""

from __future__ import annotations

import os
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram, generate_latest

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = [
    "MetricsConfig",
    "ACTION_ATTEMPTS",
    "ACTION_DURATION",
    "CREDENTIAL_OPERATIONS",
    "CREDENTIAL_OPERATION_DURATION",
    "record_action_attempt",
    "record_action_duration",
    "observe_credential_operation",
    "get_metrics",
]


@dataclass
class MetricsConfig:
    """Configuration for Prometheus metrics.

    Attributes:
        enabled: Whether metrics collection is enabled.
        prefix: Prefix for all metric names.
    """

    enabled: bool = True
    prefix: str = "funcauth"

    @classmethod
    def from_env(cls) -> MetricsConfig:
        """Create configuration from environment variables."""
        return cls(
            enabled=os.getenv("FUNCAUTH_METRICS_ENABLED", "true").lower() == "true",
            prefix=os.getenv("FUNCAUTH_METRICS_PREFIX", "funcauth"),
        )


_config = MetricsConfig.from_env()

# ============================================================================
# Sequencer Metrics
# ============================================================================

ACTION_ATTEMPTS = Counter(
    f"{_config.prefix}_action_attempts_total",
    "Attempts made by the action sequencer",
    ["action", "outcome"],
)

ACTION_DURATION = Histogram(
    f"{_config.prefix}_action_duration_seconds",
    "Time spent on an action including retry delays",
    ["action", "status"],
    buckets=(0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# ============================================================================
# Credential Metrics
# ============================================================================

CREDENTIAL_OPERATIONS = Counter(
    f"{_config.prefix}_credential_operations_total",
    "Credential lifecycle operations",
    ["operation", "outcome"],
)

CREDENTIAL_OPERATION_DURATION = Histogram(
    f"{_config.prefix}_credential_operation_duration_seconds",
    "Duration of credential lifecycle operations",
    ["operation"],
    buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)


def record_action_attempt(action: str, success: bool) -> None:
    """Record a single action attempt.

    Args:
        action: Kind of action (create, upsert, delete, verify_absent).
        success: Whether the attempt succeeded.
    """
    if not _config.enabled:
        return
    ACTION_ATTEMPTS.labels(action=action, outcome="success" if success else "failure").inc()


def record_action_duration(action: str, success: bool, duration_seconds: float) -> None:
    """Record the total duration of an action.

    Args:
        action: Kind of action.
        success: Whether the action eventually succeeded.
        duration_seconds: Time spent across all attempts.
    """
    if not _config.enabled:
        return
    status = "success" if success else "exhausted"
    ACTION_DURATION.labels(action=action, status=status).observe(duration_seconds)


@contextmanager
def observe_credential_operation(operation: str) -> Generator[dict[str, Any], None, None]:
    """Context manager for observing a credential lifecycle operation.

    Args:
        operation: Operation name (provision, update, cleanup).

    Yields:
        Context dict for overriding the outcome (e.g. "anonymous", "noop").
    """
    context: dict[str, Any] = {"outcome": "success"}
    start_time = time.perf_counter()

    try:
        yield context
    except Exception:
        context["outcome"] = "error"
        raise
    finally:
        if _config.enabled:
            duration = time.perf_counter() - start_time
            CREDENTIAL_OPERATIONS.labels(operation=operation, outcome=context["outcome"]).inc()
            CREDENTIAL_OPERATION_DURATION.labels(operation=operation).observe(duration)


def get_metrics(registry: CollectorRegistry | None = None) -> bytes:
    """Generate metrics output in Prometheus format.

    Returns:
        Prometheus metrics as bytes.
    """
    return generate_latest(registry or REGISTRY)
