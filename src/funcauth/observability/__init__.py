"""Observability module for funcauth.

Prometheus metrics for the action sequencer and the credential lifecycle.

Usage:
    from funcauth.observability import get_metrics

    payload = get_metrics()
"""

from funcauth.observability.metrics import (
    ACTION_ATTEMPTS,
    ACTION_DURATION,
    CREDENTIAL_OPERATIONS,
    MetricsConfig,
    get_metrics,
    observe_credential_operation,
    record_action_attempt,
    record_action_duration,
)

__all__ = [
    "MetricsConfig",
    "ACTION_ATTEMPTS",
    "ACTION_DURATION",
    "CREDENTIAL_OPERATIONS",
    "get_metrics",
    "observe_credential_operation",
    "record_action_attempt",
    "record_action_duration",
]
