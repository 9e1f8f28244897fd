"""Pytest fixtures for funcauth tests."""

from collections.abc import Generator

import pytest
import structlog

from funcauth.actions import ActionRunner
from funcauth.config.settings import get_settings
from funcauth.credentials import CredentialConfig, CredentialLifecycleManager, FunctionIdentity
from funcauth.store import InMemorySecretStore


# =============================================================================
# Structlog Configuration Fixture
# =============================================================================


@pytest.fixture(scope="function", autouse=True)
def reset_structlog_after_test():
    """Reset structlog configuration after each test.

    This ensures tests that modify structlog global state
    don't affect other tests.
    """
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Drop cached settings so environment patches take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Sequencer Fixtures
# =============================================================================


class RecordingSleep:
    """Sleep replacement that records requested delays instead of waiting."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    """Create a sleep recorder."""
    return RecordingSleep()


@pytest.fixture
def runner(recording_sleep: RecordingSleep) -> ActionRunner:
    """Create an action runner that never actually sleeps."""
    return ActionRunner(sleep=recording_sleep)


# =============================================================================
# Credential Fixtures
# =============================================================================


@pytest.fixture
def identity() -> FunctionIdentity:
    """Create a sample function identity."""
    return FunctionIdentity(tenant="public", namespace="default", name="word-count")


@pytest.fixture
def store() -> InMemorySecretStore:
    """Create an empty in-memory secret store."""
    return InMemorySecretStore()


@pytest.fixture
def credential_config() -> CredentialConfig:
    """Create a credential config with a small retry budget."""
    return CredentialConfig(max_attempts=3, retry_delay=0.5)


@pytest.fixture
def manager(
    store: InMemorySecretStore,
    credential_config: CredentialConfig,
    runner: ActionRunner,
) -> CredentialLifecycleManager:
    """Create a credential manager over the in-memory store."""
    return CredentialLifecycleManager(store, config=credential_config, runner=runner)
