"""Retry action sequencer.

Runs an ordered list of side-effecting actions. Each action is retried with a
fixed delay until it succeeds or its attempt budget runs out. When the budget
runs out, a gating action aborts the rest of the sequence, while a tolerant
action (``continue_on_failure=True``) lets the sequence carry on.

The sequencer never raises. Callers inspect the returned ``SequenceResult``
to decide whether the logical operation they modelled succeeded.

Example:
    runner = ActionRunner()
    result = runner.run(
        ActionSequence()
        .add(Action(name="delete", operation=delete, continue_on_failure=True))
        .add(Action(name="verify", operation=verify))
    )
    if result.succeeded("verify"):
        ...
"""

import dataclasses
import time
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum

from tenacity import RetryCallState, Retrying, retry_if_result, stop_after_attempt, wait_fixed

from funcauth.core.logging import get_logger
from funcauth.observability.metrics import record_action_attempt, record_action_duration

logger = get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_DELAY_SECONDS = 0.5


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Outcome of a single attempt of an action.

    Attributes:
        success: Whether the attempt succeeded
        error_message: Why the attempt failed, if known
        value: Optional payload produced by a successful attempt
    """

    success: bool
    error_message: str | None = None
    value: object | None = None

    @classmethod
    def ok(cls, value: object | None = None) -> "ActionResult":
        """Build a successful result."""
        return cls(success=True, value=value)

    @classmethod
    def failed(cls, error_message: str | None = None) -> "ActionResult":
        """Build a failed result."""
        return cls(success=False, error_message=error_message)


ActionCallback = Callable[[ActionResult], None]


@dataclass(frozen=True)
class Action:
    """A named, retryable unit of work.

    Attributes:
        name: Human readable description used in logs
        operation: No-argument callable producing an ActionResult
        max_attempts: Total number of attempts before giving up
        delay: Seconds to wait between attempts
        continue_on_failure: Keep running the sequence if this action gives up
        on_success: Called once with the first successful result
        on_failure: Called once with the last result when attempts run out
        kind: Low-cardinality label used for metrics
    """

    name: str
    operation: Callable[[], ActionResult]
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    delay: float = DEFAULT_DELAY_SECONDS
    continue_on_failure: bool = False
    on_success: ActionCallback | None = None
    on_failure: ActionCallback | None = None
    kind: str = "generic"

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.delay < 0:
            raise ValueError(f"delay must not be negative, got {self.delay}")

    def with_options(self, **changes: object) -> "Action":
        """Copy this action with some fields replaced."""
        return dataclasses.replace(self, **changes)  # type: ignore[arg-type]


@dataclass
class ActionSequence:
    """Ordered list of actions executed strictly in declaration order."""

    actions: list[Action] = field(default_factory=list)

    def add(self, action: Action) -> "ActionSequence":
        """Append an action and return the sequence for chaining."""
        self.actions.append(action)
        return self

    def __iter__(self) -> Iterator[Action]:
        return iter(self.actions)

    def __len__(self) -> int:
        return len(self.actions)


class SequenceStatus(str, Enum):
    """Terminal status of a sequence run."""

    COMPLETED = "completed"  # Every action ran (tolerant ones may have failed)
    ABORTED = "aborted"  # A gating action exhausted its attempts


@dataclass(frozen=True, slots=True)
class ActionOutcome:
    """Final outcome of one action within a sequence run."""

    name: str
    success: bool
    attempts: int
    error_message: str | None = None
    value: object | None = None


@dataclass
class SequenceResult:
    """Structured result of running an ActionSequence.

    Attributes:
        status: Whether the sequence ran to the end or was aborted
        outcomes: Outcome of every action that ran, in order
        aborted_at: Name of the gating action that aborted the run
    """

    status: SequenceStatus
    outcomes: list[ActionOutcome] = field(default_factory=list)
    aborted_at: str | None = None

    @property
    def completed(self) -> bool:
        """Whether every action in the sequence was run."""
        return self.status == SequenceStatus.COMPLETED

    def succeeded(self, name: str) -> bool:
        """Whether the named action ran and succeeded."""
        return any(o.name == name and o.success for o in self.outcomes)

    def value_of(self, name: str) -> object | None:
        """Value produced by the named action's successful attempt."""
        for outcome in self.outcomes:
            if outcome.name == name and outcome.success:
                return outcome.value
        return None

    @property
    def last_error(self) -> str | None:
        """Error message of the last failed action, if any."""
        for outcome in reversed(self.outcomes):
            if not outcome.success:
                return outcome.error_message
        return None


class ActionRunner:
    """Executes action sequences with fixed-delay retries.

    Retry pacing is delegated to tenacity. The sleep function is injectable
    so tests can run retries without waiting.
    """

    def __init__(self, sleep: Callable[[float], None] = time.sleep):
        """Initialize the runner.

        Args:
            sleep: Function used to wait between attempts
        """
        self._sleep = sleep

    def run(self, sequence: ActionSequence | Iterable[Action]) -> SequenceResult:
        """Run actions in order until the end or until a gating action gives up.

        Args:
            sequence: Actions to execute

        Returns:
            SequenceResult describing what ran and what succeeded
        """
        outcomes: list[ActionOutcome] = []

        for action in sequence:
            outcome = self.run_action(action)
            outcomes.append(outcome)

            if not outcome.success and not action.continue_on_failure:
                logger.warning(
                    "sequence_aborted",
                    action=action.name,
                    error=outcome.error_message,
                )
                return SequenceResult(
                    status=SequenceStatus.ABORTED,
                    outcomes=outcomes,
                    aborted_at=action.name,
                )

        return SequenceResult(status=SequenceStatus.COMPLETED, outcomes=outcomes)

    def run_action(self, action: Action) -> ActionOutcome:
        """Run a single action with retries.

        Args:
            action: Action to execute

        Returns:
            ActionOutcome with the number of attempts made
        """
        attempts = 0
        start_time = time.perf_counter()

        def attempt() -> ActionResult:
            nonlocal attempts
            attempts += 1
            result = self._invoke(action)
            record_action_attempt(action.kind, result.success)
            if not result.success:
                logger.warning(
                    "action_attempt_failed",
                    action=action.name,
                    attempt=attempts,
                    max_attempts=action.max_attempts,
                    error=result.error_message,
                )
            return result

        retrying = Retrying(
            stop=stop_after_attempt(action.max_attempts),
            wait=wait_fixed(action.delay),
            retry=retry_if_result(lambda r: not r.success),
            sleep=self._sleep,
            retry_error_callback=_last_result,
        )
        result: ActionResult = retrying(attempt)

        record_action_duration(action.kind, result.success, time.perf_counter() - start_time)

        if result.success:
            logger.info("action_succeeded", action=action.name, attempts=attempts)
            if action.on_success is not None:
                action.on_success(result)
        else:
            logger.error(
                "action_exhausted",
                action=action.name,
                attempts=attempts,
                error=result.error_message,
            )
            if action.on_failure is not None:
                action.on_failure(result)

        return ActionOutcome(
            name=action.name,
            success=result.success,
            attempts=attempts,
            error_message=result.error_message,
            value=result.value,
        )

    @staticmethod
    def _invoke(action: Action) -> ActionResult:
        """Call the action's operation, turning a raised error into a failed attempt."""
        try:
            return action.operation()
        except Exception as e:
            logger.warning("action_raised", action=action.name, exc_info=True)
            return ActionResult.failed(f"{type(e).__name__}: {e}")


def _last_result(retry_state: RetryCallState) -> ActionResult:
    """Return the final failed result instead of raising RetryError."""
    return retry_state.outcome.result()  # type: ignore[union-attr]


def run_actions(*actions: Action, sleep: Callable[[float], None] = time.sleep) -> SequenceResult:
    """Run the given actions as one sequence.

    Args:
        actions: Actions in execution order
        sleep: Function used to wait between attempts

    Returns:
        SequenceResult
    """
    return ActionRunner(sleep=sleep).run(ActionSequence(list(actions)))
