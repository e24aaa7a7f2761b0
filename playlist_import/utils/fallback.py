"""
Ordered fallback across retrieval attempts.

Each attempt is a zero-argument coroutine function returning a FetchResult.
``first_success`` runs attempts lazily in order and stops at the first success;
failures (returned or raised) are collected for logging and never propagate.
"""

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchFailure:
    """Why a single retrieval attempt produced nothing."""
    attempt: str
    reason: str
    status: Optional[int] = None

    def __str__(self) -> str:
        if self.status is not None:
            return f"{self.attempt}: {self.reason} (HTTP {self.status})"
        return f"{self.attempt}: {self.reason}"


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Either a value or the failure that prevented one."""
    value: Optional[T] = None
    failure: Optional[FetchFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None and self.value is not None

    @classmethod
    def success(cls, value: T) -> 'FetchResult[T]':
        return cls(value=value)

    @classmethod
    def fail(cls, attempt: str, reason: str, status: Optional[int] = None) -> 'FetchResult[T]':
        return cls(failure=FetchFailure(attempt=attempt, reason=reason, status=status))


@dataclass
class Attempt(Generic[T]):
    """A named retrieval strategy."""
    name: str
    run: Callable[[], Awaitable[FetchResult[T]]]


@dataclass
class FallbackOutcome(Generic[T]):
    """Result of running an attempt chain."""
    value: Optional[T] = None
    succeeded_with: Optional[str] = None
    failures: List[FetchFailure] = field(default_factory=list)

    @property
    def attempts_made(self) -> int:
        return len(self.failures) + (1 if self.succeeded_with else 0)


async def first_success(attempts: Sequence[Attempt[T]], label: str = "fetch") -> FallbackOutcome[T]:
    """
    Run attempts in order until one succeeds.

    Args:
        attempts: Ordered retrieval strategies
        label: Name used in log messages

    Returns:
        FallbackOutcome whose ``value`` is None when every attempt failed
    """
    outcome: FallbackOutcome[T] = FallbackOutcome()

    for attempt in attempts:
        try:
            result = await attempt.run()
        except Exception as e:
            result = FetchResult.fail(attempt.name, f"{type(e).__name__}: {e}")

        if result.ok:
            logger.debug(f"[{label}] {attempt.name} succeeded")
            outcome.value = result.value
            outcome.succeeded_with = attempt.name
            return outcome

        failure = result.failure or FetchFailure(attempt=attempt.name, reason="no result")
        logger.warning(f"[{label}] {failure}")
        outcome.failures.append(failure)

    logger.error(f"[{label}] all {len(outcome.failures)} attempts failed")
    return outcome
