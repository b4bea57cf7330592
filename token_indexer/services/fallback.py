"""
Ordered fallback across equivalent data sources.

Candidates are tried one at a time in priority order. The first candidate
that produces a non-empty list wins and the remaining ones are never
attempted. Upstream failures are recorded and absorbed, never raised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Generic, List, Optional, Sequence, TypeVar

import structlog

from ..errors import ErrorCategory, ProviderError

logger = structlog.stdlib.get_logger(__name__)

C = TypeVar("C")
T = TypeVar("T")


class AttemptOutcome(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    MALFORMED = "malformed"


_CATEGORY_OUTCOMES = {
    ErrorCategory.HTTP_STATUS: AttemptOutcome.HTTP_ERROR,
    ErrorCategory.NETWORK: AttemptOutcome.NETWORK_ERROR,
    ErrorCategory.TIMEOUT: AttemptOutcome.TIMEOUT,
    ErrorCategory.MALFORMED: AttemptOutcome.MALFORMED,
}


@dataclass(frozen=True)
class AttemptRecord:
    """What happened when one candidate was tried."""

    name: str
    outcome: AttemptOutcome
    detail: Optional[str] = None


@dataclass
class FallbackOutcome(Generic[T]):
    items: List[T] = field(default_factory=list)
    source: Optional[str] = None
    attempts: List[AttemptRecord] = field(default_factory=list)

    @property
    def exhausted(self) -> bool:
        """True when no candidate produced a result."""
        return self.source is None


def _default_name(candidate: object) -> str:
    return getattr(candidate, "name", repr(candidate))


class FallbackSequencer(Generic[C, T]):
    """Try candidates strictly in order until one yields items."""

    def __init__(
        self,
        label: str,
        name_of: Callable[[C], str] = _default_name,
    ) -> None:
        self.label = label
        self._name_of = name_of

    async def run(
        self,
        candidates: Sequence[C],
        attempt: Callable[[C], Awaitable[List[T]]],
    ) -> FallbackOutcome[T]:
        attempts: List[AttemptRecord] = []

        for position, candidate in enumerate(candidates, start=1):
            name = self._name_of(candidate)
            logger.debug("fallback_attempt_started", sequence=self.label, source=name, position=position)

            try:
                items = await attempt(candidate)
            except ProviderError as exc:
                record = AttemptRecord(name, _CATEGORY_OUTCOMES[exc.category], str(exc))
            except (ValueError, TypeError, KeyError) as exc:
                # Transforms that trip over an unexpected shape count as malformed.
                record = AttemptRecord(name, AttemptOutcome.MALFORMED, f"{exc.__class__.__name__}: {exc}")
            else:
                if items:
                    attempts.append(AttemptRecord(name, AttemptOutcome.OK))
                    logger.info(
                        "fallback_source_succeeded",
                        sequence=self.label,
                        source=name,
                        position=position,
                        items=len(items),
                    )
                    return FallbackOutcome(items=list(items), source=name, attempts=attempts)
                record = AttemptRecord(name, AttemptOutcome.EMPTY)

            attempts.append(record)
            logger.warning(
                "fallback_source_failed",
                sequence=self.label,
                source=name,
                position=position,
                outcome=record.outcome.value,
                detail=record.detail,
            )

        logger.warning(
            "fallback_exhausted",
            sequence=self.label,
            attempted=[record.name for record in attempts],
        )
        return FallbackOutcome(attempts=attempts)
