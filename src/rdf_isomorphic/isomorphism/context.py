"""
Search context with budget enforcement for the bijection search.

Provides:
- Search budget (recursion depth, call count, wall-clock timeout)
- Search statistics
- The exception used to abandon a search whose budget ran out

A search over highly symmetric graphs is exponential in the number of
indistinguishable blank nodes; a budget turns that into an
"undetermined" outcome instead of an unbounded run.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import IntEnum, auto
from typing import Any, Optional


class SearchState(IntEnum):
    """Search execution states."""
    PENDING = auto()     # Created but not started
    RUNNING = auto()     # Currently searching
    COMPLETED = auto()   # Finished with a definite answer
    EXHAUSTED = auto()   # Budget ran out


class BudgetExhaustedError(Exception):
    """Raised inside a search when its budget runs out."""

    def __init__(self, reason: str):
        super().__init__(f"Search budget exhausted: {reason}")
        self.reason = reason


@dataclass
class SearchBudget:
    """
    Limits for one isomorphism query. ``None`` means unlimited.

    Attributes:
        max_depth: Maximum number of speculative pairings on one path
        max_calls: Maximum number of solver invocations overall
        timeout_seconds: Wall-clock limit for the whole query
    """
    max_depth: Optional[int] = None
    max_calls: Optional[int] = None
    timeout_seconds: Optional[float] = None

    @property
    def unlimited(self) -> bool:
        return self.max_depth is None and self.max_calls is None and self.timeout_seconds is None


@dataclass
class SearchStats:
    """Statistics for one isomorphism query."""
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    state: SearchState = SearchState.PENDING
    calls: int = 0
    max_depth_reached: int = 0
    refinement_passes: int = 0
    forced_pairs: int = 0
    exhausted_reason: Optional[str] = None

    @property
    def duration_ms(self) -> float:
        """Search duration in milliseconds."""
        if self.start_time is None:
            return 0.0
        end = self.end_time or time.time()
        return (end - self.start_time) * 1000

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "duration_ms": self.duration_ms,
            "state": self.state.name,
            "calls": self.calls,
            "max_depth_reached": self.max_depth_reached,
            "refinement_passes": self.refinement_passes,
            "forced_pairs": self.forced_pairs,
            "exhausted_reason": self.exhausted_reason,
        }


@dataclass
class SearchContext:
    """
    Budget bookkeeping shared by every level of one search.

    Only counters live here; the hash maps of each branch are never shared.
    """
    budget: SearchBudget = field(default_factory=SearchBudget)
    stats: SearchStats = field(default_factory=SearchStats)
    _deadline: Optional[float] = field(default=None, init=False, repr=False)

    def start(self) -> None:
        """Mark the search as running and arm the timeout."""
        self.stats.start_time = time.time()
        self.stats.state = SearchState.RUNNING
        if self.budget.timeout_seconds is not None:
            self._deadline = time.monotonic() + self.budget.timeout_seconds

    def finish(self, exhausted: Optional[BudgetExhaustedError] = None) -> None:
        """Mark the search as done."""
        self.stats.end_time = time.time()
        if exhausted is not None:
            self.stats.state = SearchState.EXHAUSTED
            self.stats.exhausted_reason = exhausted.reason
        else:
            self.stats.state = SearchState.COMPLETED

    def check(self) -> None:
        """Raise if the timeout has passed."""
        if self._deadline is not None and time.monotonic() > self._deadline:
            raise BudgetExhaustedError(
                f"timeout of {self.budget.timeout_seconds}s exceeded"
            )

    def enter(self, depth: int) -> None:
        """
        Account for one solver invocation at the given depth.

        Raises:
            BudgetExhaustedError: If any limit is exceeded.
        """
        self.stats.calls += 1
        self.stats.max_depth_reached = max(self.stats.max_depth_reached, depth)
        if self.budget.max_depth is not None and depth > self.budget.max_depth:
            raise BudgetExhaustedError(f"max_depth of {self.budget.max_depth} exceeded")
        if self.budget.max_calls is not None and self.stats.calls > self.budget.max_calls:
            raise BudgetExhaustedError(f"max_calls of {self.budget.max_calls} exceeded")
        self.check()
