"""
Statistics-related domain models.

Immutable summaries of how events moved through the per-event state machine.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class ModeStatistics:
    """
    Event bookkeeping for one execution mode.

    Immutable snapshot built at the end of the run.
    """

    mode: str
    events_seen: int
    events_completed: int
    events_failed: int
    skip_reasons: tuple[tuple[str, int], ...] = field(default_factory=tuple)
    elapsed_time_sec: float = 0.0

    def __post_init__(self):
        """Validate mode statistics."""
        if self.events_seen < 0:
            raise ValueError(f"events_seen must be non-negative, got {self.events_seen}")
        accounted = self.events_completed + self.events_failed + self.events_skipped
        if accounted != self.events_seen:
            raise ValueError(
                f"completed ({self.events_completed}) + failed ({self.events_failed}) + "
                f"skipped ({self.events_skipped}) must equal events_seen ({self.events_seen})"
            )

    @property
    def events_skipped(self) -> int:
        return sum(count for _, count in self.skip_reasons)

    @property
    def completion_rate(self) -> float:
        """Completed events as percentage of events seen."""
        if self.events_seen == 0:
            return 0.0
        return (self.events_completed / self.events_seen) * 100

    @classmethod
    def from_outcomes(cls, mode: str, outcomes: Counter, elapsed_time_sec: float) -> 'ModeStatistics':
        """
        Build statistics from a counter of terminal outcomes.

        Args:
            mode: Execution mode name
            outcomes: Counter keyed by "completed", "failed" or "skipped:<reason>"
            elapsed_time_sec: Wall time spent in this mode

        Returns:
            ModeStatistics snapshot
        """
        skipped = tuple(sorted(
            (key.split(":", 1)[1], count)
            for key, count in outcomes.items()
            if key.startswith("skipped:")
        ))
        return cls(
            mode=mode,
            events_seen=sum(outcomes.values()),
            events_completed=outcomes.get("completed", 0),
            events_failed=outcomes.get("failed", 0),
            skip_reasons=skipped,
            elapsed_time_sec=elapsed_time_sec,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "mode": self.mode,
            "events_seen": self.events_seen,
            "events_completed": self.events_completed,
            "events_skipped": self.events_skipped,
            "events_failed": self.events_failed,
            "completion_rate": f"{self.completion_rate:.1f}%",
            "skip_reasons": dict(self.skip_reasons),
            "elapsed_time_sec": f"{self.elapsed_time_sec:.1f}",
        }


@dataclass(frozen=True)
class RunStatistics:
    """Statistics for a whole run across all enabled modes."""

    modes: tuple[ModeStatistics, ...]
    start_time: datetime
    end_time: datetime

    def __post_init__(self):
        """Validate run statistics."""
        if self.end_time < self.start_time:
            raise ValueError("end_time must be after start_time")

    @property
    def total_time_sec(self) -> float:
        return (self.end_time - self.start_time).total_seconds()

    @property
    def has_failures(self) -> bool:
        return any(m.events_failed > 0 for m in self.modes)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "total_time_sec": f"{self.total_time_sec:.1f}",
            "modes": [m.to_dict() for m in self.modes],
        }
