# MIT License (see LICENSE)
"""
Core type definitions for the frame profiler.

Defines the data structures shared by the stack timer, the sliding window
and the renderers:
- EventRecord: mutable per-cycle timing of one event.
- EventAverage: windowed average of one event.
- Snapshot: read-only view of the window handed to visualization.

All durations are in seconds.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Hashable, Mapping


class _RootEvent:
    """Sentinel key for the event pushed automatically by start_cycle()."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<ROOT>"


# Never equal to any caller-supplied key.
ROOT_EVENT = _RootEvent()

EventKey = Hashable


# =============================================================================
# Per-cycle records
# =============================================================================

@dataclass
class EventRecord:
    """
    Exclusive time and invocation count of one event within a cycle.

    Attributes:
        time: Exclusive (self) time accumulated so far, in seconds.
        count: Number of times the event was pushed this cycle.
        running_since: Clock value at which the event last became the top of
                       the stack, or None while it is paused.
    """
    time: float = 0.0
    count: int = 0
    running_since: float | None = None


# =============================================================================
# Windowed averages
# =============================================================================

@dataclass(frozen=True)
class EventAverage:
    """
    Mean exclusive time and mean invocation count over the sliding window.

    Attributes:
        time: Average exclusive time per cycle in seconds.
        count: Average number of invocations per cycle (fractional).
    """
    time: float = 0.0
    count: float = 0.0


@dataclass(frozen=True)
class Snapshot:
    """
    Read-only view of a profiler's sliding-window averages.

    Attributes:
        total: Average cycle duration in seconds.
        per_event: Average per event key. Never contains the root event.
        warming_up: True until the window has been filled once; averages are
                    understated while this holds.
        untracked: Average time per cycle spent outside every pushed event.
        untracked_count: Average count of the root event; below 1 while
                         warming up.
    """
    total: float = 0.0
    per_event: Mapping[EventKey, EventAverage] = field(
        default_factory=lambda: MappingProxyType({})
    )
    warming_up: bool = True
    untracked: float = 0.0
    untracked_count: float = 0.0

    def __post_init__(self) -> None:
        """Freeze per_event behind a read-only proxy."""
        if not isinstance(self.per_event, MappingProxyType):
            object.__setattr__(self, "per_event", MappingProxyType(dict(self.per_event)))

    @property
    def total_ms(self) -> float:
        return 1e3 * self.total
