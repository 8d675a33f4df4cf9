# MIT License (see LICENSE)
"""
Sliding window aggregation of finished cycles.

The window keeps the last N cycles in a circular buffer and maintains the
running average of the cycle total and of each event's time and count.
Averages are updated incrementally: folding a cycle subtracts the evicted
cycle's share and adds the new one's, so each fold costs
O(events in those two cycles) regardless of the window size.

Every share is divided by the full capacity, including while the buffer is
still filling up. Until the window is full the averages therefore understate
the real values; is_warming_up() reports that state.
"""
from __future__ import annotations
import logging
from typing import Iterator, Mapping

from .types import EventAverage, EventKey, EventRecord, Snapshot

logger = logging.getLogger(__name__)


class _Average:
    """Mutable accumulator behind an EventAverage."""

    __slots__ = ("time", "count", "cycles")

    def __init__(self) -> None:
        self.time = 0.0
        self.count = 0.0
        # Number of held cycles that contain this key.
        self.cycles = 0


class SlidingWindow:
    """
    Circular buffer of finished cycles with incrementally maintained means.

    Usage:
        window = SlidingWindow(60)
        window.fold(events, total)   # once per finished cycle
        snap = window.snapshot()
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"Window capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._slots: list[tuple[Mapping[EventKey, EventRecord], float] | None] = [None] * capacity
        self._pos = 0
        self._filled = 0
        self._total = 0.0
        self._events: dict[EventKey, _Average] = {}

    @property
    def filled(self) -> int:
        """Number of slots holding a cycle (saturates at capacity)."""
        return self._filled

    @property
    def total(self) -> float:
        """Running average of the cycle total."""
        return self._total

    def is_warming_up(self) -> bool:
        return self._filled < self.capacity

    def fold(self, events: Mapping[EventKey, EventRecord], total: float) -> None:
        """
        Fold a finished cycle into the window, evicting the oldest if full.

        Args:
            events: Per-event records of the finished cycle. The window keeps
                    a reference; the caller must not mutate it afterwards.
            total: Duration of the finished cycle in seconds.
        """
        w = self.capacity

        # cancel out the evicted cycle
        out = self._slots[self._pos]
        if out is not None:
            out_events, out_total = out
            self._total -= out_total / w
            for k, ev in out_events.items():
                avg = self._events[k]
                avg.cycles -= 1
                if avg.cycles == 0:
                    # true mean is exactly zero now; drop accumulated drift
                    del self._events[k]
                else:
                    avg.time -= ev.time / w
                    avg.count -= ev.count / w

        self._slots[self._pos] = (events, total)

        # insert the new cycle
        self._total += total / w
        for k, ev in events.items():
            avg = self._events.get(k)
            if avg is None:
                avg = _Average()
                self._events[k] = avg
            avg.time += ev.time / w
            avg.count += ev.count / w
            avg.cycles += 1

        self._pos = (self._pos + 1) % w
        if self._filled < w:
            self._filled += 1
            if self._filled == w:
                logger.debug("Sliding window of %d cycles warmed up", w)

    def average(self, key: EventKey) -> EventAverage:
        """Average for a single key; zero if no held cycle contains it."""
        avg = self._events.get(key)
        if avg is None:
            return EventAverage()
        return EventAverage(time=avg.time, count=avg.count)

    def keys(self) -> list[EventKey]:
        return list(self._events)

    def slots(self) -> Iterator[tuple[Mapping[EventKey, EventRecord], float]]:
        """Iterate over the held cycles, oldest first."""
        for i in range(self.capacity):
            slot = self._slots[(self._pos + i) % self.capacity]
            if slot is not None:
                yield slot

    def snapshot(self, untracked_key: EventKey | None = None) -> Snapshot:
        """
        Read-only copy of the current averages.

        Args:
            untracked_key: Key whose average is reported as Snapshot.untracked
                           instead of appearing in per_event (the probe's root
                           event).
        """
        per_event = {}
        untracked = 0.0
        untracked_count = 0.0
        for k, avg in self._events.items():
            if untracked_key is not None and k is untracked_key:
                untracked = avg.time
                untracked_count = avg.count
                continue
            per_event[k] = EventAverage(time=avg.time, count=avg.count)
        return Snapshot(
            total=self._total,
            per_event=per_event,
            warming_up=self.is_warming_up(),
            untracked=untracked,
            untracked_count=untracked_count,
        )
