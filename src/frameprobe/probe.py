# MIT License (see LICENSE)
"""
Event stack timer.

A Probe measures named events ("update physics", "draw sprites", ...) inside
repeated cycles, typically one cycle per frame or per frame phase. Events
nest with push/pop stack discipline and time is charged exclusively to the
event on top of the stack, so the exclusive times of a cycle always add up
to the cycle's duration. Finished cycles are folded into a SlidingWindow.

The clock is only sampled at cycle and event boundaries. Inside push_event()
it is sampled a second time after the record lookup, which keeps the
profiler's own bookkeeping out of the measured event.

Example:
    probe = Probe(window_size=60)

    # once per frame
    probe.start_cycle()
    probe.push_event("physics")
    world.update(dt)
    probe.pop_event()
    with probe.section("draw"):
        world.draw()
    probe.end_cycle()

    snap = probe.snapshot()
    print(f"frame: {snap.total_ms:.3f} ms")
"""
from __future__ import annotations
import logging
from contextlib import contextmanager
from typing import Callable, Iterator

from .config import DEFAULT_WINDOW_SIZE, ProbeConfig
from .errors import (
    ConcurrentSnapshot,
    DoubleStart,
    EndWithoutStart,
    PopWithoutCycle,
    PushWithoutCycle,
    StackNotDrained,
    StackUnderflow,
)
from .types import ROOT_EVENT, EventKey, EventRecord, Snapshot
from .window import SlidingWindow

logger = logging.getLogger(__name__)


class Probe:
    """
    Exclusive-time profiler for one logical stream of cycles.

    Create one probe per measured phase (e.g. one for update, one for draw).
    Probes are independent of each other and are meant to be driven from a
    single thread.

    Attributes:
        window: SlidingWindow holding the finished cycles.
        event_names: Display labels by event key, used by renderers.
    """

    def __init__(
        self,
        window_size: int | None = None,
        clock: Callable[[], float] | None = None,
        config: ProbeConfig | None = None,
    ) -> None:
        """
        Args:
            window_size: Number of cycles to average over. Overrides config.
            clock: Monotonic clock in seconds. Overrides config.
            config: Base settings (defaults to ProbeConfig()).
        """
        cfg = config or ProbeConfig()
        if window_size is None:
            window_size = cfg.window_size
        self._now = clock or cfg.clock
        self.window = SlidingWindow(window_size)
        self.event_names: dict[EventKey, str] = {}

        self._events: dict[EventKey, EventRecord] = {}
        self._stack: list[EventRecord] = []
        self._keys: list[EventKey] = []
        self._delta = 0.0
        self._cycle_started = False
        self._cycles = 0
        logger.debug("Created probe with a %d-cycle window", window_size)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def cycle_active(self) -> bool:
        return self._cycle_started

    @property
    def depth(self) -> int:
        """Number of pushed events open above the root."""
        return max(0, len(self._stack) - 1)

    @property
    def window_size(self) -> int:
        return self.window.capacity

    @property
    def cycles_folded(self) -> int:
        """Number of cycles completed since the probe was created."""
        return self._cycles

    def is_warming_up(self) -> bool:
        return self.window.is_warming_up()

    # -------------------------------------------------------------------------
    # Labels
    # -------------------------------------------------------------------------

    def name_event(self, key: EventKey, label: str) -> None:
        """Associate a human-readable label with an event key."""
        self.event_names[key] = label

    def label(self, key: EventKey) -> str:
        return self.event_names.get(key) or str(key)

    # -------------------------------------------------------------------------
    # Cycle and stack operations
    # -------------------------------------------------------------------------

    def _pause_top(self, time: float) -> None:
        top = self._stack[-1]
        dt = time - top.running_since
        top.time += dt
        top.running_since = None
        self._delta += dt

    def _find(self, key: EventKey) -> EventRecord:
        event = self._events.get(key)
        if event is None:
            event = EventRecord()
            self._events[key] = event
        return event

    def start_cycle(self) -> None:
        """
        Start a profiling cycle. Call at the start of each frame.

        Raises:
            DoubleStart: If the previous cycle has not been ended.
        """
        if self._cycle_started:
            raise DoubleStart("current cycle not ended yet")
        self._events = {}
        self._stack = []
        self._keys = []
        self._delta = 0.0
        self._cycle_started = True
        self.push_event(ROOT_EVENT)

    def push_event(self, key: EventKey) -> None:
        """
        Pause the current event and start timing `key`.

        Pushing a key that already ran this cycle (or is further down the
        stack) resumes accumulating into the same record.

        Raises:
            PushWithoutCycle: If no cycle is active.
        """
        time = self._now()
        if not self._cycle_started:
            raise PushWithoutCycle("start a cycle before profiling")
        if self._stack:
            self._pause_top(time)
        event = self._find(key)
        self._stack.append(event)
        self._keys.append(key)
        event.count += 1
        event.running_since = self._now()

    def pop_event(self) -> None:
        """
        Stop timing the current event and resume the one underneath.

        Raises:
            PopWithoutCycle: If no cycle is active.
            StackUnderflow: If only the root event is left.
        """
        time = self._now()
        if not self._cycle_started:
            raise PopWithoutCycle("start a cycle before profiling")
        if len(self._stack) < 2:
            raise StackUnderflow("event stack underflow - can't pop root")
        self._pause_top(time)
        self._stack.pop()
        self._keys.pop()
        self._stack[-1].running_since = self._now()

    def end_cycle(self) -> None:
        """
        End the current cycle and fold it into the sliding window.

        All pushed events must have been popped. Call at the end of each
        frame, before reading statistics.

        Raises:
            EndWithoutStart: If no cycle is active.
            StackNotDrained: If events other than the root are still open.
        """
        time = self._now()
        if not self._cycle_started:
            raise EndWithoutStart("no cycle started yet")
        if len(self._stack) != 1:
            open_events = ", ".join(self.label(k) for k in self._keys[1:])
            raise StackNotDrained(
                f"all events (except root) must be finished before ending a cycle; "
                f"still open: {open_events}"
            )
        self._pause_top(time)
        self._cycle_started = False
        self.window.fold(self._events, self._delta)
        self._cycles += 1

        self._events = {}
        self._stack = []
        self._keys = []
        self._delta = 0.0

    @contextmanager
    def section(self, key: EventKey) -> Iterator[None]:
        """
        Time the enclosed block as event `key`.

        The event is popped even if the block raises.
        """
        self.push_event(key)
        try:
            yield
        finally:
            self.pop_event()

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    def snapshot(self) -> Snapshot:
        """
        Averages over the sliding window. Only valid outside a cycle.

        Raises:
            ConcurrentSnapshot: If a cycle is active.
        """
        if self._cycle_started:
            raise ConcurrentSnapshot("can't read the profile while a cycle is active")
        return self.window.snapshot(untracked_key=ROOT_EVENT)


def create(window_size: int = DEFAULT_WINDOW_SIZE, clock: Callable[[], float] | None = None) -> Probe:
    """Create a probe averaging over `window_size` cycles."""
    return Probe(window_size=window_size, clock=clock)
