# MIT License (see LICENSE)
"""
frameprobe - A sliding-window frame profiler for game loops.

This package times named code sections ("events") during repeated cycles,
attributes exclusive time to the innermost running event, and averages the
results over the last N cycles for a stable on-screen breakdown.

Main entry points:
    - Probe: Event stack timer with its sliding window.
    - create: Factory for a Probe with a given window size.
    - HookRegistry: Profile existing callables without editing call sites.
    - Snapshot: Read-only averages handed to visualization.

Submodules:
    - errors: Usage violations (mismatched start/end or push/pop).
    - window: Incrementally averaged circular buffer of cycles.
    - invariants: Direct recomputation helpers for verification.
    - renderer: Bar layout and renderer adapters.

Example:
    from frameprobe import Probe

    probe = Probe(window_size=60)
    probe.start_cycle()
    with probe.section("physics"):
        world.update(dt)
    probe.end_cycle()
    print(probe.snapshot().total_ms)
"""
from .probe import Probe, create
from .window import SlidingWindow
from .hooks import HookRegistry
from .config import ProbeConfig
from .types import EventRecord, EventAverage, Snapshot
from .errors import (
    ProbeUsageError,
    DoubleStart,
    EndWithoutStart,
    StackNotDrained,
    PushWithoutCycle,
    PopWithoutCycle,
    StackUnderflow,
    ConcurrentSnapshot,
)

__all__ = [
    # Core
    "Probe",
    "create",
    "SlidingWindow",
    "HookRegistry",
    "ProbeConfig",
    # Types
    "EventRecord",
    "EventAverage",
    "Snapshot",
    # Errors
    "ProbeUsageError",
    "DoubleStart",
    "EndWithoutStart",
    "StackNotDrained",
    "PushWithoutCycle",
    "PopWithoutCycle",
    "StackUnderflow",
    "ConcurrentSnapshot",
]
