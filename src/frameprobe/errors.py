# MIT License (see LICENSE)
"""
Usage violations raised by the profiler.

Every error here means the instrumented host code broke the cycle or stack
discipline (unmatched start/end or push/pop). They are raised before the
offending call mutates any state and are never caught inside the library.
"""
from __future__ import annotations


class ProbeUsageError(RuntimeError):
    """Base class for all cycle/stack discipline violations."""


class DoubleStart(ProbeUsageError):
    """start_cycle() called while a cycle is already active."""


class EndWithoutStart(ProbeUsageError):
    """end_cycle() called with no active cycle."""


class StackNotDrained(ProbeUsageError):
    """end_cycle() called while pushed events are still open."""


class PushWithoutCycle(ProbeUsageError):
    """push_event() called outside an active cycle."""


class PopWithoutCycle(ProbeUsageError):
    """pop_event() called outside an active cycle."""


class StackUnderflow(ProbeUsageError):
    """pop_event() called with only the root event left on the stack."""


class ConcurrentSnapshot(ProbeUsageError):
    """Statistics requested while a cycle is still being measured."""
