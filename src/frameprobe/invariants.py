# MIT License (see LICENSE)
"""
Direct recomputation of the quantities the profiler maintains incrementally.

Used for verifying profiler correctness and for debugging drift:
- The exclusive times of a finished cycle must add up to its total.
- The sliding window's running averages must equal the plain mean of the
  cycles it holds (missing keys count as zero, empty slots count as zero
  cycles until the window has been filled).
"""
from __future__ import annotations
from typing import Mapping

import numpy as np

from .types import EventKey, EventRecord
from .window import SlidingWindow


def exclusive_sum(events: Mapping[EventKey, EventRecord]) -> float:
    """
    Sum of exclusive times over all records of one cycle.

    For a finished cycle this equals the cycle total (Σ self time = wall time).
    """
    if not events:
        return 0.0
    return float(np.sum([ev.time for ev in events.values()]))


def direct_means(window: SlidingWindow) -> tuple[float, dict[EventKey, tuple[float, float]]]:
    """
    Recompute the window averages from the held cycles in O(N·events).

    Args:
        window: The sliding window to inspect.

    Returns:
        (mean total, {key: (mean time, mean count)}) with every mean taken
        over the window capacity.
    """
    slots = list(window.slots())
    w = window.capacity
    totals = np.array([total for _, total in slots], dtype=np.float64)
    mean_total = float(totals.sum() / w)

    keys: dict[EventKey, None] = {}
    for events, _ in slots:
        keys.update(dict.fromkeys(events))

    out = {}
    for k in keys:
        times = np.array([events[k].time if k in events else 0.0 for events, _ in slots], dtype=np.float64)
        counts = np.array([events[k].count if k in events else 0 for events, _ in slots], dtype=np.float64)
        out[k] = (float(times.sum() / w), float(counts.sum() / w))
    return mean_total, out


def max_drift(window: SlidingWindow) -> float:
    """
    Largest absolute difference between incremental and direct averages.

    Covers the cycle total and every event's time and count.
    """
    mean_total, means = direct_means(window)
    drift = abs(window.total - mean_total)
    for k, (t, c) in means.items():
        avg = window.average(k)
        drift = max(drift, abs(avg.time - t), abs(avg.count - c))
    # keys still averaged but absent from every held cycle
    for k in window.keys():
        if k not in means:
            avg = window.average(k)
            drift = max(drift, abs(avg.time), abs(avg.count))
    return drift
