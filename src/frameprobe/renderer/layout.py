# MIT License (see LICENSE)
"""
Bar layout for the profile breakdown.

Turns a Snapshot into vertical bands, one per event, whose heights are
proportional to each event's share of the average cycle time. Pure numbers:
drawing is left to the renderer adapters.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable

from ..types import EventKey, Snapshot

UNTRACKED_LABEL = "(untracked)"


@dataclass(frozen=True)
class Bar:
    """
    One band of the breakdown.

    Attributes:
        key: Event key, or None for the untracked band.
        label: Display label.
        count: Average invocations per cycle.
        time: Average exclusive time per cycle in seconds.
        share: Fraction of the average cycle total, in [0, 1].
        y: Offset of the band's top edge from the top of the box.
        height: Height of the band.
    """
    key: EventKey | None
    label: str
    count: float
    time: float
    share: float
    y: float
    height: float

    @property
    def time_ms(self) -> float:
        return 1e3 * self.time


def layout_bars(
    snapshot: Snapshot,
    label: Callable[[EventKey], str] = str,
    height: float = 1.0,
) -> list[Bar]:
    """
    Stack one band per event from top to bottom, slowest event first.

    Args:
        snapshot: Averages to lay out.
        label: Maps an event key to its display label.
        height: Total height available for the bands.

    Returns:
        Bands in drawing order. Empty while the window is warming up or
        when no time was recorded.
    """
    total = snapshot.total
    if snapshot.warming_up or total <= 0.0:
        return []

    rows = sorted(snapshot.per_event.items(), key=lambda kv: kv[1].time, reverse=True)
    bars = []
    y = 0.0
    for k, avg in rows:
        share = avg.time / total
        dh = height * share
        bars.append(Bar(k, label(k), avg.count, avg.time, share, y, dh))
        y += dh

    if snapshot.untracked > 0.0:
        share = snapshot.untracked / total
        dh = height * share
        bars.append(Bar(None, UNTRACKED_LABEL, snapshot.untracked_count, snapshot.untracked, share, y, dh))
    return bars
