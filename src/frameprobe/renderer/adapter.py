# MIT License (see LICENSE)
"""
Renderer adapters for the profile breakdown.

This module provides an abstract base class exposing the few drawing
primitives the breakdown needs, plus concrete implementations. The profiler
core has no rendering dependency - hook your game's graphics backend in by
subclassing ProfileRenderer.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, TextIO
import sys

from .layout import layout_bars

if TYPE_CHECKING:
    from ..probe import Probe


class ProfileRenderer(ABC):
    """
    Abstract base class for renderer implementations.

    Subclasses implement the drawing primitives for a graphics backend
    (pygame, pyglet, a web frontend, ...). Coordinates grow downwards.

    Usage:
        renderer = MyRenderer()
        probe.end_cycle()
        renderer.draw_profile(probe, 10, 20, 200, 400, "draw")
    """

    font_height: float = 1.0

    @abstractmethod
    def rectangle(self, x: float, y: float, w: float, h: float) -> None:
        """Draw an outlined rectangle."""
        ...

    @abstractmethod
    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        """Draw a line segment."""
        ...

    @abstractmethod
    def text(self, s: str, x: float, y: float, scale_y: float = 1.0) -> None:
        """
        Draw (possibly multi-line) text.

        Args:
            s: Text to draw.
            x, y: Position of the first line's top-left corner.
            scale_y: Vertical scale factor, shrinks text in thin bands.
        """
        ...

    def draw_profile(self, probe: "Probe", x: float, y: float, w: float, h: float, title: str) -> None:
        """
        Draw the sliding-window breakdown of `probe` inside a box.

        Can only be called outside of a cycle.

        Args:
            probe: Profiler to visualize.
            x, y, w, h: Box receiving the bands.
            title: Caption drawn above the box.

        Raises:
            ConcurrentSnapshot: If the probe is in the middle of a cycle.
        """
        snap = probe.snapshot()
        fh = self.font_height

        self.rectangle(x, y, w, h)

        if snap.warming_up:
            self.text(f"{title}\nwarming up...", x, y - fh)
            return

        total = snap.total
        self.text(f"{title}: {1e3 * total:.3f} ms", x, y - fh)

        for bar in layout_bars(snap, probe.label, h):
            bottom = y + bar.y + bar.height
            self.line(x, bottom, x + w, bottom)
            s = f"{bar.count:.0f}x {bar.label}\n{bar.time_ms:.3f} ms ({100 * bar.share:.1f} %)"
            self.text(s, x + 5, y + bar.y + bar.height / 2 - fh, min(1.0, bar.height / (2 * fh)))


class TextRenderer(ProfileRenderer):
    """
    Console/text renderer for development and testing.

    Ignores geometry and writes the breakdown's text to a stream (stdout by
    default). Useful for headless runs without graphics dependencies.

    Output:
        draw: 2.481 ms
        40x unique sat
        0.912 ms (36.8 %)
        ...
    """

    def __init__(self, output: TextIO | None = None):
        """
        Args:
            output: Output stream (defaults to sys.stdout).
        """
        self.output = output or sys.stdout

    def rectangle(self, x: float, y: float, w: float, h: float) -> None:
        pass

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        pass

    def text(self, s: str, x: float, y: float, scale_y: float = 1.0) -> None:
        self.output.write(s + "\n")

    def draw_profile(self, probe: "Probe", x: float = 0.0, y: float = 0.0, w: float = 1.0, h: float = 1.0, title: str = "profile") -> None:
        super().draw_profile(probe, x, y, w, h, title)
        self.output.write("\n")
        self.output.flush()


class NullRenderer(ProfileRenderer):
    """
    No-op renderer that does nothing.

    Useful as a placeholder or for measuring a loop without drawing overhead.
    """

    def rectangle(self, x: float, y: float, w: float, h: float) -> None:
        pass

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        pass

    def text(self, s: str, x: float, y: float, scale_y: float = 1.0) -> None:
        pass


class BufferedRenderer(ProfileRenderer):
    """
    Renderer that records primitive calls for later retrieval.

    Each call is stored as a tuple ("rectangle" | "line" | "text", *args),
    useful for replaying on another backend or inspecting in tests.

    Example:
        renderer = BufferedRenderer()
        renderer.draw_profile(probe, 0, 20, 200, 400, "update")
        texts = [c[1] for c in renderer.commands if c[0] == "text"]
    """

    def __init__(self, font_height: float = 12.0):
        self.font_height = font_height
        self.commands: list[tuple] = []

    def rectangle(self, x: float, y: float, w: float, h: float) -> None:
        self.commands.append(("rectangle", x, y, w, h))

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self.commands.append(("line", x1, y1, x2, y2))

    def text(self, s: str, x: float, y: float, scale_y: float = 1.0) -> None:
        self.commands.append(("text", s, x, y, scale_y))

    def clear(self) -> None:
        """Clear all recorded commands."""
        self.commands.clear()
