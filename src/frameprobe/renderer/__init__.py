# MIT License (see LICENSE)
"""
Visualization of profiler statistics.

This subpackage provides the bar layout and renderer implementations:
    - layout_bars: Computes one band per event from a Snapshot.
    - ProfileRenderer: Abstract base class defining the drawing primitives.
    - TextRenderer: Text/console output for debugging.
    - NullRenderer: No-op renderer.
    - BufferedRenderer: Records draw commands for replay or inspection.

The profiler core has no rendering dependency; these adapters are optional.

Typical usage:
    from frameprobe.renderer import TextRenderer

    renderer = TextRenderer()
    renderer.draw_profile(probe, title="draw")
"""
from .layout import Bar, layout_bars, UNTRACKED_LABEL
from .adapter import (
    ProfileRenderer,
    TextRenderer,
    NullRenderer,
    BufferedRenderer,
)

__all__ = [
    "Bar",
    "layout_bars",
    "UNTRACKED_LABEL",
    "ProfileRenderer",
    "TextRenderer",
    "NullRenderer",
    "BufferedRenderer",
]
