# MIT License (see LICENSE)
"""
Profiler configuration.

A ProbeConfig bundles the settings a Probe is built from. Values can be
overridden from the environment, which is handy for tuning the window size
of an instrumented game without touching its code:

    FRAMEPROBE_WINDOW_SIZE=120 python game.py
"""
from __future__ import annotations
import os
import time
from dataclasses import dataclass, replace
from typing import Callable

# Around one second of frames at 60 fps. Fewer cycles make the breakdown too
# jittery to read; more make it lag behind what the game is doing.
DEFAULT_WINDOW_SIZE: int = 60

ENV_WINDOW_SIZE = "FRAMEPROBE_WINDOW_SIZE"


@dataclass(frozen=True)
class ProbeConfig:
    """
    Settings for a Probe.

    Attributes:
        window_size: Number of past cycles averaged by the sliding window.
        clock: Monotonic clock returning seconds as a float. Sampled at every
               cycle and event boundary.
    """
    window_size: int = DEFAULT_WINDOW_SIZE
    clock: Callable[[], float] = time.perf_counter

    def __post_init__(self) -> None:
        if self.window_size < 1:
            raise ValueError(f"window_size must be >= 1, got {self.window_size}")

    @classmethod
    def from_env(cls, **overrides) -> "ProbeConfig":
        """
        Build a config from environment variables.

        Keyword overrides take precedence over the environment.
        """
        cfg = cls()
        raw = os.environ.get(ENV_WINDOW_SIZE)
        if raw is not None:
            try:
                size = int(raw)
            except ValueError:
                raise ValueError(f"{ENV_WINDOW_SIZE} must be an integer, got {raw!r}") from None
            cfg = replace(cfg, window_size=size)
        if overrides:
            cfg = replace(cfg, **overrides)
        return cfg
