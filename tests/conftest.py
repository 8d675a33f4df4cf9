import pytest


class ManualClock:
    """Clock that only moves when told to, so timings are exact."""

    def __init__(self, t: float = 0.0):
        self.t = t
        self.calls = 0

    def __call__(self) -> float:
        self.calls += 1
        return self.t

    def advance(self, dt: float) -> None:
        self.t += dt


class TickClock:
    """Clock that advances by one unit on every read."""

    def __init__(self):
        self.t = -1.0

    def __call__(self) -> float:
        self.t += 1.0
        return self.t


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def tick_clock():
    return TickClock()
