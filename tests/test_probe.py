import time

import pytest
from frameprobe import (
    Probe,
    create,
    ProbeConfig,
    DoubleStart,
    EndWithoutStart,
    StackNotDrained,
    PushWithoutCycle,
    PopWithoutCycle,
    StackUnderflow,
    ConcurrentSnapshot,
    ProbeUsageError,
)
from frameprobe.invariants import exclusive_sum
from frameprobe.types import ROOT_EVENT


def run_nested_cycle(probe, clock):
    """
    root 1ms | a 2ms | b 3ms | a 1ms | root 0.5ms | b 4ms | root 0.5ms
    """
    probe.start_cycle()
    clock.advance(1e-3)
    probe.push_event("a")
    clock.advance(2e-3)
    probe.push_event("b")
    clock.advance(3e-3)
    probe.pop_event()
    clock.advance(1e-3)
    probe.pop_event()
    clock.advance(0.5e-3)
    probe.push_event("b")
    clock.advance(4e-3)
    probe.pop_event()
    clock.advance(0.5e-3)
    probe.end_cycle()


def last_cycle(probe):
    """Events and total of the most recently folded cycle."""
    return list(probe.window.slots())[-1]


def test_exclusive_time_attribution(clock):
    """Each interval is charged only to the event on top of the stack."""
    probe = Probe(window_size=1, clock=clock)
    run_nested_cycle(probe, clock)

    events, total = last_cycle(probe)
    assert events["a"].time == pytest.approx(3e-3)
    assert events["b"].time == pytest.approx(7e-3)
    assert events[ROOT_EVENT].time == pytest.approx(2e-3)
    assert total == pytest.approx(12e-3)


def test_exclusivity_sum_equals_wall_time(clock):
    """Σ exclusive time over all events == time between start and end."""
    probe = Probe(window_size=4, clock=clock)
    t0 = clock.t
    run_nested_cycle(probe, clock)
    wall = clock.t - t0

    events, total = last_cycle(probe)
    assert exclusive_sum(events) == pytest.approx(total, abs=1e-12)
    assert total == pytest.approx(wall, abs=1e-12)


def test_exclusivity_sum_with_real_clock():
    """With the default clock the sum still matches the measured total."""
    probe = Probe(window_size=2)
    probe.start_cycle()
    for i in range(20):
        probe.push_event("outer")
        probe.push_event(i % 3)
        sum(range(200))
        probe.pop_event()
        probe.pop_event()
    probe.end_cycle()

    events, total = last_cycle(probe)
    assert total > 0.0
    assert exclusive_sum(events) == pytest.approx(total, rel=1e-9)


def test_invocation_counts(clock):
    """count equals the number of push_event(key) calls in the cycle."""
    probe = Probe(window_size=1, clock=clock)
    probe.start_cycle()
    for _ in range(5):
        with probe.section("square"):
            clock.advance(1e-4)
    probe.push_event("transform")
    for _ in range(3):
        probe.push_event("square")
        probe.pop_event()
    probe.pop_event()
    probe.end_cycle()

    events, _ = last_cycle(probe)
    assert events["square"].count == 8
    assert events["transform"].count == 1
    assert events[ROOT_EVENT].count == 1


def test_reentrant_key_shares_record(clock):
    """Pushing a key already on the stack accumulates into the same record."""
    probe = Probe(window_size=1, clock=clock)

    def recurse(n):
        probe.push_event("fib")
        clock.advance(1e-3)
        if n > 0:
            recurse(n - 1)
        probe.pop_event()

    probe.start_cycle()
    recurse(3)
    probe.end_cycle()

    events, total = last_cycle(probe)
    assert events["fib"].count == 4
    assert events["fib"].time == pytest.approx(4e-3)
    assert total == pytest.approx(4e-3)


def test_bookkeeping_not_charged(tick_clock):
    """
    The clock is re-read after the record lookup in push_event(), so each
    charged interval spans exactly one clock read.
    """
    probe = Probe(window_size=1, clock=tick_clock)
    probe.start_cycle()
    probe.push_event("a")
    probe.pop_event()
    probe.end_cycle()

    events, total = last_cycle(probe)
    assert events["a"].time == 1.0
    assert events[ROOT_EVENT].time == 2.0
    assert total == 3.0


def test_root_hidden_from_snapshot(clock):
    """The root event shows up only as untracked time."""
    probe = Probe(window_size=1, clock=clock)
    run_nested_cycle(probe, clock)

    snap = probe.snapshot()
    assert not snap.warming_up
    assert set(snap.per_event) == {"a", "b"}
    assert ROOT_EVENT not in snap.per_event
    assert snap.untracked == pytest.approx(2e-3)
    assert snap.untracked_count == pytest.approx(1.0)
    assert snap.total == pytest.approx(snap.untracked + sum(e.time for e in snap.per_event.values()))


def test_snapshot_is_read_only(clock):
    probe = Probe(window_size=1, clock=clock)
    run_nested_cycle(probe, clock)
    snap = probe.snapshot()
    with pytest.raises(TypeError):
        snap.per_event["a"] = None
    assert probe.snapshot() == snap


def test_double_start():
    probe = Probe()
    probe.start_cycle()
    with pytest.raises(DoubleStart):
        probe.start_cycle()


def test_end_without_start():
    probe = Probe()
    with pytest.raises(EndWithoutStart):
        probe.end_cycle()


def test_end_with_open_events():
    """Unmatched pushes are reported, naming the events still open."""
    probe = Probe()
    probe.name_event("fan", "fan.draw()")
    probe.start_cycle()
    probe.push_event("fan")
    with pytest.raises(StackNotDrained, match=r"fan\.draw\(\)"):
        probe.end_cycle()
    assert probe.cycle_active
    assert probe.depth == 1


def test_push_pop_outside_cycle():
    probe = Probe()
    with pytest.raises(PushWithoutCycle):
        probe.push_event("x")
    with pytest.raises(PopWithoutCycle):
        probe.pop_event()


def test_pop_root_underflow(clock):
    """Popping the root fails and leaves the cycle intact."""
    probe = Probe(window_size=1, clock=clock)
    probe.start_cycle()
    with pytest.raises(StackUnderflow):
        probe.pop_event()
    clock.advance(1e-3)
    probe.end_cycle()
    assert probe.snapshot().total == pytest.approx(1e-3)


def test_snapshot_during_cycle():
    probe = Probe()
    probe.start_cycle()
    with pytest.raises(ConcurrentSnapshot):
        probe.snapshot()


def test_usage_errors_share_base():
    for exc in (DoubleStart, EndWithoutStart, StackNotDrained, PushWithoutCycle,
                PopWithoutCycle, StackUnderflow, ConcurrentSnapshot):
        assert issubclass(exc, ProbeUsageError)
        assert issubclass(exc, RuntimeError)


def test_section_pops_on_exception(clock):
    probe = Probe(window_size=1, clock=clock)
    probe.start_cycle()
    with pytest.raises(KeyError):
        with probe.section("lookup"):
            clock.advance(1e-3)
            {}["missing"]
    assert probe.depth == 0
    probe.end_cycle()
    assert probe.snapshot().per_event["lookup"].time == pytest.approx(1e-3)


def test_independent_probes(clock):
    """Probes for different phases do not share state."""
    update = create(window_size=2, clock=clock)
    draw = create(window_size=2, clock=clock)

    update.start_cycle()
    update.push_event("physics")
    clock.advance(2e-3)
    update.pop_event()
    update.end_cycle()

    draw.start_cycle()
    clock.advance(1e-3)
    draw.end_cycle()

    assert update.cycles_folded == 1
    assert draw.cycles_folded == 1
    assert "physics" in update.snapshot().per_event
    assert "physics" not in draw.snapshot().per_event


def test_window_size_from_config(monkeypatch):
    monkeypatch.setenv("FRAMEPROBE_WINDOW_SIZE", "120")
    assert Probe(config=ProbeConfig.from_env()).window_size == 120
    assert Probe(window_size=5, config=ProbeConfig.from_env()).window_size == 5
    assert create().window_size == 60


def test_invalid_window_size(monkeypatch):
    with pytest.raises(ValueError):
        Probe(window_size=0)
    with pytest.raises(ValueError):
        ProbeConfig(window_size=-1)
    monkeypatch.setenv("FRAMEPROBE_WINDOW_SIZE", "sixty")
    with pytest.raises(ValueError):
        ProbeConfig.from_env()


def test_default_clock_is_perf_counter():
    assert ProbeConfig().clock is time.perf_counter


def test_labels():
    probe = Probe()
    assert probe.label("fan square") == "fan square"
    probe.name_event(7, "satellite")
    assert probe.label(7) == "satellite"


if __name__ == "__main__":
    pytest.main([__file__])
