"""
Microbenchmark: profiler overhead per push/pop pair vs window size.
Run:
  python benchmarks/bench_overhead.py
"""
import time
import numpy as np
from frameprobe import Probe

def run(window: int, events_per_cycle: int = 1000, cycles: int = 200):
    probe = Probe(window_size=window)
    keys = [f"event {i % 20}" for i in range(events_per_cycle)]

    # warmup
    for _ in range(window):
        probe.start_cycle()
        probe.end_cycle()

    per_pair = np.empty(cycles)
    fold = np.empty(cycles)
    for c in range(cycles):
        t0 = time.perf_counter()
        probe.start_cycle()
        for k in keys:
            probe.push_event(k)
            probe.pop_event()
        t1 = time.perf_counter()
        probe.end_cycle()
        t2 = time.perf_counter()
        per_pair[c] = (t1 - t0) / events_per_cycle
        fold[c] = t2 - t1

    return float(np.median(per_pair)), float(np.median(fold)), probe.snapshot()

if __name__ == "__main__":
    for w in [1, 10, 60, 600]:
        pair, fold, snap = run(w)
        print(f"W={w:4d}  push+pop={1e6*pair:7.3f} us  end_cycle={1e6*fold:8.3f} us  "
              f"avg cycle={snap.total_ms:8.3f} ms")
