# examples/minimal_frame.py
import time

from frameprobe import Probe
from frameprobe.renderer import TextRenderer

probe = Probe(window_size=30)

for frame in range(30):
    probe.start_cycle()
    with probe.section("update"):
        time.sleep(0.002)
    with probe.section("draw"):
        time.sleep(0.001)
    probe.end_cycle()

TextRenderer().draw_profile(probe, title="frame")
