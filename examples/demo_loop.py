"""
Demo loop with two probes: one for the update phase, one for the draw phase.

The planet and the fan are profiled through hooks, without touching their
code; the satellite group and the fan add fine-grained events by hand.
Drawing is faked with numpy work so the demo runs headless.

Run:
  python examples/demo_loop.py
"""
import logging
import time

import numpy as np

from frameprobe import Probe, HookRegistry
from frameprobe.renderer import TextRenderer

# Update and draw get their own probe. 60 cycles keeps the breakdown legible
# without lagging too far behind the game.
draw_probe = Probe(window_size=60)
update_probe = Probe(window_size=60)

canvas = np.zeros((600, 800), dtype=np.float32)


class Planet:
    def __init__(self):
        self.x, self.y, self.r = 400.0, 300.0, 100.0

    def update(self, dt):
        t = time.perf_counter()
        self.x += np.cos(t) * dt * 100
        self.y += np.sin(t) * dt * 100

    def draw(self):
        yy, xx = np.ogrid[:600, :800]
        for i in range(10):
            mask = (xx - self.x) ** 2 + (yy - self.y) ** 2 < (self.r - 3 * i) ** 2
            canvas[mask] += 0.01 * i


class SatGroup:
    NSATS = 40

    def __init__(self, planet):
        self.planet = planet
        self.sats = []

    def update(self, dt):
        t = 3 * time.perf_counter()
        th = (np.arange(self.NSATS) * 2 * np.pi / self.NSATS + t) % (2 * np.pi)
        self.sats = [
            (self.planet.x + 100 * np.sin(a), self.planet.y + 3 * i, a < np.pi / 2 or a > 3 * np.pi / 2)
            for i, a in enumerate(th)
        ]

    def draw(self, above=True):
        for x, y, is_above in self.sats:
            if is_above == above:
                # charged to "unique sat" instead of the hooked satgroup event
                draw_probe.push_event("unique sat")
                canvas[int(y) % 600, int(x) % 800] = 1.0
                draw_probe.pop_event()


class Fan:
    def __init__(self):
        self.count = 1

    def update(self, dt):
        self.count = abs(1 - np.sin(time.perf_counter())) * 50

    def draw(self):
        draw_probe.push_event("fan matrix transform")
        m = np.eye(3)
        rot = np.array([[np.cos(0.06), -np.sin(0.06), 0], [np.sin(0.06), np.cos(0.06), 0], [0, 0, 1]])
        for _ in range(int(np.ceil(self.count))):
            with draw_probe.section("fan square"):
                corners = m @ np.array([[0, 128, 128, 0], [0, 0, 128, 128], [1, 1, 1, 1]])
                canvas[corners[1].astype(int) % 600, corners[0].astype(int) % 800] += 0.1
            m = m @ rot
        draw_probe.pop_event()


def main(frames: int = 300) -> None:
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    planet = Planet()
    satgroup = SatGroup(planet)
    fan = Fan()
    entities = {"planet": planet, "satgroup": satgroup, "fan": fan}

    draw_hooks = HookRegistry(draw_probe)
    update_hooks = HookRegistry(update_probe)
    draw_hooks.hook_all(entities, "draw")
    update_hooks.hook_all(entities, "update")

    renderer = TextRenderer()
    dt = 1 / 60
    for frame in range(frames):
        update_probe.start_cycle()
        for e in entities.values():
            e.update(dt)
        update_probe.end_cycle()

        draw_probe.start_cycle()
        canvas.fill(0.0)
        satgroup.draw(above=False)
        planet.draw()
        satgroup.draw(above=True)
        fan.draw()
        draw_probe.end_cycle()

        if frame % 100 == 99:
            renderer.draw_profile(update_probe, title="update")
            renderer.draw_profile(draw_probe, title="draw")

    draw_hooks.unhook_all()
    update_hooks.unhook_all()


if __name__ == "__main__":
    main()
