"""Interactive matplotlib window: drive the car with the keyboard.

Keys
----
up / down          forward / reverse while held
a s d f g          hard left, half left, straight, half right, hard right
r                  reset to the scenario start
c                  clear wheel trails
1 2 3              Picanto, SUV, Staria
"""

import time

import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation

from parksim import renderer
from parksim.simulator import DT, FPS

CAR_KEYS = {"1": "picanto", "2": "suv", "3": "staria"}
APP_KEYS = ("up", "down", "a", "s", "d", "f", "g", "r", "c") + tuple(CAR_KEYS)


def release_default_keymap(keys=APP_KEYS):
    """Remove matplotlib's default bindings (save, grid, home, ...) for our keys."""
    for name in list(plt.rcParams):
        if name.startswith("keymap."):
            plt.rcParams[name] = [k for k in plt.rcParams[name] if k not in keys]


class ParkingApp:
    def __init__(self, sim, figsize=(12, 8), show_front_trails=True):
        self.sim = sim
        self.show_front_trails = show_front_trails
        self.fig, self.ax = renderer.new_axes(sim.width, sim.height, figsize)
        self.fig.canvas.mpl_connect("key_press_event", self.on_key_press)
        self.fig.canvas.mpl_connect("key_release_event", self.on_key_release)
        self._last_time = None
        self._anim = None

    def on_key_press(self, event):
        key = (event.key or "").lower()
        if key == "r":
            self.sim.reset()
        elif key == "c":
            self.sim.car.clear_trails()
        elif key in CAR_KEYS:
            self.sim.select_car(CAR_KEYS[key])
        else:
            self.sim.controls.key_down(key)

    def on_key_release(self, event):
        self.sim.controls.key_up((event.key or "").lower())

    def step(self, _frame=None):
        now = time.perf_counter()
        dt = DT if self._last_time is None else now - self._last_time
        self._last_time = now
        self.sim.tick(dt)
        renderer.draw_frame(self.ax, self.sim.scenario, self.sim.car,
                            self.sim.width, self.sim.height, self.show_front_trails)
        if self.sim.is_parked():
            self.ax.set_title(self.ax.get_title() + "  |  PARKED", color="green")
        return []

    def run(self):
        release_default_keymap()
        self._anim = FuncAnimation(self.fig, self.step, interval=1000.0 / FPS,
                                   cache_frame_data=False)
        plt.show()
