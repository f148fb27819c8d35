"""Simulation session: scenario + car + controls, advanced once per frame."""

from typing import Iterable, Optional, Tuple, Union

import numpy as np

from parksim.car_model import (PICANTO_CONFIG, Car, ControlCommand,
                               VehicleGeometry, get_config)
from parksim.controls import Controls
from parksim.scenarios import SCENARIOS, Scenario, get_scenario

FPS = 60
DT = 1.0 / FPS
MAX_DT = 0.1            # s  cap for frame hitches / backgrounded windows


class ParkingSimulator:
    """One player car driving inside one scenario.

    The caller owns the frame loop and hands ``tick`` the elapsed time.
    """

    def __init__(self, width: float, height: float, scenario: Union[str, Scenario] = "free",
                 difficulty: str = "medium", geometry: VehicleGeometry = PICANTO_CONFIG,
                 rng: Optional[np.random.Generator] = None):
        self.width = width
        self.height = height
        self.difficulty = difficulty
        self.rng = rng if rng is not None else np.random.default_rng()
        self.controls = Controls()
        self.scenario_name = "custom"
        self.scenario = self._build_scenario(scenario, difficulty)
        start = self.scenario.car_start
        self.car = Car(start.x, start.y, start.heading, geometry)
        self.elapsed = 0.0

    def _build_scenario(self, scenario, difficulty) -> Scenario:
        if isinstance(scenario, Scenario):
            self.scenario_name = "custom"
            return scenario
        self.scenario_name = scenario if scenario in SCENARIOS else "free"
        return get_scenario(scenario, self.width, self.height, difficulty, rng=self.rng)

    # ---- session control ----

    def load_scenario(self, scenario: Union[str, Scenario], difficulty: Optional[str] = None):
        if difficulty is not None:
            self.difficulty = difficulty
        self.scenario = self._build_scenario(scenario, self.difficulty)
        self.reset()

    def reset(self):
        start = self.scenario.car_start
        self.car.reset(start.x, start.y, start.heading)
        self.controls.reset_steering()
        self.elapsed = 0.0

    def select_car(self, geometry: Union[str, VehicleGeometry]):
        """Switch vehicle preset in place; old trails no longer match and are dropped."""
        if isinstance(geometry, str):
            geometry = get_config(geometry)
        self.car.set_geometry(geometry, clear_trails=True)

    # ---- stepping ----

    def tick(self, dt: float, command: Optional[ControlCommand] = None):
        """Advance one frame; ``command`` defaults to the current controls."""
        dt = min(dt, MAX_DT)
        if command is None:
            command = self.controls.get_input()
        self.car.update(dt, command)
        self._keep_in_bounds()
        self.elapsed += dt

    def _keep_in_bounds(self):
        """Push the car back so every body corner lies inside the bounds."""
        bounds = self.scenario.bounds
        if bounds is None:
            return
        corners = np.array(self.car.corners())
        lo = corners.min(axis=0)
        hi = corners.max(axis=0)
        shift = (np.maximum([bounds.min_x, bounds.min_y] - lo, 0.0)
                 - np.maximum(hi - [bounds.max_x, bounds.max_y], 0.0))
        if shift.any():
            self.car.state.rear_axle_x += float(shift[0])
            self.car.state.rear_axle_y += float(shift[1])

    def is_parked(self) -> bool:
        return self.scenario.is_parked(self.car)

    def run_commands(self, segments: Iterable[Tuple[ControlCommand, float]],
                     dt: float = DT) -> np.ndarray:
        """Drive scripted ``(command, seconds)`` segments.

        Returns an Nx5 array (center_x, center_y, heading, velocity,
        steering_angle), starting with the pose before the first tick.
        """
        rows = [self._record()]
        for command, seconds in segments:
            steps = int(round(seconds / dt))
            for _ in range(steps):
                self.tick(dt, command)
                rows.append(self._record())
        return np.array(rows)

    def _record(self):
        cx, cy = self.car.center()
        s = self.car.state
        return (cx, cy, s.heading, s.velocity, s.steering_angle)
