"""Rear-axle bicycle-model kinematics for the player car.

The car is integrated about the REAR AXLE centre: the rear axle always moves
along the heading and the body pivots around the instantaneous centre of
rotation on the extended rear-axle line.  Velocity and steering angle are
commanded directly (no inertia); steering is only rate limited.

Rendering code works with the visual centre of the body, which sits
``length / 2 - rear_overhang`` ahead of the rear axle.
"""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple

import numpy as np

STEERING_RATE = 5.0        # rad/s  max change of the front-wheel angle
MOVING_EPSILON = 0.1       # px/s   below this the car does not move
STEERING_EPSILON = 0.001   # rad    below this the car drives straight
WHEEL_INSET = 5.0          # px     wheels sit this far inside the body sides

TWO_PI = 2.0 * math.pi


# ── vehicle profiles ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class VehicleGeometry:
    """Immutable vehicle profile (1 px ~ 3 cm)."""

    name: str
    length: float
    width: float
    wheelbase: float            # front-to-rear axle distance
    max_steering_angle: float   # rad, full lock
    speed: float                # constant forward/reverse speed magnitude
    rear_overhang: float        # rear axle to back bumper

    def __post_init__(self):
        for field_name in ("length", "width", "wheelbase",
                           "max_steering_angle", "speed"):
            value = getattr(self, field_name)
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"{field_name} must be a positive number, got {value!r}")
        if not math.isfinite(self.rear_overhang) or self.rear_overhang < 0:
            raise ValueError(f"rear_overhang must be >= 0, got {self.rear_overhang!r}")
        if self.wheelbase >= self.length:
            raise ValueError("wheelbase must be shorter than the car")
        if self.rear_overhang >= self.length:
            raise ValueError("rear_overhang must be shorter than the car")

    @property
    def center_offset(self) -> float:
        """Distance from the rear axle forward to the visual centre."""
        return self.length / 2.0 - self.rear_overhang


# Kia Picanto: 3595 x 1595 mm, wheelbase 2400 mm, rear overhang ~600 mm
PICANTO_CONFIG = VehicleGeometry(
    name="Kia Picanto",
    length=120, width=53, wheelbase=80,
    max_steering_angle=math.pi / 4,
    speed=60, rear_overhang=20,
)

# Mid-size SUV (Hyundai Tucson): 4500 x 1865 mm, wheelbase 2680 mm
SUV_CONFIG = VehicleGeometry(
    name="SUV",
    length=150, width=62, wheelbase=89,
    max_steering_angle=math.pi / 4.5,
    speed=60, rear_overhang=30,
)

# Hyundai Staria Load: 5253 x 1997 mm, wheelbase 3273 mm
STARIA_CONFIG = VehicleGeometry(
    name="Hyundai Staria",
    length=175, width=67, wheelbase=109,
    max_steering_angle=math.pi / 5,
    speed=60, rear_overhang=33,
)

CAR_CONFIGS: Dict[str, VehicleGeometry] = {
    "picanto": PICANTO_CONFIG,
    "suv": SUV_CONFIG,
    "staria": STARIA_CONFIG,
}


def get_config(name: str) -> VehicleGeometry:
    """Look up a vehicle preset by name. Raises KeyError if not found."""
    return CAR_CONFIGS[name]


# ── control input ─────────────────────────────────────────────────────────

class SteeringPosition(float, Enum):
    HARD_LEFT = -1.0
    HALF_LEFT = -0.5
    STRAIGHT = 0.0
    HALF_RIGHT = 0.5
    HARD_RIGHT = 1.0


class Movement(IntEnum):
    REVERSE = -1
    STOPPED = 0
    FORWARD = 1


@dataclass(frozen=True)
class ControlCommand:
    """One tick of quantised driver input.

    Plain numbers are accepted and coerced; anything outside the discrete
    sets raises ``ValueError``.
    """

    movement: Movement = Movement.STOPPED
    steering_position: SteeringPosition = SteeringPosition.STRAIGHT

    def __post_init__(self):
        object.__setattr__(self, "movement", Movement(self.movement))
        object.__setattr__(self, "steering_position",
                           SteeringPosition(self.steering_position))


# ── state ─────────────────────────────────────────────────────────────────

class VehicleState:
    """Mutable state of one car, positioned at the rear-axle centre."""
    __slots__ = ("rear_axle_x", "rear_axle_y", "heading",
                 "steering_angle", "velocity")

    def __init__(self, rear_axle_x: float, rear_axle_y: float, heading: float,
                 steering_angle: float = 0.0, velocity: float = 0.0):
        self.rear_axle_x = rear_axle_x
        self.rear_axle_y = rear_axle_y
        self.heading = heading
        self.steering_angle = steering_angle
        self.velocity = velocity

    def __repr__(self):
        return (f"VehicleState(rear_axle_x={self.rear_axle_x:.3f}, "
                f"rear_axle_y={self.rear_axle_y:.3f}, heading={self.heading:.4f}, "
                f"steering_angle={self.steering_angle:.4f}, velocity={self.velocity:.1f})")


class Wheel(NamedTuple):
    x: float
    y: float
    angle: float
    is_front: bool


WHEEL_NAMES = ("front_left", "front_right", "rear_left", "rear_right")


class WheelTrails:
    """Recorded contact points of the four wheels, oldest first.

    ``maxlen=None`` keeps every point; otherwise each trail drops its oldest
    points once it holds ``maxlen``.
    """

    def __init__(self, maxlen: Optional[int] = None):
        self.maxlen = maxlen
        self.front_left: deque = deque(maxlen=maxlen)
        self.front_right: deque = deque(maxlen=maxlen)
        self.rear_left: deque = deque(maxlen=maxlen)
        self.rear_right: deque = deque(maxlen=maxlen)

    def __len__(self):
        return len(self.front_left)

    def items(self) -> Iterator[Tuple[str, deque]]:
        for name in WHEEL_NAMES:
            yield name, getattr(self, name)

    def append(self, wheels: List[Wheel]):
        for name, wheel in zip(WHEEL_NAMES, wheels):
            getattr(self, name).append((wheel.x, wheel.y))

    def clear(self):
        for _, trail in self.items():
            trail.clear()

    def as_arrays(self) -> Dict[str, np.ndarray]:
        """Each trail as an (N, 2) array."""
        return {name: np.array(trail, dtype=np.float64).reshape(-1, 2)
                for name, trail in self.items()}


# ── car ───────────────────────────────────────────────────────────────────

class Car:
    """Player car: bicycle-model state, body geometry and wheel trails."""

    def __init__(self, center_x: float, center_y: float, heading: float = 0.0,
                 geometry: VehicleGeometry = PICANTO_CONFIG,
                 trail_maxlen: Optional[int] = None):
        self.geometry = geometry
        self.trails = WheelTrails(trail_maxlen)
        self.state = self._state_from_center(center_x, center_y, heading)

    def _state_from_center(self, center_x, center_y, heading) -> VehicleState:
        offset = self.geometry.center_offset
        return VehicleState(
            rear_axle_x=center_x - math.cos(heading) * offset,
            rear_axle_y=center_y - math.sin(heading) * offset,
            heading=normalize_heading(heading),
        )

    def set_geometry(self, geometry: VehicleGeometry, clear_trails: bool = False):
        """Swap the vehicle profile; the rear axle stays where it is."""
        self.geometry = geometry
        limit = geometry.max_steering_angle
        self.state.steering_angle = float(np.clip(self.state.steering_angle, -limit, limit))
        if abs(self.state.velocity) > geometry.speed:
            self.state.velocity = math.copysign(geometry.speed, self.state.velocity)
        if clear_trails:
            self.clear_trails()

    def reset(self, center_x: float, center_y: float, heading: float = 0.0):
        self.state = self._state_from_center(center_x, center_y, heading)
        self.clear_trails()

    def clear_trails(self):
        self.trails.clear()

    # ── physics ───────────────────────────────────────────────────────

    def update(self, dt: float, command: ControlCommand):
        """Advance one tick of ``dt`` seconds.

        ``dt`` is not clamped here; the caller caps it.
        """
        if not math.isfinite(dt) or dt < 0:
            raise ValueError(f"dt must be a finite, non-negative number, got {dt!r}")
        if not isinstance(command, ControlCommand):
            command = ControlCommand(*command)

        state = self.state
        geom = self.geometry

        target = command.steering_position * geom.max_steering_angle
        max_change = STEERING_RATE * dt
        state.steering_angle += float(np.clip(target - state.steering_angle,
                                              -max_change, max_change))

        state.velocity = int(command.movement) * geom.speed

        if abs(state.velocity) <= MOVING_EPSILON:
            return

        # Trails hold the path already travelled, so record before moving.
        self.trails.append(self.wheels())

        if abs(state.steering_angle) > STEERING_EPSILON:
            turning_radius = geom.wheelbase / math.tan(state.steering_angle)
            state.heading += state.velocity / turning_radius * dt

        # Rotate first, then move the rear axle along the new heading.
        state.rear_axle_x += math.cos(state.heading) * state.velocity * dt
        state.rear_axle_y += math.sin(state.heading) * state.velocity * dt

        state.heading = normalize_heading(state.heading)

    # ── derived geometry ──────────────────────────────────────────────

    def _to_world(self, offsets) -> np.ndarray:
        """Map (forward, left) offsets from the rear axle to world points."""
        offsets = np.asarray(offsets, dtype=np.float64).reshape(-1, 2)
        c = math.cos(self.state.heading)
        s = math.sin(self.state.heading)
        rot = np.array([[c, s], [-s, c]])
        origin = np.array([self.state.rear_axle_x, self.state.rear_axle_y])
        return origin + offsets @ rot

    def center(self) -> Tuple[float, float]:
        """Visual centre of the body."""
        (x, y), = self._to_world([(self.geometry.center_offset, 0.0)])
        return float(x), float(y)

    def pose(self) -> Tuple[float, float, float]:
        x, y = self.center()
        return x, y, self.state.heading

    def wheels(self) -> List[Wheel]:
        """Front-left, front-right, rear-left, rear-right."""
        geom = self.geometry
        half = geom.width / 2.0 - WHEEL_INSET
        points = self._to_world([
            (geom.wheelbase, half),
            (geom.wheelbase, -half),
            (0.0, half),
            (0.0, -half),
        ])
        front_angle = self.state.heading + self.state.steering_angle
        angles = (front_angle, front_angle, self.state.heading, self.state.heading)
        return [Wheel(float(p[0]), float(p[1]), angle, i < 2)
                for i, (p, angle) in enumerate(zip(points, angles))]

    def corners(self) -> List[Tuple[float, float]]:
        """Body footprint: front-left, front-right, rear-right, rear-left."""
        geom = self.geometry
        front = geom.length - geom.rear_overhang
        back = geom.rear_overhang
        half = geom.width / 2.0
        points = self._to_world([
            (front, half),
            (front, -half),
            (-back, -half),
            (-back, half),
        ])
        return [(float(x), float(y)) for x, y in points]


def normalize_heading(heading: float) -> float:
    """Wrap into [0, 2pi) with floored modulo."""
    heading = heading % TWO_PI
    # x % 2pi can round up to exactly 2pi for tiny negative x
    return 0.0 if heading >= TWO_PI else heading
