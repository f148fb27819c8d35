"""Scenario definitions: parked cars, parking target, ground surfaces, bounds.

Each layout is a ``Scenario`` dataclass produced by a generator function.
Three generators are registered in ``SCENARIOS``:

* **free** - open asphalt lot with randomly rotated parked cars
* **parallel** - street with a kerbside gap on the LEFT (left-hand traffic)
* **bay** - row of marked bays, the player reverses or drives into bay 3

Coordinates are screen pixels (y grows downward).  Obstacles, surfaces and
parking spots are anchored at their top-left corner and rotate about their
centre.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from parksim.car_model import (PICANTO_CONFIG, STARIA_CONFIG, SUV_CONFIG,
                               VehicleGeometry)

DIFFICULTIES = ("easy", "medium", "hard")

OBSTACLE_CARS = (PICANTO_CONFIG, SUV_CONFIG, STARIA_CONFIG)


# ---------------------------------------------------------------------------
# Layout dataclasses
# ---------------------------------------------------------------------------

def _rect_contains(x, y, rx, ry, width, height, rotation) -> bool:
    """True if (x, y) is inside a top-left anchored rectangle rotated about its centre."""
    cx = rx + width / 2.0
    cy = ry + height / 2.0
    c = math.cos(-rotation)
    s = math.sin(-rotation)
    dx = x - cx
    dy = y - cy
    local_x = dx * c - dy * s
    local_y = dx * s + dy * c
    return abs(local_x) <= width / 2.0 and abs(local_y) <= height / 2.0


@dataclass
class Obstacle:
    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0
    type: str = "car"            # car | wall | curb

    def contains(self, x: float, y: float) -> bool:
        return _rect_contains(x, y, self.x, self.y, self.width, self.height, self.rotation)


@dataclass
class ParkingSpot:
    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0

    def contains(self, x: float, y: float) -> bool:
        return _rect_contains(x, y, self.x, self.y, self.width, self.height, self.rotation)


@dataclass
class Surface:
    type: str                    # grass | asphalt | footpath | curb
    x: float
    y: float
    width: float
    height: float


@dataclass
class Marking:
    type: str                    # lane | centre | bay
    x1: float
    y1: float
    x2: float
    y2: float
    dashed: bool = False


@dataclass
class Environment:
    surfaces: List[Surface] = field(default_factory=list)
    markings: List[Marking] = field(default_factory=list)


@dataclass
class Bounds:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def clamp(self, x: float, y: float, margin: float = 0.0) -> Tuple[float, float]:
        """Clamp a point into the bounds shrunk by ``margin`` on every side."""
        return (float(np.clip(x, self.min_x + margin, self.max_x - margin)),
                float(np.clip(y, self.min_y + margin, self.max_y - margin)))


@dataclass
class StartPose:
    x: float
    y: float
    heading: float = 0.0


@dataclass
class Scenario:
    name: str
    difficulty: str
    car_start: StartPose
    obstacles: List[Obstacle] = field(default_factory=list)
    parking_spot: Optional[ParkingSpot] = None
    bounds: Optional[Bounds] = None
    environment: Optional[Environment] = None

    def is_parked(self, car) -> bool:
        """True when every body corner of ``car`` lies inside the parking spot."""
        if self.parking_spot is None:
            return False
        return all(self.parking_spot.contains(x, y) for x, y in car.corners())


def car_obstacle(config: VehicleGeometry, x: float, y: float,
                 rotation: float = 0.0) -> Obstacle:
    """A parked car of the given preset, lying along its length."""
    return Obstacle(x=x, y=y, width=config.length, height=config.width,
                    rotation=rotation, type="car")


def _pick(rng: np.random.Generator, options: Sequence):
    return options[int(rng.integers(len(options)))]


# ---------------------------------------------------------------------------
# Free drive
# ---------------------------------------------------------------------------

_FREE_DRIVE_SLOTS = [
    (0.2, 0.25), (0.75, 0.3), (0.15, 0.65),
    (0.8, 0.7), (0.5, 0.2), (0.4, 0.75),
    (0.65, 0.5), (0.25, 0.45), (0.85, 0.45),
    (0.55, 0.6),
]
_FREE_DRIVE_CARS = {"easy": 2, "medium": 5, "hard": 10}


def create_free_drive_scenario(width: float, height: float, difficulty: str = "medium",
                               rng: Optional[np.random.Generator] = None) -> Scenario:
    rng = rng if rng is not None else np.random.default_rng()
    border = 40.0

    surfaces = [
        Surface("asphalt", 0, 0, width, height),
        Surface("grass", 0, 0, width, border),
        Surface("grass", 0, height - border, width, border),
        Surface("grass", 0, 0, border, height),
        Surface("grass", width - border, 0, border, height),
    ]

    obstacles = []
    for fx, fy in _FREE_DRIVE_SLOTS[:_FREE_DRIVE_CARS[difficulty]]:
        config = _pick(rng, OBSTACLE_CARS)
        rotation = (rng.random() - 0.5) * math.pi / 2
        obstacles.append(car_obstacle(
            config,
            width * fx - config.length / 2,
            height * fy - config.width / 2,
            rotation,
        ))

    return Scenario(
        name=f"Free Drive ({difficulty})",
        difficulty=difficulty,
        car_start=StartPose(width / 2, height / 2, 0.0),
        obstacles=obstacles,
        bounds=Bounds(border, border, width - border, height - border),
        environment=Environment(surfaces, []),
    )


# ---------------------------------------------------------------------------
# Parallel parking - park on the LEFT kerb, driving on the left
# ---------------------------------------------------------------------------

_GAP_MULTIPLIER = {"easy": 2.0, "medium": 1.6, "hard": 1.4}


def create_parallel_parking_scenario(width: float, height: float, difficulty: str = "medium",
                                     rng: Optional[np.random.Generator] = None) -> Scenario:
    # The player's default car sizes the gap.
    gap = PICANTO_CONFIG.length * _GAP_MULTIPLIER[difficulty]

    grass_h = 50.0
    footpath_h = 35.0
    curb_h = 8.0
    parking_lane_h = PICANTO_CONFIG.width + 20
    driving_lane_h = 100.0

    # Top to bottom: grass, footpath, kerb, road, kerb, footpath, grass
    top_footpath_y = grass_h
    top_curb_y = top_footpath_y + footpath_h
    road_top_y = top_curb_y + curb_h
    road_h = parking_lane_h + driving_lane_h * 2 + parking_lane_h
    centre_line_y = road_top_y + parking_lane_h + driving_lane_h
    road_bottom_y = road_top_y + road_h
    bottom_footpath_y = road_bottom_y + curb_h
    bottom_grass_y = bottom_footpath_y + footpath_h

    surfaces = [
        Surface("grass", 0, 0, width, grass_h),
        Surface("footpath", 0, top_footpath_y, width, footpath_h),
        Surface("curb", 0, top_curb_y, width, curb_h),
        Surface("asphalt", 0, road_top_y, width, road_h),
        Surface("curb", 0, road_bottom_y, width, curb_h),
        Surface("footpath", 0, bottom_footpath_y, width, footpath_h),
        Surface("grass", 0, bottom_grass_y, width, height - bottom_grass_y),
    ]

    lane_divider_y = road_top_y + parking_lane_h
    markings = [
        Marking("centre", 0, centre_line_y, width, centre_line_y, dashed=True),
        Marking("lane", 0, lane_divider_y, width, lane_divider_y, dashed=True),
    ]

    parking_y = road_top_y + 5
    gap_centre_x = width * 0.45

    # Facing left, so the car ahead of the gap is to the right of it.
    front_car = SUV_CONFIG if difficulty == "hard" else PICANTO_CONFIG
    rear_car = PICANTO_CONFIG if difficulty == "easy" else SUV_CONFIG
    obstacles = [
        car_obstacle(front_car, gap_centre_x + gap / 2 + 10, parking_y),
        car_obstacle(rear_car, gap_centre_x - gap / 2 - rear_car.length - 10, parking_y),
    ]
    if difficulty == "hard":
        # Angled car limiting the reversing space
        obstacles.append(car_obstacle(
            PICANTO_CONFIG,
            gap_centre_x - gap / 2 - rear_car.length - PICANTO_CONFIG.length - 40,
            parking_y + 10,
            math.pi / 8,
        ))

    spot = ParkingSpot(
        x=gap_centre_x - gap / 2,
        y=parking_y,
        width=gap,
        height=parking_lane_h - 10,
    )

    start_x = gap_centre_x + gap / 2 + front_car.length + 100
    start_y = road_top_y + parking_lane_h + driving_lane_h / 2

    return Scenario(
        name=f"Parallel Parking ({difficulty})",
        difficulty=difficulty,
        car_start=StartPose(start_x, start_y, math.pi),
        obstacles=obstacles,
        parking_spot=spot,
        bounds=Bounds(10, road_top_y, width - 10, road_bottom_y),
        environment=Environment(surfaces, markings),
    )


# ---------------------------------------------------------------------------
# Bay parking
# ---------------------------------------------------------------------------

_BAY_EXTRA_WIDTH = {"easy": 60.0, "medium": 40.0, "hard": 25.0}
NUM_BAYS = 6
TARGET_BAY = 2


def create_bay_parking_scenario(width: float, height: float, difficulty: str = "medium",
                                rng: Optional[np.random.Generator] = None) -> Scenario:
    bay_w = PICANTO_CONFIG.width + _BAY_EXTRA_WIDTH[difficulty]
    bay_d = PICANTO_CONFIG.length + 30
    border = 40.0
    row_y = height * 0.15

    surfaces = [
        Surface("grass", 0, 0, width, height),
        Surface("asphalt", border, border, width - border * 2, height - border * 2),
    ]

    bays_x = (width - NUM_BAYS * bay_w) / 2
    markings = [
        Marking("bay", bays_x + i * bay_w, row_y, bays_x + i * bay_w, row_y + bay_d)
        for i in range(NUM_BAYS + 1)
    ]
    markings.append(Marking("bay", bays_x, row_y, bays_x + NUM_BAYS * bay_w, row_y))

    def bay_car(config, bay_index):
        bay_x = bays_x + bay_index * bay_w
        return car_obstacle(config, bay_x + (bay_w - config.width) / 2, row_y + 10,
                            -math.pi / 2)

    if difficulty == "easy":
        obstacles = [bay_car(PICANTO_CONFIG, TARGET_BAY - 1)]
    else:
        left_car = SUV_CONFIG if difficulty == "hard" else PICANTO_CONFIG
        obstacles = [
            bay_car(left_car, TARGET_BAY - 1),
            bay_car(SUV_CONFIG, TARGET_BAY + 1),
        ]
        if difficulty == "hard":
            # Trolley bay and a car parked across the lot
            obstacles.append(Obstacle(width * 0.3, height * 0.5, 30, 20, 0.2, "curb"))
            obstacles.append(car_obstacle(STARIA_CONFIG, width * 0.7, height * 0.55,
                                          math.pi / 4))

    spot = ParkingSpot(x=bays_x + TARGET_BAY * bay_w, y=row_y, width=bay_w, height=bay_d)

    return Scenario(
        name=f"Bay Parking ({difficulty})",
        difficulty=difficulty,
        car_start=StartPose(width / 2, height * 0.75, -math.pi / 2),
        obstacles=obstacles,
        parking_spot=spot,
        bounds=Bounds(border, border, width - border, height - border),
        environment=Environment(surfaces, markings),
    )


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

ScenarioFactory = Callable[..., Scenario]

SCENARIOS: Dict[str, ScenarioFactory] = {
    "free": create_free_drive_scenario,
    "parallel": create_parallel_parking_scenario,
    "bay": create_bay_parking_scenario,
}


def get_scenario(name: str, width: float, height: float, difficulty: str = "medium",
                 rng: Optional[np.random.Generator] = None) -> Scenario:
    """Build a scenario by name; unknown names fall back to free drive."""
    if difficulty not in DIFFICULTIES:
        raise ValueError(f"difficulty must be one of {DIFFICULTIES}, got {difficulty!r}")
    factory = SCENARIOS.get(name, create_free_drive_scenario)
    return factory(width, height, difficulty, rng=rng)
