"""Map editor: place, drag, rotate and delete layout objects.

The editor is input-agnostic: a front end feeds it pointer events in
canvas coordinates and redraws when ``on_change`` fires.  Map objects are
centre anchored (unlike scenario obstacles, which are top-left anchored).
"""

from __future__ import annotations

import math
import uuid
from dataclasses import asdict, dataclass, field
from typing import Callable, List, Optional

from parksim.car_model import CAR_CONFIGS
from parksim.scenarios import (Bounds, Environment, Obstacle, ParkingSpot,
                               Scenario, StartPose, Surface)

TOOLS = ("select", "car", "wall", "curb", "parking", "start")
OBJECT_TYPES = ("car", "wall", "curb", "parking")

ROTATE_STEP = math.pi / 12     # 15 degrees per press
START_PICK_RADIUS = 30.0

# width x height of freshly placed objects (cars come from their preset)
DEFAULT_SIZES = {
    "wall": (150.0, 15.0),
    "curb": (200.0, 10.0),
    "parking": (70.0, 130.0),
}

START_ID = "start"


@dataclass
class MapObject:
    id: str
    type: str
    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0
    car_size: Optional[str] = None

    def contains(self, x: float, y: float) -> bool:
        """Hit test in the object's rotated frame."""
        dx = x - self.x
        dy = y - self.y
        c = math.cos(-self.rotation)
        s = math.sin(-self.rotation)
        local_x = dx * c - dy * s
        local_y = dx * s + dy * c
        return abs(local_x) < self.width / 2 and abs(local_y) < self.height / 2


@dataclass
class StartPosition:
    x: float
    y: float
    heading: float = 0.0


@dataclass
class MapData:
    name: str
    objects: List[MapObject] = field(default_factory=list)
    start_position: StartPosition = field(default_factory=lambda: StartPosition(0.0, 0.0))

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "MapData":
        """Build from a stored dict; raises KeyError/TypeError/ValueError when malformed."""
        objects = [
            MapObject(
                id=str(o["id"]),
                type=str(o["type"]),
                x=float(o["x"]),
                y=float(o["y"]),
                width=float(o["width"]),
                height=float(o["height"]),
                rotation=float(o.get("rotation", 0.0)),
                car_size=o.get("car_size"),
            )
            for o in data.get("objects", [])
        ]
        start = data["start_position"]
        return cls(
            name=str(data["name"]),
            objects=objects,
            start_position=StartPosition(float(start["x"]), float(start["y"]),
                                         float(start.get("heading", 0.0))),
        )


def _new_id() -> str:
    return f"obj_{uuid.uuid4().hex[:12]}"


def _wrap_rotation(angle: float) -> float:
    angle += ROTATE_STEP
    if angle >= 2 * math.pi:
        angle -= 2 * math.pi
    return angle


class Editor:
    def __init__(self, default_width: float, default_height: float):
        self.objects: List[MapObject] = []
        self.start_position = StartPosition(default_width / 2, default_height / 2, 0.0)
        self.selected_id: Optional[str] = None
        self.current_tool = "select"
        self.current_car_size = "picanto"
        self._dragging = False
        self._drag_offset = (0.0, 0.0)
        self._on_change: Optional[Callable[[], None]] = None

    def on_change(self, callback: Callable[[], None]):
        self._on_change = callback

    def _notify(self):
        if self._on_change is not None:
            self._on_change()

    # ---- tools ----

    def set_tool(self, tool: str):
        if tool not in TOOLS:
            raise ValueError(f"unknown tool {tool!r}")
        self.current_tool = tool
        if tool != "select":
            self.selected_id = None

    def set_car_size(self, size: str):
        if size not in CAR_CONFIGS:
            raise ValueError(f"unknown car size {size!r}")
        self.current_car_size = size

    # ---- pointer ----

    def pointer_down(self, x: float, y: float):
        if self.current_tool == "select":
            obj = self.object_at(x, y)
            if obj is not None:
                self._begin_drag(obj.id, x - obj.x, y - obj.y)
            elif self.is_near_start(x, y):
                self._begin_drag(START_ID, x - self.start_position.x,
                                 y - self.start_position.y)
            else:
                self.selected_id = None
        elif self.current_tool == "start":
            self.start_position.x = x
            self.start_position.y = y
            self.selected_id = START_ID
        else:
            self.place_object(x, y)
        self._notify()

    def _begin_drag(self, object_id, offset_x, offset_y):
        self.selected_id = object_id
        self._dragging = True
        self._drag_offset = (offset_x, offset_y)

    def pointer_move(self, x: float, y: float):
        if not self._dragging:
            return
        ox, oy = self._drag_offset
        if self.selected_id == START_ID:
            self.start_position.x = x - ox
            self.start_position.y = y - oy
        else:
            obj = self.selected_object()
            if obj is not None:
                obj.x = x - ox
                obj.y = y - oy
        self._notify()

    def pointer_up(self):
        self._dragging = False

    # ---- queries ----

    def object_at(self, x: float, y: float) -> Optional[MapObject]:
        """Topmost (last placed) object under the point."""
        for obj in reversed(self.objects):
            if obj.contains(x, y):
                return obj
        return None

    def is_near_start(self, x: float, y: float) -> bool:
        return math.hypot(x - self.start_position.x,
                          y - self.start_position.y) < START_PICK_RADIUS

    def selected_object(self) -> Optional[MapObject]:
        if self.selected_id is None or self.selected_id == START_ID:
            return None
        for obj in self.objects:
            if obj.id == self.selected_id:
                return obj
        return None

    # ---- edits ----

    def place_object(self, x: float, y: float) -> Optional[MapObject]:
        tool = self.current_tool
        if tool == "car":
            config = CAR_CONFIGS[self.current_car_size]
            obj = MapObject(_new_id(), "car", x, y, config.length, config.width,
                            car_size=self.current_car_size)
        elif tool in DEFAULT_SIZES:
            w, h = DEFAULT_SIZES[tool]
            obj = MapObject(_new_id(), tool, x, y, w, h)
        else:
            return None
        self.objects.append(obj)
        self.selected_id = obj.id
        self._notify()
        return obj

    def rotate_selected(self):
        if self.selected_id == START_ID:
            self.start_position.heading = _wrap_rotation(self.start_position.heading)
        else:
            obj = self.selected_object()
            if obj is not None:
                obj.rotation = _wrap_rotation(obj.rotation)
        self._notify()

    def delete_selected(self):
        if self.selected_id and self.selected_id != START_ID:
            self.objects = [o for o in self.objects if o.id != self.selected_id]
            self.selected_id = None
            self._notify()

    def clear(self):
        self.objects = []
        self.selected_id = None
        self._notify()

    def key_down(self, key: str):
        if key in ("r", "R"):
            self.rotate_selected()
        elif key in ("delete", "Delete", "backspace", "BackSpace", "Backspace"):
            self.delete_selected()

    # ---- (de)serialisation ----

    def get_map_data(self, name: str) -> MapData:
        return MapData(
            name=name,
            objects=[MapObject(**asdict(o)) for o in self.objects],
            start_position=StartPosition(**asdict(self.start_position)),
        )

    def load_map_data(self, data: MapData):
        self.objects = [MapObject(**asdict(o)) for o in data.objects]
        self.start_position = StartPosition(**asdict(data.start_position))
        self.selected_id = None
        self._notify()


def scenario_from_map(data: MapData, width: float, height: float) -> Scenario:
    """Turn an edited map into a playable scenario.

    The first ``parking`` object becomes the target; further parking objects
    are ignored.  Everything else becomes an obstacle.
    """
    obstacles = []
    spot = None
    for obj in data.objects:
        left = obj.x - obj.width / 2
        top = obj.y - obj.height / 2
        if obj.type == "parking":
            if spot is None:
                spot = ParkingSpot(left, top, obj.width, obj.height, obj.rotation)
            continue
        obstacles.append(Obstacle(left, top, obj.width, obj.height, obj.rotation, obj.type))

    start = data.start_position
    return Scenario(
        name=data.name,
        difficulty="custom",
        car_start=StartPose(start.x, start.y, start.heading),
        obstacles=obstacles,
        parking_spot=spot,
        bounds=Bounds(0.0, 0.0, width, height),
        environment=Environment([Surface("asphalt", 0, 0, width, height)], []),
    )
