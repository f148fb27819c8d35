"""Matplotlib drawing of scenarios, the player car and its wheel trails.

Everything here only reads state.  Axes use screen convention: origin top
left, y growing downward, equal aspect.
"""

import math

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.lines import Line2D
from matplotlib.patches import Polygon

COLORS = {
    "background": "#2d3436",
    "asphalt": "#3d3d3d",
    "grass": "#3d6b1e",
    "footpath": "#c8c8c8",
    "curb": "#b0b0b0",
    "lane": "#ffffff",
    "bay": "#ffd700",
    "body": "#74b9ff",
    "body_edge": "#0984e3",
    "wheel": "#2d3436",
    "front_wheel_edge": "#f1c40f",
    "rear_wheel_edge": "#636e72",
    "rear_trail": "#c0392b",
    "front_trail": "#2980b9",
    "parked_car": "#636e72",
    "wall": "#b2bec3",
    "obstacle_curb": "#dfe6e9",
    "spot": "#ffeaa7",
    "selected": "#f1c40f",
    "start": "#27ae60",
}

WHEEL_SIZE = (24.0, 12.0)   # px, drawn length x width
TRAIL_WIDTH = 4.0           # pt


def rect_corners(cx, cy, width, height, rotation=0.0) -> np.ndarray:
    """4x2 corners of a centred rectangle rotated by ``rotation`` rad."""
    hw, hh = width / 2.0, height / 2.0
    local = np.array([[-hw, -hh], [hw, -hh], [hw, hh], [-hw, hh]])
    c, s = math.cos(rotation), math.sin(rotation)
    rot = np.array([[c, s], [-s, c]])
    return local @ rot + np.array([cx, cy])


def new_axes(width, height, figsize=(12, 8)):
    fig, ax = plt.subplots(figsize=figsize)
    setup_axes(ax, width, height)
    return fig, ax


def setup_axes(ax, width, height):
    ax.set_facecolor(COLORS["background"])
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.set_aspect("equal")
    ax.set_xticks([])
    ax.set_yticks([])


# ── environment ───────────────────────────────────────────────────────────

def draw_environment(ax, environment):
    if environment is None:
        return
    for surface in environment.surfaces:
        corners = rect_corners(surface.x + surface.width / 2, surface.y + surface.height / 2,
                               surface.width, surface.height)
        ax.add_patch(Polygon(corners, closed=True, lw=0,
                             facecolor=COLORS.get(surface.type, "#666666"), zorder=0))
    for marking in environment.markings:
        ax.plot([marking.x1, marking.x2], [marking.y1, marking.y2],
                color=COLORS["bay"] if marking.type == "bay" else COLORS["lane"],
                lw=2.0 if marking.type == "bay" else 1.5,
                ls=(0, (6, 4)) if marking.dashed else "-",
                solid_capstyle="round", zorder=1)


def draw_obstacles(ax, obstacles):
    fill = {"car": COLORS["parked_car"], "wall": COLORS["wall"],
            "curb": COLORS["obstacle_curb"]}
    for obs in obstacles:
        corners = rect_corners(obs.x + obs.width / 2, obs.y + obs.height / 2,
                               obs.width, obs.height, obs.rotation)
        ax.add_patch(Polygon(corners, closed=True, facecolor=fill.get(obs.type, "#666666"),
                             edgecolor=COLORS["background"], lw=1.5, zorder=3))


def _u_shape(ax, corners, color, lw):
    # Open side faces the road: draw three sides only.
    ax.plot(corners[[0, 3, 2, 1], 0], corners[[0, 3, 2, 1], 1], color=color, lw=lw, zorder=2)


def draw_parking_spot(ax, spot):
    if spot is None:
        return
    corners = rect_corners(spot.x + spot.width / 2, spot.y + spot.height / 2,
                           spot.width, spot.height, spot.rotation)
    _u_shape(ax, corners, COLORS["spot"], 2.0)


# ── car ───────────────────────────────────────────────────────────────────

def draw_wheel_trails(ax, car, show_front=True):
    trails = car.trails.as_arrays()
    groups = [("rear_left", "rear_trail"), ("rear_right", "rear_trail")]
    if show_front:
        groups += [("front_left", "front_trail"), ("front_right", "front_trail")]
    for name, color in groups:
        points = trails[name]
        if len(points) > 1:
            ax.plot(points[:, 0], points[:, 1], color=COLORS[color], lw=TRAIL_WIDTH,
                    solid_capstyle="round", solid_joinstyle="round", zorder=2)


def draw_car(ax, car):
    ax.add_patch(Polygon(np.array(car.corners()), closed=True, facecolor=COLORS["body"],
                         edgecolor=COLORS["body_edge"], lw=1.5, zorder=5))
    # Windshield marks the front of the car.
    cx, cy = car.center()
    heading = car.state.heading
    geom = car.geometry
    ahead = geom.length / 2 - 15
    ws = rect_corners(cx + math.cos(heading) * ahead, cy + math.sin(heading) * ahead,
                      20, geom.width - 10, heading)
    ax.add_patch(Polygon(ws, closed=True, facecolor=(1, 1, 1, 0.3), lw=0, zorder=6))
    draw_wheels(ax, car)


def draw_wheels(ax, car):
    for wheel in car.wheels():
        corners = rect_corners(wheel.x, wheel.y, WHEEL_SIZE[0], WHEEL_SIZE[1], wheel.angle)
        edge = COLORS["front_wheel_edge"] if wheel.is_front else COLORS["rear_wheel_edge"]
        ax.add_patch(Polygon(corners, closed=True, facecolor=COLORS["wheel"],
                             edgecolor=edge, lw=2.0 if wheel.is_front else 0.8, zorder=7))


def steering_label(car) -> str:
    return f"{round(math.degrees(car.state.steering_angle))}°"


def draw_trail_legend(ax, show_front=True):
    handles = []
    if show_front:
        handles.append(Line2D([], [], color=COLORS["front_trail"], lw=3, label="Front wheels"))
    handles.append(Line2D([], [], color=COLORS["rear_trail"], lw=3, label="Rear wheels"))
    return ax.legend(handles=handles, loc="lower right", facecolor=(0, 0, 0, 0.5),
                     labelcolor="white", edgecolor="none")


# ── editor ────────────────────────────────────────────────────────────────

def draw_editor_objects(ax, objects, selected_id=None):
    fill = {"car": COLORS["parked_car"], "wall": COLORS["wall"],
            "curb": COLORS["obstacle_curb"]}
    for obj in objects:
        selected = obj.id == selected_id
        corners = rect_corners(obj.x, obj.y, obj.width, obj.height, obj.rotation)
        if obj.type == "parking":
            _u_shape(ax, corners, COLORS["selected"] if selected else COLORS["spot"],
                     3.0 if selected else 2.0)
            continue
        ax.add_patch(Polygon(corners, closed=True, facecolor=fill.get(obj.type, "#666666"),
                             edgecolor=COLORS["selected"] if selected else COLORS["background"],
                             lw=2.5 if selected else 1.0, zorder=3))


def draw_start_position(ax, start, selected=False):
    color = COLORS["selected"] if selected else COLORS["start"]
    corners = rect_corners(start.x, start.y, 100, 50, start.heading)
    ax.add_patch(Polygon(corners, closed=True, fill=False, edgecolor=color,
                         lw=2.5, ls="--", zorder=4))
    ax.annotate("", xy=(start.x + math.cos(start.heading) * 60,
                        start.y + math.sin(start.heading) * 60),
                xytext=(start.x, start.y),
                arrowprops=dict(arrowstyle="-|>", color=color, lw=2), zorder=4)
    ax.text(start.x, start.y, "START", color="white", ha="center", va="center",
            fontsize=8, zorder=4)


# ── whole frame ───────────────────────────────────────────────────────────

def draw_frame(ax, scenario, car=None, width=None, height=None, show_front=True):
    """Clear ``ax`` and draw one full frame."""
    ax.cla()
    if width is not None and height is not None:
        setup_axes(ax, width, height)
    draw_environment(ax, scenario.environment)
    if car is not None:
        draw_wheel_trails(ax, car, show_front)
    draw_obstacles(ax, scenario.obstacles)
    draw_parking_spot(ax, scenario.parking_spot)
    if car is not None:
        draw_car(ax, car)
        draw_trail_legend(ax, show_front)
        ax.set_title(f"{scenario.name}  |  {car.geometry.name}  |  steering "
                     f"{steering_label(car)}")
    else:
        ax.set_title(scenario.name)


def render_scenario(scenario, car=None, width=1200, height=800, show_front=True):
    """Draw a scenario (and optionally the car) on a fresh figure."""
    fig, ax = new_axes(width, height)
    draw_frame(ax, scenario, car, width, height, show_front)
    fig.tight_layout()
    return fig
