import math

import matplotlib.pyplot as plt
import numpy as np
import pytest

from parksim import renderer
from parksim.car_model import Car, ControlCommand
from parksim.editor import MapObject, StartPosition
from parksim.scenarios import create_bay_parking_scenario


@pytest.fixture
def ax():
    fig, ax = renderer.new_axes(800, 600, figsize=(4, 3))
    yield ax
    plt.close(fig)


@pytest.fixture
def driven_car():
    car = Car(400, 300)
    for _ in range(10):
        car.update(1 / 60, ControlCommand(1, 1))
    return car


def test_rect_corners():
    corners = renderer.rect_corners(0, 0, 2, 1)
    np.testing.assert_allclose(corners, [[-1, -0.5], [1, -0.5], [1, 0.5], [-1, 0.5]])

    turned = renderer.rect_corners(10, 20, 2, 1, math.pi / 2)
    np.testing.assert_allclose(turned[1], [10.5, 21], atol=1e-12)


def test_axes_use_screen_convention(ax):
    assert ax.get_xlim() == (0, 800)
    assert ax.get_ylim() == (600, 0)


def test_trail_lines_follow_visibility(ax, driven_car):
    renderer.draw_wheel_trails(ax, driven_car, show_front=False)
    assert len(ax.lines) == 2
    renderer.draw_wheel_trails(ax, driven_car, show_front=True)
    assert len(ax.lines) == 2 + 4


def test_single_point_trails_are_not_drawn(ax):
    car = Car(400, 300)
    car.update(1 / 60, ControlCommand(1, 0))
    renderer.draw_wheel_trails(ax, car)
    assert len(ax.lines) == 0


def test_steering_label():
    car = Car(0, 0)
    assert renderer.steering_label(car) == "0°"
    car.state.steering_angle = -math.pi / 4
    assert renderer.steering_label(car) == "-45°"


def test_draw_frame(ax, driven_car):
    scenario = create_bay_parking_scenario(800, 600, "easy")
    renderer.draw_frame(ax, scenario, driven_car, 800, 600)
    # environment, obstacles, car body, windshield and four wheels
    assert len(ax.patches) >= len(scenario.environment.surfaces) + len(scenario.obstacles) + 6
    assert scenario.name in ax.get_title()
    assert "steering" in ax.get_title()
    labels = [t.get_text() for t in ax.get_legend().get_texts()]
    assert labels == ["Front wheels", "Rear wheels"]


def test_draw_frame_without_car(ax):
    scenario = create_bay_parking_scenario(800, 600, "easy")
    renderer.draw_frame(ax, scenario, None, 800, 600)
    assert ax.get_title() == scenario.name
    assert ax.get_legend() is None


def test_render_scenario_returns_figure(driven_car):
    scenario = create_bay_parking_scenario(800, 600, "hard")
    fig = renderer.render_scenario(scenario, driven_car, 800, 600, show_front=False)
    try:
        labels = [t.get_text() for t in fig.axes[0].get_legend().get_texts()]
        assert labels == ["Rear wheels"]
    finally:
        plt.close(fig)


def test_draw_editor_objects(ax):
    objects = [
        MapObject("a", "wall", 100, 100, 150, 15),
        MapObject("b", "parking", 300, 300, 70, 130),
    ]
    renderer.draw_editor_objects(ax, objects, selected_id="a")
    renderer.draw_start_position(ax, StartPosition(400, 300, 0.0), selected=True)
    assert len(ax.patches) == 2
    assert len(ax.lines) == 1
    assert any(t.get_text() == "START" for t in ax.texts)
