from types import SimpleNamespace

import matplotlib.pyplot as plt
import pytest

from parksim.cli import maps_main
from parksim.editor import Editor, MapData, MapObject, StartPosition
from parksim.editor_app import EditorApp
from parksim.map_storage import MapStorage


def key(name):
    return SimpleNamespace(key=name)


def mouse(app, x, y):
    return SimpleNamespace(inaxes=app.ax, xdata=x, ydata=y)


@pytest.fixture
def storage(tmp_path):
    return MapStorage(tmp_path / "maps.json")


@pytest.fixture
def app(storage):
    app = EditorApp(Editor(800, 600), storage, "lot", 800, 600, figsize=(4, 3))
    yield app
    plt.close(app.fig)


def test_place_then_drag_with_mouse(app):
    app.on_key_press(key("w"))
    app.on_press(mouse(app, 100, 100))
    app.on_release(mouse(app, 100, 100))
    wall, = app.editor.objects
    assert wall.type == "wall"

    app.on_key_press(key("v"))
    assert "tool: select" in app.ax.get_title()
    app.on_press(mouse(app, 100, 100))
    app.on_motion(mouse(app, 200, 150))
    app.on_release(mouse(app, 200, 150))
    app.on_motion(mouse(app, 400, 400))
    assert (wall.x, wall.y) == (200, 150)


def test_events_outside_axes_are_ignored(app):
    app.on_key_press(key("p"))
    app.on_press(SimpleNamespace(inaxes=None, xdata=None, ydata=None))
    assert app.editor.objects == []


def test_car_tool_uses_selected_size(app):
    app.on_key_press(key("c"))
    app.on_key_press(key("2"))
    assert "car (suv)" in app.ax.get_title()
    app.on_press(mouse(app, 300, 300))
    assert app.editor.objects[0].car_size == "suv"


def test_rotate_delete_and_clear_keys(app):
    app.on_key_press(key("k"))
    app.on_press(mouse(app, 300, 300))
    app.on_key_press(key("r"))
    assert app.editor.objects[0].rotation > 0
    app.on_key_press(key("delete"))
    assert app.editor.objects == []

    app.on_press(mouse(app, 300, 300))
    app.on_press(mouse(app, 500, 300))
    app.on_key_press(key("x"))
    assert app.editor.objects == []


def test_redraw_shows_objects_and_start(app):
    app.on_key_press(key("t"))
    app.on_press(mouse(app, 50, 60))
    assert any(t.get_text() == "START" for t in app.ax.texts)
    assert (app.editor.start_position.x, app.editor.start_position.y) == (50, 60)


def test_ctrl_s_saves_to_store(app, storage, capsys):
    app.on_key_press(key("w"))
    app.on_press(mouse(app, 100, 100))
    app.on_key_press(key("ctrl+s"))
    saved = storage.load_map("lot")
    assert saved.objects == app.editor.objects
    assert saved.start_position == app.editor.start_position
    assert "Saved map 'lot'" in capsys.readouterr().out


def test_maps_edit_opens_existing_or_new_map(tmp_path, monkeypatch):
    path = str(tmp_path / "maps.json")
    MapStorage(path).save_map("yard", MapData(
        "yard", [MapObject("w", "wall", 10, 20, 150, 15)], StartPosition(1, 2, 0.0)))
    opened = []
    monkeypatch.setattr(EditorApp, "run", lambda self: opened.append(self))

    assert maps_main(["--maps", path, "edit", "yard"]) == 0
    assert maps_main(["--maps", path, "edit", "fresh", "--width", "640", "--height", "480"]) == 0
    yard, fresh = opened
    assert [o.id for o in yard.editor.objects] == ["w"]
    assert yard.editor.start_position == StartPosition(1, 2, 0.0)
    assert fresh.editor.objects == []
    assert (fresh.editor.start_position.x, fresh.editor.start_position.y) == (320, 240)
    for app in opened:
        plt.close(app.fig)
