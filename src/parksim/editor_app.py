"""Interactive matplotlib map editor.

Mouse
-----
click              place with the current tool, or select / drag in select mode
drag               move the selected object or the start marker

Keys
----
v c w k p t        select, car, wall, curb, parking spot, start position tool
1 2 3              car size for the car tool: Picanto, SUV, Staria
r                  rotate the selection by 15 degrees
delete/backspace   delete the selection
x                  clear all objects
ctrl+s             save to the map store
"""

import matplotlib.pyplot as plt

from parksim import renderer
from parksim.app import CAR_KEYS, release_default_keymap
from parksim.editor import START_ID
from parksim.scenarios import Environment, Surface

TOOL_KEYS = {"v": "select", "c": "car", "w": "wall", "k": "curb", "p": "parking", "t": "start"}
SAVE_KEY = "ctrl+s"
CLEAR_KEY = "x"
EDITOR_KEYS = (tuple(TOOL_KEYS) + tuple(CAR_KEYS)
               + ("r", "delete", "backspace", CLEAR_KEY, SAVE_KEY, "s"))


class EditorApp:
    def __init__(self, editor, storage, name, width, height, figsize=(12, 8)):
        self.editor = editor
        self.storage = storage
        self.name = name
        self.width = width
        self.height = height
        self.background = Environment([Surface("asphalt", 0, 0, width, height)], [])
        self.fig, self.ax = renderer.new_axes(width, height, figsize)
        canvas = self.fig.canvas
        canvas.mpl_connect("button_press_event", self.on_press)
        canvas.mpl_connect("motion_notify_event", self.on_motion)
        canvas.mpl_connect("button_release_event", self.on_release)
        canvas.mpl_connect("key_press_event", self.on_key_press)
        editor.on_change(self.redraw)

    # ---- mouse ----

    def _point(self, event):
        if event.inaxes is not self.ax or event.xdata is None or event.ydata is None:
            return None
        return event.xdata, event.ydata

    def on_press(self, event):
        point = self._point(event)
        if point is not None:
            self.editor.pointer_down(*point)

    def on_motion(self, event):
        point = self._point(event)
        if point is not None:
            self.editor.pointer_move(*point)

    def on_release(self, _event):
        self.editor.pointer_up()

    # ---- keyboard ----

    def on_key_press(self, event):
        key = event.key or ""
        if key == SAVE_KEY:
            self.save()
            return
        key = key.lower()
        if key in TOOL_KEYS:
            self.editor.set_tool(TOOL_KEYS[key])
            self.redraw()
        elif key in CAR_KEYS:
            self.editor.set_car_size(CAR_KEYS[key])
            self.redraw()
        elif key == CLEAR_KEY:
            self.editor.clear()
        else:
            self.editor.key_down(key)

    def save(self) -> bool:
        ok = self.storage.save_map(self.name, self.editor.get_map_data(self.name))
        if ok:
            print(f"Saved map {self.name!r} to {self.storage.path}")
        return ok

    # ---- drawing ----

    def redraw(self):
        editor = self.editor
        self.ax.cla()
        renderer.setup_axes(self.ax, self.width, self.height)
        renderer.draw_environment(self.ax, self.background)
        renderer.draw_editor_objects(self.ax, editor.objects, editor.selected_id)
        renderer.draw_start_position(self.ax, editor.start_position,
                                     selected=editor.selected_id == START_ID)
        tool = editor.current_tool
        if tool == "car":
            tool = f"car ({editor.current_car_size})"
        self.ax.set_title(f"{self.name}  |  tool: {tool}  |  ctrl+s to save")
        self.fig.canvas.draw_idle()

    def run(self):
        release_default_keymap(EDITOR_KEYS)
        self.redraw()
        plt.show()
