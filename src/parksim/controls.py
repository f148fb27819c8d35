"""Keyboard and on-screen button input -> one ``ControlCommand`` per tick.

Keys: up/down arrows drive forward/reverse while held.  Steering is
positional: ``a`` hard left, ``s`` half left, ``d`` straight, ``f`` half
right, ``g`` hard right.  Buttons hold movement while pressed and latch the
steering position; held keys override buttons.
"""

from parksim.car_model import ControlCommand, Movement, SteeringPosition

MOVEMENT_KEYS = (
    ("up", Movement.FORWARD),
    ("down", Movement.REVERSE),
)

STEERING_KEYS = (
    ("a", SteeringPosition.HARD_LEFT),
    ("s", SteeringPosition.HALF_LEFT),
    ("d", SteeringPosition.STRAIGHT),
    ("f", SteeringPosition.HALF_RIGHT),
    ("g", SteeringPosition.HARD_RIGHT),
)

# Browser-style key names map onto the same bindings.
_KEY_ALIASES = {"arrowup": "up", "arrowdown": "down"}


def _normalize_key(key):
    key = str(key).lower()
    return _KEY_ALIASES.get(key, key)


class Controls:
    def __init__(self):
        self.keys = set()
        self.button_movement = Movement.STOPPED
        self.button_steering = SteeringPosition.STRAIGHT
        self.active_steering = SteeringPosition.STRAIGHT

    # ---- keyboard ----

    def key_down(self, key):
        self.keys.add(_normalize_key(key))

    def key_up(self, key):
        self.keys.discard(_normalize_key(key))

    def blur(self):
        """Window lost focus: forget held keys."""
        self.keys.clear()

    # ---- buttons ----

    def press_movement(self, value):
        self.button_movement = Movement(value)

    def release_movement(self, value):
        if self.button_movement == Movement(value):
            self.button_movement = Movement.STOPPED

    def select_steering(self, position):
        self.button_steering = SteeringPosition(position)
        self.active_steering = self.button_steering

    def reset_steering(self):
        self.select_steering(SteeringPosition.STRAIGHT)

    # ---- output ----

    def get_input(self) -> ControlCommand:
        movement = self.button_movement
        steering = self.button_steering

        for key, value in MOVEMENT_KEYS:
            if key in self.keys:
                movement = value
                break

        for key, value in STEERING_KEYS:
            if key in self.keys:
                steering = value
                self.active_steering = value
                break

        return ControlCommand(movement, steering)
