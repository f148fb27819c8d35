from parksim.car_model import Movement, SteeringPosition
from parksim.controls import Controls


def test_idle_is_stopped_and_straight():
    cmd = Controls().get_input()
    assert cmd.movement is Movement.STOPPED
    assert cmd.steering_position is SteeringPosition.STRAIGHT


def test_arrow_keys_drive_while_held():
    controls = Controls()
    controls.key_down("up")
    assert controls.get_input().movement is Movement.FORWARD
    controls.key_up("up")
    controls.key_down("ArrowDown")
    assert controls.get_input().movement is Movement.REVERSE
    controls.key_up("arrowdown")
    assert controls.get_input().movement is Movement.STOPPED


def test_forward_wins_when_both_arrows_held():
    controls = Controls()
    controls.key_down("down")
    controls.key_down("up")
    assert controls.get_input().movement is Movement.FORWARD


def test_steering_keys():
    expected = {
        "a": SteeringPosition.HARD_LEFT,
        "s": SteeringPosition.HALF_LEFT,
        "d": SteeringPosition.STRAIGHT,
        "f": SteeringPosition.HALF_RIGHT,
        "G": SteeringPosition.HARD_RIGHT,
    }
    for key, position in expected.items():
        controls = Controls()
        controls.key_down(key)
        assert controls.get_input().steering_position is position
        assert controls.active_steering is position


def test_steering_key_only_applies_while_held():
    controls = Controls()
    controls.select_steering(0.5)
    controls.key_down("a")
    assert controls.get_input().steering_position is SteeringPosition.HARD_LEFT
    controls.key_up("a")
    assert controls.get_input().steering_position is SteeringPosition.HALF_RIGHT


def test_buttons_hold_movement_and_latch_steering():
    controls = Controls()
    controls.press_movement(1)
    controls.select_steering(-1)
    cmd = controls.get_input()
    assert cmd.movement is Movement.FORWARD
    assert cmd.steering_position is SteeringPosition.HARD_LEFT

    # Releasing a different button keeps the held one
    controls.release_movement(-1)
    assert controls.get_input().movement is Movement.FORWARD
    controls.release_movement(1)
    assert controls.get_input().movement is Movement.STOPPED
    assert controls.get_input().steering_position is SteeringPosition.HARD_LEFT


def test_keys_override_buttons():
    controls = Controls()
    controls.press_movement(1)
    controls.key_down("down")
    assert controls.get_input().movement is Movement.REVERSE


def test_blur_and_reset():
    controls = Controls()
    controls.key_down("up")
    controls.key_down("g")
    controls.select_steering(-0.5)
    controls.blur()
    controls.reset_steering()
    cmd = controls.get_input()
    assert cmd.movement is Movement.STOPPED
    assert cmd.steering_position is SteeringPosition.STRAIGHT
    assert controls.active_steering is SteeringPosition.STRAIGHT
