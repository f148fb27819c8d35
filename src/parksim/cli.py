"""Console entry points: ``parksim``, ``parksim-drive`` and ``parksim-maps``."""

import argparse
import json
import math
import sys

import numpy as np

from parksim.car_model import CAR_CONFIGS, ControlCommand, Movement, SteeringPosition
from parksim.editor import Editor, scenario_from_map
from parksim.map_storage import MapStorage
from parksim.scenarios import DIFFICULTIES, SCENARIOS
from parksim.simulator import DT, MAX_DT, ParkingSimulator

MOVEMENT_NAMES = {
    "forward": Movement.FORWARD,
    "reverse": Movement.REVERSE,
    "stop": Movement.STOPPED,
}

STEERING_NAMES = {
    "hard-left": SteeringPosition.HARD_LEFT,
    "half-left": SteeringPosition.HALF_LEFT,
    "straight": SteeringPosition.STRAIGHT,
    "half-right": SteeringPosition.HALF_RIGHT,
    "hard-right": SteeringPosition.HARD_RIGHT,
}


def parse_segment(text):
    """``"forward,hard-left,2.0"`` -> ``(ControlCommand, 2.0)``."""
    parts = [p.strip().lower() for p in text.split(",")]
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(
            f"segment must be MOVEMENT,STEERING,SECONDS, got {text!r}")
    movement, steering, seconds = parts
    if movement not in MOVEMENT_NAMES:
        raise argparse.ArgumentTypeError(
            f"movement must be one of {', '.join(MOVEMENT_NAMES)}")
    if steering not in STEERING_NAMES:
        raise argparse.ArgumentTypeError(
            f"steering must be one of {', '.join(STEERING_NAMES)}")
    try:
        duration = float(seconds)
    except ValueError:
        raise argparse.ArgumentTypeError(f"bad duration {seconds!r}") from None
    if not math.isfinite(duration) or duration < 0:
        raise argparse.ArgumentTypeError(f"bad duration {seconds!r}")
    return ControlCommand(MOVEMENT_NAMES[movement], STEERING_NAMES[steering]), duration


def _add_session_args(parser):
    parser.add_argument("--scenario", default="free", choices=sorted(SCENARIOS),
                        help="Built-in scenario layout.")
    parser.add_argument("--map", default=None,
                        help="Drive a saved map instead of a built-in scenario.")
    parser.add_argument("--difficulty", default="medium", choices=DIFFICULTIES)
    parser.add_argument("--car", default="picanto", choices=sorted(CAR_CONFIGS))
    parser.add_argument("--width", type=float, default=1200.0)
    parser.add_argument("--height", type=float, default=800.0)
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the random free-drive layout.")
    parser.add_argument("--maps", default=None,
                        help="Map store path (default: $PARKSIM_MAPS or ~/.parksim/maps.json).")


def _build_simulator(args):
    """Return a simulator, or None when the requested map does not exist."""
    rng = np.random.default_rng(args.seed)
    scenario = args.scenario
    if args.map is not None:
        data = MapStorage(args.maps).load_map(args.map)
        if data is None:
            print(f"No saved map named {args.map!r}", file=sys.stderr)
            return None
        scenario = scenario_from_map(data, args.width, args.height)
    return ParkingSimulator(args.width, args.height, scenario, args.difficulty,
                            CAR_CONFIGS[args.car], rng=rng)


# ── parksim-drive ─────────────────────────────────────────────────────────

def drive_main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Drive scripted segments through a scenario and report the result.")
    _add_session_args(parser)
    parser.add_argument("--segment", type=parse_segment, action="append", default=[],
                        metavar="MOVEMENT,STEERING,SECONDS",
                        help="e.g. forward,hard-left,1.5 (repeatable, run in order)")
    parser.add_argument("--dt", type=float, default=DT)
    parser.add_argument("--save", default=None, help="Write a PNG of the final frame.")
    parser.add_argument("--trajectory", default=None,
                        help="Write the recorded trajectory as JSON.")
    args = parser.parse_args(argv)
    if not 0 < args.dt <= MAX_DT:
        parser.error(f"--dt must be in (0, {MAX_DT}]")

    sim = _build_simulator(args)
    if sim is None:
        return 2

    traj = sim.run_commands(args.segment, dt=args.dt)
    x, y, heading = sim.car.pose()
    print(f"{sim.scenario.name} | {sim.car.geometry.name} | {len(traj) - 1} ticks")
    print(f"  centre=({x:.1f}, {y:.1f})  heading={math.degrees(heading):.1f}°  "
          f"trail={len(sim.car.trails)} pts/wheel  parked={sim.is_parked()}")

    if args.trajectory:
        payload = {
            "scenario": sim.scenario.name,
            "car": sim.car.geometry.name,
            "dt": args.dt,
            "columns": ["center_x", "center_y", "heading", "velocity", "steering_angle"],
            "rows": traj.tolist(),
        }
        with open(args.trajectory, "w") as f:
            json.dump(payload, f, indent=2)
        print(f"Saved trajectory to {args.trajectory}")

    if args.save:
        from parksim import renderer
        import matplotlib.pyplot as plt

        fig = renderer.render_scenario(sim.scenario, sim.car, sim.width, sim.height)
        fig.savefig(args.save, dpi=100)
        plt.close(fig)
        print(f"Saved frame to {args.save}")
    return 0


# ── parksim-maps ──────────────────────────────────────────────────────────

def maps_main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Manage saved map layouts.")
    parser.add_argument("--maps", default=None, help="Map store path.")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("list", help="List saved map names.")
    show = sub.add_parser("show", help="Print a map as JSON.")
    show.add_argument("name")
    delete = sub.add_parser("delete", help="Delete a saved map.")
    delete.add_argument("name")
    edit = sub.add_parser("edit", help="Open the map editor; new names start empty.")
    edit.add_argument("name")
    edit.add_argument("--width", type=float, default=1200.0)
    edit.add_argument("--height", type=float, default=800.0)
    args = parser.parse_args(argv)

    storage = MapStorage(args.maps)
    if args.command == "list":
        for name in storage.map_names():
            print(name)
        return 0
    if args.command == "edit":
        return _edit_map(storage, args.name, args.width, args.height)

    data = storage.load_map(args.name)
    if data is None:
        print(f"No saved map named {args.name!r}", file=sys.stderr)
        return 2
    if args.command == "show":
        print(json.dumps(data.to_dict(), indent=2))
        return 0
    if not storage.delete_map(args.name):
        return 2
    print(f"Deleted {args.name}")
    return 0


def _edit_map(storage, name, width, height) -> int:
    from parksim.editor_app import EditorApp

    editor = Editor(width, height)
    if name in storage.map_names():
        data = storage.load_map(name)
        if data is None:
            return 2
        editor.load_map_data(data)
    EditorApp(editor, storage, name, width, height).run()
    return 0


# ── parksim (interactive) ─────────────────────────────────────────────────

def app_main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Interactive parking practice window.")
    _add_session_args(parser)
    parser.add_argument("--rear-trails-only", action="store_true",
                        help="Hide the front wheel trails.")
    args = parser.parse_args(argv)

    sim = _build_simulator(args)
    if sim is None:
        return 2

    from parksim.app import ParkingApp

    ParkingApp(sim, show_front_trails=not args.rear_trails_only).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(drive_main())
