import json

import pytest

from parksim.car_model import ControlCommand
from parksim.cli import drive_main, maps_main, parse_segment
from parksim.editor import MapData, MapObject, StartPosition
from parksim.map_storage import MapStorage


def test_parse_segment():
    command, seconds = parse_segment(" Reverse, half-right ,1.5")
    assert command == ControlCommand(-1, 0.5)
    assert seconds == 1.5


@pytest.mark.parametrize("text", [
    "forward,left,1", "sideways,straight,1", "forward,straight", "forward,straight,-1",
    "forward,straight,soon",
])
def test_parse_segment_rejects(text):
    with pytest.raises(Exception):
        parse_segment(text)


def test_drive_writes_trajectory_and_frame(tmp_path, capsys):
    png = tmp_path / "frame.png"
    traj = tmp_path / "traj.json"
    code = drive_main([
        "--scenario", "free", "--difficulty", "easy", "--seed", "5",
        "--segment", "forward,straight,1.0",
        "--segment", "stop,straight,0.5",
        "--save", str(png), "--trajectory", str(traj),
    ])
    assert code == 0
    out = capsys.readouterr().out
    assert "Free Drive (easy)" in out
    assert "90 ticks" in out

    payload = json.loads(traj.read_text())
    assert payload["car"] == "Kia Picanto"
    assert len(payload["rows"]) == 91
    assert payload["rows"][0][:2] == [600.0, 400.0]
    assert payload["rows"][-1][0] == pytest.approx(660.0)
    assert png.stat().st_size > 0


def test_drive_bad_segment_exits():
    with pytest.raises(SystemExit):
        drive_main(["--segment", "forward,nowhere,1"])


def test_drive_missing_map(tmp_path, capsys):
    code = drive_main(["--map", "nope", "--maps", str(tmp_path / "maps.json")])
    assert code == 2
    assert "No saved map" in capsys.readouterr().err


def test_drive_saved_map(tmp_path, capsys):
    path = tmp_path / "maps.json"
    MapStorage(path).save_map("lot", MapData(
        "lot", [MapObject("p", "parking", 500, 300, 70, 130)], StartPosition(200, 300, 0.0)))
    code = drive_main(["--map", "lot", "--maps", str(path),
                       "--segment", "forward,straight,0.5"])
    assert code == 0
    assert "lot | Kia Picanto | 30 ticks" in capsys.readouterr().out


def test_maps_commands(tmp_path, capsys):
    path = str(tmp_path / "maps.json")
    MapStorage(path).save_map("yard", MapData("yard", [], StartPosition(1, 2, 0.0)))

    assert maps_main(["--maps", path, "list"]) == 0
    assert capsys.readouterr().out.split() == ["yard"]

    assert maps_main(["--maps", path, "show", "yard"]) == 0
    shown = json.loads(capsys.readouterr().out)
    assert shown["start_position"] == {"x": 1, "y": 2, "heading": 0.0}

    assert maps_main(["--maps", path, "delete", "yard"]) == 0
    assert maps_main(["--maps", path, "delete", "yard"]) == 2
    assert MapStorage(path).map_names() == []


@pytest.mark.parametrize("dt", ["0", "-0.01", "0.5"])
def test_drive_rejects_bad_dt(dt):
    with pytest.raises(SystemExit):
        drive_main(["--dt", dt])
