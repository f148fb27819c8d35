"""Named map layouts stored as one JSON object on disk.

Storage problems never reach the caller: they are reported on stderr and
the operation becomes a no-op (reads return an empty result).
"""

import json
import os
import pathlib
import sys
from typing import Dict, List, Optional, Union

from parksim.editor import MapData

DEFAULT_PATH = pathlib.Path("~/.parksim/maps.json")
ENV_VAR = "PARKSIM_MAPS"


def default_path() -> pathlib.Path:
    return pathlib.Path(os.environ.get(ENV_VAR, str(DEFAULT_PATH))).expanduser()


class MapStorage:
    def __init__(self, path: Union[str, os.PathLike, None] = None):
        self.path = pathlib.Path(path).expanduser() if path is not None else default_path()

    def saved_maps(self) -> Dict[str, dict]:
        """Raw ``name -> map dict`` mapping, empty if missing or unreadable."""
        if not self.path.exists():
            return {}
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            print(f"Failed to load maps from {self.path}: {exc}", file=sys.stderr)
            return {}
        if not isinstance(data, dict):
            print(f"Ignoring {self.path}: expected a JSON object", file=sys.stderr)
            return {}
        return data

    def _write(self, maps: Dict[str, dict]) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            with open(tmp, "w") as f:
                json.dump(maps, f, indent=2)
            os.replace(tmp, self.path)
        except OSError as exc:
            print(f"Failed to save maps to {self.path}: {exc}", file=sys.stderr)
            return False
        return True

    def save_map(self, name: str, data: MapData) -> bool:
        maps = self.saved_maps()
        maps[name] = data.to_dict()
        return self._write(maps)

    def delete_map(self, name: str) -> bool:
        maps = self.saved_maps()
        if name not in maps:
            return False
        del maps[name]
        return self._write(maps)

    def map_names(self) -> List[str]:
        return list(self.saved_maps())

    def load_map(self, name: str) -> Optional[MapData]:
        raw = self.saved_maps().get(name)
        if raw is None:
            return None
        try:
            return MapData.from_dict(raw)
        except (KeyError, TypeError, ValueError) as exc:
            print(f"Map {name!r} in {self.path} is malformed: {exc}", file=sys.stderr)
            return None
