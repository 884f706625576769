"""YAML file based loader for robot specs and trajectory parameters."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from trajectories import RobotSpecs, Trajectory, TrajectoryParams

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "default_trajectory.yaml"


class YamlConfigLoader:
    """Reads `robot` and `trajectory` sections from a YAML file.

    Expected layout::

        robot:
          max_velocity: 5.0
          max_acceleration: 3.5
          base_width: 2.0
        trajectory:
          alpha: 40.0
          sample_count: 1000
          is_tank: true
          path_type: quintic_hermite
          waypoints:
            - [0.0, 0.0, 1.5707963]
            - {x: 0.0, y: 100.0, heading: 1.5707963, velocity: 0.0}

    A missing file or a file that is not a mapping is logged and treated as
    empty, which then fails validation when the specs are built.

    Args:
        config_path: YAML file path. Defaults to the bundled example config.
    """

    def __init__(self, config_path: Path | str | None = None) -> None:
        self._path = Path(config_path) if config_path is not None else _DEFAULT_CONFIG_PATH

    def read(self) -> dict[str, Any]:
        """Read the raw YAML content as a dict."""
        if not self._path.exists():
            logger.warning("Config file not found: %s", self._path)
            return {}

        with open(self._path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            logger.warning("Invalid YAML format in %s", self._path)
            return {}

        return data

    def load(self) -> tuple[RobotSpecs, TrajectoryParams]:
        """Load and validate the robot specs and trajectory parameters."""
        raw = self.read()
        specs = RobotSpecs.from_dict(raw.get("robot") or {})
        params = TrajectoryParams.from_dict(raw.get("trajectory") or {})

        logger.info(
            "Config loaded from %s (%d waypoints, tank=%s)",
            self._path, len(params.waypoints), params.is_tank,
        )
        return specs, params


def load_trajectory(config_path: Path | str | None = None) -> Trajectory:
    """Build a trajectory straight from a YAML config file."""
    specs, params = YamlConfigLoader(config_path).load()
    return Trajectory(specs, params)
