"""Tunable parameters for head pose estimation."""

import math
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping

from .constants import ROTATION, MIN_FACE_HEIGHT
from .exceptions import ConfigError


@dataclass(frozen=True)
class EstimatorConfig:
    """
    Estimator tuning values.

    The defaults are empirically tuned for a VRM avatar neck joint and are
    cosmetic rather than correctness requirements.

    Attributes:
        amplification: Multiplier turning subtle nose deviation into a visible tilt
        pitch_range: Symmetric pitch limit in radians
        yaw_range: Symmetric yaw limit in radians
        pitch_smoothing: Fraction of the distance to the new pitch covered per frame
        yaw_smoothing: Fraction of the distance to the new yaw covered per frame
        min_face_height: Face heights below this are treated as degenerate
    """

    amplification: float = ROTATION["pitch"]["amplification"]
    pitch_range: float = ROTATION["pitch"]["range"]
    yaw_range: float = ROTATION["yaw"]["range"]
    pitch_smoothing: float = ROTATION["pitch"]["smoothing"]
    yaw_smoothing: float = ROTATION["yaw"]["smoothing"]
    min_face_height: float = MIN_FACE_HEIGHT

    def __post_init__(self) -> None:
        if not self.amplification > 0:
            raise ConfigError(f"amplification must be positive, got {self.amplification}")
        for name in ("pitch_range", "yaw_range"):
            value = getattr(self, name)
            if not 0 < value <= math.pi / 2:
                raise ConfigError(f"{name} must be in (0, pi/2], got {value}")
        for name in ("pitch_smoothing", "yaw_smoothing"):
            value = getattr(self, name)
            if not 0 <= value <= 1:
                raise ConfigError(f"{name} must be in [0, 1], got {value}")
        if not self.min_face_height > 0:
            raise ConfigError(f"min_face_height must be positive, got {self.min_face_height}")

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> 'EstimatorConfig':
        """
        Build a config from a mapping, e.g. parsed JSON or CLI arguments.
        A "smoothing" key sets both axes at once.

        Args:
            values: Mapping of field names to values

        Returns:
            Validated EstimatorConfig
        """
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, float] = {}
        for key, value in values.items():
            if value is None:
                continue
            if key == "smoothing":
                kwargs.setdefault("pitch_smoothing", float(value))
                kwargs.setdefault("yaw_smoothing", float(value))
            elif key in known:
                kwargs[key] = float(value)
            else:
                raise ConfigError(f"Unknown estimator option: {key}")
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
