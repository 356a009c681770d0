"""
Reader for flat motion-sample dumps.

Binary motion formats are decoded by an external parser; this module
reads the flat JSON dump such a parser can produce:

    {
        "frame_rate": 30,
        "samples": [
            {"bone": "センター", "frame": 0,
             "position": [0, 10, 0], "rotation": [0, 0, 0, 1]},
            ...
        ]
    }
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

from parallax.core.errors import MalformedSourceError
from parallax.core.types import MotionSample
from parallax.motion.retarget import SOURCE_FPS


@dataclass
class MotionSource:
    """Parsed motion data ready for retargeting."""

    samples: List[MotionSample] = field(default_factory=list)
    frame_rate: float = SOURCE_FPS
    name: str = "motion"


def parse_motion(data: dict, name: str = "motion") -> MotionSource:
    """Build a MotionSource from an already-decoded JSON document."""
    if not isinstance(data, dict) or "samples" not in data:
        raise MalformedSourceError("Motion data must be an object with a 'samples' list")

    raw_samples = data["samples"]
    if not isinstance(raw_samples, list):
        raise MalformedSourceError("'samples' must be a list")

    samples = []
    for i, raw in enumerate(raw_samples):
        try:
            samples.append(
                MotionSample(
                    bone_name=str(raw["bone"]),
                    frame_index=float(raw["frame"]),
                    position=tuple(float(v) for v in raw["position"]),
                    rotation=tuple(float(v) for v in raw["rotation"]),
                )
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedSourceError(f"Sample {i} is malformed: {exc}") from exc

    try:
        frame_rate = float(data.get("frame_rate", SOURCE_FPS))
    except (TypeError, ValueError) as exc:
        raise MalformedSourceError(f"Invalid frame_rate: {data.get('frame_rate')!r}") from exc

    return MotionSource(samples=samples, frame_rate=frame_rate, name=name)


def load_motion_json(path: Union[str, Path]) -> MotionSource:
    """
    Load a motion dump from disk.

    Raises:
        MalformedSourceError: File is unreadable or not a valid dump
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MalformedSourceError(f"Could not read motion file {path}: {exc}") from exc

    return parse_motion(data, name=path.stem)
