"""Export retargeted clips to JSON format."""

import json
from pathlib import Path

from parallax.core.types import RetargetedClip


def export_json(clip: RetargetedClip, output_path: Path):
    """
    Export a retargeted clip to JSON format.

    Args:
        clip: Retargeting result
        output_path: Output JSON file path
    """
    data = {
        "version": "1.0",
        "num_tracks": len(clip.tracks),
        "clip": clip.to_dict(),
    }

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
