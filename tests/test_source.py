import json

import pytest

from parallax.core.errors import MalformedSourceError
from parallax.motion.source import load_motion_json, parse_motion


def test_parse_motion():
    source = parse_motion(
        {
            "frame_rate": 60,
            "samples": [
                {"bone": "頭", "frame": 3, "position": [1, 2, 3], "rotation": [0, 0, 0, 1]},
            ],
        },
        name="wave",
    )

    assert source.frame_rate == 60.0
    assert source.name == "wave"
    sample = source.samples[0]
    assert sample.bone_name == "頭"
    assert sample.frame_index == 3.0
    assert sample.position == (1.0, 2.0, 3.0)
    assert sample.rotation == (0.0, 0.0, 0.0, 1.0)


def test_frame_rate_defaults_to_thirty():
    assert parse_motion({"samples": []}).frame_rate == 30.0


@pytest.mark.parametrize(
    "data",
    [
        [],
        {"frames": []},
        {"samples": {}},
        {"samples": [{"bone": "頭", "frame": 0, "position": [0, 0, 0]}]},
        {"samples": [{"bone": "頭", "frame": "x", "position": [0, 0, 0], "rotation": [0, 0, 0, 1]}]},
        {"samples": [], "frame_rate": "fast"},
    ],
)
def test_malformed_documents(data):
    with pytest.raises(MalformedSourceError):
        parse_motion(data)


def test_load_uses_file_stem_as_name(tmp_path):
    path = tmp_path / "walk.json"
    path.write_text(json.dumps({"samples": []}), encoding="utf-8")

    assert load_motion_json(path).name == "walk"


def test_load_missing_file(tmp_path):
    with pytest.raises(MalformedSourceError):
        load_motion_json(tmp_path / "missing.json")
