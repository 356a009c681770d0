import json

import pytest

from parallax.cli import main
from parallax.core.config import AppConfig, AxisMap


@pytest.fixture
def motion_file(tmp_path):
    path = tmp_path / "dance.json"
    data = {
        "frame_rate": 30,
        "samples": [
            {"bone": "センター", "frame": 0, "position": [0, 10, 0], "rotation": [0, 0, 0, 1]},
            {"bone": "センター", "frame": 60, "position": [0, 12, 0], "rotation": [0, 0, 0, 1]},
            {"bone": "頭", "frame": 30, "position": [0, 0, 0], "rotation": [0, 0, 0, 1]},
            {"bone": "左目", "frame": 90, "position": [0, 0, 0], "rotation": [0, 0, 0, 1]},
        ],
    }
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path


def test_init_config_writes_preset(tmp_path):
    path = tmp_path / "config.yaml"

    assert main(["init-config", str(path), "--preset", "mobile"]) == 0

    assert AppConfig.from_yaml(path).calibration.base_z == 50.0


def test_retarget_exports_clip(tmp_path, motion_file):
    output = tmp_path / "clip.json"

    assert main(["retarget", str(motion_file), "--output", str(output)]) == 0

    exported = json.loads(output.read_text(encoding="utf-8"))
    clip = exported["clip"]
    assert exported["num_tracks"] == 2
    assert clip["name"] == "dance"
    assert clip["duration"] == pytest.approx(3.0)
    assert clip["unmatched_channels"] == 1

    hips = next(t for t in clip["tracks"] if t["bone"] == "hips")
    assert hips["positions"][0] == pytest.approx([0.0, 1.0, 0.0])


def test_retarget_uses_config_file(tmp_path, motion_file):
    config = AppConfig()
    config.retarget.axis_map = AxisMap.YXZ
    config_path = tmp_path / "config.yaml"
    config.to_yaml(config_path)
    output = tmp_path / "clip.json"

    assert main(["retarget", str(motion_file), "--output", str(output), "--config", str(config_path)]) == 0

    clip = json.loads(output.read_text(encoding="utf-8"))["clip"]
    hips = next(t for t in clip["tracks"] if t["bone"] == "hips")
    # Y relabeled as X, then mirrored
    assert hips["positions"][0] == pytest.approx([-1.0, 0.0, 0.0])


def test_retarget_bad_config_fails(tmp_path, motion_file):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("retarget:\n  axis_map: ABC\n")

    code = main(["retarget", str(motion_file), "--output", str(tmp_path / "out.json"), "--config", str(config_path)])

    assert code == 1
    assert not (tmp_path / "out.json").exists()


def test_retarget_malformed_file_fails(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    assert main(["retarget", str(path), "--output", str(tmp_path / "out.json")]) == 1


def test_project_prints_camera(capsys):
    assert main(["project", "0.6", "0", "1", "--frames", "1"]) == 0

    out = capsys.readouterr().out
    assert "0.900" in out
    assert "70.800" in out


def test_project_look_at_mode(capsys):
    assert main(["project", "0.6", "0", "1", "--look-at"]) == 0

    assert "Looking at origin" in capsys.readouterr().out
