import pytest

from parallax.core.config import RetargetConfig
from parallax.core.errors import ConfigurationError, MalformedSourceError, MissingTargetError
from parallax.core.session import ParallaxSession
from parallax.core.types import MotionSample, PoseSample
from parallax.motion.bone_map import HumanoidBone
from parallax.motion.skeleton import humanoid_skeleton
from parallax.motion.source import MotionSource

IDENTITY = (0.0, 0.0, 0.0, 1.0)


def motion(*frames, bone="頭"):
    samples = [MotionSample(bone, f, (0.0, 0.0, 0.0), IDENTITY) for f in frames]
    return MotionSource(samples=samples, name="dance")


@pytest.fixture
def session():
    session = ParallaxSession()
    session.load_skeleton(humanoid_skeleton())
    return session


def test_render_tick_follows_published_pose():
    session = ParallaxSession()
    session.poses.publish(PoseSample(0.6, 0.0, 1.0))

    transform = session.render_tick()

    assert transform.position[0] == pytest.approx(0.9)


def test_center_step_also_sets_neutral_depth(session):
    session.adapter.last_face_width = 0.3
    session.poses.publish(PoseSample(0.2, 0.1, 1.0))

    session.calibrate("center")

    assert session.calibration.profile.offset_x == pytest.approx(-0.2)
    assert session.calibration.profile.offset_y == pytest.approx(-0.1)
    assert session.adapter.neutral_face_width == pytest.approx(0.3)


def test_corner_step_uses_latest_pose(session):
    session.poses.publish(PoseSample(0.5, -0.25, 1.0))

    session.calibrate("bottom_right")

    assert session.calibration.profile.sensitivity_x_right == pytest.approx(2.0)
    assert session.calibration.profile.sensitivity_y_bottom == pytest.approx(4.0)


def test_calibration_without_skeleton_is_rejected():
    session = ParallaxSession()
    session.adapter.last_face_width = 0.3
    session.poses.publish(PoseSample(0.2, 0.1, 1.0))
    before = session.calibration.profile.copy()

    with pytest.raises(MissingTargetError):
        session.calibrate("center")

    assert session.calibration.profile == before
    assert session.adapter.neutral_face_width == pytest.approx(0.2)


def test_unknown_calibration_step(session):
    with pytest.raises(ValueError):
        session.calibrate("middle")


def test_motion_without_skeleton_is_rejected():
    session = ParallaxSession()

    with pytest.raises(MissingTargetError):
        session.load_motion(motion(0, 30))

    assert session.clip is None
    assert session.motion is None


def test_loading_skeleton_after_motion_reapplies(session):
    session.load_motion(motion(0, 30))
    first = session.clip

    session.load_skeleton(humanoid_skeleton())

    assert session.clip is not first
    assert HumanoidBone.HEAD in session.clip.tracks


def test_failed_motion_load_keeps_previous_clip(session):
    clip = session.load_motion(motion(0, 30))
    broken = MotionSource(samples=[MotionSample("頭", 0, (0.0, 0.0), IDENTITY)], name="broken")

    with pytest.raises(MalformedSourceError):
        session.load_motion(broken)

    assert session.clip is clip
    assert session.motion.name == "dance"


def test_config_update_rebuilds_clip(session):
    session.load_motion(motion(0, 60))

    clip = session.update_retarget_config(RetargetConfig(loop=False))

    assert clip.loop is False
    assert session.retarget_config.loop is False


def test_invalid_config_update_keeps_previous_state(session):
    clip = session.load_motion(motion(0, 60))
    previous = session.retarget_config

    with pytest.raises(ConfigurationError):
        session.update_retarget_config(RetargetConfig(hip_scale=0.0))

    assert session.clip is clip
    assert session.retarget_config is previous


def test_reapply_without_motion_is_noop(session):
    assert session.reapply() is None
