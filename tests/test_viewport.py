import numpy as np
import pytest

from parallax.core.config import CalibrationProfile, ViewConfig
from parallax.core.types import PoseSample, ProjectionFrustum
from parallax.render.viewport import ViewportProjector, off_axis_frustum, target_position


@pytest.fixture
def profile():
    return CalibrationProfile()


def test_target_position_for_right_of_center_pose(profile):
    target = target_position(PoseSample(0.6, 0.0, 1.0), profile)

    np.testing.assert_allclose(target, [6.0, 0.0, 70.8])


def test_quadrant_sensitivity_selection():
    profile = CalibrationProfile(
        sensitivity_x_left=2.0,
        sensitivity_x_right=1.0,
        sensitivity_y_top=3.0,
        sensitivity_y_bottom=0.5,
    )

    upper_left = target_position(PoseSample(-0.5, 0.5, 1.0), profile)
    lower_right = target_position(PoseSample(0.5, -0.5, 1.0), profile)

    np.testing.assert_allclose(upper_left[:2], [-10.0, 15.0])
    np.testing.assert_allclose(lower_right[:2], [5.0, -2.5])


def test_invert_x_uses_the_mirrored_quadrant():
    profile = CalibrationProfile(invert_x=True, sensitivity_x_left=2.0)

    target = target_position(PoseSample(0.5, 0.0, 1.0), profile)

    assert target[0] == pytest.approx(-10.0)


def test_offsets_applied_before_quadrant_selection():
    profile = CalibrationProfile(offset_x=-0.2, sensitivity_x_left=2.0)

    target = target_position(PoseSample(0.1, 0.0, 1.0), profile)

    assert target[0] == pytest.approx(-0.1 * 10.0 * 2.0)


@pytest.mark.parametrize(
    "depth, invert_z, expected_z",
    [
        (10.0, False, 200.0),
        (-5.0, False, 1.0),
        (1.5, True, 70.8 * 0.6),
    ],
)
def test_depth_maps_to_clamped_distance(profile, depth, invert_z, expected_z):
    profile.invert_z = invert_z

    target = target_position(PoseSample(0.0, 0.0, depth), profile)

    assert target[2] == pytest.approx(expected_z)


def test_camera_starts_at_base_distance():
    projector = ViewportProjector(base_z=70.8)

    np.testing.assert_allclose(projector.position, [0.0, 0.0, 70.8])


def test_camera_eases_toward_target(profile):
    projector = ViewportProjector(ViewConfig(), base_z=profile.base_z)
    pose = PoseSample(0.6, 0.0, 1.0)

    first = projector.project(pose, profile)
    assert first.position[0] == pytest.approx(0.9)

    for _ in range(200):
        last = projector.project(pose, profile)
    np.testing.assert_allclose(last.position, [6.0, 0.0, 70.8], atol=1e-6)


def test_reset_returns_camera_home(profile):
    projector = ViewportProjector(base_z=profile.base_z)
    projector.project(PoseSample(0.6, 0.3, 0.5), profile)

    projector.reset()

    np.testing.assert_allclose(projector.position, [0.0, 0.0, 70.8])


def test_project_timed_matches_project_at_reference_rate(profile):
    a = ViewportProjector(base_z=profile.base_z)
    b = ViewportProjector(base_z=profile.base_z)
    pose = PoseSample(0.6, -0.4, 1.2)

    np.testing.assert_allclose(
        a.project(pose, profile).position,
        b.project_timed(pose, profile, dt=1 / 60).position,
    )


def test_centered_camera_gets_symmetric_frustum(profile):
    frustum = off_axis_frustum(np.array([0.0, 0.0, 10.0]), profile)

    assert frustum.left == pytest.approx(-0.1)
    assert frustum.right == pytest.approx(0.1)
    assert frustum.top == pytest.approx(0.1)
    assert frustum.bottom == pytest.approx(-0.1)
    assert frustum.is_symmetric


def test_offset_camera_gets_skewed_frustum(profile):
    frustum = off_axis_frustum(np.array([5.0, 0.0, 10.0]), profile)

    assert frustum.left == pytest.approx(-0.15)
    assert frustum.right == pytest.approx(0.05)
    assert not frustum.is_symmetric


def test_frustum_distance_is_floored(profile):
    frustum = off_axis_frustum(np.array([0.0, 0.0, 0.0]), profile)

    assert frustum.left == pytest.approx(-10.0)
    assert np.isfinite(frustum.right)


def test_off_axis_mode_keeps_camera_unrotated(profile):
    projector = ViewportProjector(base_z=profile.base_z)

    first = projector.project(PoseSample(0.6, 0.2, 1.0), profile)
    second = projector.project(PoseSample(-0.6, 0.2, 1.0), profile)

    np.testing.assert_array_equal(first.rotation, np.eye(3))
    assert first.look_at is None
    assert first.frustum.far == 1000.0
    assert first.frustum.left != pytest.approx(second.frustum.left)


def test_look_at_mode_aims_at_origin(profile):
    profile.look_at_center = True
    projector = ViewportProjector(base_z=profile.base_z)

    transform = projector.project(PoseSample(0.6, 0.2, 1.0), profile)

    np.testing.assert_array_equal(transform.look_at, [0.0, 0.0, 0.0])
    assert transform.frustum.is_symmetric
    assert transform.frustum.far == 100.0
    back = transform.rotation[:, 2]
    np.testing.assert_allclose(back, transform.position / np.linalg.norm(transform.position))


def test_projection_matrix_for_symmetric_bounds():
    frustum = ProjectionFrustum(-0.1, 0.1, 0.1, -0.1, 0.1, 1000.0)

    matrix = frustum.to_matrix()

    assert matrix[0, 0] == pytest.approx(1.0)
    assert matrix[0, 2] == pytest.approx(0.0)
    assert matrix[3, 2] == pytest.approx(-1.0)
