import numpy as np
import pytest

from parallax.core.types import PoseSample
from parallax.tracking.pose_signal import LandmarkSet, PoseSignalAdapter
from parallax.tracking.sampling import PoseChannel, SamplingLoop


class FakeSource:
    frame_size = (640, 480)

    def __init__(self, frames=None):
        self.frames = frames
        self.reads = 0

    def read(self):
        self.reads += 1
        if self.frames is None:
            return np.zeros((480, 640, 3), dtype=np.uint8)
        return self.frames.pop(0) if self.frames else None


class FakeDetector:
    def __init__(self):
        self.calls = 0

    def detect(self, frame):
        self.calls += 1
        points = np.full((468, 3), 0.5)
        points[234, :2] = (0.4, 0.5)
        points[454, :2] = (0.6, 0.5)
        return LandmarkSet(points)


@pytest.fixture
def detector():
    return FakeDetector()


def make_loop(detector, source=None, interval_ms=33.0):
    return SamplingLoop(PoseSignalAdapter(), detector, source or FakeSource(), interval_ms=interval_ms)


def test_detector_runs_at_most_once_per_interval(detector):
    loop = make_loop(detector)

    assert loop.tick(now=0.0)
    assert not loop.tick(now=0.010)
    assert not loop.tick(now=0.030)
    assert loop.tick(now=0.034)

    assert detector.calls == 2
    assert loop.channel.version == 2


def test_missing_frame_does_not_consume_interval(detector):
    source = FakeSource(frames=[None, np.zeros((480, 640, 3), dtype=np.uint8)])
    loop = make_loop(detector, source)

    assert not loop.tick(now=0.0)
    assert loop.tick(now=0.001)
    assert detector.calls == 1


def test_published_pose_comes_from_detection(detector):
    loop = make_loop(detector)

    loop.tick(now=0.0)

    pose = loop.channel.latest()
    assert (pose.x, pose.y, pose.depth) == pytest.approx((0.0, 0.0, 1.0))


def test_channel_keeps_last_write():
    channel = PoseChannel()
    channel.publish(PoseSample(0.1, 0.0, 1.0))
    channel.publish(PoseSample(0.2, 0.0, 1.0))

    assert channel.latest().x == 0.2
    assert channel.version == 2


def test_run_until_stopped():
    loop = None

    class StoppingDetector(FakeDetector):
        def detect(self, frame):
            loop.stop()
            return super().detect(frame)

    detector = StoppingDetector()
    loop = make_loop(detector)

    loop.run(idle_s=0.0)

    assert detector.calls == 1
    assert not loop.running
