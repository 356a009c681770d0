"""
Self-throttled sampling loop and the pose snapshot it publishes.

The sampling loop is the only writer of the pose; the render loop only
reads. Poses are immutable, so publishing is a single reference swap and
a reader never sees a half-written sample, even when the two loops run
on different threads.
"""

import logging
import time
from typing import Callable, Optional, Protocol, Tuple

import numpy as np

from parallax.core.types import PoseSample
from parallax.tracking.pose_signal import Detection, PoseSignalAdapter

logger = logging.getLogger(__name__)


class Detector(Protocol):
    def detect(self, frame: np.ndarray) -> Detection:
        ...


class FrameSource(Protocol):
    @property
    def frame_size(self) -> Tuple[int, int]:
        ...

    def read(self) -> Optional[np.ndarray]:
        ...


class PoseChannel:
    """Latest published pose (last writer wins)."""

    def __init__(self, initial: Optional[PoseSample] = None) -> None:
        self._latest = initial or PoseSample()
        self.version = 0

    def publish(self, pose: PoseSample) -> None:
        self._latest = pose
        self.version += 1

    def latest(self) -> PoseSample:
        return self._latest


class SamplingLoop:
    """
    Runs the detector at most once per ``interval_ms``.

    Calls made before the interval has elapsed do nothing except let the
    caller reschedule. The loop stops only when stop() is called.
    """

    def __init__(
        self,
        adapter: PoseSignalAdapter,
        detector: Detector,
        source: FrameSource,
        channel: Optional[PoseChannel] = None,
        interval_ms: float = 33.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.adapter = adapter
        self.detector = detector
        self.source = source
        self.channel = channel or PoseChannel(adapter.info)
        self.interval_ms = interval_ms
        self.clock = clock

        self._last_sample_time: Optional[float] = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def tick(self, now: Optional[float] = None) -> bool:
        """
        One scheduling opportunity.

        Returns:
            True if a frame was sampled this tick
        """
        now = self.clock() if now is None else now
        if (
            self._last_sample_time is not None
            and (now - self._last_sample_time) * 1000.0 < self.interval_ms
        ):
            return False

        frame = self.source.read()
        if frame is None:
            return False

        self._last_sample_time = now
        detection = self.detector.detect(frame)
        pose = self.adapter.update(detection, self.source.frame_size)
        self.channel.publish(pose)
        return True

    def run(self, idle_s: float = 0.001) -> None:
        """Tick until stop() is called."""
        self._running = True
        logger.info(f"Sampling loop started ({self.interval_ms:.0f} ms interval)")
        while self._running:
            self.tick()
            time.sleep(idle_s)
        logger.info("Sampling loop stopped")

    def stop(self) -> None:
        self._running = False
