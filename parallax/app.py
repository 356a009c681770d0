"""
Application setup and the headless live-tracking loop.
"""

import logging
import sys
import time
from typing import Callable, Optional

from parallax.core.config import AppConfig
from parallax.core.session import ParallaxSession
from parallax.core.types import CameraTransform

# Render loop target
FRAME_INTERVAL_S = 1.0 / 60.0


def setup_logging(level: int = logging.INFO):
    """Configure logging for the application."""
    formatter = logging.Formatter(
        fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    logging.getLogger('parallax').setLevel(level)


def run_live(
    config: AppConfig,
    duration_s: Optional[float] = None,
    on_frame: Optional[Callable[[CameraTransform], None]] = None,
) -> ParallaxSession:
    """
    Drive webcam sampling and the camera update on one thread.

    Both loops are interleaved cooperatively: each render frame gives the
    sampling loop one scheduling opportunity, which it skips until its
    interval has elapsed.

    Args:
        config: Application configuration
        duration_s: Stop after this many seconds (runs until Ctrl+C if None)
        on_frame: Called with every camera transform

    Returns:
        The session, for inspecting the final state
    """
    from parallax.tracking.capture import CameraCapture
    from parallax.tracking.sampling import SamplingLoop
    from parallax.vision.face_landmarks import FaceLandmarkDetector

    logger = logging.getLogger(__name__)

    if config.tracking.mode != "face":
        raise ValueError("Live tracking ships a face detector only; set tracking.mode to 'face'")

    session = ParallaxSession(config)
    detector = FaceLandmarkDetector()
    start = time.monotonic()

    with CameraCapture(config.tracking) as camera:
        sampler = SamplingLoop(
            session.adapter,
            detector,
            camera,
            channel=session.poses,
            interval_ms=config.tracking.sample_interval_ms,
        )
        logger.info("Live tracking started (Ctrl+C to stop)")
        try:
            while duration_s is None or time.monotonic() - start < duration_s:
                sampler.tick()
                transform = session.render_tick()
                if on_frame is not None:
                    on_frame(transform)
                time.sleep(FRAME_INTERVAL_S)
        except KeyboardInterrupt:
            logger.info("Interrupted")
        finally:
            detector.close()

    return session
