"""
Exception types raised by the parallax window core.

Degenerate geometry (zero-width faces, cameras on the screen plane) is
clamped where it happens and never shows up here. Unmapped source bones
are counted, not raised.
"""


class ParallaxError(Exception):
    """Base class for all parallax errors."""


class ConfigurationError(ParallaxError, ValueError):
    """A profile or config value violates its invariants."""


class MissingTargetError(ParallaxError):
    """Retargeting or calibration was requested before a target skeleton was loaded."""


class MalformedSourceError(ParallaxError, ValueError):
    """Motion source data could not be read or failed validation."""


class RetargetInProgressError(ParallaxError, RuntimeError):
    """A retarget was started while another one is still running."""
