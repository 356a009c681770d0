"""
Parallax Window

Head-tracked off-axis rendering and motion retargeting for a webcam
"window into a deeper space" display.

Features:
- Face or handheld-object tracking into a normalized pose signal
- 5-step quadrant sensitivity calibration
- Smoothed camera with off-axis (asymmetric) or look-at projection
- Retargeting of foreign motion data onto a humanoid skeleton
- JSON clip export and YAML configuration

License: MIT
"""

__version__ = "1.0.0"
__author__ = "Parallax Window Contributors"

from pathlib import Path

# Package root
PACKAGE_ROOT = Path(__file__).parent

__all__ = [
    "__version__",
    "PACKAGE_ROOT",
]
