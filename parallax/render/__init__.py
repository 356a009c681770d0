"""Camera projection for the parallax window."""

from parallax.render.viewport import ViewportProjector

__all__ = ["ViewportProjector"]
