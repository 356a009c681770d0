"""Export modules for retargeted clips."""

from parallax.export.json_export import export_json

__all__ = ["export_json"]
