"""Detector bindings for the pose signal."""
