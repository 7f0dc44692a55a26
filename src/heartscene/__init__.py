"""Animated Valentine scene: spinning hearts, a flower and 3D text."""

__version__ = "0.1.0"
