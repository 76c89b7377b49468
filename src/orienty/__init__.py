"""Orienty: orientation and convention validator for 3D scene graphs."""

__version__ = "0.1.0"
