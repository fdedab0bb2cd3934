"""Camera frame relay and HTTP surface for the rover teleoperation console."""

__version__ = "0.1.0"
