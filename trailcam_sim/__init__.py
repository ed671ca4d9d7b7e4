"""Trail camera settings simulator."""

__version__ = "0.1.0"
