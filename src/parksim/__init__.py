"""2D parking practice simulator built on a rear-axle bicycle model."""

__version__ = "0.1.0"
