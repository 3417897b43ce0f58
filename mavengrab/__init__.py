"""mavengrab: grab Maven dependencies at runtime."""

__version__ = "0.1.0"
