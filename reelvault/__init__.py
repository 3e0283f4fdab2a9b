"""Authentication and session subsystem for the reelvault movie collection app."""

__version__ = "1.0.0"
