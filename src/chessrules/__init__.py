"""Chess rules engine: legal moves, move execution, terminal detection, notation."""

__version__ = "0.1.0"
