"""RouteCraft — route planning and geometry synchronization engine."""

__version__ = "0.1.0"
