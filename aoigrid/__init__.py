"""Grid-based area-of-interest tracking, entity movement and a tick-driven object manager."""

__version__ = "0.1.0"
__all__ = ["entity", "grid", "manager", "move", "store"]