"""Deep Drill: an endless digging game."""

__version__ = "0.1.0"
