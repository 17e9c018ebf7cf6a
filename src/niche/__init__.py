"""niche: agent task execution engine."""

__version__ = "0.1.0"
