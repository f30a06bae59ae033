"""Run a command while background helper processes run alongside it."""

__version__ = "0.1.0"
