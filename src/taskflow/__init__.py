"""TaskFlow: a priority-ordered personal task manager."""

__version__ = "0.3.0"
