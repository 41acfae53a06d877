"""Server-rendered task tracker: named users, tasks, filters."""

__version__ = "0.1.0"
