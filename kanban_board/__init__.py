"""Kanban board server with path-based project lookup."""

__version__ = "0.1.0"
