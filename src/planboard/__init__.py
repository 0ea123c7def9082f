"""Planboard - Kanban tasks and a booking calendar from the command line."""

__version__ = "0.1.0"
