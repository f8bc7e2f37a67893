"""Taskpad - personal task manager with a REST backend and CLI client."""

__version__ = "1.0.0"
