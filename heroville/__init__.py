"""Heroville: idle hero and dungeon simulation core."""

__version__ = "0.1.0"
