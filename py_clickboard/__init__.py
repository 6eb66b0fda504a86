"""Procedural board generator for click-the-numbers puzzles."""

__version__ = "0.1.0"
