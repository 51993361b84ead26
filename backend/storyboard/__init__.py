"""Storyboard Maker API: scripts and storyboards from short movie ideas."""

__version__ = "1.0.0"
