"""Branching-dialogue story graphs, story documents and playback."""

__version__ = "0.3.0"
