"""TaskTrack API - personal task tracking backend."""

__version__ = "1.0.0"
