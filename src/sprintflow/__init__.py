"""Sprint session scheduling and playback."""

__version__ = "0.1.0"
