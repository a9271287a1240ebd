"""aiffconv - lossless to AIFF batch converter."""

__version__ = "0.1.0"
