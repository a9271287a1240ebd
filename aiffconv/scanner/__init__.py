"""Source folder scanning."""

from aiffconv.scanner.artwork import resolve_cover
from aiffconv.scanner.walker import enumerate_sources

__all__ = ["enumerate_sources", "resolve_cover"]
