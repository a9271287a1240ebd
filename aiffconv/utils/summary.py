"""Destination folder summary."""

from dataclasses import dataclass
from pathlib import Path

from aiffconv.models.plan import OUTPUT_SUFFIX


@dataclass
class DestinationSummary:
    """What actually ended up in the destination folder."""

    aiff_count: int = 0
    total_bytes: int = 0

    @property
    def total_size(self) -> str:
        return format_size(self.total_bytes)


def summarize_destination(destination: Path) -> DestinationSummary:
    """
    Count AIFF files and total size under the destination folder.

    Reads the filesystem rather than trusting job results, so files that
    ffmpeg failed to write are not counted.
    """
    summary = DestinationSummary()
    if not destination.is_dir():
        return summary

    for path in destination.rglob("*"):
        if not path.is_file():
            continue
        summary.total_bytes += path.stat().st_size
        if path.suffix == OUTPUT_SUFFIX:
            summary.aiff_count += 1

    return summary


def format_size(num_bytes: int) -> str:
    """Format a byte count in binary units, e.g. 1.5M."""
    size = float(num_bytes)
    for unit in ("B", "K", "M", "G"):
        if size < 1024:
            return f"{int(size)}{unit}" if unit == "B" else f"{size:.1f}{unit}"
        size /= 1024
    return f"{size:.1f}T"
