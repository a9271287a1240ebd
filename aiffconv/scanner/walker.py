"""Directory listing for source and artwork files."""

import fnmatch
from pathlib import Path

from aiffconv.models.profile import FormatProfile


def _sort_key(path: Path) -> tuple[str, str]:
    return path.name.lower(), path.name


def list_files(directory: Path) -> list[Path]:
    """
    List visible regular files directly inside a directory.

    Hidden files (leading dot, including macOS ``._`` resource forks) are
    skipped. Results are deduplicated by resolved path and sorted by name
    so that ordering does not depend on the filesystem.
    """
    entries = sorted(
        (entry for entry in directory.iterdir() if not entry.name.startswith(".") and entry.is_file()),
        key=_sort_key,
    )

    seen: set[Path] = set()
    files = []
    for entry in entries:
        resolved = entry.resolve()
        if resolved in seen:
            continue
        seen.add(resolved)
        files.append(entry)

    return files


def enumerate_sources(source_dir: Path, profile: FormatProfile) -> list[Path]:
    """
    List the source files a run will convert.

    Non-recursive. Extension matching follows the profile: exact case for
    FLAC and WAV, any case for DSD (.dsf/.DSF/.dff/.DFF) in a single scan.

    Args:
        source_dir: Folder holding the album
        profile: Format profile of the running command

    Returns:
        Source paths in conversion order
    """
    return [path for path in list_files(source_dir) if profile.matches(path.name)]


def find_matching(directory: Path, pattern: str) -> list[Path]:
    """Case-insensitive glob over the files directly inside a directory."""
    pattern = pattern.lower()
    return [path for path in list_files(directory) if fnmatch.fnmatchcase(path.name.lower(), pattern)]
