"""Cover art discovery."""

import logging
from pathlib import Path

from aiffconv.models.plan import CoverSearchResult
from aiffconv.models.status import CoverStrategy
from aiffconv.scanner.walker import find_matching, list_files

logger = logging.getLogger(__name__)

COVER_STEMS = (
    "cover", "Cover",
    "folder", "Folder",
    "front", "Front", "FRONT",
    "album", "Album",
    "artwork", "Artwork",
)
COVER_EXTENSIONS = (".jpg", ".png")

# Exact filenames checked in the source root, in priority order
ROOT_COVER_NAMES = tuple(f"{stem}{ext}" for stem in COVER_STEMS for ext in COVER_EXTENSIONS)

COVER_SUBFOLDERS = (
    "Covers", "covers",
    "Cover", "cover",
    "Artwork", "artwork",
    "Scans", "scans",
    "COVER FRONT BACK CD",
    "Cover Front Back 2cd",
)

# Case-insensitive; *.a.jpg / *.a.mini.jpg are common scan naming conventions
SUBFOLDER_FRONT_PATTERNS = ("front.jpg", "cover.jpg", "*.a.jpg", "*.a.mini.jpg")
SUBFOLDER_FALLBACK_PATTERN = "*.jpg"


def resolve_cover(source_dir: Path) -> CoverSearchResult | None:
    """
    Find the album cover for a source folder.

    Search order, first match wins:
    1. Well-known filenames in the source root (cover.jpg, Folder.png, ...)
    2. Known artwork subfolders: front cover names first, then any .jpg
    3. Any .jpg or .png in the source root

    Args:
        source_dir: Album folder being converted

    Returns:
        The chosen image, or None if the folder has no usable artwork
    """
    for name in ROOT_COVER_NAMES:
        candidate = source_dir / name
        if candidate.is_file():
            return CoverSearchResult(
                path=candidate,
                source_description=name,
                strategy=CoverStrategy.ROOT_NAME,
            )

    searched: set[Path] = set()
    for folder_name in COVER_SUBFOLDERS:
        folder = source_dir / folder_name
        if not folder.is_dir():
            continue
        # Case-insensitive filesystems report Covers/ and covers/ as the same folder
        resolved = folder.resolve()
        if resolved in searched:
            continue
        searched.add(resolved)

        match = _search_subfolder(folder)
        if match:
            return CoverSearchResult(
                path=match,
                source_description=f"{folder_name}/{match.name}",
                strategy=CoverStrategy.SUBFOLDER,
            )
        logger.debug("No cover image in %s", folder)

    images = [path for path in list_files(source_dir) if path.suffix.lower() in COVER_EXTENSIONS]
    if images:
        return CoverSearchResult(
            path=images[0],
            source_description=images[0].name,
            strategy=CoverStrategy.ANY_IMAGE,
        )

    return None


def _search_subfolder(folder: Path) -> Path | None:
    """Front cover names first, then any JPEG."""
    for pattern in SUBFOLDER_FRONT_PATTERNS:
        matches = find_matching(folder, pattern)
        if matches:
            return matches[0]

    matches = find_matching(folder, SUBFOLDER_FALLBACK_PATTERN)
    return matches[0] if matches else None
