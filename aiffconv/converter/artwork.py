"""Cover art installation."""

import logging
import shutil
from pathlib import Path

from PIL import Image

from aiffconv.models.plan import CoverSearchResult
from aiffconv.utils.errors import CoverArtError

logger = logging.getLogger(__name__)

JPEG_MAGIC = b"\xff\xd8\xff"


def is_jpeg(path: Path) -> bool:
    """Check JPEG magic bytes (the extension is not trusted)."""
    with open(path, "rb") as f:
        return f.read(3) == JPEG_MAGIC


def install_cover(
    cover: CoverSearchResult,
    destination: Path,
    filename: str = "cover.jpg",
    transcode: bool = True,
    quality: int = 95,
) -> Path:
    """
    Write the chosen cover into the destination folder.

    JPEG sources are copied byte for byte. Anything else (typically PNG) is
    re-encoded to JPEG so the file matches its .jpg name, unless
    ``transcode`` is False, in which case it is copied unchanged.

    Args:
        cover: Search result to install
        destination: Destination folder
        filename: Output filename
        transcode: Re-encode non-JPEG images
        quality: JPEG quality for re-encoded images

    Returns:
        Path of the written file

    Raises:
        CoverArtError: If the image cannot be read or written
    """
    target = destination / filename

    try:
        if not transcode or is_jpeg(cover.path):
            shutil.copyfile(cover.path, target)
        else:
            logger.info("Re-encoding %s to JPEG", cover.source_description)
            with Image.open(cover.path) as img:
                img.convert("RGB").save(target, "JPEG", quality=quality)
    except OSError as e:
        raise CoverArtError(f"Could not install cover art from {cover.source_description}: {e}") from e

    return target
