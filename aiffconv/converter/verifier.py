"""Read back converted AIFF files."""

import logging
from dataclasses import dataclass
from pathlib import Path

from mutagen import MutagenError
from mutagen.aiff import AIFF

from aiffconv.models.config import ConversionConfig

logger = logging.getLogger(__name__)


@dataclass
class AiffInfo:
    """Stream facts from an AIFF header."""

    sample_rate: int
    bit_depth: int
    channels: int
    duration: float
    size_bytes: int


def read_aiff_info(path: Path) -> AiffInfo | None:
    """
    Read stream info from an AIFF file with mutagen.

    Returns None when the file is missing or not a parseable AIFF.
    """
    try:
        audio = AIFF(path)
        size_bytes = path.stat().st_size
    except (MutagenError, OSError) as e:
        logger.debug("Could not read AIFF header of %s: %s", path, e)
        return None

    return AiffInfo(
        sample_rate=audio.info.sample_rate,
        bit_depth=audio.info.bits_per_sample,
        channels=audio.info.channels,
        duration=audio.info.length,
        size_bytes=size_bytes,
    )


def check_output(info: AiffInfo, config: ConversionConfig) -> list[str]:
    """
    Compare an output header with the requested format.

    Returns:
        Mismatch descriptions (empty if the output matches)
    """
    problems = []
    if config.sample_rate and info.sample_rate != config.sample_rate:
        problems.append(f"sample rate {info.sample_rate} Hz, expected {config.sample_rate} Hz")
    if config.bit_depth and info.bit_depth != config.bit_depth:
        problems.append(f"bit depth {info.bit_depth}, expected {config.bit_depth}")
    return problems
