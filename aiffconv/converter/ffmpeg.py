"""FFmpeg command builders for AIFF conversion."""

import shutil

from aiffconv.models.config import ConversionConfig
from aiffconv.models.plan import ConversionJob


def find_ffmpeg(ffmpeg_path: str = "ffmpeg") -> str | None:
    """Resolve the ffmpeg executable on PATH (or an explicit path)."""
    return shutil.which(ffmpeg_path)


def build_output_options(config: ConversionConfig) -> list[str]:
    """
    Build the ffmpeg output options for a config.

    - Resample only when a sample rate is requested
    - 16-bit: signed 16-bit big-endian PCM
    - 24-bit: 24-bit big-endian PCM fed from a 32-bit sample format
    - Unset bit depth: 24-bit container, which holds 16- or 24-bit sources losslessly
    - Tags are written as an ID3v2 chunk

    Pure function of the config.
    """
    options = []

    if config.sample_rate:
        options.extend(["-ar", str(config.sample_rate)])

    if config.bit_depth == 16:
        options.extend(["-sample_fmt", "s16", "-c:a", "pcm_s16be"])
    elif config.bit_depth == 24:
        options.extend(["-sample_fmt", "s32", "-c:a", "pcm_s24be"])
    else:
        options.extend(["-c:a", "pcm_s24be"])

    options.extend(["-write_id3v2", "1"])

    return options


def build_ffmpeg_command(
    job: ConversionJob,
    config: ConversionConfig,
    ffmpeg_path: str = "ffmpeg",
) -> list[str]:
    """
    Build FFmpeg command for one file.

    Args:
        job: Conversion job (source and output paths)
        config: Output format
        ffmpeg_path: Path to FFmpeg executable

    Returns:
        Command as list of strings
    """
    return [
        ffmpeg_path,
        "-y",  # Overwrite output
        "-i", str(job.source_path),
        *build_output_options(config),
        str(job.output_path),
    ]
