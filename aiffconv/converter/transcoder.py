"""Single file transcoding."""

import logging
import subprocess

from aiffconv.converter.ffmpeg import build_ffmpeg_command
from aiffconv.converter.verifier import check_output, read_aiff_info
from aiffconv.models.config import ConversionConfig, Settings
from aiffconv.models.plan import ConversionJob, TrackResult
from aiffconv.models.status import ErrorCode

logger = logging.getLogger(__name__)


def stderr_tail(text: str, max_lines: int = 5, max_len: int = 500) -> str:
    """Last lines of ffmpeg's stderr; the error is usually at the end."""
    lines = (text or "").strip().splitlines()
    tail = "\n".join(lines[-max_lines:])
    return tail[-max_len:]


def convert_file(
    job: ConversionJob,
    config: ConversionConfig,
    settings: Settings | None = None,
) -> TrackResult:
    """
    Convert a single file according to the run config.

    Steps:
    1. Build FFmpeg command
    2. Run it, blocking until ffmpeg exits
    3. Read back the AIFF header and warn on format mismatches

    A non-zero ffmpeg exit fails the file. Partial output is left in place.

    Args:
        job: Conversion job with source and output paths
        config: Output format
        settings: Optional global settings

    Returns:
        TrackResult with success/failure and details
    """
    settings = settings or Settings()
    cmd = build_ffmpeg_command(job, config, settings.ffmpeg_path)
    logger.debug("Running: %s", subprocess.list2cmdline(cmd))

    try:
        result = subprocess.run(
            cmd,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=settings.ffmpeg_timeout,
        )
    except subprocess.TimeoutExpired:
        return TrackResult(
            source_path=job.source_path,
            success=False,
            error_code=ErrorCode.TIMEOUT.value,
            error_message=f"FFmpeg timed out after {settings.ffmpeg_timeout} seconds",
        )
    except OSError as e:
        return TrackResult(
            source_path=job.source_path,
            success=False,
            error_code=ErrorCode.IO_ERROR.value,
            error_message=str(e),
        )

    if result.returncode != 0:
        return TrackResult(
            source_path=job.source_path,
            success=False,
            returncode=result.returncode,
            error_code=ErrorCode.ENCODE_FAIL.value,
            error_message=f"FFmpeg failed: {stderr_tail(result.stderr)}",
        )

    track = TrackResult(
        source_path=job.source_path,
        output_path=job.output_path,
        success=True,
        returncode=result.returncode,
    )

    if settings.verify_output:
        info = read_aiff_info(job.output_path)
        if info:
            track.output_sample_rate = info.sample_rate
            track.output_bit_depth = info.bit_depth
            track.output_channels = info.channels
            track.duration_seconds = info.duration
            track.output_size_bytes = info.size_bytes
            for problem in check_output(info, config):
                logger.warning("%s: %s", job.output_path.name, problem, extra={"output": job.output_path})

    return track
