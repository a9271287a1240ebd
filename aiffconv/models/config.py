"""Configuration models."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, PositiveInt
from pydantic_settings import BaseSettings

REDBOOK_SAMPLE_RATE = 44100
REDBOOK_BIT_DEPTH = 16
ALLOWED_BIT_DEPTHS = (16, 24)


class ConversionConfig(BaseModel):
    """Output format for a run. Unset fields preserve the source value."""

    sample_rate: PositiveInt | None = None
    bit_depth: Literal[16, 24] | None = None

    model_config = {"frozen": True}

    def describe(self) -> str:
        """Human-readable format summary for the run banner."""
        if self.sample_rate and self.bit_depth:
            return f"{self.sample_rate} Hz / {self.bit_depth}-bit"
        if self.sample_rate:
            return f"{self.sample_rate} Hz / original bit depth"
        if self.bit_depth:
            return f"original sample rate / {self.bit_depth}-bit"
        return "original quality (no resampling)"


class Settings(BaseSettings):
    """Global configuration from environment or defaults."""

    # FFmpeg settings
    ffmpeg_path: str = "ffmpeg"
    ffmpeg_timeout: int | None = None  # No limit; a hung ffmpeg blocks the batch

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_file: Path | None = None
    jsonl_log: bool = False

    # Cover art
    cover_filename: str = "cover.jpg"
    cover_transcode: bool = True  # Re-encode non-JPEG covers so content matches the name
    cover_jpeg_quality: int = 95

    # Output checks
    verify_output: bool = True
    fail_on_error: bool = False

    model_config = {"env_prefix": "AIFFCONV_"}
