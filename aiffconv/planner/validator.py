"""Validation of a conversion request."""

from pathlib import Path

from pydantic import ValidationError

from aiffconv.converter.ffmpeg import find_ffmpeg
from aiffconv.models.config import ALLOWED_BIT_DEPTHS, ConversionConfig, Settings
from aiffconv.utils.errors import ConfigError, DependencyError

FFMPEG_INSTALL_HINTS = [
    "macOS: brew install ffmpeg",
    "Ubuntu: sudo apt install ffmpeg",
]


def validate_bit_depth(bit_depth: int | None) -> int | None:
    """
    Validate requested output bit depth.

    Raises:
        ConfigError: If bit depth is set and not 16 or 24
    """
    if bit_depth is not None and bit_depth not in ALLOWED_BIT_DEPTHS:
        raise ConfigError("Bit depth must be 16 or 24")
    return bit_depth


def validate_source_dir(source_dir: Path) -> Path:
    """
    Validate that the source folder exists.

    Raises:
        ConfigError: If the folder is missing or not a directory
    """
    if not source_dir.is_dir():
        raise ConfigError(f"Source folder does not exist: {source_dir}")
    return source_dir


def require_ffmpeg(settings: Settings) -> str:
    """
    Resolve the ffmpeg executable.

    Returns:
        Absolute path of the executable

    Raises:
        DependencyError: If ffmpeg cannot be found
    """
    path = find_ffmpeg(settings.ffmpeg_path)
    if not path:
        raise DependencyError(
            f"{settings.ffmpeg_path} is not installed. Please install it first.",
            hints=FFMPEG_INSTALL_HINTS,
        )
    return path


def validate_request(
    sample_rate: int | None,
    bit_depth: int | None,
    source_dir: Path,
    settings: Settings,
) -> ConversionConfig:
    """
    Validate a request and freeze it into a ConversionConfig.

    Checks run in order (bit depth, source folder, ffmpeg) and nothing is
    written to disk before all of them pass.

    Args:
        sample_rate: Requested output rate in Hz, or None to preserve
        bit_depth: Requested output bit depth, or None to preserve
        source_dir: Folder holding the source files
        settings: Global settings (ffmpeg location)

    Returns:
        Validated config

    Raises:
        ConfigError: On the first failed check
    """
    validate_bit_depth(bit_depth)
    validate_source_dir(source_dir)
    require_ffmpeg(settings)
    return ConversionConfig(sample_rate=sample_rate, bit_depth=bit_depth)


def load_settings() -> Settings:
    """
    Read settings from the environment.

    Raises:
        ConfigError: If an AIFFCONV_* variable holds an invalid value
    """
    try:
        return Settings()
    except ValidationError as e:
        problems = [
            f"{Settings.model_config['env_prefix']}{str(err['loc'][0]).upper()}: {err['msg']}"
            for err in e.errors()
        ]
        raise ConfigError(f"Invalid configuration: {'; '.join(problems)}") from e
