"""Audio conversion module."""

from aiffconv.converter.artwork import install_cover
from aiffconv.converter.ffmpeg import build_ffmpeg_command, build_output_options
from aiffconv.converter.pipeline import ConversionPipeline
from aiffconv.converter.transcoder import convert_file
from aiffconv.converter.verifier import read_aiff_info

__all__ = [
    "build_ffmpeg_command",
    "build_output_options",
    "convert_file",
    "install_cover",
    "read_aiff_info",
    "ConversionPipeline",
]
