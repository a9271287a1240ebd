"""Option folding and build plan resolution."""

from collections.abc import Iterable
from pathlib import Path

from aiffconv.models.config import REDBOOK_BIT_DEPTH, REDBOOK_SAMPLE_RATE, ConversionConfig
from aiffconv.models.plan import BuildPlan, ConversionJob
from aiffconv.models.profile import FormatProfile

SAMPLE_RATE_FLAG = "sample_rate"
BIT_DEPTH_FLAG = "bit_depth"
REDBOOK_FLAG = "redbook"


def apply_format_flags(
    profile: FormatProfile,
    flags: Iterable[tuple[str, object]],
) -> tuple[int | None, int | None]:
    """
    Fold format flags over the profile defaults.

    Flags are applied in command-line order, so the last one wins:
    ``--redbook -r 48000`` gives 48000 Hz / 16-bit while
    ``-r 48000 --redbook`` gives 44100 Hz / 16-bit.

    Args:
        profile: Format profile supplying the defaults
        flags: (flag name, value) pairs in the order they were given

    Returns:
        (sample_rate, bit_depth), either may be None
    """
    sample_rate = profile.default_sample_rate
    bit_depth = profile.default_bit_depth

    for name, value in flags:
        if name == REDBOOK_FLAG:
            sample_rate, bit_depth = REDBOOK_SAMPLE_RATE, REDBOOK_BIT_DEPTH
        elif name == SAMPLE_RATE_FLAG:
            sample_rate = int(value)
        elif name == BIT_DEPTH_FLAG:
            bit_depth = int(value)
        else:
            raise ValueError(f"Unknown format flag: {name}")

    return sample_rate, bit_depth


def resolve_build_plan(
    profile: FormatProfile,
    config: ConversionConfig,
    sources: list[Path],
    destination: Path,
) -> BuildPlan:
    """
    Create one job per source file.

    Args:
        profile: Format profile of the running command
        config: Validated output format
        sources: Source files in conversion order
        destination: Destination folder

    Returns:
        Build plan with pending jobs
    """
    return BuildPlan(
        profile=profile,
        config=config,
        destination=destination,
        jobs=[ConversionJob.for_source(path, destination) for path in sources],
    )
