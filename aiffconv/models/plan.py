"""Conversion job and result models."""

from pathlib import Path

from pydantic import BaseModel, Field

from aiffconv.models.config import ConversionConfig
from aiffconv.models.profile import FormatProfile
from aiffconv.models.status import CoverStrategy, JobStatus

OUTPUT_SUFFIX = ".aiff"


class ConversionJob(BaseModel):
    """One source file and where its AIFF goes."""

    source_path: Path
    output_path: Path
    status: JobStatus = JobStatus.PENDING

    @classmethod
    def for_source(cls, source_path: Path, destination: Path) -> "ConversionJob":
        """Create a job writing `<destination>/<stem>.aiff`."""
        return cls(
            source_path=source_path,
            output_path=destination / f"{source_path.stem}{OUTPUT_SUFFIX}",
        )

    @property
    def name(self) -> str:
        """Display name (source filename without extension)."""
        return self.source_path.stem


class TrackResult(BaseModel):
    """Result of converting a single file."""

    source_path: Path
    output_path: Path | None = None
    success: bool = False
    returncode: int | None = None
    error_code: str | None = None
    error_message: str | None = None

    # Output info read back from the AIFF header
    output_sample_rate: int | None = None
    output_bit_depth: int | None = None
    output_channels: int | None = None
    duration_seconds: float | None = None
    output_size_bytes: int | None = None


class BuildPlan(BaseModel):
    """Ordered jobs for one run."""

    profile: FormatProfile
    config: ConversionConfig
    destination: Path
    jobs: list[ConversionJob] = Field(default_factory=list)

    @property
    def total_files(self) -> int:
        """Total number of files to convert."""
        return len(self.jobs)


class CoverSearchResult(BaseModel):
    """Cover image picked for the destination folder."""

    path: Path
    source_description: str
    strategy: CoverStrategy
