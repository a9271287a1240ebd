"""Sequential conversion pipeline."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from aiffconv.converter.transcoder import convert_file
from aiffconv.models.config import Settings
from aiffconv.models.plan import BuildPlan, ConversionJob, TrackResult
from aiffconv.models.status import JobStatus

logger = logging.getLogger(__name__)


@dataclass
class PipelineEvent:
    """Base event for pipeline progress."""

    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class JobStartedEvent(PipelineEvent):
    """ffmpeg is about to run for a job."""

    job: ConversionJob | None = None
    index: int = 0  # 1-based position in the plan
    total: int = 0


@dataclass
class JobCompletedEvent(PipelineEvent):
    job: ConversionJob | None = None
    result: TrackResult | None = None


@dataclass
class JobErrorEvent(PipelineEvent):
    job: ConversionJob | None = None
    error: str = ""


@dataclass
class PipelineStats:
    """Counters for one run."""

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    started_at: datetime | None = None
    finished_at: datetime | None = None

    @property
    def elapsed_seconds(self) -> float | None:
        if self.started_at and self.finished_at:
            return (self.finished_at - self.started_at).total_seconds()
        return None


class ConversionPipeline:
    """
    Converts the jobs of a plan one at a time, in plan order.

    Each ffmpeg invocation finishes before the next starts. A failed job is
    recorded and the run moves on; nothing is retried.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        event_callback: Callable[[PipelineEvent], None] | None = None,
    ):
        self.settings = settings or Settings()
        self.event_callback = event_callback
        self.stats = PipelineStats()

    def emit(self, event: PipelineEvent) -> None:
        if self.event_callback:
            self.event_callback(event)

    def execute(self, plan: BuildPlan) -> list[TrackResult]:
        """
        Run every job in the plan.

        Returns:
            One TrackResult per job, in plan order
        """
        self.stats = PipelineStats(total=plan.total_files, started_at=datetime.now())
        logger.info("Converting %d file(s) to %s", plan.total_files, plan.destination)

        results = [
            self._run_job(plan, job, index)
            for index, job in enumerate(plan.jobs, start=1)
        ]

        self.stats.finished_at = datetime.now()
        logger.info(
            "Finished: %d succeeded, %d failed in %.1fs",
            self.stats.succeeded,
            self.stats.failed,
            self.stats.elapsed_seconds or 0.0,
        )
        return results

    def _run_job(self, plan: BuildPlan, job: ConversionJob, index: int) -> TrackResult:
        self.emit(JobStartedEvent(job=job, index=index, total=plan.total_files))
        result = convert_file(job, plan.config, self.settings)

        if result.success:
            job.status = JobStatus.SUCCEEDED
            self.stats.succeeded += 1
            log_output_info(result)
            self.emit(JobCompletedEvent(job=job, result=result))
            return result

        job.status = JobStatus.FAILED
        self.stats.failed += 1
        error = result.error_message or "Unknown error"
        logger.warning(
            "Conversion failed for %s: %s",
            job.source_path.name,
            error,
            extra={"source": job.source_path, "error_code": result.error_code},
        )
        self.emit(JobErrorEvent(job=job, error=error))
        return result


def log_output_info(result: TrackResult) -> None:
    """Debug line with the format read back from a converted file."""
    if result.output_sample_rate is None:
        return
    logger.debug(
        "%s: %d Hz / %d-bit, %d ch, %.1fs, %d bytes",
        result.output_path.name,
        result.output_sample_rate,
        result.output_bit_depth,
        result.output_channels,
        result.duration_seconds,
        result.output_size_bytes,
        extra={"output": result.output_path},
    )
