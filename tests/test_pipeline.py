"""Tests for transcoding and the sequential pipeline."""

import logging
import subprocess
from pathlib import Path

from aiffconv.converter.pipeline import (
    ConversionPipeline,
    JobCompletedEvent,
    JobErrorEvent,
    JobStartedEvent,
)
from aiffconv.converter.transcoder import convert_file, stderr_tail
from aiffconv.converter.verifier import check_output, read_aiff_info
from aiffconv.models.config import ConversionConfig, Settings
from aiffconv.models.plan import ConversionJob
from aiffconv.models.profile import SourceFormat, get_profile
from aiffconv.models.status import ErrorCode, JobStatus
from aiffconv.planner.resolver import resolve_build_plan


def make_plan(album: Path, dest: Path, config: ConversionConfig | None = None):
    """Plan every FLAC file in an album folder."""
    sources = sorted(album.glob("*.flac"))
    return resolve_build_plan(
        get_profile(SourceFormat.FLAC),
        config or ConversionConfig(),
        sources,
        dest,
    )


class TestConvertFile:
    """Tests for single file conversion."""

    def test_success(self, tmp_path, fake_ffmpeg):
        """Zero exit status means success and the AIFF is read back."""
        source = tmp_path / "01.flac"
        source.write_bytes(b"fLaC")
        job = ConversionJob.for_source(source, tmp_path)

        result = convert_file(job, ConversionConfig(sample_rate=44100, bit_depth=16))

        assert result.success
        assert result.output_path == tmp_path / "01.aiff"
        assert result.output_sample_rate == 44100
        assert result.output_bit_depth == 16
        assert result.output_size_bytes > 0

    def test_failure(self, tmp_path, fake_ffmpeg):
        """Non-zero exit status fails the file and keeps the stderr tail."""
        fake_ffmpeg.fail_names.add("bad.flac")
        source = tmp_path / "bad.flac"
        source.write_bytes(b"")
        job = ConversionJob.for_source(source, tmp_path)

        result = convert_file(job, ConversionConfig())

        assert not result.success
        assert result.returncode == 1
        assert result.error_code == ErrorCode.ENCODE_FAIL.value
        assert "Invalid data found" in result.error_message
        assert result.output_path is None

    def test_timeout(self, tmp_path, monkeypatch):
        """A configured timeout marks a hung ffmpeg as failed."""

        def hang(cmd, **kwargs):
            assert kwargs["timeout"] == 5
            raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

        monkeypatch.setattr(subprocess, "run", hang)
        job = ConversionJob.for_source(tmp_path / "01.flac", tmp_path)

        result = convert_file(job, ConversionConfig(), Settings(ffmpeg_timeout=5))

        assert not result.success
        assert result.error_code == ErrorCode.TIMEOUT.value

    def test_no_timeout_by_default(self, tmp_path, monkeypatch):
        """ffmpeg runs without a time limit unless configured."""
        seen = {}

        def record(cmd, **kwargs):
            seen.update(kwargs)
            return subprocess.CompletedProcess(cmd, 0, "", "")

        monkeypatch.setattr(subprocess, "run", record)
        job = ConversionJob.for_source(tmp_path / "01.flac", tmp_path)

        convert_file(job, ConversionConfig(), Settings(verify_output=False))

        assert seen["timeout"] is None
        assert seen["stdin"] is subprocess.DEVNULL

    def test_ffmpeg_vanished(self, tmp_path, monkeypatch):
        """OS errors launching ffmpeg fail the file instead of the batch."""

        def missing(cmd, **kwargs):
            raise FileNotFoundError(2, "No such file or directory", cmd[0])

        monkeypatch.setattr(subprocess, "run", missing)
        job = ConversionJob.for_source(tmp_path / "01.flac", tmp_path)

        result = convert_file(job, ConversionConfig())

        assert not result.success
        assert result.error_code == ErrorCode.IO_ERROR.value

    def test_mismatch_is_logged(self, tmp_path, monkeypatch, aiff_writer, caplog):
        """An output at the wrong rate is logged but still succeeds."""

        def wrong_rate(cmd, **kwargs):
            aiff_writer(Path(cmd[-1]), sample_rate=48000, bit_depth=16)
            return subprocess.CompletedProcess(cmd, 0, "", "")

        monkeypatch.setattr(subprocess, "run", wrong_rate)
        job = ConversionJob.for_source(tmp_path / "01.flac", tmp_path)

        with caplog.at_level(logging.WARNING, logger="aiffconv"):
            result = convert_file(job, ConversionConfig(sample_rate=44100, bit_depth=16))

        assert result.success
        assert "sample rate 48000 Hz, expected 44100 Hz" in caplog.text


class TestStderrTail:
    """Tests for ffmpeg diagnostics trimming."""

    def test_keeps_last_lines(self):
        """Only the final lines of ffmpeg output are kept."""
        text = "\n".join(f"line {i}" for i in range(20))

        assert stderr_tail(text, max_lines=2) == "line 18\nline 19"

    def test_empty(self):
        """Missing stderr becomes an empty string."""
        assert stderr_tail(None) == ""


class TestVerifier:
    """Tests for reading AIFF headers."""

    def test_reads_header(self, tmp_path, aiff_writer):
        """Sample rate, depth and channels come from the COMM chunk."""
        path = aiff_writer(tmp_path / "01.aiff", sample_rate=176400, bit_depth=24)

        info = read_aiff_info(path)

        assert info.sample_rate == 176400
        assert info.bit_depth == 24
        assert info.channels == 2

    def test_not_an_aiff(self, tmp_path):
        """Unparseable files give None."""
        path = tmp_path / "01.aiff"
        path.write_bytes(b"")

        assert read_aiff_info(path) is None

    def test_missing_file(self, tmp_path):
        """Missing files give None."""
        assert read_aiff_info(tmp_path / "nope.aiff") is None

    def test_check_output(self, tmp_path, aiff_writer):
        """Only requested fields are compared."""
        info = read_aiff_info(aiff_writer(tmp_path / "01.aiff", sample_rate=96000, bit_depth=24))

        assert check_output(info, ConversionConfig()) == []
        assert check_output(info, ConversionConfig(bit_depth=24)) == []
        assert len(check_output(info, ConversionConfig(sample_rate=44100, bit_depth=16))) == 2


class TestConversionPipeline:
    """Tests for the sequential pipeline."""

    def test_all_succeed(self, make_album, tmp_path, fake_ffmpeg):
        """Every job is converted in order and marked succeeded."""
        album = make_album(["02.flac", "01.flac", "03.flac"])
        plan = make_plan(album, tmp_path / "out")
        plan.destination.mkdir()

        results = ConversionPipeline().execute(plan)

        assert fake_ffmpeg.converted == ["01.flac", "02.flac", "03.flac"]
        assert all(r.success for r in results)
        assert [job.status for job in plan.jobs] == [JobStatus.SUCCEEDED] * 3

    def test_failure_does_not_stop_batch(self, make_album, tmp_path, fake_ffmpeg):
        """A failed file is recorded and the next file still runs."""
        fake_ffmpeg.fail_names.add("02.flac")
        album = make_album(["01.flac", "02.flac", "03.flac"])
        plan = make_plan(album, tmp_path / "out")
        plan.destination.mkdir()
        pipeline = ConversionPipeline()

        results = pipeline.execute(plan)

        assert fake_ffmpeg.converted == ["01.flac", "02.flac", "03.flac"]
        assert [r.success for r in results] == [True, False, True]
        assert [job.status for job in plan.jobs] == [
            JobStatus.SUCCEEDED,
            JobStatus.FAILED,
            JobStatus.SUCCEEDED,
        ]
        assert pipeline.stats.succeeded == 2
        assert pipeline.stats.failed == 1

    def test_no_retry(self, make_album, tmp_path, fake_ffmpeg):
        """Failed files are attempted exactly once."""
        fake_ffmpeg.fail_names.add("01.flac")
        album = make_album(["01.flac"])
        plan = make_plan(album, tmp_path / "out")
        plan.destination.mkdir()

        ConversionPipeline().execute(plan)

        assert len(fake_ffmpeg.calls) == 1

    def test_events_in_order(self, make_album, tmp_path, fake_ffmpeg):
        """Each job emits a start event followed by its outcome."""
        fake_ffmpeg.fail_names.add("02.flac")
        album = make_album(["01.flac", "02.flac"])
        plan = make_plan(album, tmp_path / "out")
        plan.destination.mkdir()
        events = []

        ConversionPipeline(event_callback=events.append).execute(plan)

        assert [type(e) for e in events] == [
            JobStartedEvent,
            JobCompletedEvent,
            JobStartedEvent,
            JobErrorEvent,
        ]
        assert [(e.index, e.total) for e in events if isinstance(e, JobStartedEvent)] == [(1, 2), (2, 2)]
        assert "Invalid data found" in events[3].error

    def test_config_passed_to_every_job(self, make_album, tmp_path, fake_ffmpeg):
        """All invocations use the same output options."""
        album = make_album(["01.flac", "02.flac"])
        plan = make_plan(album, tmp_path / "out", ConversionConfig(sample_rate=44100, bit_depth=16))
        plan.destination.mkdir()

        ConversionPipeline().execute(plan)

        options = [cmd[4:-1] for cmd in fake_ffmpeg.calls]
        assert options[0] == options[1]
        assert options[0][:2] == ["-ar", "44100"]

    def test_empty_plan(self, tmp_path):
        """An empty plan does nothing."""
        plan = make_plan(tmp_path, tmp_path / "out")

        assert ConversionPipeline().execute(plan) == []
        assert plan.total_files == 0

    def test_output_format_logged_at_debug(self, make_album, tmp_path, fake_ffmpeg, caplog):
        """The format read back from each AIFF is logged for --verbose."""
        album = make_album(["01.flac"])
        plan = make_plan(album, tmp_path / "out", ConversionConfig(sample_rate=44100, bit_depth=16))
        plan.destination.mkdir()

        with caplog.at_level(logging.DEBUG, logger="aiffconv"):
            ConversionPipeline().execute(plan)

        assert "01.aiff: 44100 Hz / 16-bit, 2 ch" in caplog.text

    def test_elapsed_time_recorded(self, make_album, tmp_path, fake_ffmpeg):
        album = make_album(["01.flac"])
        plan = make_plan(album, tmp_path / "out")
        plan.destination.mkdir()
        pipeline = ConversionPipeline()

        pipeline.execute(plan)

        assert pipeline.stats.elapsed_seconds >= 0
