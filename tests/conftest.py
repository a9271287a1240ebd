"""Shared fixtures: album folders and a stand-in for ffmpeg."""

import logging
import shutil
import struct
import subprocess
from pathlib import Path

import pytest


def _ieee_extended(value: int) -> bytes:
    """Encode a positive integer as an 80-bit IEEE extended float (AIFF COMM rate)."""
    exponent = value.bit_length() - 1
    mantissa = value << (63 - exponent)
    return struct.pack(">HQ", 16383 + exponent, mantissa)


def write_aiff(path: Path, sample_rate: int = 44100, bit_depth: int = 16, channels: int = 2) -> Path:
    """Write a minimal, valid AIFF header with no audio frames."""
    comm_data = struct.pack(">hLh", channels, 0, bit_depth) + _ieee_extended(sample_rate)
    comm = b"COMM" + struct.pack(">I", len(comm_data)) + comm_data
    ssnd = b"SSND" + struct.pack(">I", 8) + struct.pack(">II", 0, 0)
    body = b"AIFF" + comm + ssnd
    path.write_bytes(b"FORM" + struct.pack(">I", len(body)) + body)
    return path


class FakeFFmpeg:
    """
    Replacement for subprocess.run that behaves like ffmpeg writing AIFF.

    Sources named in ``fail_names`` exit 1 without writing any output.
    """

    def __init__(self, fail_names: set[str] | None = None, source_rate: int = 96000):
        self.calls: list[list[str]] = []
        self.fail_names = fail_names or set()
        self.source_rate = source_rate

    def __call__(self, cmd, **kwargs):
        self.calls.append(list(cmd))
        source = Path(cmd[cmd.index("-i") + 1])
        if source.name in self.fail_names:
            return subprocess.CompletedProcess(
                cmd, 1, stdout="", stderr=f"{source}: Invalid data found when processing input\n"
            )

        sample_rate = int(cmd[cmd.index("-ar") + 1]) if "-ar" in cmd else self.source_rate
        bit_depth = 16 if "pcm_s16be" in cmd else 24
        write_aiff(Path(cmd[-1]), sample_rate=sample_rate, bit_depth=bit_depth)
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    @property
    def converted(self) -> list[str]:
        """Source filenames in the order ffmpeg saw them."""
        return [Path(cmd[cmd.index("-i") + 1]).name for cmd in self.calls]


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers the CLI installs so they do not outlive captured streams."""
    yield
    logging.getLogger("aiffconv").handlers.clear()


@pytest.fixture
def ffmpeg_on_path(monkeypatch):
    """Pretend ffmpeg is installed."""
    monkeypatch.setattr(shutil, "which", lambda name: f"/usr/bin/{name}")


@pytest.fixture
def ffmpeg_missing(monkeypatch):
    """Pretend ffmpeg is not installed."""
    monkeypatch.setattr(shutil, "which", lambda name: None)


@pytest.fixture
def fake_ffmpeg(monkeypatch, ffmpeg_on_path):
    """Install a FakeFFmpeg in place of subprocess.run; returns it for inspection."""
    fake = FakeFFmpeg()
    monkeypatch.setattr(subprocess, "run", fake)
    return fake


@pytest.fixture
def aiff_writer():
    """Expose write_aiff to tests."""
    return write_aiff


@pytest.fixture
def make_album(tmp_path):
    """Create an album folder with the given (relative) files."""

    def _make(files: list[str], name: str = "Album [FLAC]") -> Path:
        album = tmp_path / name
        album.mkdir(parents=True, exist_ok=True)
        for rel in files:
            path = album / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"audio-or-image:" + rel.encode())
        return album

    return _make
