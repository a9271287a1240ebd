"""CLI entry points using Click."""

import logging
import shlex
import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.markup import escape

from aiffconv import __version__
from aiffconv.converter.artwork import install_cover
from aiffconv.converter.ffmpeg import build_ffmpeg_command
from aiffconv.converter.pipeline import (
    ConversionPipeline,
    JobCompletedEvent,
    JobErrorEvent,
    JobStartedEvent,
    PipelineEvent,
)
from aiffconv.models.config import ConversionConfig, Settings
from aiffconv.models.plan import BuildPlan
from aiffconv.models.profile import FormatProfile, SourceFormat, get_profile
from aiffconv.models.status import CoverStrategy
from aiffconv.planner.resolver import (
    BIT_DEPTH_FLAG,
    REDBOOK_FLAG,
    SAMPLE_RATE_FLAG,
    apply_format_flags,
    resolve_build_plan,
)
from aiffconv.planner.validator import load_settings, validate_request
from aiffconv.scanner.artwork import resolve_cover
from aiffconv.scanner.walker import enumerate_sources
from aiffconv.utils.errors import AiffconvError, CoverArtError, DependencyError
from aiffconv.utils.logging import setup_logging
from aiffconv.utils.summary import summarize_destination

console = Console(soft_wrap=True, emoji=False)
err_console = Console(stderr=True, soft_wrap=True, emoji=False)
logger = logging.getLogger(__name__)

FORMAT_FLAGS_KEY = "aiffconv.format_flags"
FORMAT_FLAG_NAMES = (SAMPLE_RATE_FLAG, BIT_DEPTH_FLAG, REDBOOK_FLAG)
RULE = "━" * 40
CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    # The first positional argument ends option parsing
    "allow_interspersed_args": False,
}


class ExitCodeMixin:
    """Report usage errors with exit status 1 instead of Click's 2."""

    def main(self, *args, **kwargs):
        kwargs["standalone_mode"] = False
        try:
            return super().main(*args, **kwargs)
        except click.ClickException as e:
            e.show()
            sys.exit(1)
        except click.Abort:
            err_console.print("Aborted!")
            sys.exit(1)


class ConverterCommand(ExitCodeMixin, click.Command):
    """
    Single-format converter command.

    Format flags are read from the raw arguments, in order, before Click
    parses them. Click keeps only the last value of a repeated option and
    applies it at the option's first position, which would break
    ``-r 48000 --redbook -r 96000``.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        ctx.meta[FORMAT_FLAGS_KEY] = self.scan_format_flags(ctx, args)
        return super().parse_args(ctx, args)

    def scan_format_flags(self, ctx: click.Context, args: list[str]) -> list[tuple[str, object]]:
        """
        Collect every format flag up to the first positional argument.

        Help given before any bad token exits 0 straight away. Scanning stops
        at the first token it cannot place and Click reports the error.

        Returns:
            (flag name, converted value) pairs in command-line order
        """
        options = {
            opt: param
            for param in self.get_params(ctx)
            if isinstance(param, click.Option)
            for opt in param.opts
        }

        flags = []
        tokens = iter(args)
        for token in tokens:
            if token == "--" or token == "-" or not token.startswith("-"):
                break

            name, has_value, value = token.partition("=")
            param = options.get(name)
            if param is None and not token.startswith("--"):
                # Attached short form, e.g. -r48000
                name, value, has_value = token[:2], token[2:], True
                param = options.get(name)
            if param is None:
                break

            if param.name == "help":
                click.echo(ctx.get_help(), color=ctx.color)
                ctx.exit()
            if param.is_flag:
                if param.name in FORMAT_FLAG_NAMES:
                    flags.append((param.name, True))
                continue

            if not has_value:
                value = next(tokens, None)
                if value is None:
                    break
            if param.name in FORMAT_FLAG_NAMES:
                flags.append((param.name, param.type.convert(value, param, ctx)))

        return flags


class ConverterGroup(ExitCodeMixin, click.Group):
    """Umbrella command holding all converters."""


def _fail(message: str, hints: list[str] | None = None) -> NoReturn:
    err_console.print(f"[red]Error: {escape(message)}[/red]")
    for hint in hints or []:
        err_console.print(f"  {escape(hint)}")
    sys.exit(1)


def print_banner(
    profile: FormatProfile,
    config: ConversionConfig,
    source: Path,
    destination: Path,
) -> None:
    """Print the run header."""
    console.print(f"[green]{profile.label} to AIFF Converter[/green]")
    console.print(RULE)
    console.print(f"Source:      {escape(str(source))}")
    console.print(f"Destination: {escape(str(destination))}")
    console.print(f"Format:      AIFF [blue]{escape(config.describe())}[/blue]")
    console.print(RULE)
    console.print()


def print_progress(event: PipelineEvent) -> None:
    """Adapt pipeline events to console lines."""
    if isinstance(event, JobStartedEvent) and event.job:
        counter = escape(f"[{event.index}/{event.total}]")
        console.print(f"{counter} Converting: [yellow]{escape(event.job.name)}[/yellow]")
    elif isinstance(event, JobCompletedEvent):
        console.print("       [green]✓ Done[/green]")
    elif isinstance(event, JobErrorEvent):
        console.print("       [red]✗ Failed[/red]")


def print_dry_run(plan: BuildPlan, source: Path, settings: Settings) -> None:
    """Show what a run would do without writing anything."""
    console.print("[yellow]DRY RUN - no files will be written[/yellow]")
    for index, job in enumerate(plan.jobs, start=1):
        cmd = build_ffmpeg_command(job, plan.config, settings.ffmpeg_path)
        console.print(f"{escape(f'[{index}/{plan.total_files}]')} {escape(job.name)}")
        console.print(f"       {escape(shlex.join(cmd))}")

    cover = resolve_cover(source)
    if cover:
        console.print(f"Cover art: {escape(cover.source_description)} -> {escape(settings.cover_filename)}")
    else:
        console.print("[yellow]⚠ No cover art found[/yellow]")


def copy_cover_art(source: Path, destination: Path, settings: Settings) -> bool:
    """
    Find and install the album cover. Never fatal.

    Returns:
        True if a cover was written
    """
    console.print("Looking for cover art...")
    cover = resolve_cover(source)
    if not cover:
        logger.info("No cover art found in %s", source)
        console.print("[yellow]⚠ No cover art found[/yellow]")
        return False

    try:
        install_cover(
            cover,
            destination,
            filename=settings.cover_filename,
            transcode=settings.cover_transcode,
            quality=settings.cover_jpeg_quality,
        )
    except CoverArtError as e:
        logger.warning("%s", e)
        console.print("[yellow]⚠ Cover art could not be copied[/yellow]")
        return False

    if cover.strategy == CoverStrategy.SUBFOLDER:
        console.print(f"[green]✓ Copied cover art from {escape(cover.source_description)}[/green]")
    else:
        console.print(f"[green]✓ Copied cover art: {escape(cover.source_description)}[/green]")
    return True


def run_conversion(
    profile: FormatProfile,
    source: Path,
    destination: Path,
    sample_rate: int | None,
    bit_depth: int | None,
    dry_run: bool = False,
    verbose: bool = False,
    log_file: Path | None = None,
    settings: Settings | None = None,
) -> None:
    """
    Validate, convert every source file, copy cover art and report.

    Exits with status 1 on invalid input. Per-file failures are reported but
    only change the exit status when ``fail_on_error`` is set.
    """
    if settings is None:
        try:
            settings = load_settings()
        except AiffconvError as e:
            _fail(str(e))

    setup_logging(
        settings.log_level,
        log_file or settings.log_file,
        settings.jsonl_log,
        verbose=verbose,
    )

    try:
        config = validate_request(sample_rate, bit_depth, source, settings)
    except DependencyError as e:
        _fail(str(e), e.hints)
    except AiffconvError as e:
        _fail(str(e))

    if not dry_run:
        try:
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            _fail(f"Cannot create destination folder {destination}: {e}")

    print_banner(profile, config, source, destination)

    sources = enumerate_sources(source, profile)
    if not sources:
        logger.info("No %s files in %s", profile.label, source)
        console.print(
            f"[yellow]Warning: No {profile.label} files ({profile.extensions_display}) "
            f"found in source folder[/yellow]"
        )
        return

    console.print(f"Found [green]{len(sources)}[/green] {profile.label} files to convert")
    console.print()

    plan = resolve_build_plan(profile, config, sources, destination)

    if dry_run:
        print_dry_run(plan, source, settings)
        return

    pipeline = ConversionPipeline(settings=settings, event_callback=print_progress)
    pipeline.execute(plan)
    console.print()

    copy_cover_art(source, destination, settings)

    summary = summarize_destination(destination)
    console.print()
    console.print(RULE)
    console.print("[green]Conversion complete![/green]")
    console.print(f"Output: {escape(str(destination))}")
    console.print()
    console.print(f"Files converted: {summary.aiff_count}")
    console.print(f"Total size: {summary.total_size}")

    failed = pipeline.stats.failed
    if failed:
        console.print(f"[red]Failed: {failed}[/red]")
        if settings.fail_on_error:
            sys.exit(1)


def make_command(source_format: SourceFormat) -> click.Command:
    """Build the converter command for one source format."""
    profile = get_profile(source_format)
    label = profile.label
    name = f"{label.lower()}-to-aiff"
    albums = f'"./Album [{label}]" "./Album [AIFF]"'
    default_rate = profile.default_sample_rate
    default_depth = profile.default_bit_depth

    epilog = (
        "\b\nExamples:\n"
        f"  # {'Default: 176.4kHz / 24-bit' if default_rate else 'Preserve original quality'}\n"
        f"  {name} {albums}\n"
        "  # Convert to Red Book CD quality\n"
        f"  {name} --redbook {albums}\n"
        "  # Custom: 88.2kHz / 24-bit\n"
        f"  {name} -r 88200 -b 24 {albums}"
    )

    @click.command(
        name=name,
        cls=ConverterCommand,
        context_settings=CONTEXT_SETTINGS,
        help=(
            f"Convert all {label} files ({profile.extensions_display}) in SOURCE "
            f"to uncompressed AIFF in DESTINATION.\n\n{profile.description}"
        ),
        epilog=epilog,
    )
    @click.option(
        "-r",
        "--sample-rate",
        type=click.IntRange(min=1),
        metavar="RATE",
        expose_value=False,
        help=(
            "Resample to specified rate in Hz (e.g. 44100, 48000, 88200, 96000, 176400, 192000)"
            + (f" [default: {default_rate}]" if default_rate else "")
        ),
    )
    @click.option(
        "-b",
        "--bit-depth",
        type=int,
        metavar="BITS",
        expose_value=False,
        help="Convert to specified bit depth (16 or 24)"
        + (f" [default: {default_depth}]" if default_depth else ""),
    )
    @click.option(
        "--redbook",
        is_flag=True,
        expose_value=False,
        help="Shortcut for CD quality: 44100 Hz / 16-bit",
    )
    @click.option(
        "--dry-run",
        is_flag=True,
        help="Show what would be done without converting",
    )
    @click.option(
        "-v",
        "--verbose",
        is_flag=True,
        help="Show debug output, including ffmpeg errors",
    )
    @click.option(
        "--log-file",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="Also write logs to this file",
    )
    @click.version_option(version=__version__)
    @click.argument("source", type=click.Path(path_type=Path))
    @click.argument("destination", type=click.Path(path_type=Path))
    @click.pass_context
    def command(
        ctx: click.Context,
        source: Path,
        destination: Path,
        dry_run: bool,
        verbose: bool,
        log_file: Path | None,
    ):
        sample_rate, bit_depth = apply_format_flags(profile, ctx.meta.get(FORMAT_FLAGS_KEY, []))
        run_conversion(
            profile,
            source,
            destination,
            sample_rate,
            bit_depth,
            dry_run=dry_run,
            verbose=verbose,
            log_file=log_file,
        )

    return command


flac_to_aiff = make_command(SourceFormat.FLAC)
wav_to_aiff = make_command(SourceFormat.WAV)
dsd_to_aiff = make_command(SourceFormat.DSD)


@click.group(cls=ConverterGroup, context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__)
def cli():
    """
    aiffconv - convert folders of lossless audio to AIFF.

    Each subcommand converts one source format; FLAC and WAV keep the
    source sample rate and bit depth unless told otherwise, DSD defaults
    to 176.4kHz / 24-bit.
    """
    pass


cli.add_command(flac_to_aiff, name="flac")
cli.add_command(wav_to_aiff, name="wav")
cli.add_command(dsd_to_aiff, name="dsd")


if __name__ == "__main__":
    cli()
