"""Command line entry point: ``covgate check`` and ``covgate init``."""

from __future__ import annotations

from pathlib import Path

import click

from .aggregator import aggregate
from .analyzer import analyze_profile
from .config import DEFAULT_CONFIG_PATH, ConfigFile, load_config, write_config
from .errors import CovgateError
from .files import files_for_path, resolve_source_path, split_skip_dirs
from .logging_config import configure_logging, get_logger
from .packages import PackageResolver
from .reporter import FAILURE_MESSAGE, TabReporter
from .runner import run_tests
from .verifier import ThresholdVerifier

LOGGER = get_logger(__name__)

_skip_dirs_option = click.option(
    "-s",
    "--skip-dirs",
    default="vendor",
    show_default=True,
    help="Comma separated list of directories to skip when reporting coverage.",
)
_profile_type = click.Path(exists=True, dir_okay=False, path_type=Path)


def _project_files(path: str | None, skip_dirs: str) -> tuple[str, list[Path]]:
    src_path = resolve_source_path(path)
    try:
        files = files_for_path(src_path, split_skip_dirs(skip_dirs))
    except OSError as exc:
        raise click.UsageError(f"could not retrieve project files from path {src_path}: {exc}") from exc
    return src_path, files


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Enforce minimum Go statement coverage per package."""

    configure_logging("DEBUG" if verbose else "WARNING")


@cli.command()
@click.argument("path", required=False)
@click.option("--print-functions", is_flag=True, help="Print coverage for individual functions.")
@click.option(
    "--print-src",
    is_flag=True,
    help="Print source coverage for each function (implies --print-functions).",
)
@click.option("--no-config", is_flag=True, help="Do not read configuration from file.")
@click.option(
    "-m",
    "--minimum-coverage",
    type=click.FloatRange(0, 100),
    default=0.0,
    show_default=True,
    help="Minimum coverage percentage enforced for every package when no config is used.",
)
@click.option("-p", "--profile-file", type=_profile_type, help="Path to an existing coverage profile.")
@click.option(
    "-c",
    "--config-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help=f"Path to the configuration file (defaults to {DEFAULT_CONFIG_PATH}).",
)
@_skip_dirs_option
@click.pass_context
def check(
    ctx: click.Context,
    path: str | None,
    print_functions: bool,
    print_src: bool,
    no_config: bool,
    minimum_coverage: float,
    profile_file: Path | None,
    config_file: Path | None,
    skip_dirs: str,
) -> None:
    """Check whether package coverage meets the configured minimums."""

    src_path, project_files = _project_files(path, skip_dirs)
    generated: Path | None = None
    try:
        config = None if no_config else load_config(config_file)
        profile_path = profile_file
        if profile_path is None:
            generated = profile_path = run_tests(src_path)
        package_functions = analyze_profile(profile_path, project_files, PackageResolver())
    except CovgateError as exc:
        LOGGER.debug("check failed", extra={"error_context": exc.context})
        raise click.ClickException(str(exc)) from exc
    finally:
        if generated is not None:
            generated.unlink(missing_ok=True)

    verifier = ThresholdVerifier(
        default_minimum=minimum_coverage,
        print_functions=print_functions,
        print_source=print_src,
        color=ctx.color is not False,
    )
    with TabReporter() as reporter:
        verifier.out = reporter
        try:
            result = verifier.verify(aggregate(package_functions), config)
        except CovgateError as exc:
            reporter.flush()
            raise click.ClickException(str(exc)) from exc

        if not result.passed:
            reporter.write(FAILURE_MESSAGE)
    if not result.passed:
        ctx.exit(1)


@cli.command()
@click.argument("path", required=False)
@click.option("-p", "--profile-file", type=_profile_type, required=True, help="Path to a coverage profile.")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Where to write the generated configuration.",
)
@_skip_dirs_option
def init(path: str | None, profile_file: Path, output: Path, skip_dirs: str) -> None:
    """Write a config pinning each package's minimum to its current coverage."""

    _, project_files = _project_files(path, skip_dirs)
    try:
        package_functions = analyze_profile(profile_file, project_files, PackageResolver())
    except CovgateError as exc:
        raise click.ClickException(str(exc)) from exc

    coverages = aggregate(package_functions)
    config = ConfigFile.pinned({name: coverage.percent for name, coverage in coverages.items()})
    click.echo(str(write_config(config, output)))


def main() -> None:  # pragma: no cover - console script
    cli()


__all__ = ["check", "cli", "init", "main"]
