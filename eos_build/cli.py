"""Click CLI with generate and scan subcommands."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import click

from eos_build.emitter import render
from eos_build.errors import EosBuildError
from eos_build.models import BuildConfig
from eos_build.pipeline import run_generate, run_scan

_LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def _source_root_option(f):
    return click.option(
        "--source-root",
        type=click.Path(path_type=Path),
        default="usr/src",
        show_default=True,
        envvar="EOS_SOURCE_ROOT",
        help="Directory searched for build.toml files",
    )(f)


@click.group(invoke_without_command=True)
@click.version_option(version="0.1.0")
@click.option(
    "-C", "--directory",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Change to this directory (the tree root) before doing anything",
)
@click.option("-v", "--verbose", count=True, help="More logging; repeat for debug output")
@click.pass_context
def cli(ctx: click.Context, directory: Path | None, verbose: int):
    """eos-build: generate build.ninja for the kernel tree."""
    logging.basicConfig(
        level=_LOG_LEVELS.get(verbose, logging.DEBUG),
        format="%(levelname)s %(name)s: %(message)s",
    )
    if directory:
        os.chdir(directory)
    if ctx.invoked_subcommand is None:
        # full parameter processing, so envvars apply as they do for "generate"
        with generate.make_context("generate", [], parent=ctx) as sub_ctx:
            generate.invoke(sub_ctx)


@cli.command()
@_source_root_option
@click.option("--output-dir", type=click.Path(path_type=Path), default="bld", show_default=True,
              envvar="EOS_OUTPUT_DIR", help="Root of build outputs")
@click.option("-o", "--build-file", type=click.Path(path_type=Path), default="build.ninja",
              show_default=True, envvar="EOS_BUILD_FILE", help="Ninja file to write")
@click.option("--cc", "compiler", default="gcc-10", show_default=True, envvar="EOS_CC",
              help="Compiler used for header discovery and compilation")
@click.option("-j", "--jobs", type=click.IntRange(min=1), envvar="EOS_JOBS",
              help="Parallel header discovery jobs [default: CPU count]")
@click.option("--stdout", "to_stdout", is_flag=True, help="Print the graph instead of writing it")
def generate(
    source_root: Path,
    output_dir: Path,
    build_file: Path,
    compiler: str,
    jobs: int | None,
    to_stdout: bool,
):
    """Generate the ninja build file."""
    config = BuildConfig(
        source_root=source_root,
        output_dir=output_dir,
        build_file=build_file,
        compiler=compiler,
        jobs=jobs,
    )

    def progress(stage: str, current: int, total: int):
        if to_stdout:
            return
        if total > 0:
            click.echo(f"  {stage}: {current}/{total}", nl=(current == total))
        else:
            click.echo(f"  {stage}...")

    try:
        result = run_generate(config, progress=progress, write=not to_stdout)
    except EosBuildError as e:
        raise click.ClickException(str(e))

    if to_stdout:
        click.echo(render(result.graph), nl=False)
        return

    click.echo(
        f"\nWrote {result.build_file}: {len(result.graph.statements)} statement(s) "
        f"from {result.descriptions} description(s), {result.units} source file(s)"
    )


@cli.command()
@_source_root_option
def scan(source_root: Path):
    """List build descriptions without running the compiler."""
    config = BuildConfig(source_root=source_root)
    try:
        summaries = run_scan(config)
    except EosBuildError as e:
        raise click.ClickException(str(e))

    if not summaries:
        click.echo("No build descriptions found.")
        return

    click.echo(f"\nFound {len(summaries)} build description(s):\n")
    for summary in summaries:
        color = "yellow" if summary.kind == "genunix" else "green"
        line = (
            f"  {click.style(summary.kind, fg=color):>20}  {summary.name}  "
            f"{click.style(str(summary.path), fg='cyan')}  "
            f"{click.style(f'{len(summary.sources)} src', dim=True)}"
        )
        if summary.dependencies:
            line += f"  -> {', '.join(summary.dependencies)}"
        click.echo(line)

    modules = sum(1 for s in summaries if s.kind == "module")
    click.echo(f"\nSummary:\n  genunix: {len(summaries) - modules}\n  module: {modules}")


if __name__ == "__main__":
    cli()
