"""Generator orchestrator: discover -> read -> map -> resolve headers -> assemble -> emit."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from eos_build.assembler import GraphAssembler
from eos_build.description import BuildDescription, ModuleDescription, read_description
from eos_build.emitter import write_build_file
from eos_build.headers import HeaderResolver
from eos_build.models import BuildConfig, DescriptionSummary, GenerateResult
from eos_build.scanner import find_build_files
from eos_build.toolchain import Toolchain

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int], None]


def load_descriptions(config: BuildConfig) -> list[tuple[Path, BuildDescription]]:
    """Discover and parse every description below the source root."""
    paths = find_build_files(config.source_root, config.description_filename)
    logger.info("found %d description file(s) under %s", len(paths), config.source_root)
    return [(path, read_description(path)) for path in paths]


def run_scan(config: BuildConfig) -> list[DescriptionSummary]:
    """List the descriptions of the tree without running the compiler."""
    summaries: list[DescriptionSummary] = []
    for path, description in load_descriptions(config):
        if isinstance(description, ModuleDescription):
            summaries.append(DescriptionSummary(
                path=path,
                kind="module",
                name=description.name,
                sources=list(description.src),
                dependencies=list(description.dependencies),
            ))
        else:
            summaries.append(DescriptionSummary(
                path=path,
                kind="genunix",
                name=config.genunix_path.name,
                sources=list(description.src),
            ))
    return summaries


def run_generate(
    config: BuildConfig,
    progress: ProgressCallback | None = None,
    write: bool = True,
) -> GenerateResult:
    """Build the whole graph and, unless ``write`` is false, write it out.

    Any error aborts before the build file is touched.
    """
    # Stage 1: Discover and read
    if progress:
        progress("Scanning", 0, 1)
    descriptions = load_descriptions(config)
    if progress:
        progress("Scanning", 1, 1)

    toolchain = Toolchain.from_config(config)

    with HeaderResolver(toolchain.cflags, toolchain.compiler, config.jobs) as resolver:
        assembler = GraphAssembler(toolchain, resolver, config.output_dir)

        # Stage 2: Map every source, then queue all header lookups at once
        units = [
            unit
            for path, description in descriptions
            for unit in assembler.units_for(description, path)
        ]
        unit_count = len(units)
        resolver.prefetch(units)
        logger.info("resolving headers for %d unit(s) on %d worker(s)", unit_count, config.jobs)

        # Stage 3: Assemble in discovery order
        for i, (path, description) in enumerate(descriptions):
            if progress:
                progress("Assembling", i, len(descriptions))
            assembler.add(description, path)
        if progress:
            progress("Assembling", len(descriptions), len(descriptions))

    graph = assembler.graph

    # Stage 4: Emit
    build_file = None
    if write:
        if progress:
            progress("Writing", 0, 1)
        build_file = write_build_file(graph, config.build_file)
        if progress:
            progress("Writing", 1, 1)

    return GenerateResult(
        build_file=build_file,
        graph=graph,
        descriptions=len(descriptions),
        units=unit_count,
    )
