"""Build graph assembly: turn descriptions into ninja build statements."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, Sequence

from eos_build.description import BuildDescription, CoreDescription, ModuleDescription
from eos_build.mapper import object_source_map
from eos_build.models import BuildStatement, Graph, Rule, TranslationUnit, Variable
from eos_build.toolchain import Toolchain

logger = logging.getLogger(__name__)


class Resolver(Protocol):
    def resolve_all(self, units: Sequence[TranslationUnit]) -> list[list[str]]: ...


def new_graph(toolchain: Toolchain) -> Graph:
    """Create a graph holding only the toolchain's variables and rules."""
    return Graph(variables=list(toolchain.variables), rules=list(toolchain.rules))


def mod_deps_variable(dependencies: list[str]) -> list[Variable]:
    if not dependencies:
        return []
    return [Variable("mod_deps", " ".join(f"-N{dep}" for dep in dependencies))]


class GraphAssembler:
    """Accumulate the statements of every description into one graph."""

    def __init__(self, toolchain: Toolchain, resolver: Resolver, output_dir: Path = Path("bld")):
        self.toolchain = toolchain
        self.resolver = resolver
        self.output_dir = output_dir
        self.graph = new_graph(toolchain)

    def units_for(self, description: BuildDescription, path: Path) -> list[TranslationUnit]:
        return object_source_map(path, description.src, self.output_dir)

    def compile_statements(self, units: list[TranslationUnit]) -> list[BuildStatement]:
        """One ``cc_kernel`` statement per unit, in unit order."""
        headers = self.resolver.resolve_all(units)
        return [
            BuildStatement(
                output=str(unit.object_path),
                rule=Rule.MOD_COMPILE.value,
                inputs=[str(unit.source_path)],
                implicit_deps=deps,
            )
            for unit, deps in zip(units, headers)
        ]

    def description_statements(
        self,
        description: BuildDescription,
        path: Path,
    ) -> list[BuildStatement]:
        """Compile and link statements for the description found at ``path``."""
        units = self.units_for(description, path)
        stmts = self.compile_statements(units)
        objects = [str(unit.object_path) for unit in units]

        if isinstance(description, ModuleDescription):
            stmts.append(BuildStatement(
                output=f"{self.toolchain.modules_dir}/{description.name}",
                rule=Rule.MOD_LINK.value,
                inputs=objects,
                variables=mod_deps_variable(description.dependencies),
                implicit_deps=[self.toolchain.genunix_path],
            ))
        elif isinstance(description, CoreDescription):
            stmts.append(BuildStatement(
                output=self.toolchain.genunix_path,
                rule=Rule.GENUNIX_LINK.value,
                inputs=objects,
            ))
        else:
            raise TypeError(f"unknown description type: {type(description).__name__}")

        return stmts

    def add(self, description: BuildDescription, path: Path) -> list[BuildStatement]:
        stmts = self.description_statements(description, path)
        self.graph.statements.extend(stmts)
        logger.debug("%s: %d statement(s)", path, len(stmts))
        return stmts
