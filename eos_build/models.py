"""Data models for the build graph generator."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from pathlib import Path


class Rule(enum.Enum):
    """Ninja rules the generated graph uses."""
    MOD_COMPILE = "cc_kernel"
    MOD_LINK = "ld_kmod"
    GENUNIX_LINK = "ld_genunix"


@dataclass(frozen=True)
class TranslationUnit:
    """A C source file and the object file it compiles to."""
    source_path: Path
    object_path: Path


@dataclass(frozen=True)
class Variable:
    name: str
    value: str


@dataclass(frozen=True)
class RuleDefinition:
    name: str
    command: str


@dataclass
class BuildStatement:
    """One ``build`` line of the ninja file."""
    output: str
    rule: str
    inputs: list[str] = field(default_factory=list)
    variables: list[Variable] = field(default_factory=list)
    implicit_deps: list[str] = field(default_factory=list)


@dataclass
class Graph:
    """The complete ninja build graph for one run."""
    variables: list[Variable] = field(default_factory=list)
    rules: list[RuleDefinition] = field(default_factory=list)
    statements: list[BuildStatement] = field(default_factory=list)


@dataclass
class BuildConfig:
    """Configuration for a generator run.

    All paths are relative to the tree root the generator runs in.
    """
    source_root: Path = field(default_factory=lambda: Path("usr/src"))
    output_dir: Path = field(default_factory=lambda: Path("bld"))
    build_file: Path = field(default_factory=lambda: Path("build.ninja"))
    description_filename: str = "build.toml"
    compiler: str = "gcc-10"
    jobs: int | None = None
    release: str = "5.11"

    def __post_init__(self):
        if not self.jobs:
            self.jobs = os.cpu_count() or 1

    @property
    def genunix_path(self) -> Path:
        return self.output_dir / "genunix"

    @property
    def modules_dir(self) -> Path:
        return self.output_dir / "modules"


@dataclass
class DescriptionSummary:
    """Result of the scan stage, one per description file."""
    path: Path
    kind: str
    name: str
    sources: list[str] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)


@dataclass
class GenerateResult:
    """Result of a full generator run."""
    build_file: Path | None
    graph: Graph
    descriptions: int = 0
    units: int = 0
