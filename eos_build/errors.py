"""Exceptions raised by the generator. Every one of them aborts the run."""

from __future__ import annotations

from pathlib import Path


class EosBuildError(Exception):
    """Base class for all generator errors."""


class DiscoveryError(EosBuildError):
    """A directory could not be read while looking for description files."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"{path}: {reason}")


class DescriptionError(EosBuildError):
    """A description file could not be read or does not match a schema."""

    def __init__(self, path: Path, detail: str):
        self.path = path
        super().__init__(f"{path}: {detail}")


class SourceDeclarationError(EosBuildError):
    """A declared source is not a C source file inside the tree."""

    def __init__(self, source: str, reason: str = "expected c source file"):
        self.source = source
        super().__init__(f"{source}: {reason}")


class HeaderResolutionError(EosBuildError):
    """The compiler failed while listing a source's headers."""

    def __init__(self, source: Path, output: str):
        self.source = source
        self.output = output
        super().__init__(
            f"using gcc to determine header deps for {source} failed: {output}"
        )


class EmitError(EosBuildError):
    """The build file could not be written."""
