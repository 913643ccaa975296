"""Schemas for ``build.toml`` description files."""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CoreDescription(BaseModel):
    """The ``[genunix]`` table: sources of the core kernel image."""

    model_config = ConfigDict(frozen=True)

    src: list[str]


class ModuleDescription(BaseModel):
    """The ``[module]`` table: a kernel module and the modules it needs."""

    model_config = ConfigDict(frozen=True)

    name: str
    src: list[str]
    dependencies: list[str] = Field(default_factory=list)


BuildDescription = Union[CoreDescription, ModuleDescription]


class DescriptionFile(BaseModel):
    """Top level of a description file. Exactly one table must be set."""

    model_config = ConfigDict(extra="forbid")

    genunix: CoreDescription | None = None
    module: ModuleDescription | None = None

    @model_validator(mode="after")
    def check_one_table(self) -> DescriptionFile:
        present = [t for t in ("genunix", "module") if getattr(self, t) is not None]
        if len(present) != 1:
            raise ValueError(
                "expected exactly one of the tables [genunix] or [module], "
                f"found {len(present)}"
            )
        return self

    @property
    def description(self) -> BuildDescription:
        return self.genunix if self.genunix is not None else self.module
