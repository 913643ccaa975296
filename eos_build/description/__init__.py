"""Build description records and their loader."""

from eos_build.description.loader import parse_description, read_description
from eos_build.description.models import (
    BuildDescription,
    CoreDescription,
    DescriptionFile,
    ModuleDescription,
)

__all__ = [
    "BuildDescription",
    "CoreDescription",
    "DescriptionFile",
    "ModuleDescription",
    "parse_description",
    "read_description",
]
