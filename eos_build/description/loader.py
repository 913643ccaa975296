"""Read description files into typed records."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from pydantic import ValidationError

from eos_build.description.models import BuildDescription, DescriptionFile
from eos_build.errors import DescriptionError

logger = logging.getLogger(__name__)


def parse_description(text: str, path: Path) -> BuildDescription:
    """Parse the TOML text of the description at ``path``."""
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise DescriptionError(path, str(e)) from e

    try:
        return DescriptionFile.model_validate(data).description
    except ValidationError as e:
        raise DescriptionError(path, str(e)) from e


def read_description(path: Path) -> BuildDescription:
    """Read and parse the description file at ``path``."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DescriptionError(path, str(e)) from e
    description = parse_description(text, path)
    logger.debug("read %s: %s", path, type(description).__name__)
    return description
