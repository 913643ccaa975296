"""Recursive search for build description files."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from eos_build.errors import DiscoveryError

logger = logging.getLogger(__name__)


def find_build_files(root: Path, filename: str = "build.toml") -> list[Path]:
    """Find every file called ``filename`` below ``root``.

    Symbolic links are never followed, whether they point at directories
    or at description files. Entries are visited in name order so the
    result is the same on every run.
    """
    result: list[Path] = []
    _walk(Path(root), filename, result)
    return result


def _walk(directory: Path, filename: str, result: list[Path]) -> None:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        raise DiscoveryError(directory, e.strerror or str(e)) from e

    for entry in entries:
        path = directory / entry.name
        try:
            if entry.is_symlink():
                logger.debug("skipping symlink %s", path)
                continue
            if entry.is_dir(follow_symlinks=False):
                _walk(path, filename, result)
            elif entry.name == filename:
                logger.debug("found description %s", path)
                result.append(path)
        except OSError as e:
            raise DiscoveryError(path, e.strerror or str(e)) from e
