"""Map declared sources to translation units."""

from __future__ import annotations

import os
from pathlib import Path, PurePath

from eos_build.errors import SourceDeclarationError
from eos_build.models import TranslationUnit

SOURCE_SUFFIX = ".c"
OBJECT_SUFFIX = ".o"


def object_source_map(
    description_path: Path,
    sources: list[str],
    output_dir: Path = Path("bld"),
) -> list[TranslationUnit]:
    """Pair each source of a description with its object file.

    Sources resolve against the directory holding the description. Objects
    mirror the normalized source path under ``output_dir``. Only path
    arithmetic is done here; nothing is read from disk.
    """
    base = description_path.parent
    rel_base = _relative(base)

    units: list[TranslationUnit] = []
    for src in sources:
        if not src.endswith(SOURCE_SUFFIX):
            raise SourceDeclarationError(src)
        if PurePath(src).is_absolute():
            raise SourceDeclarationError(src, "expected a path relative to build.toml")

        obj = src[: -len(SOURCE_SUFFIX)] + OBJECT_SUFFIX
        rel_obj = Path(os.path.normpath(rel_base / obj))
        if rel_obj.parts[0] == os.pardir:
            raise SourceDeclarationError(src, "source lies outside the source tree")

        units.append(TranslationUnit(source_path=base / src, object_path=output_dir / rel_obj))
    return units


def _relative(path: PurePath) -> PurePath:
    # keep absolute trees under the output dir instead of escaping it
    if path.is_absolute():
        return path.relative_to(path.anchor)
    return path
