"""Header dependency discovery through the compiler's ``-H`` output."""

from __future__ import annotations

import logging
import subprocess
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Sequence

from eos_build.errors import HeaderResolutionError
from eos_build.models import TranslationUnit

logger = logging.getLogger(__name__)

DEPTH_MARKER = "."


def parse_header_output(text: str) -> list[str]:
    """Pull header paths out of the include tree gcc prints for ``-H``.

    Each header line starts with one dot per level of include nesting.
    Every other line (guard hints, warnings) is ignored. Repeated headers
    are kept once, at their first position.
    """
    headers: dict[str, None] = {}
    for line in text.splitlines():
        if not line.startswith(DEPTH_MARKER):
            continue
        header = line.lstrip(DEPTH_MARKER).strip()
        if header:
            headers.setdefault(header, None)
    return list(headers)


def header_deps(
    source: Path,
    cflags: Sequence[str],
    compiler: str = "gcc-10",
) -> list[str]:
    """Return every header ``source`` includes, directly or not.

    The compiler only preprocesses and checks syntax; no object is written.
    """
    args = [compiler, "-H", "-fsyntax-only", *cflags, str(source)]
    logger.debug("running %s", " ".join(args))
    try:
        result = subprocess.run(args, capture_output=True, text=True, errors="replace")
    except OSError as e:
        raise HeaderResolutionError(source, f"failed to execute {compiler}: {e}") from e

    # gcc writes the include tree to stderr, even on success
    if result.returncode != 0:
        raise HeaderResolutionError(source, result.stderr)
    return parse_header_output(result.stderr)


class HeaderResolver:
    """Runs header discovery for many sources on a shared thread pool.

    Lookups are submitted up front with :meth:`prefetch` and collected with
    :meth:`resolve_all`, which always returns results in the order of the
    units it was given, whatever order the compiler runs finish in.
    """

    def __init__(
        self,
        cflags: Sequence[str],
        compiler: str = "gcc-10",
        max_workers: int | None = None,
    ):
        self.cflags = tuple(cflags)
        self.compiler = compiler
        self._pool = ThreadPoolExecutor(max_workers=max_workers)
        self._pending: dict[Path, Future] = {}

    def submit(self, source: Path) -> Future:
        future = self._pending.get(source)
        if future is None:
            future = self._pool.submit(header_deps, source, self.cflags, self.compiler)
            self._pending[source] = future
        return future

    def prefetch(self, units: Iterable[TranslationUnit]) -> None:
        for unit in units:
            self.submit(unit.source_path)

    def resolve_all(self, units: Sequence[TranslationUnit]) -> list[list[str]]:
        futures = [self.submit(unit.source_path) for unit in units]
        return [f.result() for f in futures]

    def close(self) -> None:
        self._pool.shutdown(wait=True, cancel_futures=True)
        self._pending.clear()

    def __enter__(self) -> HeaderResolver:
        return self

    def __exit__(self, *exc) -> None:
        self.close()
