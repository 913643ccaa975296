"""Tests for the full generator run."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from conftest import INT_TYPES_H, TYPES_H, fake_gcc_run
from eos_build.emitter import render
from eos_build.errors import DescriptionError, HeaderResolutionError, SourceDeclarationError
from eos_build.models import BuildConfig
from eos_build.pipeline import run_generate, run_scan


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


def test_scan(kernel_tree):
    summaries = run_scan(BuildConfig(jobs=1))

    assert [(s.kind, s.name) for s in summaries] == [
        ("module", "drv"),
        ("module", "mac"),
        ("genunix", "genunix"),
    ]
    assert summaries[0].dependencies == ["misc/mac", "misc/dls"]
    assert summaries[2].sources == ["main.c", "clock.c"]


def test_generate_fixture_tree(kernel_tree, fake_gcc):
    result = run_generate(BuildConfig(jobs=4))

    assert result.build_file == Path("build.ninja")
    assert (kernel_tree / "build.ninja").read_text() == render(result.graph)
    assert result.descriptions == 3
    assert result.units == 5
    assert fake_gcc.call_count == 5

    outputs = [s.output for s in result.graph.statements]
    assert outputs == [
        "bld/usr/src/uts/common/io/drv/drv.o",
        "bld/usr/src/uts/common/io/drv/drv_subr.o",
        "bld/modules/drv",
        "bld/usr/src/uts/common/io/mac/mac.o",
        "bld/modules/mac",
        "bld/usr/src/uts/common/os/main.o",
        "bld/usr/src/uts/common/os/clock.o",
        "bld/genunix",
    ]

    drv_o = result.graph.statements[0]
    assert drv_o.implicit_deps == [
        TYPES_H,
        INT_TYPES_H,
        "usr/src/uts/common/io/drv/local.h",
    ]

    text = (kernel_tree / "build.ninja").read_text()
    assert "build bld/modules/drv: ld_kmod" in text
    assert "  mod_deps = -Nmisc/mac -Nmisc/dls\n" in text


def test_generate_is_byte_identical(kernel_tree, fake_gcc):
    run_generate(BuildConfig(jobs=8))
    first = (kernel_tree / "build.ninja").read_bytes()
    run_generate(BuildConfig(jobs=8))
    assert (kernel_tree / "build.ninja").read_bytes() == first


def test_parallelism_does_not_change_output(kernel_tree, fake_gcc):
    sequential = run_generate(BuildConfig(jobs=1), write=False)
    parallel = run_generate(BuildConfig(jobs=16), write=False)
    assert render(sequential.graph) == render(parallel.graph)


def test_core_and_module_scenario(tmp_path, monkeypatch, fake_gcc):
    _write(tmp_path / "usr/src/core/build.toml", '[genunix]\nsrc = ["a.c"]\n')
    _write(tmp_path / "usr/src/drv/build.toml", '[module]\nname = "drv"\nsrc = ["b.c"]\n')
    monkeypatch.chdir(tmp_path)

    stmts = run_generate(BuildConfig(jobs=2)).graph.statements

    compiles = [s for s in stmts if s.rule == "cc_kernel"]
    assert [(s.inputs, s.output) for s in compiles] == [
        (["usr/src/core/a.c"], "bld/usr/src/core/a.o"),
        (["usr/src/drv/b.c"], "bld/usr/src/drv/b.o"),
    ]

    core = next(s for s in stmts if s.rule == "ld_genunix")
    assert core.output == "bld/genunix"
    assert core.inputs == ["bld/usr/src/core/a.o"]
    assert core.implicit_deps == []

    module = next(s for s in stmts if s.rule == "ld_kmod")
    assert module.output == "bld/modules/drv"
    assert module.inputs == ["bld/usr/src/drv/b.o"]
    assert module.implicit_deps == ["bld/genunix"]
    assert module.variables == []


def test_custom_paths(kernel_tree, fake_gcc):
    config = BuildConfig(
        source_root=Path("usr/src/uts/common/io/mac"),
        output_dir=Path("out"),
        build_file=Path("eos.ninja"),
        jobs=1,
    )
    result = run_generate(config)

    assert (kernel_tree / "eos.ninja").exists()
    assert not (kernel_tree / "build.ninja").exists()
    assert [s.output for s in result.graph.statements] == [
        "out/usr/src/uts/common/io/mac/mac.o",
        "out/modules/mac",
    ]
    assert result.graph.statements[-1].implicit_deps == ["out/genunix"]


def test_compiler_failure_writes_nothing(kernel_tree):
    (kernel_tree / "build.ninja").write_text("previous\n")

    def broken_mac(args, **kwargs):
        if args[-1].endswith("mac.c"):
            return subprocess.CompletedProcess(args, 1, stdout="", stderr="mac.c:1: error: oops\n")
        return fake_gcc_run(args)

    with patch("eos_build.headers.subprocess.run", side_effect=broken_mac):
        with pytest.raises(HeaderResolutionError, match="mac.c:1: error: oops"):
            run_generate(BuildConfig(jobs=4))

    assert (kernel_tree / "build.ninja").read_text() == "previous\n"


def test_bad_source_fails_before_compiling(kernel_tree, fake_gcc):
    _write(kernel_tree / "usr/src/uts/common/io/zz/build.toml",
           '[module]\nname = "zz"\nsrc = ["zz.s"]\n')

    with pytest.raises(SourceDeclarationError, match="zz.s"):
        run_generate(BuildConfig(jobs=4))

    assert fake_gcc.call_count == 0
    assert not (kernel_tree / "build.ninja").exists()


def test_bad_description_aborts(kernel_tree, fake_gcc):
    _write(kernel_tree / "usr/src/uts/common/io/bad/build.toml", '[module]\nsrc = ["x.c"]\n')

    with pytest.raises(DescriptionError, match="io/bad/build.toml"):
        run_generate(BuildConfig(jobs=1))
    assert not (kernel_tree / "build.ninja").exists()


def test_progress_callback(kernel_tree, fake_gcc):
    stages = []
    run_generate(BuildConfig(jobs=1), progress=lambda s, c, t: stages.append((s, c, t)))

    assert stages[0] == ("Scanning", 0, 1)
    assert ("Assembling", 3, 3) in stages
    assert stages[-1] == ("Writing", 1, 1)
