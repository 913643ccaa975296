"""Shared fixtures: a copy of the fixture kernel tree and a fake gcc."""

import shutil
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

FIXTURES = Path(__file__).parent / "fixtures"

TYPES_H = "usr/src/uts/common/sys/types.h"
INT_TYPES_H = "usr/src/uts/intel/sys/int_types.h"


def gcc_h_output(source):
    """What ``gcc -H`` prints on stderr for a fixture source."""
    local = Path(source).parent / "local.h"
    return (
        f". {TYPES_H}\n"
        f".. {INT_TYPES_H}\n"
        f". {local}\n"
        "Multiple include guards may be useful for:\n"
        f"{local}\n"
    )


def fake_gcc_run(args, **kwargs):
    return subprocess.CompletedProcess(args, 0, stdout="", stderr=gcc_h_output(args[-1]))


@pytest.fixture
def fake_gcc():
    with patch("eos_build.headers.subprocess.run", side_effect=fake_gcc_run) as run:
        yield run


@pytest.fixture
def kernel_tree(tmp_path, monkeypatch):
    """Copy of tests/fixtures/tree with the working directory set to it."""
    root = tmp_path / "tree"
    shutil.copytree(FIXTURES / "tree", root)
    monkeypatch.chdir(root)
    return root
