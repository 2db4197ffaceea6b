"""Shared test fixtures."""

from __future__ import annotations

import stat
import textwrap
from pathlib import Path

import pytest

FAKE_MAKEFILE = textwrap.dedent("""\
    all:
    \t@echo "building TARGET=$(TARGET) USE_THREAD=$(USE_THREAD)"
    \ttouch libopenblas.a
""")


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """Minimal stand-in for a cloned OpenBLAS checkout."""
    root = tmp_path / "source"
    (root / "kernel" / "x86_64").mkdir(parents=True)
    (root / "Makefile").write_text(FAKE_MAKEFILE, encoding="utf-8")
    (root / "kernel" / "x86_64" / "dgemm.S").write_text("; kernel\n", encoding="utf-8")
    (root / "TargetList.txt").write_text("HASWELL\nZEN\n", encoding="utf-8")
    return root


@pytest.fixture
def fake_make(tmp_path: Path) -> Path:
    """Executable that records its arguments and drops a static library."""
    script = tmp_path / "bin" / "fake-make"
    script.parent.mkdir(parents=True)
    script.write_text(
        '#!/bin/sh\necho "$@" > args.txt\necho "fake build"\ntouch libopenblas.a\n',
        encoding="utf-8",
    )
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script
