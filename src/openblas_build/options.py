"""Build options and their translation into ``make`` variables."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

from openblas_build.targets import Target

if TYPE_CHECKING:
    from openblas_build.config import BuildSettings
    from openblas_build.observability import StructuredLogger
    from openblas_build.result import BuildDetail


class Interface(StrEnum):
    """Integer width of the BLAS/LAPACK calling convention."""

    LP64 = "lp64"
    ILP64 = "ilp64"


# Order of this table is the order of the emitted tokens.
_FLAG_TOKENS: tuple[tuple[str, str], ...] = (
    ("no_static", "NO_STATIC=1"),
    ("no_shared", "NO_SHARED=1"),
    ("no_cblas", "NO_CBLAS=1"),
    ("no_lapack", "NO_LAPACK=1"),
    ("no_lapacke", "NO_LAPACKE=1"),
    ("no_fortran", "NOFORTRAN=1"),
    ("use_thread", "USE_THREAD=1"),
    ("use_openmp", "USE_OPENMP=1"),
    ("dynamic_arch", "DYNAMIC_ARCH=1"),
)


@dataclass(frozen=True, slots=True)
class BuildOption:
    """Feature toggles for one OpenBLAS build.

    Every field defaults to off, which leaves the decision to the Makefile's
    own defaults (including host CPU detection when ``target`` is ``None``).
    """

    no_static: bool = False
    no_shared: bool = False
    no_cblas: bool = False
    no_lapack: bool = False
    no_lapacke: bool = False
    no_fortran: bool = False
    use_thread: bool = False
    use_openmp: bool = False
    dynamic_arch: bool = False
    interface: Interface = Interface.LP64
    target: Target | None = None

    def to_arguments(self) -> list[str]:
        args = [token for name, token in _FLAG_TOKENS if getattr(self, name)]
        if self.interface is Interface.ILP64:
            args.append("INTERFACE64=1")
        if self.target is not None:
            args.append(f"TARGET={self.target.token()}")
        return args

    def build(
        self,
        out_dir: str | Path,
        *,
        settings: BuildSettings | None = None,
        logger: StructuredLogger | None = None,
    ) -> BuildDetail:
        """Stage the source tree into ``out_dir`` and run ``make`` there.

        An existing ``out_dir`` is replaced. Libraries end up at
        ``out_dir/libopenblas.a`` and ``out_dir/libopenblas.so``.
        """
        from openblas_build.builder import build

        return build(self, out_dir, settings=settings, logger=logger)
