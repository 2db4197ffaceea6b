"""Copy the immutable OpenBLAS checkout into a disposable build directory.

The copy is made into a hidden sibling of the output directory and only
renamed into place once complete, so an interrupted copy never leaves a
half-populated ``out_dir`` behind. Two builds must not share an ``out_dir``:
the previous contents are deleted without locking.
"""

from __future__ import annotations

import os
import shutil
import stat
import uuid
from pathlib import Path

from openblas_build.config import check_source_dir
from openblas_build.errors import StagingError
from openblas_build.observability import StructuredLogger


def stage(
    source_dir: str | Path,
    out_dir: str | Path,
    *,
    logger: StructuredLogger | None = None,
) -> Path:
    """Replace ``out_dir`` with a writable copy of ``source_dir``'s contents."""
    source = check_source_dir(source_dir)
    destination = Path(out_dir)
    _ensure_disjoint(source, destination)
    if logger is not None:
        logger.log(
            operation="stage",
            phase="check",
            out_dir=destination,
            message="Source checkout found.",
            extra={"source_dir": str(source)},
        )

    # The scratch sibling is named after the resolved directory; a root has no name.
    target = destination.resolve()
    if not target.name:
        raise StagingError(
            "Output directory must have a final path component.",
            path=destination,
            hint="Pass a dedicated directory such as build/openblas.",
            context={"operation": "stage", "source_dir": str(source)},
        )

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise _staging_error(
            "Cannot create parent of output directory.", exc, source, destination
        ) from exc

    scratch = target.parent / f".{target.name}.staging-{uuid.uuid4().hex[:8]}"
    renamed = False
    try:
        shutil.copytree(source, scratch, symlinks=True)
        _make_writable(scratch)
        if target.is_symlink() or target.is_file():
            target.unlink()
        elif target.exists():
            shutil.rmtree(target)
        scratch.rename(target)
        renamed = True
    except (shutil.Error, OSError) as exc:
        error = _staging_error("Staging the source tree failed.", exc, source, destination)
        if logger is not None:
            logger.log(
                operation="stage",
                phase="stage",
                out_dir=destination,
                message=str(error),
                level="error",
            )
        raise error from exc
    finally:
        if not renamed:
            shutil.rmtree(scratch, ignore_errors=True)

    if logger is not None:
        logger.log(
            operation="stage",
            phase="stage",
            out_dir=destination,
            message="Source tree staged.",
        )
    return destination


def _ensure_disjoint(source: Path, destination: Path) -> None:
    resolved_source = source.resolve()
    resolved_destination = destination.resolve()
    if resolved_destination == resolved_source or resolved_source in resolved_destination.parents:
        raise StagingError(
            "Output directory must not be inside the source checkout.",
            path=destination,
            hint="Choose an out_dir outside of the OpenBLAS source tree.",
            context={"operation": "stage", "source_dir": str(source)},
        )
    if resolved_destination in resolved_source.parents:
        raise StagingError(
            "Output directory must not contain the source checkout.",
            path=destination,
            hint="Staging removes out_dir, which would delete the sources.",
            context={"operation": "stage", "source_dir": str(source)},
        )


def _make_writable(root: Path) -> None:
    for dirpath, dirnames, filenames in os.walk(root):
        for name in (dirpath, *(os.path.join(dirpath, entry) for entry in dirnames + filenames)):
            if os.path.islink(name):
                continue
            mode = os.stat(name).st_mode
            if not mode & stat.S_IWUSR:
                os.chmod(name, mode | stat.S_IWUSR)


def _staging_error(message: str, exc: BaseException, source: Path, destination: Path) -> StagingError:
    return StagingError(
        message,
        path=_failing_path(exc) or destination,
        hint="Check free disk space and permissions, then retry.",
        context={
            "operation": "stage",
            "source_dir": str(source),
            "out_dir": str(destination),
            "error": str(exc),
        },
    )


def _failing_path(exc: BaseException) -> str | None:
    if isinstance(exc, shutil.Error) and exc.args and isinstance(exc.args[0], list):
        failures = exc.args[0]
        if failures:
            return str(failures[0][0])
    filename = getattr(exc, "filename", None)
    return str(filename) if filename else None
