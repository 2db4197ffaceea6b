"""One-shot build: stage the checkout, run ``make``, report the result."""

from __future__ import annotations

from pathlib import Path

from openblas_build import staging, supervisor
from openblas_build.config import BuildSettings, openblas_source_dir
from openblas_build.observability import StructuredLogger
from openblas_build.options import BuildOption
from openblas_build.result import BuildDetail


def build(
    option: BuildOption,
    out_dir: str | Path,
    *,
    settings: BuildSettings | None = None,
    logger: StructuredLogger | None = None,
) -> BuildDetail:
    """Build OpenBLAS for ``option`` in ``out_dir``.

    Without explicit settings the checkout is resolved via
    :func:`openblas_source_dir`. Any failure propagates unchanged; the staged
    tree and its logs stay on disk.
    """
    if settings is None:
        settings = BuildSettings(source_dir=openblas_source_dir())

    arguments = option.to_arguments()
    destination = staging.stage(settings.source_dir, out_dir, logger=logger)
    outcome = supervisor.run(
        destination,
        arguments,
        make=settings.make,
        jobs=settings.jobs,
        env=settings.env,
        logger=logger,
    )

    detail = BuildDetail(
        out_dir=destination,
        option=option,
        arguments=tuple(arguments),
        command=outcome.command,
        stdout_log=outcome.stdout_log,
        stderr_log=outcome.stderr_log,
        duration_s=outcome.duration_s,
    )
    if logger is not None:
        logger.log(
            operation="build",
            phase="result",
            out_dir=destination,
            message="Build finished.",
            extra={"libraries": [path.name for path in detail.libraries()]},
        )
    return detail
