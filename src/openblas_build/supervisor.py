"""Run ``make`` inside a staged tree with output captured to log files.

The call blocks until the child exits; there is no timeout or cancellation.
``out.log`` and ``err.log`` are left in the working directory on every
outcome so a failed build can be inspected afterwards.
"""

from __future__ import annotations

import os
import shlex
import subprocess
import time
from collections.abc import Mapping, Sequence
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path

from openblas_build.errors import BuildFailure, LaunchError, LaunchFailureReason
from openblas_build.observability import StructuredLogger

STDOUT_LOG = "out.log"
STDERR_LOG = "err.log"


@dataclass(frozen=True, slots=True)
class ProcessOutcome:
    command: tuple[str, ...]
    returncode: int
    stdout_log: Path
    stderr_log: Path
    duration_s: float

    @property
    def command_line(self) -> str:
        return shlex.join(self.command)


def build_command(
    arguments: Sequence[str],
    *,
    make: str = "make",
    jobs: int | None = None,
) -> tuple[str, ...]:
    command = [make]
    if jobs is not None:
        command.append(f"-j{jobs}")
    command.extend(arguments)
    return tuple(command)


def run(
    out_dir: str | Path,
    arguments: Sequence[str],
    *,
    make: str = "make",
    jobs: int | None = None,
    env: Mapping[str, str] | None = None,
    logger: StructuredLogger | None = None,
) -> ProcessOutcome:
    """Execute the build tool in ``out_dir`` and classify its exit status."""
    workdir = Path(out_dir)
    command = build_command(arguments, make=make, jobs=jobs)
    command_line = shlex.join(command)
    stdout_log = workdir / STDOUT_LOG
    stderr_log = workdir / STDERR_LOG
    process_env = {**os.environ, **env} if env else None

    with ExitStack() as stack:
        try:
            out = stack.enter_context(stdout_log.open("wb"))
            err = stack.enter_context(stderr_log.open("wb"))
        except OSError as exc:
            error = LaunchError(
                "Cannot create log file.",
                reason="log_unavailable",
                command=command_line,
                hint="Ensure the output directory exists and is writable.",
                context={"operation": "run", "path": str(exc.filename or workdir)},
            )
            _log_error(logger, workdir, error)
            raise error from exc

        if logger is not None:
            logger.log(
                operation="run",
                phase="launch",
                out_dir=workdir,
                message="Launching build tool.",
                extra={"command": list(command)},
            )
        started = time.monotonic()
        try:
            completed = subprocess.run(
                command,
                cwd=workdir,
                stdout=out,
                stderr=err,
                env=process_env,
                check=False,
            )
        except OSError as exc:
            error = _launch_error(exc, command_line)
            _log_error(logger, workdir, error)
            raise error from exc
        duration_s = round(time.monotonic() - started, 3)

    if logger is not None:
        logger.log(
            operation="run",
            phase="exit",
            out_dir=workdir,
            message=f"Build tool exited with status {completed.returncode}.",
            level="info" if completed.returncode == 0 else "error",
            extra={"returncode": completed.returncode, "duration_s": duration_s},
        )

    if completed.returncode != 0:
        raise BuildFailure(
            f"Subprocess returned non-zero status {completed.returncode}: `{command_line}`",
            returncode=completed.returncode,
            command=command_line,
            stdout_log=stdout_log,
            stderr_log=stderr_log,
            hint=f"Inspect {stderr_log} and {stdout_log} for the build output.",
            context={"operation": "run", "cwd": str(workdir)},
        )

    return ProcessOutcome(
        command=command,
        returncode=completed.returncode,
        stdout_log=stdout_log,
        stderr_log=stderr_log,
        duration_s=duration_s,
    )


def _launch_error(exc: OSError, command_line: str) -> LaunchError:
    reason: LaunchFailureReason
    if isinstance(exc, FileNotFoundError):
        reason = "not_found"
        hint = "Install the build tool or point OPENBLAS_MAKE at it."
    elif isinstance(exc, PermissionError):
        reason = "permission"
        hint = "The build tool exists but is not executable by this user."
    else:
        reason = "os_error"
        hint = None
    return LaunchError(
        f"Subprocess execution failed: `{command_line}` ({exc})",
        reason=reason,
        command=command_line,
        hint=hint,
        context={"operation": "run", "error": str(exc)},
    )


def _log_error(logger: StructuredLogger | None, workdir: Path, error: LaunchError) -> None:
    if logger is None:
        return
    logger.log(
        operation="run",
        phase="launch",
        out_dir=workdir,
        message=str(error),
        level="error",
        extra={"reason": error.reason},
    )
