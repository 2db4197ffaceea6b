"""Typed error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from pathlib import Path
from typing import Literal

LaunchFailureReason = Literal["not_found", "permission", "os_error", "log_unavailable"]


class ErrorCode(StrEnum):
    """Stable error identifiers used across API surfaces."""

    VALIDATION = "E_VALIDATION"
    CONFIGURATION = "E_CONFIGURATION"
    STAGING = "E_STAGING"
    LAUNCH = "E_LAUNCH"
    BUILD_FAILURE = "E_BUILD_FAILURE"


class OpenBlasBuildError(Exception):
    """Base error class that carries code, optional hint, and context."""

    code: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        if self.context:
            for k, v in self.context.items():
                if v:
                    parts.append(f"  {k}: {v}")
        return "\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": str(self),
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class ValidationError(OpenBlasBuildError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.VALIDATION, hint=hint, context=context)


class ConfigurationError(OpenBlasBuildError):
    """The vendored source tree is missing or was never initialized."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.CONFIGURATION, hint=hint, context=context)


class StagingError(OpenBlasBuildError):
    """Copying or removing the staged tree failed."""

    def __init__(
        self,
        message: str,
        *,
        path: str | Path | None = None,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        merged = dict(context or {})
        if path is not None:
            merged.setdefault("path", str(path))
        super().__init__(message, code=ErrorCode.STAGING, hint=hint, context=merged)
        self.path = Path(path) if path is not None else None


class LaunchError(OpenBlasBuildError):
    """The external build tool could not be started."""

    def __init__(
        self,
        message: str,
        *,
        reason: LaunchFailureReason,
        command: str = "",
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        merged = {"reason": reason, "command": command, **dict(context or {})}
        super().__init__(message, code=ErrorCode.LAUNCH, hint=hint, context=merged)
        self.reason = reason
        self.command = command


class BuildFailure(OpenBlasBuildError):
    """The external build ran and exited with a non-zero status."""

    def __init__(
        self,
        message: str,
        *,
        returncode: int,
        command: str,
        stdout_log: Path | None = None,
        stderr_log: Path | None = None,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        merged = {
            "returncode": str(returncode),
            "command": command,
            "stdout_log": str(stdout_log) if stdout_log is not None else "",
            "stderr_log": str(stderr_log) if stderr_log is not None else "",
            **dict(context or {}),
        }
        super().__init__(message, code=ErrorCode.BUILD_FAILURE, hint=hint, context=merged)
        self.returncode = returncode
        self.command = command
        self.stdout_log = stdout_log
        self.stderr_log = stderr_log


__all__ = [
    "BuildFailure",
    "ConfigurationError",
    "ErrorCode",
    "LaunchError",
    "LaunchFailureReason",
    "OpenBlasBuildError",
    "StagingError",
    "ValidationError",
]
