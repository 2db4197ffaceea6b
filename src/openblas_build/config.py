"""Build settings and environment-driven configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from openblas_build.errors import ConfigurationError, ValidationError
from openblas_build.options import BuildOption, Interface
from openblas_build.targets import Target

SOURCE_MARKER = "Makefile"
SOURCE_DIR_ENV = "OPENBLAS_SOURCE_DIR"
MAKE_ENV = "OPENBLAS_MAKE"
JOBS_ENV = "OPENBLAS_JOBS"

# Environment toggles read by option_from_env(), keyed by BuildOption field.
OPTION_ENV_FLAGS: dict[str, str] = {
    "no_static": "OPENBLAS_NO_STATIC",
    "no_shared": "OPENBLAS_NO_SHARED",
    "no_cblas": "OPENBLAS_NO_CBLAS",
    "no_lapack": "OPENBLAS_NO_LAPACK",
    "no_lapacke": "OPENBLAS_NO_LAPACKE",
    "no_fortran": "OPENBLAS_NO_FORTRAN",
    "use_thread": "OPENBLAS_USE_THREAD",
    "use_openmp": "OPENBLAS_USE_OPENMP",
    "dynamic_arch": "OPENBLAS_DYNAMIC_ARCH",
}
INTERFACE_ENV = "OPENBLAS_INTERFACE"
TARGET_ENV = "OPENBLAS_TARGET"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"", "0", "false", "no", "off"})

# Only meaningful in a source checkout or editable install; an installed
# package must be pointed at the sources with OPENBLAS_SOURCE_DIR.
DEFAULT_SOURCE_DIR = Path(__file__).resolve().parents[2] / "source"
SOURCE_HINT = (
    "Run `git submodule update --init`, or set OPENBLAS_SOURCE_DIR when not "
    "building from a checkout of this project."
)


def check_source_dir(path: str | Path) -> Path:
    """Return ``path`` if it holds an initialized OpenBLAS checkout."""
    source_dir = Path(path)
    if not (source_dir / SOURCE_MARKER).is_file():
        raise ConfigurationError(
            "OpenBLAS repository has not been cloned.",
            hint=SOURCE_HINT,
            context={
                "operation": "check_source_dir",
                "source_dir": str(source_dir),
                "marker": SOURCE_MARKER,
            },
        )
    return source_dir


def openblas_source_dir(environ: Mapping[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    override = env.get(SOURCE_DIR_ENV)
    return check_source_dir(Path(override) if override else DEFAULT_SOURCE_DIR)


@dataclass(frozen=True, slots=True)
class BuildSettings:
    """Where the sources live and how ``make`` is invoked."""

    source_dir: Path = DEFAULT_SOURCE_DIR
    make: str = "make"
    jobs: int | None = None
    env: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.jobs is not None and self.jobs < 1:
            raise ValidationError(
                "Job count must be a positive integer.",
                context={"operation": "settings", "jobs": str(self.jobs)},
            )
        if not self.make:
            raise ValidationError("Build tool name must not be empty.")


def settings_from_env(environ: Mapping[str, str] | None = None) -> BuildSettings:
    env = os.environ if environ is None else environ
    source_dir = Path(env[SOURCE_DIR_ENV]) if env.get(SOURCE_DIR_ENV) else DEFAULT_SOURCE_DIR
    return BuildSettings(
        source_dir=source_dir,
        make=env.get(MAKE_ENV) or "make",
        jobs=_parse_jobs(env.get(JOBS_ENV)),
    )


def option_from_env(environ: Mapping[str, str] | None = None) -> BuildOption:
    env = os.environ if environ is None else environ
    flags = {name: _parse_bool(key, env.get(key, "")) for name, key in OPTION_ENV_FLAGS.items()}

    interface_value = env.get(INTERFACE_ENV, "").strip().lower()
    if not interface_value:
        interface = Interface.LP64
    else:
        try:
            interface = Interface(interface_value)
        except ValueError:
            raise ValidationError(
                f"Unsupported interface: {interface_value!r}",
                hint="Use `lp64` or `ilp64`.",
                context={"operation": "option_from_env", "variable": INTERFACE_ENV},
            ) from None

    target_value = env.get(TARGET_ENV, "").strip()
    target = Target.parse(target_value) if target_value else None
    return BuildOption(**flags, interface=interface, target=target)


def _parse_bool(key: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValidationError(
        f"Cannot interpret {key}={raw!r} as a boolean.",
        hint="Use 1/0, true/false, yes/no or on/off.",
        context={"operation": "option_from_env", "variable": key},
    )


def _parse_jobs(raw: str | None) -> int | None:
    if raw is None or not raw.strip():
        return None
    try:
        jobs = int(raw)
    except ValueError:
        raise ValidationError(
            f"{JOBS_ENV} must be an integer, got {raw!r}.",
            context={"operation": "settings_from_env", "variable": JOBS_ENV},
        ) from None
    if jobs < 1:
        raise ValidationError(
            f"{JOBS_ENV} must be positive, got {jobs}.",
            context={"operation": "settings_from_env", "variable": JOBS_ENV},
        )
    return jobs
