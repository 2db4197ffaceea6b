"""Public package entrypoint for the OpenBLAS build helper."""

from .builder import build
from .config import (
    BuildSettings,
    check_source_dir,
    openblas_source_dir,
    option_from_env,
    settings_from_env,
)
from .errors import (
    BuildFailure,
    ConfigurationError,
    ErrorCode,
    LaunchError,
    OpenBlasBuildError,
    StagingError,
    ValidationError,
)
from .observability import StructuredLogger
from .options import BuildOption, Interface
from .result import BuildDetail
from .staging import stage
from .supervisor import ProcessOutcome, run
from .targets import Target, TargetFamily

__all__ = [
    "BuildDetail",
    "BuildFailure",
    "BuildOption",
    "BuildSettings",
    "ConfigurationError",
    "ErrorCode",
    "Interface",
    "LaunchError",
    "OpenBlasBuildError",
    "ProcessOutcome",
    "StagingError",
    "StructuredLogger",
    "Target",
    "TargetFamily",
    "ValidationError",
    "build",
    "check_source_dir",
    "openblas_source_dir",
    "option_from_env",
    "run",
    "settings_from_env",
    "stage",
]
