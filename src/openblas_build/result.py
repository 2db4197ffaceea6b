"""Record describing a finished OpenBLAS build."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import cbor2

from openblas_build.options import BuildOption, Interface
from openblas_build.targets import Target

STATIC_LIBRARY = "libopenblas.a"
SHARED_LIBRARY = "libopenblas.so"


@dataclass(frozen=True, slots=True)
class BuildDetail:
    """Outcome of a successful build.

    New metadata goes into new optional fields or ``extra`` so existing
    callers keep working.
    """

    out_dir: Path
    option: BuildOption
    arguments: tuple[str, ...]
    command: tuple[str, ...]
    stdout_log: Path
    stderr_log: Path
    duration_s: float = 0.0
    extra: Mapping[str, str] = field(default_factory=dict)
    schema_version: int = 1

    @property
    def interface(self) -> Interface:
        return self.option.interface

    @property
    def target(self) -> Target | None:
        return self.option.target

    @property
    def static_library(self) -> Path | None:
        return self._existing(STATIC_LIBRARY)

    @property
    def shared_library(self) -> Path | None:
        return self._existing(SHARED_LIBRARY)

    def libraries(self) -> tuple[Path, ...]:
        return tuple(path for path in (self.static_library, self.shared_library) if path)

    def to_json(self, path: str | Path | None = None) -> str:
        encoded = json.dumps(self._payload(), indent=2, sort_keys=True) + "\n"
        if path is not None:
            Path(path).write_text(encoded, encoding="utf-8")
        return encoded

    def to_cbor(self, path: str | Path | None = None) -> bytes:
        encoded = cbor2.dumps(self._payload(), canonical=True)
        if path is not None:
            Path(path).write_bytes(encoded)
        return encoded

    def _existing(self, name: str) -> Path | None:
        candidate = self.out_dir / name
        return candidate if candidate.exists() else None

    # duration_s is excluded so records of identical builds compare equal.
    def _payload(self) -> dict[str, object]:
        return {
            "schema_version": self.schema_version,
            "out_dir": str(self.out_dir),
            "interface": self.interface.value,
            "target": self.target.token() if self.target is not None else None,
            "arguments": list(self.arguments),
            "command": list(self.command),
            "logs": {"stdout": str(self.stdout_log), "stderr": str(self.stderr_log)},
            "libraries": [path.name for path in self.libraries()],
            "extra": dict(sorted(self.extra.items())),
        }
