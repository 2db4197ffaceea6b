"""Structured logging of build phases."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

Phase = Literal["check", "stage", "launch", "exit", "result"]


@dataclass(slots=True)
class StructuredLogger:
    records: list[dict[str, Any]] = field(default_factory=list)

    def log(
        self,
        *,
        operation: str,
        phase: Phase,
        out_dir: str | Path | None,
        message: str,
        level: str = "info",
        extra: dict[str, Any] | None = None,
    ) -> None:
        record: dict[str, Any] = {
            "level": level,
            "operation": operation,
            "phase": phase,
            "out_dir": str(out_dir) if out_dir is not None else None,
            "message": message,
        }
        if extra is not None:
            record["extra"] = extra
        self.records.append(record)

    def records_for_phase(self, phase: Phase) -> list[dict[str, Any]]:
        return [record for record in self.records if record.get("phase") == phase]

    def errors(self) -> list[dict[str, Any]]:
        return [record for record in self.records if record.get("level") == "error"]

    def to_json_lines(self, path: str | Path) -> Path:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        lines = [json.dumps(record, sort_keys=True) for record in self.records]
        output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return output_path
