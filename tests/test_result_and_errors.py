import json
from pathlib import Path

import cbor2

from openblas_build.errors import (
    BuildFailure,
    ConfigurationError,
    ErrorCode,
    LaunchError,
    StagingError,
    ValidationError,
)
from openblas_build.observability import StructuredLogger
from openblas_build.options import BuildOption, Interface
from openblas_build.result import BuildDetail
from openblas_build.targets import Target


def _detail(out_dir: Path, *, duration_s: float = 1.5) -> BuildDetail:
    option = BuildOption(no_shared=True, interface=Interface.ILP64, target=Target.SKYLAKEX)
    return BuildDetail(
        out_dir=out_dir,
        option=option,
        arguments=tuple(option.to_arguments()),
        command=("make", *option.to_arguments()),
        stdout_log=out_dir / "out.log",
        stderr_log=out_dir / "err.log",
        duration_s=duration_s,
    )


def test_detail_exposes_effective_configuration(tmp_path: Path) -> None:
    detail = _detail(tmp_path)

    assert detail.interface is Interface.ILP64
    assert detail.target is Target.SKYLAKEX
    assert detail.libraries() == ()


def test_detail_locates_libraries_that_exist(tmp_path: Path) -> None:
    (tmp_path / "libopenblas.a").write_bytes(b"!<arch>\n")
    (tmp_path / "libopenblas.so").write_bytes(b"\x7fELF")
    detail = _detail(tmp_path)

    assert detail.libraries() == (tmp_path / "libopenblas.a", tmp_path / "libopenblas.so")


def test_detail_export_is_stable_and_ignores_duration(tmp_path: Path) -> None:
    fast = _detail(tmp_path, duration_s=0.1)
    slow = _detail(tmp_path, duration_s=99.0)

    assert fast.to_json() == slow.to_json()
    assert fast.to_cbor() == slow.to_cbor()

    payload = json.loads(fast.to_json())
    assert payload["target"] == "SKYLAKEX"
    assert payload["interface"] == "ilp64"
    assert payload["arguments"] == ["NO_SHARED=1", "INTERFACE64=1", "TARGET=SKYLAKEX"]
    assert cbor2.loads(fast.to_cbor()) == payload


def test_detail_export_writes_files(tmp_path: Path) -> None:
    detail = _detail(tmp_path)

    detail.to_json(tmp_path / "detail.json")
    detail.to_cbor(tmp_path / "detail.cbor")

    assert json.loads((tmp_path / "detail.json").read_text(encoding="utf-8"))["schema_version"] == 1
    assert cbor2.loads((tmp_path / "detail.cbor").read_bytes())["libraries"] == []


def test_error_codes_are_stable_and_machine_readable() -> None:
    errors = [
        ValidationError("bad input"),
        ConfigurationError("not cloned"),
        StagingError("copy failed", path="/tmp/out"),
        LaunchError("no make", reason="not_found", command="make"),
        BuildFailure("make failed", returncode=2, command="make all"),
    ]
    assert [error.code for error in errors] == [
        ErrorCode.VALIDATION.value,
        ErrorCode.CONFIGURATION.value,
        ErrorCode.STAGING.value,
        ErrorCode.LAUNCH.value,
        ErrorCode.BUILD_FAILURE.value,
    ]


def test_error_to_dict_carries_context_and_hint() -> None:
    error = BuildFailure(
        "make failed",
        returncode=2,
        command="make USE_THREAD=1",
        stderr_log=Path("/tmp/out/err.log"),
        hint="Inspect err.log.",
    )

    payload = error.to_dict()

    assert payload["code"] == "E_BUILD_FAILURE"
    assert payload["hint"] == "Inspect err.log."
    assert payload["context"]["returncode"] == "2"
    assert payload["context"]["command"] == "make USE_THREAD=1"
    assert payload["context"]["stderr_log"] == "/tmp/out/err.log"
    assert "Hint: Inspect err.log." in str(error)


def test_staging_error_keeps_failing_path() -> None:
    error = StagingError("copy failed", path="/data/out/kernel")

    assert error.path == Path("/data/out/kernel")
    assert "path: /data/out/kernel" in str(error)


def test_structured_logger_exports_json_lines(tmp_path: Path) -> None:
    logger = StructuredLogger()
    logger.log(operation="stage", phase="check", out_dir=tmp_path, message="ok")
    logger.log(operation="run", phase="exit", out_dir=None, message="bad", level="error")

    path = logger.to_json_lines(tmp_path / "logs" / "build.jsonl")

    lines = path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["phase"] for line in lines] == ["check", "exit"]
    assert logger.records_for_phase("exit")[0]["level"] == "error"
    assert len(logger.errors()) == 1
