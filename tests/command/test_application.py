# topmark:header:start
#
#   project      : Probity
#   file         : test_application.py
#   file_relpath : tests/command/test_application.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for `probity.command.application`: one orchestrated run, end to end."""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING

import pytest

from probity.analyser.diagnostics import FileError
from probity.analyser.nodes import PropertyDeclaration
from probity.analyser.reflection import (
    CONSTRUCTOR_NAME,
    ClassReflection,
    MethodReflection,
    PropertyReflection,
    Scope,
)
from probity.analyser.types import MixedType
from probity.command.application import AnalyseApplication, RunPhase
from probity.command.timestamps import timestamp_cache_key
from probity.exit_codes import ExitCode
from tests.conftest import MB, ScriptedAnalyser, make_watchdog

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

    from probity.analyser.diagnostics import Diagnostic
    from probity.analyser.protocols import FileHook, NodeObserver
    from probity.cache.storage import MemoryCacheStorage
    from probity.command.output import OutputLike
    from probity.command.result import AnalysisResult
    from tests.conftest import RecordingOutput


class CapturingFormatter:
    """Formatter double that keeps the result and returns a fixed status."""

    def __init__(self, status: int = 7) -> None:
        self.status = status
        self.results: list[AnalysisResult] = []

    def format_errors(self, analysis_result: AnalysisResult, output: OutputLike) -> int:
        self.results.append(analysis_result)
        output.write_line("formatted")
        return self.status


def _qualifying_node() -> tuple[object, Scope]:
    reflection = ClassReflection("Service")
    reflection.methods[CONSTRUCTOR_NAME] = MethodReflection(CONSTRUCTOR_NAME, reflection)
    reflection.properties["__cache"] = PropertyReflection(
        "__cache", reflection, MixedType(explicit=False)
    )
    return PropertyDeclaration("__cache", 2, ast.Pass()), Scope("A.src", reflection)


def _sources(tmp_path: Path) -> list[str]:
    files: list[str] = []
    for name in ("A.src", "B.src"):
        path: Path = tmp_path / name
        path.write_text("x = 1\n", encoding="utf-8")
        files.append(str(path))
    return files


def _run(
    app: AnalyseApplication,
    files: list[str],
    std_output: RecordingOutput,
    error_output: RecordingOutput,
    formatter: CapturingFormatter,
    **kwargs: object,
) -> int:
    options: dict[str, object] = {
        "only_files": True,
        "default_level_used": True,
        "debug": False,
        "project_config_file": None,
        "changed": False,
    }
    options.update(kwargs)
    return app.analyse(
        files,
        std_output=std_output,
        error_output=error_output,
        error_formatter=formatter,
        **options,  # type: ignore[arg-type]
    )


def test_progress_run_end_to_end(
    tmp_path: Path,
    std_output: RecordingOutput,
    error_output: RecordingOutput,
    memory_cache: MemoryCacheStorage,
) -> None:
    """Two files, mixed diagnostics, a qualifying property, progress mode."""
    files: list[str] = _sources(tmp_path)
    e1 = FileError(files[0], 3, "x")
    analyser = ScriptedAnalyser(errors=[e1, "cfg missing"], nodes=[_qualifying_node()])
    registered: list[Callable[[], None]] = []
    limit_file: Path = tmp_path / "memory_limit"
    watchdog = make_watchdog(limit_file, 12 * MB, registered=registered)
    app = AnalyseApplication(analyser, limit_file, memory_cache, watchdog=watchdog)
    formatter = CapturingFormatter(status=7)

    status: int = _run(app, files, std_output, error_output, formatter)

    assert status == 7
    assert app.phase is RunPhase.DONE
    assert analyser.received == {"files": files, "only_files": True, "debug": False}
    assert [kind for kind, _ in analyser.events] == ["after", "after"]

    (result,) = formatter.results
    assert result.file_specific_errors == (e1,)
    assert result.not_file_specific_errors == ("cfg missing",)
    assert result.default_level_used is True
    assert result.has_inferrable_property_types_from_constructor is True
    assert result.project_config_file is None

    assert error_output.calls == [("start", 2), ("advance", 1), ("advance", 1), ("finish", None)]
    assert std_output.lines == ["formatted"]
    assert limit_file.read_text(encoding="utf-8") == "12 MB"
    assert registered == [watchdog.on_exit]
    assert memory_cache.entries == {}


def test_debug_run_lists_files_and_records_timestamps(
    tmp_path: Path,
    std_output: RecordingOutput,
    error_output: RecordingOutput,
    memory_cache: MemoryCacheStorage,
) -> None:
    files: list[str] = _sources(tmp_path)
    analyser = ScriptedAnalyser()
    limit_file: Path = tmp_path / "memory_limit"
    app = AnalyseApplication(
        analyser, limit_file, memory_cache, watchdog=make_watchdog(limit_file, MB)
    )
    formatter = CapturingFormatter(status=int(ExitCode.SUCCESS))

    status: int = _run(
        app,
        files,
        std_output,
        error_output,
        formatter,
        debug=True,
        changed=True,
        default_level_used=False,
        project_config_file="/proj/probity.toml",
    )

    assert status == ExitCode.SUCCESS
    assert analyser.events == [
        ("before", files[0]),
        ("after", files[0]),
        ("before", files[1]),
        ("after", files[1]),
    ]
    assert std_output.lines == [files[0], files[1], "formatted"]
    assert error_output.calls == []
    assert set(memory_cache.entries) == {timestamp_cache_key(f) for f in files}

    (result,) = formatter.results
    assert result.has_inferrable_property_types_from_constructor is False
    assert result.default_level_used is False
    assert result.project_config_file == "/proj/probity.toml"
    assert not result.has_errors()


def test_engine_errors_propagate(
    tmp_path: Path,
    std_output: RecordingOutput,
    error_output: RecordingOutput,
    memory_cache: MemoryCacheStorage,
) -> None:
    """The orchestrator does not catch engine failures; the ceiling record survives."""
    files: list[str] = _sources(tmp_path)
    analyser = ScriptedAnalyser(raises=MemoryError())
    limit_file: Path = tmp_path / "memory_limit"
    app = AnalyseApplication(
        analyser, limit_file, memory_cache, watchdog=make_watchdog(limit_file, 5 * MB)
    )
    formatter = CapturingFormatter()

    with pytest.raises(MemoryError):
        _run(app, files, std_output, error_output, formatter)

    assert app.phase is RunPhase.RUNNING
    assert formatter.results == []
    assert limit_file.read_text(encoding="utf-8") == "5 MB"


def test_empty_file_list(
    tmp_path: Path,
    std_output: RecordingOutput,
    error_output: RecordingOutput,
    memory_cache: MemoryCacheStorage,
) -> None:
    limit_file: Path = tmp_path / "memory_limit"
    app = AnalyseApplication(
        ScriptedAnalyser(), limit_file, memory_cache, watchdog=make_watchdog(limit_file, MB)
    )
    formatter = CapturingFormatter(status=0)

    assert _run(app, [], std_output, error_output, formatter) == 0
    assert error_output.calls == []
    assert not formatter.results[0].has_errors()


class FailingAfterFirstFile:
    """Engine that finishes one file, then fails."""

    def analyse(
        self,
        files: Sequence[str],
        only_files: bool,
        pre_file_callback: FileHook | None,
        post_file_callback: FileHook | None,
        debug: bool,
        node_observer: NodeObserver | None = None,
    ) -> list[Diagnostic]:
        if post_file_callback is not None:
            post_file_callback(files[0])
        raise RuntimeError("engine crashed")


def test_progress_is_closed_when_engine_fails(
    tmp_path: Path,
    std_output: RecordingOutput,
    error_output: RecordingOutput,
    memory_cache: MemoryCacheStorage,
) -> None:
    files: list[str] = _sources(tmp_path)
    limit_file: Path = tmp_path / "memory_limit"
    app = AnalyseApplication(
        FailingAfterFirstFile(), limit_file, memory_cache, watchdog=make_watchdog(limit_file, MB)
    )
    formatter = CapturingFormatter()

    with pytest.raises(RuntimeError, match="engine crashed"):
        _run(app, files, std_output, error_output, formatter)

    assert error_output.calls == [("start", 2), ("advance", 1), ("finish", None)]
    assert app.phase is RunPhase.RUNNING
    assert formatter.results == []
