# topmark:header:start
#
#   project      : Probity
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pytest configuration for the Probity test suite.

Provides shared test doubles for the run orchestrator:

- `RecordingOutput`: an `OutputLike` that records every call;
- `ScriptedAnalyser`: an engine that replays a scripted diagnostic stream and
  invokes the hooks and node observer in a fixed order;
- `StaticSampler`: a memory sampler returning scripted byte counts.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar, cast

import pytest

from probity.cache.storage import MemoryCacheStorage
from probity.command.memory import FatalErrorTracker, MemoryWatchdog
from probity.config import logging

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from probity.analyser.diagnostics import Diagnostic
    from probity.analyser.protocols import FileHook, NodeObserver
    from probity.analyser.reflection import Scope

F = TypeVar("F", bound=Callable[..., object])

MB: int = 1024 * 1024


def as_typed_mark(mark: Any) -> Callable[[F], F]:
    """Wrap a pytest mark so static type checkers preserve the function type.

    Args:
        mark (Any): A pytest mark decorator such as `pytest.mark.cli`.

    Returns:
        Callable[[F], F]: A decorator that preserves the wrapped function's type.
    """

    def _decorator(func: F) -> F:
        return cast("F", mark(func))

    return _decorator


mark_cli: Callable[[F], F] = as_typed_mark(pytest.mark.cli)


def parametrize(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.mark.parametrize`."""
    return as_typed_mark(pytest.mark.parametrize(*args, **kwargs))


@pytest.fixture(autouse=True)
def silence_probity_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure Probity's runtime log level is not forced via env during tests.

    Args:
        monkeypatch (pytest.MonkeyPatch): Used to drop ``PROBITY_LOG_LEVEL``.
    """
    monkeypatch.delenv("PROBITY_LOG_LEVEL", raising=False)


@pytest.fixture(autouse=True)
def restore_excepthook(monkeypatch: pytest.MonkeyPatch) -> None:
    """Undo `FatalErrorTracker.install` after each test."""
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)


@pytest.hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Log everything (TRACE) during test runs."""
    logging.setup_logging(level=logging.TRACE_LEVEL)


class RecordingOutput:
    """`OutputLike` double that keeps every line and progress call."""

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.calls: list[tuple[str, int | None]] = []

    def write_line(self, text: str = "") -> None:
        self.lines.append(text)

    def styled(self, text: str, **style_kwargs: Any) -> str:
        return text

    def progress_start(self, total: int) -> None:
        self.calls.append(("start", total))

    def progress_advance(self, step: int = 1) -> None:
        self.calls.append(("advance", step))

    def progress_finish(self) -> None:
        self.calls.append(("finish", None))

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def count(self, kind: str) -> int:
        return sum(1 for name, _ in self.calls if name == kind)


class StaticSampler:
    """Memory sampler replaying ``values`` (the last one repeats)."""

    def __init__(self, *values: int) -> None:
        self.values: list[int] = list(values) or [0]
        self.calls: int = 0

    def __call__(self) -> int:
        index: int = min(self.calls, len(self.values) - 1)
        self.calls += 1
        return self.values[index]


@dataclass
class ScriptedAnalyser:
    """Engine double: calls the hooks around each file and returns ``errors``.

    Attributes:
        errors (list[Diagnostic]): Diagnostics to return.
        nodes (list[tuple[object, Scope]]): ``(node, scope)`` pairs fed to the
            observer while the first file is being "analysed".
        events (list[tuple[str, str]]): Hook invocations, in order.
        raises (BaseException | None): Raised after the first file when set.
    """

    errors: list[Diagnostic] = field(default_factory=lambda: [])
    nodes: list[tuple[object, Scope]] = field(default_factory=lambda: [])
    events: list[tuple[str, str]] = field(default_factory=lambda: [])
    raises: BaseException | None = None
    received: dict[str, Any] = field(default_factory=lambda: {})

    def analyse(
        self,
        files: Sequence[str],
        only_files: bool,
        pre_file_callback: FileHook | None,
        post_file_callback: FileHook | None,
        debug: bool,
        node_observer: NodeObserver | None = None,
    ) -> list[Diagnostic]:
        self.received = {"files": list(files), "only_files": only_files, "debug": debug}
        for index, file in enumerate(files):
            if pre_file_callback is not None:
                self.events.append(("before", file))
                pre_file_callback(file)
            if index == 0 and node_observer is not None:
                for node, scope in self.nodes:
                    node_observer(node, scope)
            if self.raises is not None:
                raise self.raises
            if post_file_callback is not None:
                self.events.append(("after", file))
                post_file_callback(file)
        return list(self.errors)


def make_watchdog(
    memory_limit_file: Path,
    *samples: int,
    registered: list[Callable[[], None]] | None = None,
    tracker: FatalErrorTracker | None = None,
) -> MemoryWatchdog:
    """Return a watchdog with a scripted sampler and no real ``atexit`` registration."""
    sink: list[Callable[[], None]] = registered if registered is not None else []
    return MemoryWatchdog(
        memory_limit_file,
        sampler=StaticSampler(*samples),
        tracker=tracker or FatalErrorTracker(),
        register_exit=sink.append,
    )


def write_sources(root: Path, sources: dict[str, str]) -> list[str]:
    """Write ``{relative path: source}`` under ``root`` and return the absolute paths."""
    paths: list[str] = []
    for rel, text in sources.items():
        path: Path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        paths.append(str(path.resolve()))
    return paths


def messages(errors: Iterable[Diagnostic]) -> list[str]:
    """Return the message text of each diagnostic."""
    return [e if isinstance(e, str) else e.message for e in errors]


@pytest.fixture
def memory_cache() -> MemoryCacheStorage:
    """Return an empty in-memory cache."""
    return MemoryCacheStorage()


@pytest.fixture
def std_output() -> RecordingOutput:
    """Return a recording standard output."""
    return RecordingOutput()


@pytest.fixture
def error_output() -> RecordingOutput:
    """Return a recording error output."""
    return RecordingOutput()
