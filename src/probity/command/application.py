# topmark:header:start
#
#   project      : Probity
#   file         : application.py
#   file_relpath : src/probity/command/application.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Run orchestrator: drive the analysis engine once and report the result.

`AnalyseApplication.analyse` moves through these phases:

``INIT``
    Write the initial memory ceiling record and register its exit-time cleanup.
``INSTRUMENTED``
    Select the per-file hooks for the run mode and build the inference observer.
``RUNNING``
    One blocking call into the engine with the file list, hooks and observer.
``FINALIZING``
    Close the progress indicator, partition diagnostics, build the result.
``DONE``
    Hand the result to the error formatter; its status is the return value.

Engine errors are never caught here: they propagate to the process boundary,
where the only reaction is the memory ceiling cleanup decided at exit.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from probity.command.inference import InferenceFlag, InferrablePropertyTypeObserver
from probity.command.instrumentation import select_instrumentation
from probity.command.memory import MemoryWatchdog
from probity.command.result import AnalysisResult, partition_errors
from probity.command.timestamps import TimestampRecorder
from probity.config.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from probity.analyser.diagnostics import Diagnostic
    from probity.analyser.protocols import Analyser
    from probity.cache.storage import Cache
    from probity.command.formatters.base import ErrorFormatter
    from probity.command.output import OutputLike
    from probity.config.logging import ProbityLogger

logger: ProbityLogger = get_logger(__name__)


class RunPhase(Enum):
    """Phases of a single `AnalyseApplication.analyse` call."""

    INIT = "init"
    INSTRUMENTED = "instrumented"
    RUNNING = "running"
    FINALIZING = "finalizing"
    DONE = "done"


class AnalyseApplication:
    """Orchestrate one analysis run.

    Args:
        analyser (Analyser): The analysis engine.
        memory_limit_file (Path): Memory ceiling record file.
        cache (Cache): Destination of file timestamps in changed-files mode.
        watchdog (MemoryWatchdog | None): Override the watchdog built from
            ``memory_limit_file`` (tests inject samplers this way).
    """

    def __init__(
        self,
        analyser: Analyser,
        memory_limit_file: Path,
        cache: Cache,
        *,
        watchdog: MemoryWatchdog | None = None,
    ) -> None:
        self.analyser = analyser
        self.memory_limit_file = memory_limit_file
        self.cache = cache
        self.watchdog: MemoryWatchdog = watchdog or MemoryWatchdog(memory_limit_file)
        self.phase: RunPhase | None = None

    def _enter(self, phase: RunPhase) -> None:
        self.phase = phase
        logger.debug("Run phase: %s", phase.value)

    def analyse(
        self,
        files: Sequence[str],
        *,
        only_files: bool,
        std_output: OutputLike,
        error_output: OutputLike,
        error_formatter: ErrorFormatter,
        default_level_used: bool,
        debug: bool,
        project_config_file: str | None,
        changed: bool = False,
    ) -> int:
        """Analyse ``files`` and return the error formatter's exit status.

        Args:
            files (Sequence[str]): Files to analyse.
            only_files (bool): Whether the run is scoped to explicitly given files.
            std_output (OutputLike): Formatter output and debug file listing.
            error_output (OutputLike): Progress indicator.
            error_formatter (ErrorFormatter): Renders the aggregate result.
            default_level_used (bool): Whether no rule level was chosen explicitly.
            debug (bool): Debug mode (file listing instead of progress; the
                engine re-raises internal errors).
            project_config_file (str | None): Configuration file in effect.
            changed (bool): Changed-files mode: record each file's mtime in the cache.

        Returns:
            int: The exit status returned by ``error_formatter``.
        """
        self._enter(RunPhase.INIT)
        self.watchdog.record_peak_usage()
        self.watchdog.register_exit_hook()

        self._enter(RunPhase.INSTRUMENTED)
        recorder = TimestampRecorder(self.cache, enabled=changed)
        instrumentation = select_instrumentation(
            debug=debug,
            files=files,
            std_output=std_output,
            error_output=error_output,
            watchdog=self.watchdog,
            recorder=recorder,
        )
        inference_flag = InferenceFlag()
        observer = InferrablePropertyTypeObserver(inference_flag)

        self._enter(RunPhase.RUNNING)
        logger.info("Analysing %d file(s)", len(files))
        try:
            errors: list[Diagnostic] = self.analyser.analyse(
                files,
                only_files,
                instrumentation.before_file,
                instrumentation.after_file,
                debug,
                observer,
            )
        finally:
            # Close the progress indicator even when the engine fails.
            instrumentation.finish()

        self._enter(RunPhase.FINALIZING)
        file_specific_errors, not_file_specific_errors = partition_errors(errors)
        analysis_result = AnalysisResult(
            file_specific_errors=tuple(file_specific_errors),
            not_file_specific_errors=tuple(not_file_specific_errors),
            default_level_used=default_level_used,
            has_inferrable_property_types_from_constructor=inference_flag.value,
            project_config_file=project_config_file,
        )

        self._enter(RunPhase.DONE)
        return error_formatter.format_errors(analysis_result, std_output)
