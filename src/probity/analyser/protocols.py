# topmark:header:start
#
#   project      : Probity
#   file         : protocols.py
#   file_relpath : src/probity/analyser/protocols.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Contract between the run orchestrator and an analysis engine.

The orchestrator makes a single, blocking `Analyser.analyse` call. The engine
walks the files itself and re-enters the orchestrator through the hooks:

* ``pre_file_callback(file)`` before a file is analysed;
* ``post_file_callback(file)`` after it was analysed;
* ``node_observer(node, scope)`` for every syntax node encountered.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Protocol, TypeAlias

if TYPE_CHECKING:
    from probity.analyser.diagnostics import Diagnostic
    from probity.analyser.reflection import Scope

FileHook: TypeAlias = Callable[[str], None]
NodeObserver: TypeAlias = Callable[[object, "Scope"], None]


class Analyser(Protocol):
    """Structural interface of an analysis engine."""

    def analyse(
        self,
        files: Sequence[str],
        only_files: bool,
        pre_file_callback: FileHook | None,
        post_file_callback: FileHook | None,
        debug: bool,
        node_observer: NodeObserver | None = None,
    ) -> list[Diagnostic]:
        """Analyse ``files`` and return every diagnostic found.

        Args:
            files (Sequence[str]): Files to analyse, in order.
            only_files (bool): ``True`` when the run is scoped to explicitly given
                files rather than a whole project.
            pre_file_callback (FileHook | None): Invoked before each file.
            post_file_callback (FileHook | None): Invoked after each file.
            debug (bool): Debug mode; engines re-raise internal errors instead of
                reporting them as diagnostics.
            node_observer (NodeObserver | None): Invoked for every syntax node.

        Returns:
            list[Diagnostic]: File-scoped `FileError` records and global strings.
        """
        ...
