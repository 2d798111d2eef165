# topmark:header:start
#
#   project      : Probity
#   file         : __init__.py
#   file_relpath : src/probity/command/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Run orchestration layer.

No CLI dependencies: do not import Click or anything under ``probity.cli``
from here. Output goes through the [`OutputLike`][probity.command.output.OutputLike]
protocol, implemented by the CLI layer.
"""

from __future__ import annotations

from probity.command.application import AnalyseApplication, RunPhase
from probity.command.result import AnalysisResult, partition_errors

__all__ = [
    "AnalyseApplication",
    "AnalysisResult",
    "RunPhase",
    "partition_errors",
]
