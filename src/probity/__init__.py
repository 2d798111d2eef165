# topmark:header:start
#
#   project      : Probity
#   file         : __init__.py
#   file_relpath : src/probity/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Probity package.

Probity runs a batch static-analysis pass over a set of source files. It drives
an analysis engine over the file list, instruments the run (progress, memory
ceiling tracking, incremental timestamp caching), and hands the aggregated
diagnostics to a pluggable error formatter.
"""

from __future__ import annotations
