# topmark:header:start
#
#   project      : Probity
#   file         : __init__.py
#   file_relpath : src/probity/cli/commands/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Probity CLI subcommands."""

from __future__ import annotations
