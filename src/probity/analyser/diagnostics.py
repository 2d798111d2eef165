# topmark:header:start
#
#   project      : Probity
#   file         : diagnostics.py
#   file_relpath : src/probity/analyser/diagnostics.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Diagnostics produced by an analysis engine.

An engine returns a flat sequence in which every item is one of two shapes:

* a `FileError`: a structured record attached to a specific file and line;
* a plain ``str``: a global message not attributable to any single file
  (configuration problems, unmatched ignore patterns, internal errors).

The shape is the discriminator; there is no tag field.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class FileError:
    """A diagnostic attached to a specific file.

    Attributes:
        file (str): Path of the file the diagnostic belongs to.
        line (int | None): 1-based line number, or ``None`` when unknown.
        message (str): Human-readable message.
        can_be_ignored (bool): Whether ``ignore_errors`` patterns may drop it.
            Syntax and read errors are never ignorable.
        tip (str | None): Optional hint rendered next to the message.
    """

    file: str
    line: int | None
    message: str
    can_be_ignored: bool = True
    tip: str | None = None


Diagnostic: TypeAlias = FileError | str
