# topmark:header:start
#
#   project      : Probity
#   file         : nodes.py
#   file_relpath : src/probity/analyser/nodes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Synthetic nodes emitted by the reference engine in addition to `ast` nodes."""

from __future__ import annotations

import ast
from dataclasses import dataclass, field


@dataclass(frozen=True)
class PropertyDeclaration:
    """One property declared in a class body.

    A single statement may declare several properties (``__a = __b = None``);
    the engine emits one `PropertyDeclaration` per declared name, right before
    visiting the statement itself.

    Attributes:
        name (str): The declared property name (not mangled).
        lineno (int): Line of the declaring statement.
        statement (ast.stmt): The declaring ``Assign``/``AnnAssign`` statement.
    """

    name: str
    lineno: int
    statement: ast.stmt = field(repr=False, compare=False)
