# topmark:header:start
#
#   project      : Probity
#   file         : __init__.py
#   file_relpath : src/probity/analyser/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Analysis engine contract and the bundled reference engine.

The run orchestrator only depends on [`Analyser`][probity.analyser.protocols.Analyser];
[`PythonAnalyser`][probity.analyser.analyser.PythonAnalyser] is the engine the
CLI uses for Python sources.
"""

from __future__ import annotations

from probity.analyser.analyser import PythonAnalyser
from probity.analyser.diagnostics import Diagnostic, FileError
from probity.analyser.nodes import PropertyDeclaration
from probity.analyser.protocols import Analyser, FileHook, NodeObserver
from probity.analyser.reflection import (
    ClassReflection,
    MethodReflection,
    PropertyReflection,
    Scope,
)
from probity.analyser.types import DeclaredType, MixedType, Type

__all__ = [
    "Analyser",
    "ClassReflection",
    "DeclaredType",
    "Diagnostic",
    "FileError",
    "FileHook",
    "MethodReflection",
    "MixedType",
    "NodeObserver",
    "PropertyDeclaration",
    "PropertyReflection",
    "PythonAnalyser",
    "Scope",
    "Type",
]
