# topmark:header:start
#
#   project      : Probity
#   file         : types.py
#   file_relpath : src/probity/analyser/types.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Static types as seen by the bundled reference engine.

Only the distinction Probity cares about is modelled: the unconstrained
``mixed`` type (Python's ``Any``), which is either *explicit* (written by the
user) or *implicit* (inferred because nothing was declared), versus any other
declared type.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass

_ANY_NAMES: frozenset[str] = frozenset({"Any", "typing.Any", "t.Any", "typing_extensions.Any"})


class Type:
    """Base class for engine-side types."""

    def describe(self) -> str:
        """Return a human-readable description of the type."""
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class MixedType(Type):
    """The unconstrained type.

    Attributes:
        explicit (bool): ``True`` when the user wrote ``Any``; ``False`` when the
            type was inferred from the absence of any declaration.
    """

    explicit: bool = False

    def describe(self) -> str:
        """Return ``"mixed"``."""
        return "mixed"

    def is_explicit_mixed(self) -> bool:
        """Return True if the user declared this type explicitly."""
        return self.explicit


@dataclass(frozen=True, slots=True)
class DeclaredType(Type):
    """Any declared, non-``Any`` type, kept as its source expression."""

    expression: str

    def describe(self) -> str:
        """Return the annotation source text."""
        return self.expression


def type_from_annotation(annotation: ast.expr | None) -> Type:
    """Return the engine type for a class-body annotation.

    Args:
        annotation (ast.expr | None): The annotation node, or ``None`` for an
            unannotated assignment.

    Returns:
        Type: ``MixedType(explicit=False)`` when nothing was declared,
        ``MixedType(explicit=True)`` for ``Any``, otherwise a `DeclaredType`.
        ``ClassVar[...]`` is unwrapped first.
    """
    if annotation is None:
        return MixedType(explicit=False)
    annotation = unwrap_class_var(annotation) or annotation
    source: str = ast.unparse(annotation)
    if source in _ANY_NAMES:
        return MixedType(explicit=True)
    return DeclaredType(source)


def is_class_var(annotation: ast.expr | None) -> bool:
    """Return True if the annotation is ``ClassVar`` or ``ClassVar[...]``."""
    if annotation is None:
        return False
    target: ast.expr = annotation.value if isinstance(annotation, ast.Subscript) else annotation
    return ast.unparse(target) in {"ClassVar", "typing.ClassVar"}


def unwrap_class_var(annotation: ast.expr) -> ast.expr | None:
    """Return the inner annotation of ``ClassVar[X]``, or None if not a ClassVar subscript."""
    if isinstance(annotation, ast.Subscript) and is_class_var(annotation):
        return annotation.slice
    return None
