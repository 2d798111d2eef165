# topmark:header:start
#
#   project      : Probity
#   file         : inference.py
#   file_relpath : src/probity/command/inference.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Detect private properties whose type could be inferred from the constructor.

The observer is fed every ``(node, scope)`` pair the engine visits and flips a
run-owned `InferenceFlag` the first time it sees a qualifying property
declaration. Afterwards it returns immediately for every node.

A property qualifies when all of the following hold:

1. it is declared inside a class body;
2. the class has a constructor, declared on that very class;
3. the property is declared on that class (not inherited) and is not static;
4. the property is private;
5. its type is ``mixed``, and that was inferred rather than written.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from probity.analyser.nodes import PropertyDeclaration
from probity.analyser.types import MixedType
from probity.config.logging import get_logger

if TYPE_CHECKING:
    from probity.analyser.reflection import Scope
    from probity.config.logging import ProbityLogger

logger: ProbityLogger = get_logger(__name__)


@dataclass
class InferenceFlag:
    """Write-once boolean cell owned by a single run."""

    value: bool = False

    def set(self) -> None:
        """Flip the flag to True; it never reverts."""
        self.value = True

    def __bool__(self) -> bool:
        return self.value


class InferrablePropertyTypeObserver:
    """Node observer that sets ``flag`` on the first qualifying property."""

    def __init__(self, flag: InferenceFlag) -> None:
        self.flag = flag

    def __call__(self, node: object, scope: Scope) -> None:
        if self.flag.value:
            return

        if not isinstance(node, PropertyDeclaration):
            return

        if not scope.is_in_class():
            return

        class_reflection = scope.get_class_reflection()
        if not class_reflection.has_constructor():
            return
        if class_reflection.get_constructor().declaring_class is not class_reflection:
            return

        if not class_reflection.has_native_property(node.name):
            return
        property_reflection = class_reflection.get_native_property(node.name)
        if property_reflection.declaring_class is not class_reflection:
            return
        if property_reflection.is_static or not property_reflection.is_private:
            return

        property_type = property_reflection.readable_type
        if not isinstance(property_type, MixedType) or property_type.is_explicit_mixed():
            return

        logger.debug(
            "Inferrable property type: %s.%s (%s:%d)",
            class_reflection.name,
            node.name,
            scope.file,
            node.lineno,
        )
        self.flag.set()
