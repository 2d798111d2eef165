# topmark:header:start
#
#   project      : Probity
#   file         : reflection.py
#   file_relpath : src/probity/analyser/reflection.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Engine-side reflection model: classes, methods, properties, and scopes.

The reference engine builds one `ClassReflection` per class definition in a
module and hands a `Scope` alongside every node it visits, so that node
observers can ask questions such as "which class am I in?" or "who declares
this constructor?" without re-parsing anything.

Python conventions used:
    - the constructor is ``__init__`` (declared on the class or inherited);
    - a property is *private* when its name is name-mangled (``__name``, not
      a dunder);
    - a property annotated with ``ClassVar`` is *static*.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from probity.analyser.types import Type

CONSTRUCTOR_NAME: str = "__init__"


def is_private_name(name: str) -> bool:
    """Return True if ``name`` is name-mangled, i.e. ``__x`` but not ``__x__``."""
    return name.startswith("__") and not name.endswith("__")


@dataclass(eq=False)
class MethodReflection:
    """A method declared in a class body."""

    name: str
    declaring_class: ClassReflection = field(repr=False)
    lineno: int = 0


@dataclass(eq=False)
class PropertyReflection:
    """A property (class-body attribute declaration)."""

    name: str
    declaring_class: ClassReflection = field(repr=False)
    readable_type: Type
    is_static: bool = False

    @property
    def is_private(self) -> bool:
        """Return True if the property uses the most restrictive visibility."""
        return is_private_name(self.name)


@dataclass(eq=False)
class ClassReflection:
    """A class known to the engine, with its own members and resolved parents.

    Parents that cannot be resolved within the analysed module are left out,
    so lookups only follow the known part of the hierarchy.
    """

    name: str
    parents: list[ClassReflection] = field(default_factory=lambda: [])
    methods: dict[str, MethodReflection] = field(default_factory=lambda: {})
    properties: dict[str, PropertyReflection] = field(default_factory=lambda: {})

    def _mro(self) -> list[ClassReflection]:
        """Return self followed by known ancestors, depth-first, without repeats."""
        seen: list[ClassReflection] = []
        pending: list[ClassReflection] = [self]
        while pending:
            current = pending.pop(0)
            if any(current is s for s in seen):
                continue
            seen.append(current)
            pending.extend(current.parents)
        return seen

    def find_method(self, name: str) -> MethodReflection | None:
        """Return the nearest declaration of method ``name`` in the hierarchy."""
        for cls in self._mro():
            method = cls.methods.get(name)
            if method is not None:
                return method
        return None

    def has_constructor(self) -> bool:
        """Return True if the class declares or inherits a constructor."""
        return self.find_method(CONSTRUCTOR_NAME) is not None

    def get_constructor(self) -> MethodReflection:
        """Return the constructor reflection.

        Raises:
            LookupError: If the class has no constructor.
        """
        constructor = self.find_method(CONSTRUCTOR_NAME)
        if constructor is None:
            raise LookupError(f"Class {self.name} has no constructor")
        return constructor

    def has_native_property(self, name: str) -> bool:
        """Return True if property ``name`` is declared on this class or an ancestor."""
        return any(name in cls.properties for cls in self._mro())

    def get_native_property(self, name: str) -> PropertyReflection:
        """Return the nearest declaration of property ``name``.

        Raises:
            LookupError: If no class in the known hierarchy declares it.
        """
        for cls in self._mro():
            prop = cls.properties.get(name)
            if prop is not None:
                return prop
        raise LookupError(f"Property {self.name}::{name} does not exist")


@dataclass(frozen=True)
class Scope:
    """Lexical context handed to node observers.

    Attributes:
        file (str): File being analysed.
        class_reflection (ClassReflection | None): Innermost enclosing class.
        function_name (str | None): Innermost enclosing function, if any.
    """

    file: str
    class_reflection: ClassReflection | None = None
    function_name: str | None = None

    def is_in_class(self) -> bool:
        """Return True if the scope is inside a class body (or a method of one)."""
        return self.class_reflection is not None

    def get_class_reflection(self) -> ClassReflection:
        """Return the enclosing class.

        Raises:
            LookupError: If the scope is not inside a class.
        """
        if self.class_reflection is None:
            raise LookupError("Scope is not in a class")
        return self.class_reflection

    def enter_class(self, reflection: ClassReflection) -> Scope:
        """Return a child scope for a class body."""
        return Scope(file=self.file, class_reflection=reflection, function_name=None)

    def enter_function(self, name: str) -> Scope:
        """Return a child scope for a function body."""
        return Scope(file=self.file, class_reflection=self.class_reflection, function_name=name)
