# topmark:header:start
#
#   project      : Probity
#   file         : analyser.py
#   file_relpath : src/probity/analyser/analyser.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Reference analysis engine for Python sources.

`PythonAnalyser` is deliberately small: it exists so that the CLI has a real
engine to drive, and so that the orchestration layer can be exercised end to
end. Rules by level:

* level 0: unreadable files and syntax errors (never ignorable);
* level 1: methods redeclared within one class body;
* level 2: unreachable statements after ``return``/``raise``/``break``/``continue``.

Every visited node is reported to the node observer together with its lexical
`Scope`. Names declared in a class body are additionally reported as
`PropertyDeclaration` nodes.
"""

from __future__ import annotations

import ast
import re
from pathlib import Path
from typing import TYPE_CHECKING

from probity.analyser.diagnostics import FileError
from probity.analyser.nodes import PropertyDeclaration
from probity.analyser.reflection import (
    ClassReflection,
    MethodReflection,
    PropertyReflection,
    Scope,
)
from probity.analyser.types import MixedType, is_class_var, type_from_annotation
from probity.config.logging import get_logger
from probity.constants import DEFAULT_LEVEL

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from probity.analyser.diagnostics import Diagnostic
    from probity.analyser.protocols import FileHook, NodeObserver
    from probity.config.logging import ProbityLogger

logger: ProbityLogger = get_logger(__name__)

_TERMINATORS = (ast.Return, ast.Raise, ast.Break, ast.Continue)
_FUNCTION_DEFS = (ast.FunctionDef, ast.AsyncFunctionDef)


def _declared_names(target: ast.expr) -> Iterator[str]:
    """Yield plain names bound by an assignment target (tuples unpacked)."""
    if isinstance(target, ast.Name):
        yield target.id
    elif isinstance(target, (ast.Tuple, ast.List)):
        for element in target.elts:
            yield from _declared_names(element)
    elif isinstance(target, ast.Starred):
        yield from _declared_names(target.value)


def _property_declarations(stmt: ast.stmt) -> Iterator[PropertyDeclaration]:
    """Yield one `PropertyDeclaration` per name a class-body statement declares."""
    if isinstance(stmt, ast.Assign):
        for target in stmt.targets:
            for name in _declared_names(target):
                yield PropertyDeclaration(name=name, lineno=stmt.lineno, statement=stmt)
    elif isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name):
        yield PropertyDeclaration(name=stmt.target.id, lineno=stmt.lineno, statement=stmt)


def build_class_reflections(tree: ast.Module) -> dict[int, ClassReflection]:
    """Build a reflection for every class defined in ``tree``.

    Base classes are resolved by simple name among the classes of the same module.

    Args:
        tree (ast.Module): Parsed module.

    Returns:
        dict[int, ClassReflection]: Reflections keyed by ``id()`` of their
        ``ast.ClassDef`` node.
    """
    class_defs: list[ast.ClassDef] = [n for n in ast.walk(tree) if isinstance(n, ast.ClassDef)]
    by_name: dict[str, ast.ClassDef] = {c.name: c for c in class_defs}
    reflections: dict[int, ClassReflection] = {id(c): ClassReflection(c.name) for c in class_defs}

    for class_def in class_defs:
        reflection = reflections[id(class_def)]
        for base in class_def.bases:
            if not isinstance(base, ast.Name):
                continue
            parent_def = by_name.get(base.id)
            if parent_def is not None and parent_def is not class_def:
                reflection.parents.append(reflections[id(parent_def)])

        for stmt in class_def.body:
            if isinstance(stmt, _FUNCTION_DEFS):
                reflection.methods[stmt.name] = MethodReflection(
                    name=stmt.name, declaring_class=reflection, lineno=stmt.lineno
                )
            elif isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name):
                reflection.properties[stmt.target.id] = PropertyReflection(
                    name=stmt.target.id,
                    declaring_class=reflection,
                    readable_type=type_from_annotation(stmt.annotation),
                    is_static=is_class_var(stmt.annotation),
                )
            elif isinstance(stmt, ast.Assign):
                # A plain assignment never replaces an earlier (possibly annotated) declaration.
                for declaration in _property_declarations(stmt):
                    reflection.properties.setdefault(
                        declaration.name,
                        PropertyReflection(
                            name=declaration.name,
                            declaring_class=reflection,
                            readable_type=MixedType(explicit=False),
                        ),
                    )

    return reflections


class _FileWalker:
    """Walk one module, collecting rule violations and feeding the observer."""

    def __init__(
        self,
        file: str,
        reflections: dict[int, ClassReflection],
        level: int,
        node_observer: NodeObserver | None,
    ) -> None:
        self.file = file
        self.reflections = reflections
        self.level = level
        self.node_observer = node_observer
        self.errors: list[FileError] = []

    def _observe(self, node: object, scope: Scope) -> None:
        if self.node_observer is not None:
            self.node_observer(node, scope)

    def walk(self, node: ast.AST, scope: Scope) -> None:
        self._observe(node, scope)

        if isinstance(node, ast.ClassDef):
            for child in (*node.decorator_list, *node.bases, *node.keywords):
                self.walk(child, scope)
            if self.level >= 1:
                self._check_redeclared_methods(node)
            class_scope = scope.enter_class(self.reflections[id(node)])
            self.walk_block(node.body, class_scope, in_class_body=True)
            return

        if isinstance(node, _FUNCTION_DEFS):
            for child in (*node.decorator_list, node.args):
                self.walk(child, scope)
            if node.returns is not None:
                self.walk(node.returns, scope)
            self.walk_block(node.body, scope.enter_function(node.name))
            return

        for _name, value in ast.iter_fields(node):
            if isinstance(value, list):
                items = [v for v in value if isinstance(v, ast.AST)]
                if items and all(isinstance(v, ast.stmt) for v in items):
                    self.walk_block(items, scope)
                else:
                    for item in items:
                        self.walk(item, scope)
            elif isinstance(value, ast.AST):
                self.walk(value, scope)

    def walk_block(self, stmts: list[ast.stmt], scope: Scope, *, in_class_body: bool = False) -> None:
        if self.level >= 2:
            self._check_unreachable(stmts)
        for stmt in stmts:
            if in_class_body:
                for declaration in _property_declarations(stmt):
                    self._observe(declaration, scope)
            self.walk(stmt, scope)

    def _check_redeclared_methods(self, class_def: ast.ClassDef) -> None:
        # Decorated functions are skipped: property setters and overloads reuse names.
        first_seen: dict[str, int] = {}
        for stmt in class_def.body:
            if not isinstance(stmt, _FUNCTION_DEFS) or stmt.decorator_list:
                continue
            if stmt.name in first_seen:
                self.errors.append(
                    FileError(
                        file=self.file,
                        line=stmt.lineno,
                        message=(
                            f"Method {class_def.name}.{stmt.name}() is already defined "
                            f"on line {first_seen[stmt.name]}."
                        ),
                    )
                )
            else:
                first_seen[stmt.name] = stmt.lineno

    def _check_unreachable(self, stmts: list[ast.stmt]) -> None:
        for index, stmt in enumerate(stmts[:-1]):
            if isinstance(stmt, _TERMINATORS):
                self.errors.append(
                    FileError(
                        file=self.file,
                        line=stmts[index + 1].lineno,
                        message="Unreachable statement - code above always terminates.",
                    )
                )
                return


class PythonAnalyser:
    """Analyse Python source files.

    Args:
        level (int): Rule level (0..2); higher levels enable more rules.
        ignore_errors (Sequence[str]): Regular expressions; ignorable file
            errors whose message matches one of them are dropped.

    Raises:
        re.error: If an ``ignore_errors`` pattern is not a valid regular expression.
    """

    def __init__(self, level: int = DEFAULT_LEVEL, ignore_errors: Sequence[str] = ()) -> None:
        self.level = level
        self.ignore_patterns: list[re.Pattern[str]] = [re.compile(p) for p in ignore_errors]

    def analyse(
        self,
        files: Sequence[str],
        only_files: bool,
        pre_file_callback: FileHook | None,
        post_file_callback: FileHook | None,
        debug: bool,
        node_observer: NodeObserver | None = None,
    ) -> list[Diagnostic]:
        """Analyse ``files`` one by one, invoking the hooks around each file.

        In debug mode unexpected exceptions propagate; otherwise they are
        reported as global "internal error" diagnostics. ``MemoryError`` always
        propagates.

        Args:
            files (Sequence[str]): Files to analyse.
            only_files (bool): Whether the run is scoped to explicitly given files.
                Unmatched ignore patterns are only reported for project-scoped runs.
            pre_file_callback (FileHook | None): Invoked before each file.
            post_file_callback (FileHook | None): Invoked after each file.
            debug (bool): Re-raise internal errors.
            node_observer (NodeObserver | None): Invoked for every visited node.

        Returns:
            list[Diagnostic]: Diagnostics in file order.
        """
        errors: list[Diagnostic] = []
        for file in files:
            if pre_file_callback is not None:
                pre_file_callback(file)

            try:
                errors.extend(self.analyse_file(file, node_observer))
            except MemoryError:
                raise
            except Exception as e:
                if debug:
                    raise
                logger.exception("Internal error while analysing %s", file)
                errors.append(f"Internal error: {e} while analysing file {file}")

            if post_file_callback is not None:
                post_file_callback(file)

        return self._filter_ignored(errors, only_files=only_files)

    def analyse_file(self, file: str, node_observer: NodeObserver | None = None) -> list[FileError]:
        """Analyse a single file and return its file-scoped diagnostics."""
        logger.debug("Analysing %s (level %d)", file, self.level)
        try:
            source: str = Path(file).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return [FileError(file=file, line=None, message=f"Cannot read file: {e}", can_be_ignored=False)]

        try:
            tree: ast.Module = ast.parse(source, filename=file)
        except (SyntaxError, ValueError) as e:
            msg: str = getattr(e, "msg", None) or str(e)
            return [
                FileError(
                    file=file,
                    line=getattr(e, "lineno", None),
                    message=f"Syntax error, {msg}",
                    can_be_ignored=False,
                )
            ]

        walker = _FileWalker(file, build_class_reflections(tree), self.level, node_observer)
        walker.walk(tree, Scope(file=file))
        logger.trace("%s: %d error(s)", file, len(walker.errors))
        return walker.errors

    def _filter_ignored(self, errors: list[Diagnostic], *, only_files: bool) -> list[Diagnostic]:
        if not self.ignore_patterns:
            return errors

        used: set[int] = set()
        kept: list[Diagnostic] = []
        for error in errors:
            if isinstance(error, str) or not error.can_be_ignored:
                kept.append(error)
                continue
            matched: int | None = next(
                (i for i, p in enumerate(self.ignore_patterns) if p.search(error.message)),
                None,
            )
            if matched is None:
                kept.append(error)
            else:
                used.add(matched)

        if not only_files:
            kept.extend(
                f"Ignored error pattern {p.pattern} was not matched in reported errors."
                for i, p in enumerate(self.ignore_patterns)
                if i not in used
            )
        return kept
