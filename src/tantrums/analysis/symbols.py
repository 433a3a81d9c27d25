"""
Symbol collection for Tantrums documents.

One scan over the stripped lines of a document builds:

- the function signature table (name -> parameters, return type, where it
  was declared and how many times),
- the flat variable table (name -> first binding seen anywhere in the file),
- a scope tree: an arena of brace-delimited scopes with parent links that
  every name-resolving check consults.

The flat table is a deliberate approximation used where whole-file knowledge
is wanted (unused and possibly-undefined names). Checks that care about
where a name is visible resolve it through the scope tree instead.

Example:
    table = SymbolCollector().collect(scan_document(lines))
    add = table.functions["add"]
    print(add.parameters, add.return_type)
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from tantrums.analysis.inference import ValueType
from tantrums.analysis.lexstate import ScannedLine
from tantrums.language import (
    CATCH_BINDING,
    DYNAMIC_ASSIGNMENT,
    FOR_BINDING,
    FUNCTION_HEADER,
    KEYWORDS,
    RESERVED_LINE_PREFIX,
    TYPED_DECLARATION,
    VOID,
    is_builtin_type,
)

_LOOP_HEADER = re.compile(r"^\s*(?:while|for)\b")


# =============================================================================
# Symbol Records
# =============================================================================


class ScopeKind(Enum):
    """What opened a scope."""

    FILE = "file"
    FUNCTION = "function"
    LOOP = "loop"
    BLOCK = "block"


class BindingKind(Enum):
    """How a name was introduced."""

    VARIABLE = "variable"
    PARAMETER = "parameter"
    LOOP_VARIABLE = "loop_variable"
    CATCH_VARIABLE = "catch_variable"


@dataclass(frozen=True, slots=True)
class Parameter:
    """A function parameter with its optional declared type."""

    name: str
    declared_type: Optional[ValueType] = None

    def __str__(self) -> str:
        if self.declared_type:
            return f"{self.declared_type} {self.name}"
        return self.name


@dataclass(slots=True)
class FunctionSignature:
    """
    A user function declared with ``tantrum``.

    The first declaration wins; later ones only bump ``occurrences`` and are
    remembered in ``declarations`` so duplicates can be reported.

    Attributes:
        name: Function name
        parameters: Ordered parameters
        return_type: Declared return type name, "void", or None
        line: 0-based line of the first declaration
        column: Column of the name on that line
        occurrences: Number of declarations seen
        declarations: (line, column) of every declaration, in order
    """

    name: str
    parameters: tuple[Parameter, ...]
    return_type: Optional[str]
    line: int
    column: int
    occurrences: int = 1
    declarations: list[tuple[int, int]] = field(default_factory=list)

    @property
    def arity(self) -> int:
        return len(self.parameters)

    @property
    def value_type(self) -> Optional[ValueType]:
        """The declared return type as a value type (None for void/untyped)."""
        return ValueType.from_name(self.return_type)

    @property
    def returns_value(self) -> bool:
        return self.return_type is not None and self.return_type != VOID

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        prefix = f"{self.return_type} " if self.return_type else ""
        return f"tantrum {prefix}{self.name}({params})"


@dataclass(frozen=True, slots=True)
class VariableBinding:
    """
    A name bound by a declaration, an assignment, or a header.

    Attributes:
        name: Bound name
        declared_type: The declared type, None for dynamic bindings
        line: 0-based line of the binding
        column: Column of the name
        is_static: True for ``<type> name = ...`` declarations
        scope_id: Scope that owns the binding
        kind: How the name was introduced
    """

    name: str
    declared_type: Optional[ValueType]
    line: int
    column: int
    is_static: bool
    scope_id: int = 0
    kind: BindingKind = BindingKind.VARIABLE

    @property
    def display_name(self) -> str:
        if self.declared_type:
            return f"{self.declared_type} {self.name}"
        return self.name


# =============================================================================
# Scope Tree
# =============================================================================


@dataclass(slots=True)
class Scope:
    """
    A brace-delimited region of a document.

    Scope 0 is the whole file. ``close_line`` stays None for a scope whose
    closing brace never appears.
    """

    id: int
    kind: ScopeKind
    parent: Optional[int]
    header_line: int
    open_line: int
    open_col: int
    close_line: Optional[int] = None
    close_col: Optional[int] = None
    function_name: Optional[str] = None
    return_type: Optional[str] = None
    bindings: list[VariableBinding] = field(default_factory=list)

    @property
    def is_closed(self) -> bool:
        return self.close_line is not None

    @property
    def returns_value(self) -> bool:
        """True for a function body whose header declares a non-void return type."""
        return self.return_type is not None and self.return_type != VOID

    def first_binding(self, name: str) -> Optional[VariableBinding]:
        for binding in self.bindings:
            if binding.name == name:
                return binding
        return None


class ScopeTree:
    """
    Arena of scopes with parent links.

    Positions map to scopes through per-line change points: the scope of a
    column is the one set by the last change point at or before it. An
    opening brace belongs to the enclosing scope, a closing brace to the
    scope it closes.
    """

    def __init__(self) -> None:
        self.scopes: list[Scope] = [
            Scope(id=0, kind=ScopeKind.FILE, parent=None, header_line=0, open_line=0, open_col=0)
        ]
        self._change_points: list[list[tuple[int, int]]] = []

    @property
    def root(self) -> Scope:
        return self.scopes[0]

    def __getitem__(self, scope_id: int) -> Scope:
        return self.scopes[scope_id]

    def __iter__(self) -> Iterator[Scope]:
        return iter(self.scopes)

    def __len__(self) -> int:
        return len(self.scopes)

    def scope_at(self, line: int, column: int) -> Scope:
        """Return the scope governing a position."""
        if not 0 <= line < len(self._change_points):
            return self.root
        current = self._change_points[line][0][1]
        for col, scope_id in self._change_points[line]:
            if col > column:
                break
            current = scope_id
        return self.scopes[current]

    def scope_at_line_start(self, line: int) -> Scope:
        return self.scope_at(line, 0)

    def chain(self, scope: Scope) -> Iterator[Scope]:
        """Yield a scope and then each of its ancestors."""
        current: Optional[Scope] = scope
        while current is not None:
            yield current
            current = self.scopes[current.parent] if current.parent is not None else None

    def enclosing_function(self, scope: Scope) -> Optional[Scope]:
        for candidate in self.chain(scope):
            if candidate.kind == ScopeKind.FUNCTION:
                return candidate
        return None

    def enclosing_loop(self, scope: Scope) -> Optional[Scope]:
        """Nearest loop body, not looking past the enclosing function."""
        for candidate in self.chain(scope):
            if candidate.kind == ScopeKind.LOOP:
                return candidate
            if candidate.kind == ScopeKind.FUNCTION:
                return None
        return None

    def contains(self, outer: Scope, inner: Scope) -> bool:
        """Check whether ``inner`` is ``outer`` or nested inside it."""
        return any(s.id == outer.id for s in self.chain(inner))

    def resolve(self, name: str, line: int, column: int) -> Optional[VariableBinding]:
        """
        Find the binding a name refers to at a position.

        Walks outward from the innermost scope and returns the first binding
        of the name made at or before the position.
        """
        for scope in self.chain(self.scope_at(line, column)):
            for binding in scope.bindings:
                if binding.name != name:
                    continue
                if (binding.line, binding.column) <= (line, column):
                    return binding
        return None

    def bindings(self) -> Iterator[VariableBinding]:
        """Yield every binding in scope creation order."""
        for scope in self.scopes:
            yield from scope.bindings

    def functions(self) -> list[Scope]:
        return [s for s in self.scopes if s.kind == ScopeKind.FUNCTION]

    # Construction helpers used by SymbolCollector

    def _open(self, kind: ScopeKind, parent: int, header_line: int, line: int, col: int) -> Scope:
        scope = Scope(
            id=len(self.scopes),
            kind=kind,
            parent=parent,
            header_line=header_line,
            open_line=line,
            open_col=col,
        )
        self.scopes.append(scope)
        return scope

    def _set_change_points(self, points: list[tuple[int, int]]) -> None:
        self._change_points.append(points)


# =============================================================================
# Symbol Table
# =============================================================================


@dataclass
class SymbolTable:
    """
    Everything the collector learned about a document.

    Read-only once built; rules never modify it.
    """

    functions: dict[str, FunctionSignature] = field(default_factory=dict)
    variables: dict[str, VariableBinding] = field(default_factory=dict)
    parameter_names: set[str] = field(default_factory=set)
    bound_names: set[str] = field(default_factory=set)
    scopes: ScopeTree = field(default_factory=ScopeTree)

    def known_names(self) -> set[str]:
        """Union of declared functions, variables, parameters and header names."""
        return (
            set(self.functions)
            | set(self.variables)
            | self.parameter_names
            | self.bound_names
        )


def parse_parameters(text: str) -> tuple[Parameter, ...]:
    """
    Parse the parameter list of a function header.

    Each comma-separated entry may be prefixed with a built-in type name.
    Anything else is untyped and the last word is taken as the name.
    """
    params: list[Parameter] = []
    for part in text.split(","):
        words = part.split()
        if not words:
            continue
        if len(words) >= 2 and is_builtin_type(words[0]):
            params.append(Parameter(words[1], ValueType.from_name(words[0])))
        else:
            params.append(Parameter(words[-1]))
    return tuple(params)


class SymbolCollector:
    """
    Builds a SymbolTable from scanned lines.

    Runs two passes: the first lays out scopes and functions, the second
    records variable bindings in line order so each can be placed in the
    scope that governs it.
    """

    def collect(self, lines: Sequence[ScannedLine]) -> SymbolTable:
        table = SymbolTable()
        self._collect_scopes(lines, table)
        self._collect_functions(lines, table)
        self._collect_variables(lines, table)
        return table

    # -------------------------------------------------------------------------
    # Pass 1: scopes
    # -------------------------------------------------------------------------

    def _collect_scopes(self, lines: Sequence[ScannedLine], table: SymbolTable) -> None:
        tree = table.scopes
        stack = [0]
        pending_header: Optional[tuple[str, int]] = None

        for line in lines:
            text = line.stripped
            points = [(0, stack[-1])]
            segment_start = 0

            for col, ch in enumerate(text):
                if ch == "{":
                    header = text[segment_start:col]
                    header_line = line.index
                    if not header.strip() and pending_header is not None:
                        header, header_line = pending_header
                    pending_header = None
                    scope = tree._open(
                        self._classify_header(header), stack[-1], header_line, line.index, col
                    )
                    self._bind_header(header, scope)
                    stack.append(scope.id)
                    points.append((col + 1, scope.id))
                    segment_start = col + 1
                elif ch == "}":
                    if len(stack) > 1:
                        closed = tree[stack.pop()]
                        closed.close_line = line.index
                        closed.close_col = col
                        points.append((col + 1, stack[-1]))
                    segment_start = col + 1

            tree._set_change_points(points)

            tail = text[segment_start:].strip()
            if tail:
                pending_header = (tail, line.index)
            elif "{" in text or "}" in text:
                pending_header = None

    @staticmethod
    def _classify_header(header: str) -> ScopeKind:
        if FUNCTION_HEADER.search(header):
            return ScopeKind.FUNCTION
        if _LOOP_HEADER.match(header):
            return ScopeKind.LOOP
        return ScopeKind.BLOCK

    @staticmethod
    def _bind_header(header: str, scope: Scope) -> None:
        """Declare the names a header introduces inside the scope it opens."""
        if scope.kind == ScopeKind.FUNCTION:
            match = FUNCTION_HEADER.search(header)
            if match is None:
                return
            scope.function_name = match.group(2)
            scope.return_type = match.group(1)
            for param in parse_parameters(match.group(3)):
                scope.bindings.append(
                    VariableBinding(
                        name=param.name,
                        declared_type=param.declared_type,
                        line=scope.open_line,
                        column=scope.open_col,
                        is_static=param.declared_type is not None,
                        scope_id=scope.id,
                        kind=BindingKind.PARAMETER,
                    )
                )
            return

        for pattern, kind in (
            (FOR_BINDING, BindingKind.LOOP_VARIABLE),
            (CATCH_BINDING, BindingKind.CATCH_VARIABLE),
        ):
            match = pattern.search(header)
            if match:
                scope.bindings.append(
                    VariableBinding(
                        name=match.group(1),
                        declared_type=None,
                        line=scope.open_line,
                        column=scope.open_col,
                        is_static=False,
                        scope_id=scope.id,
                        kind=kind,
                    )
                )

    # -------------------------------------------------------------------------
    # Pass 1b: functions and header names
    # -------------------------------------------------------------------------

    def _collect_functions(self, lines: Sequence[ScannedLine], table: SymbolTable) -> None:
        for line in lines:
            text = line.stripped
            match = FUNCTION_HEADER.search(text)
            if match:
                name = match.group(2)
                params = parse_parameters(match.group(3))
                table.parameter_names.update(p.name for p in params)
                position = (line.index, match.start(2))
                existing = table.functions.get(name)
                if existing is None:
                    table.functions[name] = FunctionSignature(
                        name=name,
                        parameters=params,
                        return_type=match.group(1),
                        line=line.index,
                        column=match.start(2),
                        declarations=[position],
                    )
                else:
                    existing.occurrences += 1
                    existing.declarations.append(position)

            for pattern in (FOR_BINDING, CATCH_BINDING):
                bound = pattern.search(text)
                if bound:
                    table.bound_names.add(bound.group(1))

    # -------------------------------------------------------------------------
    # Pass 2: variables
    # -------------------------------------------------------------------------

    def _collect_variables(self, lines: Sequence[ScannedLine], table: SymbolTable) -> None:
        tree = table.scopes
        for line in lines:
            text = line.stripped
            trimmed = text.strip()
            if not trimmed:
                continue

            typed = TYPED_DECLARATION.search(text)
            if typed:
                column = typed.start(2)
                scope = tree.scope_at(line.index, column)
                binding = VariableBinding(
                    name=typed.group(2),
                    declared_type=ValueType.from_name(typed.group(1)),
                    line=line.index,
                    column=column,
                    is_static=True,
                    scope_id=scope.id,
                )
                scope.bindings.append(binding)
                table.variables.setdefault(binding.name, binding)
                continue

            if RESERVED_LINE_PREFIX.match(trimmed) or trimmed in ("{", "}"):
                continue
            dynamic = DYNAMIC_ASSIGNMENT.match(trimmed)
            if dynamic is None or dynamic.group(1) in KEYWORDS:
                continue
            name = dynamic.group(1)
            column = len(text) - len(text.lstrip())
            scope = tree.scope_at(line.index, column)
            binding = VariableBinding(
                name=name,
                declared_type=None,
                line=line.index,
                column=column,
                is_static=False,
                scope_id=scope.id,
            )
            # Reassignments of a visible name do not bind a new one
            if tree.resolve(name, line.index, column) is None:
                scope.bindings.append(binding)
            table.variables.setdefault(name, binding)
