"""
The Tantrums diagnostic rule set.

Each check is a plain function ``check(ctx, report)``. It reads the shared,
read-only AnalysisContext and emits zero or more diagnostics through the
Reporter. Checks never look at each other's findings, so a construct one
check cannot classify never hides a finding from another; ambiguous input
is skipped rather than guessed at.

Most checks work on stripped lines, where string bodies and comments are
blanked to spaces (quotes stay), so literal text is never mistaken for code
and columns still line up with the raw source.

``CHECKS`` lists the checks in the order the engine runs them.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Optional

from tantrums.analysis import rules
from tantrums.analysis.context import MODE_DIRECTIVE, AnalysisContext, Mode, Reporter
from tantrums.analysis.inference import (
    ValueType,
    infer_literal_type,
    is_compatible,
    split_arguments,
)
from tantrums.analysis.symbols import BindingKind, Scope
from tantrums.language import (
    BUILTIN_FUNCTIONS,
    BUILTIN_TYPES,
    DYNAMIC_ASSIGNMENT,
    FUNCTION_HEADER,
    KEYWORDS,
    NON_CALL_WORDS,
    TYPED_DECLARATION,
    VALID_ESCAPES,
)
from tantrums.utils.diagnostics import suggest_similar

Check = Callable[[AnalysisContext, Reporter], None]

_TYPES = "|".join(BUILTIN_TYPES)

_CALL = re.compile(r"\b([A-Za-z_]\w*)\s*\(")
_IDENTIFIER = re.compile(r"\b([A-Za-z_]\w*)\b")
_EMPTY_CONDITION = re.compile(r"\b(if|while)\s*\(\s*\)")
_TYPED_INIT = re.compile(rf"^({_TYPES})\s+([A-Za-z_]\w*)\s*=(?!=)\s*([^;]+)")
_REASSIGNMENT = re.compile(r"^([A-Za-z_]\w*)\s*=\s*([^=;]+);?$")
_RETURN_VALUE = re.compile(r"\breturn\s+([^;{}]+)")
_RETURN = re.compile(r"\breturn\b")
_FUNCTION_EXIT = re.compile(r"\b(return|throw)\b")
_LOOP_JUMP = re.compile(r"\b(break|continue)\b")
_DIVISION_BY_ZERO = re.compile(r"/\s*0(?:\.0+)?(?![\w.])")
_RHS = re.compile(r"=\s*(.+?);\s*$")
_BLOCK_CONTROL = re.compile(r"\b(if|else|while|for|try|catch)\b")
_ALLOCATION = re.compile(rf"^(?:(?:{_TYPES})\s+)?([A-Za-z_]\w*)\s*=\s*alloc\b")

# Lines starting like these never need a terminator
_NO_TERMINATOR = (
    re.compile(r"^\}?\s*else\b"),
    re.compile(r"^(if|while|for)(\s*\(|\s+)"),
    re.compile(r"^tantrum\s+"),
    re.compile(r"^try\s*$"),
    re.compile(r"^catch\b"),
    re.compile(r"^#"),
)

# Lines starting like these are statements
_STATEMENT = (
    re.compile(r"^(return|throw|print|append|use|free)\b"),
    re.compile(r"^\w+\s*="),
    re.compile(rf"^({_TYPES})\s+\w+"),
    re.compile(r"^\w+\s*\("),
    re.compile(r"(\+\+|--)"),
    re.compile(r"(\+=|-=|\*=|/=|%=)"),
)

_CLOSERS = {")": "(", "]": "[", "}": "{"}


# =============================================================================
# Helpers
# =============================================================================


@dataclass(frozen=True, slots=True)
class CallSite:
    """
    A ``name(`` occurrence on a stripped line.

    Attributes:
        name: Called identifier
        start: Column of the identifier
        open: Column of the opening parenthesis
        close: Column of the matching closing parenthesis, None when it is
            not on the same line
    """

    name: str
    start: int
    open: int
    close: Optional[int]

    @property
    def end(self) -> int:
        return (self.close if self.close is not None else self.open) + 1

    def arguments(self, text: str) -> Optional[str]:
        if self.close is None:
            return None
        return text[self.open + 1 : self.close]


def matching_paren(text: str, open_index: int) -> Optional[int]:
    """Find the ``)`` balancing the ``(`` at ``open_index`` on the same line."""
    depth = 0
    for index in range(open_index, len(text)):
        ch = text[index]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return index
    return None


def find_calls(text: str) -> Iterator[CallSite]:
    """Yield every call-shaped occurrence on a stripped line, nested ones included."""
    for match in _CALL.finditer(text):
        open_index = match.end() - 1
        yield CallSite(
            name=match.group(1),
            start=match.start(1),
            open=open_index,
            close=matching_paren(text, open_index),
        )


def _indent(text: str) -> int:
    return len(text) - len(text.lstrip())


def _code_end(text: str) -> int:
    return len(text.rstrip())


def _is_brace_only(trimmed: str) -> bool:
    return not trimmed.strip("{} \t")


def _header_span(ctx: AnalysisContext, scope: Scope) -> tuple[int, int, int]:
    """Position of a function's name on its header line."""
    text = ctx.lines[scope.header_line].stripped
    match = FUNCTION_HEADER.search(text)
    if match is None:
        return scope.header_line, _indent(text), _code_end(text)
    return scope.header_line, match.start(2), match.end(2)


def _scope_lines(ctx: AnalysisContext, scope: Scope) -> range:
    last = scope.close_line if scope.close_line is not None else len(ctx.lines) - 1
    return range(scope.open_line, last + 1)


# =============================================================================
# Syntax
# =============================================================================


def check_mode_directive(ctx: AnalysisContext, report: Reporter) -> None:
    """Validate ``#mode`` directive lines; only the first valid one applies."""
    first_valid: Optional[int] = None
    for line in ctx.lines:
        trimmed = line.stripped.strip()
        if not trimmed.startswith("#"):
            continue
        end = len(line.text)
        if not MODE_DIRECTIVE.match(trimmed):
            report.emit(rules.INVALID_MODE_DIRECTIVE, line.index, 0, end)
            continue
        if ";" not in trimmed:
            report.emit(rules.MODE_DIRECTIVE_SEMICOLON, line.index, 0, end)
        if first_valid is None:
            first_valid = line.index
        else:
            report.emit(rules.DUPLICATE_MODE_DIRECTIVE, line.index, 0, end, first_valid + 1)


def check_brackets(ctx: AnalysisContext, report: Reporter) -> None:
    """Match ``(``, ``[`` and ``{`` across the whole document."""
    stack: list[tuple[str, int, int]] = []
    for line in ctx.lines:
        for col, ch in enumerate(line.stripped):
            if ch in "([{":
                stack.append((ch, line.index, col))
            elif ch in _CLOSERS:
                if not stack:
                    report.emit(rules.UNEXPECTED_CLOSER, line.index, col, col + 1, ch)
                    continue
                opener, opener_line, _ = stack.pop()
                if opener != _CLOSERS[ch]:
                    report.emit(
                        rules.MISMATCHED_CLOSER,
                        line.index,
                        col,
                        col + 1,
                        ch,
                        opener,
                        opener_line + 1,
                    )

    for opener, opener_line, col in stack:
        report.emit(rules.UNCLOSED_DELIMITER, opener_line, col, col + 1, opener)


def check_strings(ctx: AnalysisContext, report: Reporter) -> None:
    """Report string literals still open at end of line, from the opening quote."""
    for line in ctx.lines:
        for literal in line.strings:
            if not literal.terminated:
                report.emit(rules.UNTERMINATED_STRING, line.index, literal.start, literal.end)


def check_escape_sequences(ctx: AnalysisContext, report: Reporter) -> None:
    for line in ctx.lines:
        for escape in line.escapes:
            if escape.char and escape.char not in VALID_ESCAPES:
                report.emit(
                    rules.INVALID_ESCAPE, line.index, escape.column, escape.column + 2, escape.char
                )


def _needs_terminator(trimmed: str) -> bool:
    if any(pattern.search(trimmed) for pattern in _NO_TERMINATOR):
        return False
    return any(pattern.search(trimmed) for pattern in _STATEMENT)


def check_statement_termination(ctx: AnalysisContext, report: Reporter) -> None:
    """Warn about statements that do not end in ``;``, ``{`` or ``}``."""
    for line in ctx.lines:
        # Already reported as an unterminated string
        if line.has_unterminated_string:
            continue
        text = line.stripped
        trimmed = text.strip()
        if not trimmed or trimmed.startswith("}"):
            continue
        if trimmed.endswith((";", "{", "}")):
            continue
        # An unclosed ( or [ continues the statement on the next line
        if text.count("(") + text.count("[") > text.count(")") + text.count("]"):
            continue
        if _needs_terminator(trimmed):
            end = _code_end(text)
            report.emit(rules.MISSING_SEMICOLON, line.index, end, end)


def check_conditions(ctx: AnalysisContext, report: Reporter) -> None:
    for line in ctx.lines:
        for match in _EMPTY_CONDITION.finditer(line.stripped):
            report.emit(
                rules.EMPTY_CONDITION, line.index, match.start(), match.end(), match.group(1)
            )


# =============================================================================
# Types
# =============================================================================


def check_call_sites(ctx: AnalysisContext, report: Reporter) -> None:
    """Check argument count, and literal argument types, of calls to user functions."""
    functions = ctx.symbols.functions
    for line in ctx.lines:
        text = line.stripped
        if FUNCTION_HEADER.search(text):
            continue
        for call in find_calls(text):
            if call.name in NON_CALL_WORDS:
                continue
            signature = functions.get(call.name)
            arguments_text = call.arguments(text)
            if signature is None or arguments_text is None:
                continue

            args = split_arguments(arguments_text)
            if len(args) != signature.arity:
                report.emit(
                    rules.WRONG_ARGUMENT_COUNT,
                    line.index,
                    call.start,
                    call.end,
                    call.name,
                    signature.arity,
                    len(args),
                )
                continue

            if not ctx.checks_types:
                continue
            for position, (arg, param) in enumerate(zip(args, signature.parameters), start=1):
                if param.declared_type is None:
                    continue
                actual = infer_literal_type(arg)
                if actual is None or is_compatible(param.declared_type, actual):
                    continue
                report.emit(
                    rules.ARGUMENT_TYPE_MISMATCH,
                    line.index,
                    call.start,
                    call.end,
                    call.name,
                    position,
                    param.name,
                    param.declared_type,
                    actual,
                )


def check_assignment_types(ctx: AnalysisContext, report: Reporter) -> None:
    """Check literal values assigned to typed variables, at declaration and later."""
    if not ctx.checks_types:
        return
    scopes = ctx.scopes
    for line in ctx.lines:
        text = line.stripped
        trimmed = text.strip()
        start, end = _indent(text), _code_end(text)

        declaration = _TYPED_INIT.match(trimmed)
        if declaration:
            declared = ValueType.from_name(declaration.group(1))
            actual = infer_literal_type(declaration.group(3))
            if declared and actual and not is_compatible(declared, actual):
                report.emit(
                    rules.ASSIGNMENT_TYPE_MISMATCH,
                    line.index,
                    start,
                    end,
                    actual,
                    declared,
                    declaration.group(2),
                )
            continue

        assignment = _REASSIGNMENT.match(trimmed)
        if assignment is None or assignment.group(1) in KEYWORDS:
            continue
        name = assignment.group(1)
        binding = scopes.resolve(name, line.index, start)
        if binding is None or binding.declared_type is None:
            continue
        actual = infer_literal_type(assignment.group(2))
        if actual and not is_compatible(binding.declared_type, actual):
            report.emit(
                rules.ASSIGNMENT_TYPE_MISMATCH,
                line.index,
                start,
                end,
                actual,
                binding.declared_type,
                name,
            )


def check_return_types(ctx: AnalysisContext, report: Reporter) -> None:
    """Check ``return <literal>`` against the enclosing function's declared type."""
    if not ctx.checks_types:
        return
    scopes = ctx.scopes
    for line in ctx.lines:
        for match in _RETURN_VALUE.finditer(line.stripped):
            function = scopes.enclosing_function(scopes.scope_at(line.index, match.start()))
            if function is None:
                continue
            declared = ValueType.from_name(function.return_type)
            actual = infer_literal_type(match.group(1))
            if declared is None or actual is None or is_compatible(declared, actual):
                continue
            report.emit(
                rules.RETURN_TYPE_MISMATCH,
                line.index,
                match.start(),
                match.start() + len(match.group(0).rstrip()),
                function.function_name,
                declared,
                actual,
            )


# =============================================================================
# Symbols
# =============================================================================


def check_duplicate_functions(ctx: AnalysisContext, report: Reporter) -> None:
    redeclarations = sorted(
        (line, col, signature)
        for signature in ctx.symbols.functions.values()
        for line, col in signature.declarations[1:]
    )
    for line, col, signature in redeclarations:
        report.emit(
            rules.DUPLICATE_FUNCTION,
            line,
            col,
            col + len(signature.name),
            signature.name,
            signature.line + 1,
        )


def check_duplicate_variables(ctx: AnalysisContext, report: Reporter) -> None:
    """Warn when a typed declaration repeats a name declared in the same scope."""
    duplicates = []
    for scope in ctx.scopes:
        seen: dict[str, int] = {}
        for binding in scope.bindings:
            if binding.kind != BindingKind.VARIABLE or not binding.is_static:
                continue
            if binding.name in seen:
                duplicates.append((binding.line, binding.column, binding.name, seen[binding.name]))
            else:
                seen[binding.name] = binding.line
    for line, col, name, first_line in sorted(duplicates):
        report.emit(rules.DUPLICATE_VARIABLE, line, col, col + len(name), name, first_line + 1)


def check_undefined_functions(ctx: AnalysisContext, report: Reporter) -> None:
    functions = ctx.symbols.functions
    candidates = sorted(set(functions) | set(BUILTIN_FUNCTIONS))
    for line in ctx.lines:
        text = line.stripped
        if FUNCTION_HEADER.search(text):
            continue
        for call in find_calls(text):
            if call.name in NON_CALL_WORDS or call.name in functions:
                continue
            similar = suggest_similar(call.name, candidates, max_suggestions=1)
            report.emit(
                rules.UNDEFINED_FUNCTION,
                line.index,
                call.start,
                call.start + len(call.name),
                call.name,
                suggestion=f"did you mean '{similar[0]}'?" if similar else None,
            )


def _expression_region(text: str, trimmed: str) -> Optional[tuple[int, str]]:
    """Where the undefined-variable heuristic looks: an assignment RHS or bare call arguments."""
    rhs = _RHS.search(text)
    if rhs:
        return rhs.start(1), rhs.group(1)
    if re.match(r"^\w+\s*\(", trimmed):
        call = next(find_calls(text), None)
        if call is not None:
            arguments = call.arguments(text)
            if arguments is not None:
                return call.open + 1, arguments
    return None


def check_undefined_variables(ctx: AnalysisContext, report: Reporter) -> None:
    """
    Warn about identifiers that nothing in the document declares.

    Only assignment right-hand sides and the arguments of a bare call are
    examined, against the flat whole-file namespace. Identifiers directly
    followed by ``(`` are calls and belong to check_undefined_functions.
    With the ``skip_string_literal_lines`` policy, a line holding any string
    literal is skipped entirely.
    """
    known = ctx.symbols.known_names() | KEYWORDS | set(BUILTIN_FUNCTIONS)
    skip_strings = ctx.config.skip_string_literal_lines
    for line in ctx.lines:
        text = line.stripped
        trimmed = text.strip()
        if _is_brace_only(trimmed) or trimmed.startswith("#"):
            continue
        if re.match(r"^(tantrum|use)\s+", trimmed):
            continue
        if skip_strings and line.has_string_literal:
            continue

        region = _expression_region(text, trimmed)
        if region is None:
            continue
        offset, expression = region
        for match in _IDENTIFIER.finditer(expression):
            name = match.group(1)
            if name in known:
                continue
            if expression[match.end() :].lstrip().startswith("("):
                continue
            col = offset + match.start()
            report.emit(rules.UNDEFINED_VARIABLE, line.index, col, col + len(name), name)


# =============================================================================
# Control Flow
# =============================================================================


def check_return_outside_function(ctx: AnalysisContext, report: Reporter) -> None:
    """Report ``return`` and ``throw`` that no function body encloses."""
    scopes = ctx.scopes
    for line in ctx.lines:
        for match in _FUNCTION_EXIT.finditer(line.stripped):
            scope = scopes.scope_at(line.index, match.start())
            if scopes.enclosing_function(scope) is None:
                report.emit(
                    rules.RETURN_OUTSIDE_FUNCTION,
                    line.index,
                    match.start(),
                    match.end(),
                    match.group(1),
                )


def check_loop_jumps(ctx: AnalysisContext, report: Reporter) -> None:
    """Report ``break`` and ``continue`` outside a loop body of the same function."""
    scopes = ctx.scopes
    for line in ctx.lines:
        for match in _LOOP_JUMP.finditer(line.stripped):
            scope = scopes.scope_at(line.index, match.start())
            if scopes.enclosing_loop(scope) is None:
                report.emit(
                    rules.JUMP_OUTSIDE_LOOP, line.index, match.start(), match.end(), match.group(1)
                )


def check_dead_code(ctx: AnalysisContext, report: Reporter) -> None:
    """
    Warn about lines after a ``return`` until the block holding it closes.

    Blank and brace-only lines are not reported; the line that closes the
    block is not either, since whatever follows its brace is reachable.
    """
    scopes = ctx.scopes
    reported: set[int] = set()
    for line in ctx.lines:
        for match in _RETURN.finditer(line.stripped):
            scope = scopes.scope_at(line.index, match.start())
            if scopes.enclosing_function(scope) is None:
                continue
            stop = scope.close_line if scope.close_line is not None else len(ctx.lines)
            for index in range(line.index + 1, stop):
                if index in reported:
                    continue
                text = ctx.lines[index].stripped
                if _is_brace_only(text.strip()):
                    continue
                reported.add(index)
                report.emit(rules.UNREACHABLE_CODE, index, _indent(text), _code_end(text))


def check_division_by_zero(ctx: AnalysisContext, report: Reporter) -> None:
    for line in ctx.lines:
        for match in _DIVISION_BY_ZERO.finditer(line.stripped):
            report.emit(rules.DIVISION_BY_ZERO, line.index, match.start(), match.end())


def check_missing_return(ctx: AnalysisContext, report: Reporter) -> None:
    """Warn about functions with a non-void return type whose body never returns."""
    scopes = ctx.scopes
    for function in scopes.functions():
        if not function.returns_value:
            continue
        if not _contains_return(ctx, function):
            line, start, end = _header_span(ctx, function)
            report.emit(rules.MISSING_RETURN, line, start, end, function.function_name)


def _contains_return(ctx: AnalysisContext, function: Scope) -> bool:
    scopes = ctx.scopes
    for index in _scope_lines(ctx, function):
        for match in _RETURN.finditer(ctx.lines[index].stripped):
            if scopes.contains(function, scopes.scope_at(index, match.start())):
                return True
    return False


# =============================================================================
# Hygiene
# =============================================================================


def check_unused_variables(ctx: AnalysisContext, report: Reporter) -> None:
    """
    Warn about variables whose name appears only once in the document.

    Both typed and dynamic bindings are checked. Occurrences are counted over
    the raw text, so a mention inside a string or comment counts as a use.
    """
    source = ctx.source_text()
    for binding in ctx.symbols.variables.values():
        occurrences = re.findall(rf"\b{re.escape(binding.name)}\b", source)
        if len(occurrences) <= 1:
            report.emit(
                rules.UNUSED_VARIABLE,
                binding.line,
                binding.column,
                binding.column + len(binding.name),
                binding.display_name,
            )


def check_shadowed_builtins(ctx: AnalysisContext, report: Reporter) -> None:
    """Warn when a declaration or assignment reuses a built-in function name."""
    for line in ctx.lines:
        text = line.stripped
        typed = TYPED_DECLARATION.search(text)
        if typed:
            name, col = typed.group(2), typed.start(2)
        else:
            dynamic = DYNAMIC_ASSIGNMENT.match(text.strip())
            if dynamic is None:
                continue
            name, col = dynamic.group(1), _indent(text)
        if name in BUILTIN_FUNCTIONS:
            report.emit(rules.SHADOWED_BUILTIN, line.index, col, col + len(name), name)


def check_empty_blocks(ctx: AnalysisContext, report: Reporter) -> None:
    """Warn about control-structure bodies that open and immediately close."""
    for line, following in zip(ctx.lines, ctx.lines[1:]):
        trimmed = line.stripped.strip()
        if not trimmed.endswith("{") or following.stripped.strip() != "}":
            continue
        if FUNCTION_HEADER.search(trimmed) or not _BLOCK_CONTROL.search(trimmed):
            continue
        report.emit(
            rules.EMPTY_BLOCK, line.index, _indent(line.stripped), _code_end(line.stripped)
        )


def check_unfreed_allocations(ctx: AnalysisContext, report: Reporter) -> None:
    """
    Warn about ``alloc`` results that are never released.

    A pointer counts as released when ``free(name)`` appears anywhere in the
    document, or when it is returned to the caller.
    """
    code = ctx.code_text()
    reported: set[str] = set()
    for line in ctx.lines:
        text = line.stripped
        match = _ALLOCATION.match(text.strip())
        if match is None or match.group(1) in reported:
            continue
        name = re.escape(match.group(1))
        if re.search(rf"\bfree\s*\(\s*{name}\s*\)", code):
            continue
        if re.search(rf"\breturn\s+{name}\s*;", code):
            continue
        reported.add(match.group(1))
        col = _indent(text) + match.start(1)
        report.emit(
            rules.UNFREED_ALLOCATION, line.index, col, col + len(match.group(1)), match.group(1)
        )


# =============================================================================
# Static Mode
# =============================================================================


def check_static_variables(ctx: AnalysisContext, report: Reporter) -> None:
    """Under ``#mode static;`` every new variable needs a declared type."""
    if ctx.mode != Mode.STATIC:
        return
    untyped = sorted(
        (binding.line, binding.column, binding.name)
        for binding in ctx.scopes.bindings()
        if binding.kind == BindingKind.VARIABLE and not binding.is_static
    )
    for line, col, name in untyped:
        report.emit(rules.STATIC_UNTYPED_VARIABLE, line, col, col + len(name), name, name)


def check_static_return_types(ctx: AnalysisContext, report: Reporter) -> None:
    """Under ``#mode static;`` every function except ``main`` declares a return type."""
    if ctx.mode != Mode.STATIC:
        return
    for function in ctx.scopes.functions():
        if function.return_type is None and function.function_name != "main":
            line, start, end = _header_span(ctx, function)
            report.emit(rules.STATIC_MISSING_RETURN_TYPE, line, start, end, function.function_name)


CHECKS: tuple[Check, ...] = (
    check_mode_directive,
    check_brackets,
    check_strings,
    check_escape_sequences,
    check_statement_termination,
    check_conditions,
    check_call_sites,
    check_assignment_types,
    check_return_types,
    check_duplicate_functions,
    check_duplicate_variables,
    check_undefined_functions,
    check_undefined_variables,
    check_return_outside_function,
    check_loop_jumps,
    check_dead_code,
    check_division_by_zero,
    check_missing_return,
    check_unused_variables,
    check_shadowed_builtins,
    check_empty_blocks,
    check_unfreed_allocations,
    check_static_variables,
    check_static_return_types,
)
