"""
Tantrums rule catalog and lint configuration.

Every diagnostic the engine can produce belongs to exactly one rule defined
here. A rule carries a stable code, a kebab-case name, a category, a message
template and a default level. The configuration decides each rule's
effective level: allowed rules are silenced, warned rules are reported as
warnings and denied rules as errors.

Example:
    config = LintConfiguration()
    config.allow("unused-variable")
    config.set_level_by_category(LintCategory.STYLE, LintLevel.DENY)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from tantrums.utils.diagnostics import Severity


# =============================================================================
# Levels and Categories
# =============================================================================


class LintLevel(Enum):
    """
    Effective level of a rule.

    ALLOW: Rule is disabled, no diagnostic produced
    WARN: Rule produces a warning
    DENY: Rule produces an error
    """

    ALLOW = "allow"
    WARN = "warn"
    DENY = "deny"

    @property
    def severity(self) -> Optional[Severity]:
        """Severity of diagnostics produced at this level (None when allowed)."""
        if self == LintLevel.DENY:
            return Severity.ERROR
        if self == LintLevel.WARN:
            return Severity.WARNING
        return None


class LintCategory(Enum):
    """Categories of rules for organization and filtering."""

    SYNTAX = "syntax"            # Brackets, strings, terminators, directives
    TYPES = "types"              # Literal type compatibility and arity
    SYMBOLS = "symbols"          # Duplicate and undefined names
    CONTROL_FLOW = "flow"        # Misplaced jumps, unreachable code, returns
    HYGIENE = "hygiene"          # Unused names, shadowing, empty blocks, leaks
    MODE = "mode"                # Rules that only apply under #mode static


@dataclass(frozen=True)
class LintRule:
    """
    Definition of a single rule.

    Attributes:
        code: Unique rule identifier (e.g., "E0101")
        name: Human-readable rule name (e.g., "wrong-argument-count")
        category: The category this rule belongs to
        message: Template message for the violation (use {} for placeholders)
        level: Default level
        suggestion: Optional hint shown with the violation
    """

    code: str
    name: str
    category: LintCategory
    message: str
    level: LintLevel = LintLevel.WARN
    suggestion: Optional[str] = None

    def format(self, *args: object) -> str:
        return self.message.format(*args) if args else self.message

    def __str__(self) -> str:
        return f"{self.code} ({self.name})"


# =============================================================================
# Rules - Syntax
# =============================================================================

INVALID_MODE_DIRECTIVE = LintRule(
    code="E0001",
    name="invalid-mode-directive",
    category=LintCategory.SYNTAX,
    message="Invalid directive. Valid: #mode static; / #mode dynamic; / #mode both;",
    level=LintLevel.DENY,
)

MODE_DIRECTIVE_SEMICOLON = LintRule(
    code="W0001",
    name="mode-directive-semicolon",
    category=LintCategory.SYNTAX,
    message="Missing semicolon after #mode directive.",
)

DUPLICATE_MODE_DIRECTIVE = LintRule(
    code="W0002",
    name="duplicate-mode-directive",
    category=LintCategory.SYNTAX,
    message="Duplicate #mode directive; only the one on line {} applies.",
    suggestion="remove this directive",
)

UNEXPECTED_CLOSER = LintRule(
    code="E0002",
    name="unexpected-closer",
    category=LintCategory.SYNTAX,
    message="Unexpected '{}' with no matching opener.",
    level=LintLevel.DENY,
)

MISMATCHED_CLOSER = LintRule(
    code="E0003",
    name="mismatched-closer",
    category=LintCategory.SYNTAX,
    message="Mismatched '{}': expected closing for '{}' from line {}.",
    level=LintLevel.DENY,
)

UNCLOSED_DELIMITER = LintRule(
    code="E0004",
    name="unclosed-delimiter",
    category=LintCategory.SYNTAX,
    message="Unclosed '{}'.",
    level=LintLevel.DENY,
)

UNTERMINATED_STRING = LintRule(
    code="E0005",
    name="unterminated-string",
    category=LintCategory.SYNTAX,
    message="Unterminated string literal.",
    level=LintLevel.DENY,
    suggestion='close the string with a matching "',
)

INVALID_ESCAPE = LintRule(
    code="E0006",
    name="invalid-escape",
    category=LintCategory.SYNTAX,
    message="Invalid escape sequence '\\{}'. Valid: \\n \\t \\\\ \\\" \\r \\0",
    level=LintLevel.DENY,
)

MISSING_SEMICOLON = LintRule(
    code="W0003",
    name="missing-semicolon",
    category=LintCategory.SYNTAX,
    message="Missing ';' at end of statement.",
)

EMPTY_CONDITION = LintRule(
    code="E0007",
    name="empty-condition",
    category=LintCategory.SYNTAX,
    message="Empty condition in '{}' statement.",
    level=LintLevel.DENY,
)


# =============================================================================
# Rules - Types
# =============================================================================

WRONG_ARGUMENT_COUNT = LintRule(
    code="E0101",
    name="wrong-argument-count",
    category=LintCategory.TYPES,
    message="'{}' expects {} arg(s) but got {}.",
    level=LintLevel.DENY,
)

ARGUMENT_TYPE_MISMATCH = LintRule(
    code="E0102",
    name="argument-type-mismatch",
    category=LintCategory.TYPES,
    message="'{}' param {} ('{}') expects '{}' but got '{}'.",
    level=LintLevel.DENY,
)

ASSIGNMENT_TYPE_MISMATCH = LintRule(
    code="E0103",
    name="assignment-type-mismatch",
    category=LintCategory.TYPES,
    message="Cannot assign '{}' to '{}' variable '{}'.",
    level=LintLevel.DENY,
)

RETURN_TYPE_MISMATCH = LintRule(
    code="E0104",
    name="return-type-mismatch",
    category=LintCategory.TYPES,
    message="Function '{}' is declared '{}' but returns '{}'.",
    level=LintLevel.DENY,
)


# =============================================================================
# Rules - Symbols
# =============================================================================

DUPLICATE_FUNCTION = LintRule(
    code="E0201",
    name="duplicate-function",
    category=LintCategory.SYMBOLS,
    message="Duplicate function '{}': already defined on line {}.",
    level=LintLevel.DENY,
)

DUPLICATE_VARIABLE = LintRule(
    code="W0201",
    name="duplicate-variable",
    category=LintCategory.SYMBOLS,
    message="Variable '{}' already declared in this scope (line {}).",
    suggestion="assign to the existing variable instead of declaring it again",
)

UNDEFINED_FUNCTION = LintRule(
    code="E0202",
    name="undefined-function",
    category=LintCategory.SYMBOLS,
    message="'{}' is not defined. Did you forget to declare it with 'tantrum'?",
    level=LintLevel.DENY,
)

UNDEFINED_VARIABLE = LintRule(
    code="W0202",
    name="undefined-variable",
    category=LintCategory.SYMBOLS,
    message="'{}' may be undefined.",
)


# =============================================================================
# Rules - Control Flow
# =============================================================================

RETURN_OUTSIDE_FUNCTION = LintRule(
    code="E0301",
    name="return-outside-function",
    category=LintCategory.CONTROL_FLOW,
    message="'{}' used outside of a function.",
    level=LintLevel.DENY,
)

JUMP_OUTSIDE_LOOP = LintRule(
    code="E0302",
    name="jump-outside-loop",
    category=LintCategory.CONTROL_FLOW,
    message="'{}' used outside of a loop.",
    level=LintLevel.DENY,
)

UNREACHABLE_CODE = LintRule(
    code="W0301",
    name="unreachable-code",
    category=LintCategory.CONTROL_FLOW,
    message="Unreachable code after 'return'.",
    suggestion="remove the unreachable code",
)

DIVISION_BY_ZERO = LintRule(
    code="E0303",
    name="division-by-zero",
    category=LintCategory.CONTROL_FLOW,
    message="Division by zero.",
    level=LintLevel.DENY,
)

MISSING_RETURN = LintRule(
    code="W0302",
    name="missing-return",
    category=LintCategory.CONTROL_FLOW,
    message="Function '{}' has return type but may not return a value.",
)


# =============================================================================
# Rules - Hygiene
# =============================================================================

UNUSED_VARIABLE = LintRule(
    code="W0401",
    name="unused-variable",
    category=LintCategory.HYGIENE,
    message="Variable '{}' is declared but never used.",
)

SHADOWED_BUILTIN = LintRule(
    code="W0402",
    name="shadowed-builtin",
    category=LintCategory.HYGIENE,
    message="'{}' shadows a built-in function.",
    suggestion="use a different variable name",
)

EMPTY_BLOCK = LintRule(
    code="W0403",
    name="empty-block",
    category=LintCategory.HYGIENE,
    message="Empty block body.",
)

UNFREED_ALLOCATION = LintRule(
    code="W0404",
    name="unfreed-allocation",
    category=LintCategory.HYGIENE,
    message="Pointer '{}' is allocated but never freed.",
    suggestion="call free({}) once the pointer is no longer needed",
)


# =============================================================================
# Rules - Static Mode
# =============================================================================

STATIC_UNTYPED_VARIABLE = LintRule(
    code="E0501",
    name="static-untyped-variable",
    category=LintCategory.MODE,
    message="Static mode: variable '{}' must be declared with a type (e.g., int {} = ...).",
    level=LintLevel.DENY,
)

STATIC_MISSING_RETURN_TYPE = LintRule(
    code="E0502",
    name="static-missing-return-type",
    category=LintCategory.MODE,
    message="Function '{}' in static mode must declare a return type.",
    level=LintLevel.DENY,
)


# =============================================================================
# Rule Registry
# =============================================================================


ALL_RULES: dict[str, LintRule] = {
    rule.code: rule
    for rule in (
        # Syntax
        INVALID_MODE_DIRECTIVE,
        MODE_DIRECTIVE_SEMICOLON,
        DUPLICATE_MODE_DIRECTIVE,
        UNEXPECTED_CLOSER,
        MISMATCHED_CLOSER,
        UNCLOSED_DELIMITER,
        UNTERMINATED_STRING,
        INVALID_ESCAPE,
        MISSING_SEMICOLON,
        EMPTY_CONDITION,
        # Types
        WRONG_ARGUMENT_COUNT,
        ARGUMENT_TYPE_MISMATCH,
        ASSIGNMENT_TYPE_MISMATCH,
        RETURN_TYPE_MISMATCH,
        # Symbols
        DUPLICATE_FUNCTION,
        DUPLICATE_VARIABLE,
        UNDEFINED_FUNCTION,
        UNDEFINED_VARIABLE,
        # Control flow
        RETURN_OUTSIDE_FUNCTION,
        JUMP_OUTSIDE_LOOP,
        UNREACHABLE_CODE,
        DIVISION_BY_ZERO,
        MISSING_RETURN,
        # Hygiene
        UNUSED_VARIABLE,
        SHADOWED_BUILTIN,
        EMPTY_BLOCK,
        UNFREED_ALLOCATION,
        # Static mode
        STATIC_UNTYPED_VARIABLE,
        STATIC_MISSING_RETURN_TYPE,
    )
}

# Also index by name
RULES_BY_NAME: dict[str, LintRule] = {rule.name: rule for rule in ALL_RULES.values()}


def get_rule(rule_id: str) -> Optional[LintRule]:
    """Get a rule by its code or its name."""
    return ALL_RULES.get(rule_id) or RULES_BY_NAME.get(rule_id)


def get_rules_by_category(category: LintCategory) -> list[LintRule]:
    """Get all rules in a category."""
    return [rule for rule in ALL_RULES.values() if rule.category == category]


# =============================================================================
# Lint Configuration
# =============================================================================

_DIRECTIVE = re.compile(r"\btantrums:\s*(allow|warn|deny)\(\s*([A-Za-z0-9_-]+)\s*\)")


@dataclass
class LintConfiguration:
    """
    Effective levels for every rule, plus named heuristic policies.

    Attributes:
        rule_levels: Overrides keyed by rule code or name
        skip_string_literal_lines: Policy for the undefined-variable check.
            When set, any line containing a string literal is skipped; string
            contents are too easily mistaken for identifiers.
    """

    rule_levels: dict[str, LintLevel] = field(default_factory=dict)
    skip_string_literal_lines: bool = True

    def get_level(self, rule: LintRule) -> LintLevel:
        """Get the effective level for a rule."""
        # Check by code first, then by name
        if rule.code in self.rule_levels:
            return self.rule_levels[rule.code]
        if rule.name in self.rule_levels:
            return self.rule_levels[rule.name]
        return rule.level

    def set_level(self, rule_id: str, level: LintLevel) -> None:
        """
        Set the level for a rule by code or name.

        Raises:
            KeyError: If no rule has that code or name
        """
        rule = get_rule(rule_id)
        if rule is None:
            raise KeyError(rule_id)
        self.rule_levels.pop(rule.name, None)
        self.rule_levels[rule.code] = level

    def set_level_by_category(self, category: LintCategory, level: LintLevel) -> None:
        """Set the level for all rules in a category."""
        for rule in get_rules_by_category(category):
            self.rule_levels[rule.code] = level

    def allow(self, rule_id: str) -> None:
        """Disable a rule."""
        self.set_level(rule_id, LintLevel.ALLOW)

    def warn(self, rule_id: str) -> None:
        """Set a rule to warning level."""
        self.set_level(rule_id, LintLevel.WARN)

    def deny(self, rule_id: str) -> None:
        """Set a rule to error level."""
        self.set_level(rule_id, LintLevel.DENY)

    def allow_all(self) -> None:
        """Disable all rules."""
        for rule in ALL_RULES.values():
            self.rule_levels[rule.code] = LintLevel.ALLOW

    def warn_all(self) -> None:
        """Set all rules to warning level."""
        for rule in ALL_RULES.values():
            self.rule_levels[rule.code] = LintLevel.WARN

    def deny_all(self) -> None:
        """Set all rules to error level."""
        for rule in ALL_RULES.values():
            self.rule_levels[rule.code] = LintLevel.DENY

    def copy(self) -> LintConfiguration:
        return LintConfiguration(
            rule_levels=dict(self.rule_levels),
            skip_string_literal_lines=self.skip_string_literal_lines,
        )

    def with_directives(self, comments: list[str]) -> LintConfiguration:
        """
        Return a copy with in-source directives applied.

        Directives live in comments and apply to the whole document:
            // tantrums: allow(unused-variable)
        Unknown rule names are ignored.
        """
        config = self.copy()
        for comment in comments:
            for action, rule_id in self.parse_directives(comment):
                if get_rule(rule_id) is not None:
                    config.set_level(rule_id, LintLevel(action))
        return config

    @staticmethod
    def parse_directives(comment: str) -> list[tuple[str, str]]:
        """
        Parse lint directives from comment text.

        Returns:
            List of (action, rule_id) pairs in order of appearance
        """
        return [(m.group(1), m.group(2)) for m in _DIRECTIVE.finditer(comment)]


__all__ = [
    "LintLevel",
    "LintCategory",
    "LintRule",
    "LintConfiguration",
    "ALL_RULES",
    "RULES_BY_NAME",
    "get_rule",
    "get_rules_by_category",
    "INVALID_MODE_DIRECTIVE",
    "MODE_DIRECTIVE_SEMICOLON",
    "DUPLICATE_MODE_DIRECTIVE",
    "UNEXPECTED_CLOSER",
    "MISMATCHED_CLOSER",
    "UNCLOSED_DELIMITER",
    "UNTERMINATED_STRING",
    "INVALID_ESCAPE",
    "MISSING_SEMICOLON",
    "EMPTY_CONDITION",
    "WRONG_ARGUMENT_COUNT",
    "ARGUMENT_TYPE_MISMATCH",
    "ASSIGNMENT_TYPE_MISMATCH",
    "RETURN_TYPE_MISMATCH",
    "DUPLICATE_FUNCTION",
    "DUPLICATE_VARIABLE",
    "UNDEFINED_FUNCTION",
    "UNDEFINED_VARIABLE",
    "RETURN_OUTSIDE_FUNCTION",
    "JUMP_OUTSIDE_LOOP",
    "UNREACHABLE_CODE",
    "DIVISION_BY_ZERO",
    "MISSING_RETURN",
    "UNUSED_VARIABLE",
    "SHADOWED_BUILTIN",
    "EMPTY_BLOCK",
    "UNFREED_ALLOCATION",
    "STATIC_UNTYPED_VARIABLE",
    "STATIC_MISSING_RETURN_TYPE",
]
