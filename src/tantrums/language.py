"""
Vocabulary of the Tantrums language.

This module defines the fixed word lists the analysis engine recognizes:
built-in type names, built-in functions, and reserved keywords. None of these
are evaluated; they are used only to classify identifiers.
"""

import re

# Built-in value types usable as declaration prefixes
BUILTIN_TYPES: tuple[str, ...] = ("int", "float", "string", "bool", "list", "map")

# Return-type marker for functions that produce no value
VOID = "void"

# Built-in functions with their documented signatures (never enforced)
BUILTIN_FUNCTIONS: dict[str, str] = {
    "print": "print(value)",
    "input": "input(prompt?)",
    "len": "len(value) -> int",
    "range": "range(n) -> list",
    "type": "type(value) -> string",
    "append": "append(list, value)",
}

KEYWORDS: frozenset[str] = frozenset(
    {
        "tantrum",
        "if",
        "else",
        "while",
        "for",
        "in",
        "return",
        "throw",
        "break",
        "continue",
        "alloc",
        "free",
        "use",
        "and",
        "or",
        "true",
        "false",
        "null",
        "try",
        "catch",
        "void",
        *BUILTIN_TYPES,
    }
)

# Words that may precede "(" without being a call to a user function
NON_CALL_WORDS: frozenset[str] = KEYWORDS | frozenset(BUILTIN_FUNCTIONS)

# Valid characters after a backslash inside a string literal
VALID_ESCAPES: frozenset[str] = frozenset({"n", "t", "\\", '"', "r", "0"})

# Control structures whose bodies may be reported as empty
CONTROL_KEYWORDS: tuple[str, ...] = ("if", "else", "while", "for", "try", "catch")

# A line starting with one of these is never read as a dynamic assignment
RESERVED_LINE_PREFIX = re.compile(
    r"^(?:if|while|for|tantrum|else|return|throw|use|try|catch|break|continue"
    r"|print|input|len|append|range|type|free|alloc)\b"
)

_TYPE_ALTERNATION = "|".join(BUILTIN_TYPES)

# tantrum [<type>|void] name(<params>)
FUNCTION_HEADER = re.compile(
    rf"\btantrum\s+(?:({_TYPE_ALTERNATION}|{VOID})\s+)?([A-Za-z_]\w*)\s*\(([^)]*)\)"
)

# <type> name = ...
TYPED_DECLARATION = re.compile(rf"\b({_TYPE_ALTERNATION})\s+([A-Za-z_]\w*)\s*=(?!=)")

# name = ... (compared against a trimmed line)
DYNAMIC_ASSIGNMENT = re.compile(r"^([A-Za-z_]\w*)\s*=\s*[^=]")

FOR_BINDING = re.compile(r"\bfor\s+([A-Za-z_]\w*)\s+in\b")
CATCH_BINDING = re.compile(r"\bcatch\s*\(\s*([A-Za-z_]\w*)\s*\)")

FILE_EXTENSIONS: tuple[str, ...] = (".42AHH", ".42ahh")
LANGUAGE_ID = "tantrums"


def is_builtin_type(name: str) -> bool:
    """Check whether a word names one of the six built-in types."""
    return name in BUILTIN_TYPES


def is_reserved(name: str) -> bool:
    """Check whether a word is a keyword or a built-in function name."""
    return name in NON_CALL_WORDS
