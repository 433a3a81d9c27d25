"""
Literal type inference from surface syntax.

Classifies an expression fragment by how it looks, never by evaluating it.
Anything that is not an obvious literal yields ``None`` and the caller must
skip rather than guess.
"""

import re
from enum import Enum
from typing import Optional

_FLOAT_LITERAL = re.compile(r"^\d+\.\d+$")
_INT_LITERAL = re.compile(r"^-?\d+$")


class ValueType(Enum):
    """Types a Tantrums value can have."""

    INT = "int"
    FLOAT = "float"
    STRING = "string"
    BOOL = "bool"
    LIST = "list"
    MAP = "map"
    NULL = "null"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: Optional[str]) -> Optional["ValueType"]:
        """Look up a declared type name; unknown names (and void) give None."""
        if not name:
            return None
        try:
            return cls(name)
        except ValueError:
            return None


def infer_literal_type(expr: str) -> Optional[ValueType]:
    """
    Infer the type of a literal expression.

    Rules, checked in order: leading quote is a string, ``true``/``false``
    is a bool, ``null`` is null, ``\\d+.\\d+`` is a float, optionally
    negative digits are an int, leading ``[`` is a list, leading ``{`` is a
    map.

    Args:
        expr: Expression text, surrounding whitespace is ignored

    Returns:
        The inferred type, or None when the fragment is not a literal
    """
    e = expr.strip()
    if not e:
        return None
    if e[0] == '"':
        return ValueType.STRING
    if e in ("true", "false"):
        return ValueType.BOOL
    if e == "null":
        return ValueType.NULL
    if _FLOAT_LITERAL.match(e):
        return ValueType.FLOAT
    if _INT_LITERAL.match(e):
        return ValueType.INT
    if e[0] == "[":
        return ValueType.LIST
    if e[0] == "{":
        return ValueType.MAP
    return None


def is_compatible(declared: ValueType, actual: ValueType) -> bool:
    """
    Check whether a value of type ``actual`` may go where ``declared`` is expected.

    Identical types are compatible, and an int may widen to float. No other
    coercion is allowed.
    """
    if declared == actual:
        return True
    return declared == ValueType.FLOAT and actual == ValueType.INT


def split_arguments(text: str) -> list[str]:
    """
    Split a call's argument text on top-level commas.

    Commas nested in parentheses, brackets or braces do not split. A blank
    trailing argument is dropped, so an empty list yields no arguments.
    """
    if not text.strip():
        return []
    args: list[str] = []
    depth = 0
    current: list[str] = []
    for ch in text:
        if ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth -= 1
        if ch == "," and depth == 0:
            args.append("".join(current))
            current = []
            continue
        current.append(ch)
    if "".join(current).strip():
        args.append("".join(current))
    return args
