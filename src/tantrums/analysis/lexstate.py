"""
Lexical state tracking for Tantrums source lines.

The tracker classifies every character of a line as code, string literal,
line comment or block comment, without building tokens. It is the only place
that knows the comment and string syntax of the language; every check that
must ignore literal or comment content goes through the stripped text it
produces.

Rules applied at each position, in priority order:

1. Inside a block comment, only ``*/`` is recognized.
2. Inside a string, ``\\`` consumes the next character as a pair and an
   unescaped ``"`` closes the string.
3. Otherwise ``/*`` opens a block comment, ``//`` opens a line comment that
   runs to end of line, and ``"`` opens a string.

Block comments carry over to the next line. A string still open at end of
line is recorded as unterminated and treated as closed, so one bad literal
cannot corrupt the analysis of the lines after it.

Usage:
    scanned = scan_document(text.splitlines())
    for line in scanned:
        print(line.stripped)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class Region(Enum):
    """What governs a single character position."""

    CODE = "code"
    STRING = "string"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"


@dataclass(frozen=True, slots=True)
class LexState:
    """
    Scanner state carried from one line to the next.

    At most one flag is set at a time.
    """

    in_string: bool = False
    in_block_comment: bool = False


@dataclass(frozen=True, slots=True)
class StringLiteral:
    """
    A string literal found on a line.

    Attributes:
        start: Column of the opening quote
        end: Column just past the closing quote, or the line length
        terminated: Whether a closing quote was found on the same line
    """

    start: int
    end: int
    terminated: bool


@dataclass(frozen=True, slots=True)
class EscapeSequence:
    """A backslash pair inside a string literal."""

    column: int
    char: str  # empty when the backslash is the last character of the line


@dataclass(frozen=True, slots=True)
class ScannedLine:
    """
    The classification of one source line.

    Attributes:
        index: 0-based line number
        text: The raw line text
        regions: Region of each character position
        stripped: The line with string bodies and comments blanked to spaces;
            quotes are kept so literals stay visible, columns are unchanged
        strings: String literals in order of appearance
        escapes: Escape sequences found inside those literals
        comment: Concatenated comment text on this line
        end_state: State handed to the next line
    """

    index: int
    text: str
    regions: tuple[Region, ...]
    stripped: str
    strings: tuple[StringLiteral, ...]
    escapes: tuple[EscapeSequence, ...]
    comment: str
    end_state: LexState

    def region_at(self, column: int) -> Region:
        """Return the region governing a column (CODE past end of line)."""
        if 0 <= column < len(self.regions):
            return self.regions[column]
        return Region.CODE

    @property
    def has_string_literal(self) -> bool:
        """Check whether any string literal starts or continues on this line."""
        return bool(self.strings)

    @property
    def has_unterminated_string(self) -> bool:
        """Check whether a string literal is still open at end of line."""
        return any(not s.terminated for s in self.strings)


def scan_line(text: str, state: LexState | None = None, index: int = 0) -> ScannedLine:
    """
    Classify the characters of one line.

    Args:
        text: The raw line text (without line terminator)
        state: Carry-over state from the previous line
        index: 0-based line number recorded on the result

    Returns:
        The scanned line, including the state for the next line
    """
    state = state or LexState()
    length = len(text)
    regions: list[Region] = [Region.CODE] * length
    out: list[str] = list(text)
    strings: list[StringLiteral] = []
    escapes: list[EscapeSequence] = []
    comment: list[str] = []

    in_block = state.in_block_comment
    in_string = state.in_string and not in_block
    string_start = 0

    i = 0
    while i < length:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < length else ""

        if in_block:
            regions[i] = Region.BLOCK_COMMENT
            out[i] = " "
            comment.append(ch)
            if ch == "*" and nxt == "/":
                regions[i + 1] = Region.BLOCK_COMMENT
                out[i + 1] = " "
                comment.append(nxt)
                in_block = False
                i += 2
                continue
            i += 1
            continue

        if in_string:
            regions[i] = Region.STRING
            if ch == "\\":
                escapes.append(EscapeSequence(i, nxt))
                out[i] = " "
                if nxt:
                    regions[i + 1] = Region.STRING
                    out[i + 1] = " "
                i += 2
                continue
            if ch == '"':
                in_string = False
                strings.append(StringLiteral(string_start, i + 1, True))
                i += 1
                continue
            out[i] = " "
            i += 1
            continue

        if ch == "/" and nxt == "*":
            regions[i] = regions[i + 1] = Region.BLOCK_COMMENT
            out[i] = out[i + 1] = " "
            comment.append("/*")
            in_block = True
            i += 2
            continue
        if ch == "/" and nxt == "/":
            for j in range(i, length):
                regions[j] = Region.LINE_COMMENT
                out[j] = " "
            comment.append(text[i:])
            break
        if ch == '"':
            regions[i] = Region.STRING
            in_string = True
            string_start = i
        i += 1

    if in_string:
        strings.append(StringLiteral(string_start, length, False))

    return ScannedLine(
        index=index,
        text=text,
        regions=tuple(regions),
        stripped="".join(out),
        strings=tuple(strings),
        escapes=tuple(escapes),
        comment="".join(comment),
        end_state=LexState(in_string=False, in_block_comment=in_block),
    )


def scan_document(lines: Iterable[str]) -> list[ScannedLine]:
    """Scan every line of a document, threading block-comment state."""
    scanned: list[ScannedLine] = []
    state = LexState()
    for index, text in enumerate(lines):
        line = scan_line(text, state, index)
        scanned.append(line)
        state = line.end_state
    return scanned


def strip_line(text: str) -> str:
    """Return a single line with string bodies and comments blanked."""
    return scan_line(text).stripped
