"""Incremental, line-at-a-time lexer."""

from __future__ import annotations

import re
from collections.abc import Generator, Iterator
from enum import Enum

from .tokens import Lexeme, Token

WHITESPACE = " \t"
QUOTES = "'\""
# Characters that end a run of unquoted text.
_WORD_BREAKS = WHITESPACE + QUOTES + ";|$~"

_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

_Scan = Generator[Lexeme, None, "int | None"]


class ScanMode(Enum):
    TEXT = "text"
    SINGLE_QUOTED = "'"
    DOUBLE_QUOTED = '"'


def _skip_whitespace(line: str, pos: int) -> int:
    while pos < len(line) and line[pos] in WHITESPACE:
        pos += 1
    return pos


class Lexer:
    """Turns input lines into lexemes, carrying scan state across line breaks.

    Each call to :meth:`feed` scans exactly one line. The only state kept
    between calls is the open quote (if any), whether the previous line ended
    with an escaped newline, and whether that line stopped in the middle of a
    word. Text already consumed is never scanned again.

    ``feed`` returns a generator: a lexeme is only produced when the consumer
    asks for it, so producer and consumer hand over one lexeme at a time.
    """

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.mode = ScanMode.TEXT
        self._continued = False
        self._in_word = False

    @property
    def pending(self) -> bool:
        """True when the last line left a statement open."""
        return self.mode is not ScanMode.TEXT or self._continued

    def feed(self, line: str) -> Iterator[Lexeme]:
        line = line.removesuffix("\n").removesuffix("\r")
        end = len(line)
        continued, self._continued = self._continued, False

        if self.mode is not ScanMode.TEXT:
            pos = yield from self._quoted(line, 0)
            if pos is None:
                return
        elif continued:
            pos = _skip_whitespace(line, 0)
            if 0 < pos < end:
                yield Lexeme(Token.WHITESPACE, line[:pos])
                self._in_word = False
        else:
            pos = _skip_whitespace(line, 0)

        while pos < end:
            char = line[pos]
            if char in WHITESPACE:
                stop = _skip_whitespace(line, pos)
                if stop < end:
                    yield Lexeme(Token.WHITESPACE, line[pos:stop])
                self._in_word = False
                pos = stop
            elif char == ";":
                yield Lexeme(Token.SEMICOLON, char)
                self._in_word = False
                pos += 1
            elif char == "|":
                yield Lexeme(Token.PIPE, char)
                self._in_word = False
                pos += 1
            elif char == "~":
                yield Lexeme(Token.STRING if self._in_word else Token.TILDE, char)
                self._in_word = True
                pos += 1
            elif char == "$":
                yield Lexeme(Token.DOLLAR, char)
                self._in_word = True
                pos += 1
                match = _IDENTIFIER_RE.match(line, pos)
                if match:
                    yield Lexeme(Token.IDENTIFIER, match.group())
                    pos = match.end()
            elif char in QUOTES:
                self.mode = ScanMode(char)
                self._in_word = True
                next_pos = yield from self._quoted(line, pos + 1)
                if next_pos is None:
                    return
                pos = next_pos
            else:
                next_pos = yield from self._unquoted(line, pos)
                if next_pos is None:
                    return
                pos = next_pos

        self._in_word = False
        yield Lexeme(Token.NEWLINE, "\n")

    def _quoted(self, line: str, pos: int) -> _Scan:
        """Scan the body of the open quoted string, starting at ``pos``.

        Returns the position after the closing quote, or None when the line
        ran out first (the string continues on the next line).
        """
        quote = self.mode.value
        chunks: list[str] = []
        start = pos
        while pos < len(line):
            char = line[pos]
            if char == "\\":
                chunks.append(line[start:pos])
                if pos + 1 == len(line):
                    # The escaped character is the line break itself.
                    chunks.append("\n")
                    yield Lexeme(Token.SUBSTRING, "".join(chunks))
                    return None
                chunks.append(line[pos + 1])
                pos += 2
                start = pos
            elif char == quote:
                chunks.append(line[start:pos])
                yield Lexeme(Token.STRING, "".join(chunks))
                self.mode = ScanMode.TEXT
                return pos + 1
            else:
                pos += 1
        chunks.append(line[start:])
        chunks.append("\n")
        yield Lexeme(Token.SUBSTRING, "".join(chunks))
        return None

    def _unquoted(self, line: str, pos: int) -> _Scan:
        chunks: list[str] = []
        start = pos
        while pos < len(line):
            char = line[pos]
            if char == "\\":
                chunks.append(line[start:pos])
                if pos + 1 == len(line):
                    text = "".join(chunks)
                    if text:
                        yield Lexeme(Token.STRING, text)
                        self._in_word = True
                    yield Lexeme(Token.ESCAPED_NEWLINE, char)
                    self._continued = True
                    return None
                if line[pos + 1] in ";|":
                    # Operators cannot be escaped; the backslash stays literal.
                    chunks.append(char)
                    pos += 1
                    start = pos
                    break
                chunks.append(line[pos + 1])
                pos += 2
                start = pos
                continue
            if char in _WORD_BREAKS:
                break
            pos += 1
        chunks.append(line[start:pos])
        yield Lexeme(Token.STRING, "".join(chunks))
        self._in_word = True
        return pos


__all__ = ["Lexer", "ScanMode"]
