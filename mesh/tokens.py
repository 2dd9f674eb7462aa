"""Lexeme kinds produced by the lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Token(Enum):
    NEWLINE = "Newline"
    ESCAPED_NEWLINE = "EscapedNewline"
    WHITESPACE = "Whitespace"
    IDENTIFIER = "Identifier"
    STRING = "String"
    SUBSTRING = "SubString"
    DOLLAR = "Dollar"
    PIPE = "Pipe"
    SEMICOLON = "Semicolon"
    TILDE = "Tilde"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Lexeme:
    kind: Token
    text: str

    def __str__(self) -> str:
        return f"{self.kind}({self.text})"


__all__ = ["Token", "Lexeme"]
