"""Command tree produced by the parser.

The nodes carry no behavior; :class:`mesh.shell.Interpreter` walks them.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class StringLit:
    text: str


@dataclass(frozen=True, slots=True)
class Tilde:
    marker: str = "~"


@dataclass(frozen=True, slots=True)
class VarRef:
    identifier: str


Expr = StringLit | Tilde | VarRef


@dataclass(frozen=True, slots=True)
class Word:
    """One argument position; its parts are concatenated without separators."""

    parts: tuple[Expr, ...]


@dataclass(frozen=True, slots=True)
class Cmd:
    argv: tuple[Word, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class Pipeline:
    stages: tuple[Stmt, ...]

    def __post_init__(self) -> None:
        if not self.stages:
            raise ValueError("A pipeline needs at least one stage")


@dataclass(frozen=True, slots=True)
class StmtList:
    statements: tuple[Stmt, ...] = field(default_factory=tuple)


Stmt = StmtList | Pipeline | Cmd


__all__ = [
    "StringLit",
    "Tilde",
    "VarRef",
    "Expr",
    "Word",
    "Cmd",
    "Pipeline",
    "StmtList",
    "Stmt",
]
