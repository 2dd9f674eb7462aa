"""Exception hierarchy shared by the parser, the interpreter and the CLI."""

from __future__ import annotations


class MeshError(Exception):
    """Base class for all shell errors."""


class ParseError(MeshError):
    """Raised for input the grammar cannot accept."""


class ShellError(MeshError):
    """Runtime failure of a single command."""


class CommandNotFound(ShellError):
    """The external program could not be located."""


class ExitRequest(MeshError):
    """Signal raised by ``exit``; it ends the session rather than failing it."""

    def __init__(self, status: int = 0) -> None:
        super().__init__(status)
        self.status = status

    def __str__(self) -> str:
        return f"exit {self.status}"


class ParserStateError(RuntimeError):
    """The parser API was used out of order (a caller bug)."""


__all__ = [
    "MeshError",
    "ParseError",
    "ShellError",
    "CommandNotFound",
    "ExitRequest",
    "ParserStateError",
]
