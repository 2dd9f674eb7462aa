"""Shared shell types."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import IO, TYPE_CHECKING

from ..exceptions import MeshError

if TYPE_CHECKING:
    from .core import Interpreter


@dataclass(slots=True)
class CommandResult:
    status: int = 0
    error: MeshError | None = None


# A stream is a file object backed by a descriptor, a raw descriptor, or
# None for "inherit the interpreter process's stream".
Stream = IO[str] | IO[bytes] | int | None

BuiltinHandler = Callable[[list[str]], CommandResult | None]
ShellCommand = Callable[["Interpreter", list[str]], CommandResult | None]


__all__ = ["CommandResult", "Stream", "BuiltinHandler", "ShellCommand"]
