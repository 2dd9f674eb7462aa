"""Table of the commands that run inside the interpreter itself."""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from typing import TYPE_CHECKING

from .common import BuiltinHandler, ShellCommand

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from .core import Interpreter

BUILTINS: dict[str, ShellCommand] = {}


def builtin(name: str) -> Callable[[ShellCommand], ShellCommand]:
    """Register the decorated function as the builtin ``name``."""

    def decorator(func: ShellCommand) -> ShellCommand:
        if name in BUILTINS:
            raise ValueError(f"Builtin {name!r} is already registered")
        BUILTINS[name] = func
        return func

    return decorator


def bind(shell: "Interpreter") -> dict[str, BuiltinHandler]:
    """Return every registered builtin as a handler acting on ``shell``."""
    return {name: partial(func, shell) for name, func in BUILTINS.items()}


__all__ = ["BUILTINS", "bind", "builtin"]
