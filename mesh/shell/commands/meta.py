"""Session-control builtins."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ...exceptions import ExitRequest, ShellError
from ..registry import builtin

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from ..core import Interpreter

_STATUS_RE = re.compile(r"[+-]?[0-9]+")


@builtin("exit")
def exit(shell: "Interpreter", args: list[str]) -> None:  # noqa: A001
    if len(args) > 1:
        raise ShellError("exit: too many arguments")
    if not args:
        raise ExitRequest(0)
    if not _STATUS_RE.fullmatch(args[0]):
        raise ShellError(f"exit: {args[0]}: integer argument required")
    raise ExitRequest(int(args[0]))
