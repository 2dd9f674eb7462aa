"""Directory-changing builtin."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from ...exceptions import ShellError
from ..registry import builtin

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from ..core import Interpreter


@builtin("cd")
def cd(shell: "Interpreter", args: list[str]) -> None:
    if not args:
        target = shell.home()
    elif len(args) == 1:
        target = args[0]
        if target == "-":
            target = shell.env.get("OLDPWD", "")
            if not target:
                raise ShellError("cd: OLDPWD not set")
    else:
        raise ShellError("cd: too many arguments")

    oldpwd = shell.env.get("PWD") or os.getcwd()
    newpwd = os.path.abspath(target)
    try:
        os.chdir(target)
    except OSError as exc:
        raise ShellError(f"cd: {target}: {exc.strerror}") from exc
    shell.env["OLDPWD"] = oldpwd
    shell.env["PWD"] = newpwd
