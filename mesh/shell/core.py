"""Core Interpreter implementation."""

from __future__ import annotations

import logging
import os
from collections.abc import MutableMapping
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from ..ast import Cmd, Expr, Pipeline, Stmt, StmtList, StringLit, Tilde, VarRef, Word
from ..exceptions import ExitRequest, ShellError
from . import registry
from .common import BuiltinHandler, CommandResult, Stream
from .host import run_host_process

logger = logging.getLogger(__name__)


class Interpreter:
    """Executes command trees against the host's processes and descriptors."""

    def __init__(
        self,
        *,
        stdin: Stream = None,
        stdout: Stream = None,
        stderr: Stream = None,
        env: MutableMapping[str, str] | None = None,
    ) -> None:
        self.stdin = stdin
        self.stdout = stdout
        self.stderr = stderr
        self.env: MutableMapping[str, str] = os.environ if env is None else env
        self.builtins: dict[str, BuiltinHandler] = self._bind_builtins()

    # ------------------------------------------------------------------
    # Builtins
    # ------------------------------------------------------------------
    def register_builtin(self, name: str, handler: BuiltinHandler) -> None:
        self.builtins[name] = handler

    def _bind_builtins(self) -> dict[str, BuiltinHandler]:
        # Import command modules for their side effects (registration)
        from . import commands  # noqa: F401

        return registry.bind(self)

    def home(self) -> str:
        try:
            return str(Path.home())
        except RuntimeError as exc:
            raise ShellError(f"cannot resolve home directory: {exc}") from exc

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------
    def execute(self, stmt: Stmt) -> CommandResult:
        match stmt:
            case StmtList():
                return self._run_list(stmt)
            case Pipeline():
                return self._run_pipeline(stmt)
            case Cmd():
                return self._run_cmd(stmt)
        raise TypeError(f"Not a statement: {stmt!r}")

    def _run_list(self, stmts: StmtList) -> CommandResult:
        result = CommandResult()
        for stmt in stmts.statements:
            result = self.execute(stmt)
            if result.error is not None:
                return result
        return result

    def _run_cmd(self, cmd: Cmd) -> CommandResult:
        try:
            argv = [self.expand(word) for word in cmd.argv]
        except ShellError as exc:
            return CommandResult(status=1, error=exc)
        if not argv:
            return CommandResult()
        name, *args = argv
        handler = self.builtins.get(name)
        if handler is None:
            return run_host_process(
                argv,
                stdin=self.stdin,
                stdout=self.stdout,
                stderr=self.stderr,
                env=None if self.env is os.environ else self.env,
            )
        try:
            result = handler(args)
        except ExitRequest as exc:
            return CommandResult(status=exc.status, error=exc)
        except ShellError as exc:
            return CommandResult(status=1, error=exc)
        return result if result is not None else CommandResult()

    def _run_pipeline(self, pipeline: Pipeline) -> CommandResult:
        stages = pipeline.stages
        if len(stages) == 1:
            return self.execute(stages[0])
        pipes = [os.pipe() for _ in stages[1:]]
        logger.debug("Running %d-stage pipeline over pipes %s", len(stages), pipes)
        last = len(stages) - 1
        with ThreadPoolExecutor(max_workers=len(stages), thread_name_prefix="mesh-stage") as pool:
            futures = []
            for index, stage in enumerate(stages):
                stdin = self.stdin if index == 0 else pipes[index - 1][0]
                stdout = self.stdout if index == last else pipes[index][1]
                # Each stage closes the pipe ends it uses once it is done.
                owned: list[int] = []
                if index > 0:
                    owned.append(pipes[index - 1][0])
                if index < last:
                    owned.append(pipes[index][1])
                futures.append(pool.submit(self._run_stage, stage, stdin, stdout, owned))
        # Leaving the executor joined every stage; result() re-raises failures.
        results = [future.result() for future in futures]
        return results[-1]

    def _run_stage(self, stage: Stmt, stdin: Stream, stdout: Stream, owned: list[int]) -> CommandResult:
        child = self.spawn(stdin=stdin, stdout=stdout)
        try:
            return child.execute(stage)
        finally:
            for fd in owned:
                os.close(fd)

    def spawn(self, *, stdin: Stream, stdout: Stream) -> Interpreter:
        """Create an interpreter sharing this one's environment and builtins."""
        child = Interpreter(stdin=stdin, stdout=stdout, stderr=self.stderr, env=self.env)
        for name, handler in self.builtins.items():
            child.builtins.setdefault(name, handler)
        return child

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------
    def expand(self, word: Word) -> str:
        return "".join(self.evaluate(part) for part in word.parts)

    def evaluate(self, expr: Expr) -> str:
        match expr:
            case StringLit(text=text):
                return text
            case Tilde():
                return self.home()
            case VarRef(identifier=name):
                return self.env.get(name, "")
        raise TypeError(f"Not an expression: {expr!r}")


__all__ = ["Interpreter"]
