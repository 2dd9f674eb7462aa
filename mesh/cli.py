"""Command-line interface for mesh."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Iterable, Iterator

from .exceptions import ExitRequest, MeshError, ParserStateError
from .parser import Parser
from .shell import Interpreter

PROG = "mesh"
PROMPT = "$ "
CONTINUATION_PROMPT = "> "
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
# Status of a statement cut short by Ctrl-C (128 + SIGINT).
INTERRUPTED_STATUS = 130

logger = logging.getLogger(__name__)


def _report(error: MeshError | str) -> None:
    print(f"{PROG}: {error}", file=sys.stderr, flush=True)


def repl(lines: Iterable[str | None], interpreter: Interpreter, parser: Parser | None = None) -> int:
    """Feed ``lines`` through the parser and run each finished statement.

    A ``None`` in ``lines`` stands for an interrupt at the prompt: the
    statement being typed is dropped and the status becomes 1.

    Returns the status of the last statement that ran, or the status given
    to ``exit``.
    """

    parser = parser or Parser()
    status = 0
    for line in lines:
        if line is None:
            parser.reset()
            status = 1
            continue
        if not parser.feed(line):
            continue
        tree, error = parser.result()
        if error is not None:
            _report(error)
            status = 1
            continue
        if tree is None:
            raise ParserStateError("parser finished without a statement")
        if not tree.statements:
            continue
        try:
            result = interpreter.execute(tree)
        except KeyboardInterrupt:
            print(file=sys.stderr, flush=True)
            status = INTERRUPTED_STATUS
            continue
        if isinstance(result.error, ExitRequest):
            logger.debug("Session ended by %s", result.error)
            return result.error.status
        status = result.status
        if result.error is not None:
            _report(result.error)
    if parser.pending:
        parser.reset()
        _report("unexpected end of input")
        status = 1
    return status


def _prompt_lines(parser: Parser) -> Iterator[str | None]:
    while True:
        try:
            yield input(CONTINUATION_PROMPT if parser.pending else PROMPT)
        except EOFError:
            print(file=sys.stderr)
            return
        except KeyboardInterrupt:
            print(file=sys.stderr)
            yield None


def _run(args: argparse.Namespace) -> int:
    interpreter = Interpreter()
    if args.command is not None:
        return repl(args.command.splitlines(), interpreter)
    if args.script is not None:
        try:
            handle = open(args.script, encoding="utf-8")
        except OSError as exc:
            _report(f"{args.script}: {exc.strerror}")
            return 1
        with handle:
            return repl(handle, interpreter)
    if not sys.stdin.isatty():
        return repl(sys.stdin, interpreter)
    parser = Parser()
    return repl(_prompt_lines(parser), interpreter, parser)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog=PROG, description="A small line-oriented command shell.")
    parser.add_argument("-c", dest="command", metavar="COMMAND", help="Run COMMAND and exit.")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=os.environ.get("MESH_LOG_LEVEL", "WARNING"),
        help="Logging threshold for diagnostics on stderr (default: $MESH_LOG_LEVEL or WARNING).",
    )
    parser.add_argument("script", nargs="?", help="Script file to run instead of standard input.")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(name)s: %(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    exit_code = _run(args)
    raise SystemExit(exit_code)


__all__ = ["main", "repl"]
