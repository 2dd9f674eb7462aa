"""Spawning external programs."""

from __future__ import annotations

import logging
import subprocess
import sys
from collections.abc import Mapping

from ..exceptions import CommandNotFound, ShellError
from .common import CommandResult, Stream

logger = logging.getLogger(__name__)


def _flush(stream: Stream, fallback: object) -> None:
    target = fallback if stream is None else stream
    flush = getattr(target, "flush", None)
    if flush is not None:
        flush()


def exit_status(returncode: int) -> int:
    """Map a Popen return code to a shell status (signals become 128 + n)."""
    if returncode < 0:
        return 128 - returncode
    return returncode


def run_host_process(
    argv: list[str],
    *,
    stdin: Stream = None,
    stdout: Stream = None,
    stderr: Stream = None,
    env: Mapping[str, str] | None = None,
) -> CommandResult:
    """Run ``argv`` with the given standard streams and wait for it."""

    # Anything we buffered must reach the descriptor before the child writes.
    _flush(stdout, sys.stdout)
    _flush(stderr, sys.stderr)
    try:
        process = subprocess.Popen(
            argv,
            stdin=stdin,
            stdout=stdout,
            stderr=stderr,
            env=None if env is None else dict(env),
        )
    except FileNotFoundError:
        return CommandResult(status=127, error=CommandNotFound(f"{argv[0]}: command not found"))
    except PermissionError as exc:
        return CommandResult(status=126, error=ShellError(f"{argv[0]}: {exc.strerror}"))
    except OSError as exc:
        return CommandResult(status=126, error=ShellError(f"{argv[0]}: {exc}"))
    logger.debug("Spawned %s as pid %d", argv, process.pid)
    returncode = process.wait()
    logger.debug("pid %d exited with %d", process.pid, returncode)
    return CommandResult(status=exit_status(returncode))


__all__ = ["run_host_process", "exit_status"]
