"""Incremental parser turning fed lines into command trees."""

from __future__ import annotations

import logging
import re
import threading
from enum import Enum

from .ast import Cmd, Expr, Pipeline, StmtList, StringLit, Stmt, Tilde, VarRef, Word
from .exceptions import ParseError, ParserStateError
from .lexer import Lexer
from .tokens import Lexeme, Token

logger = logging.getLogger(__name__)

_ASSIGNMENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*=")


class ParseStatus(Enum):
    IDLE = "idle"
    NEED_MORE_INPUT = "need more input"
    COMPLETE = "complete"
    ERROR = "error"


class Parser:
    """Builds one :class:`StmtList` per logical line of input.

    Lines are handed over with :meth:`feed`. Every lexeme is folded into the
    partial tree as soon as the lexer produces it, so a statement spread over
    several lines is never re-parsed. Once a statement is finished (or has
    failed), :meth:`result` returns it and the parser starts over.

    After a syntax error the remaining lexemes up to the next newline are
    drained and dropped, which keeps the lexer in step with the input.
    """

    def __init__(self) -> None:
        self._lexer = Lexer()
        self._lock = threading.Lock()
        self.status = ParseStatus.IDLE
        self._clear()

    def _clear(self) -> None:
        self._statements: list[Stmt] = []
        self._stages: list[Stmt] = []
        self._argv: list[Word] = []
        self._parts: list[Expr] = []
        self._text: list[str] = []
        self._in_word = False
        self._dollar = False
        self._tree: StmtList | None = None
        self._error: ParseError | None = None

    @property
    def pending(self) -> bool:
        """True while a statement has been started but not finished."""
        return self.status is ParseStatus.NEED_MORE_INPUT

    def reset(self) -> None:
        """Forget any partial statement and any uncollected result."""
        with self._lock:
            self._lexer.reset()
            self._clear()
            self.status = ParseStatus.IDLE

    def feed(self, line: str) -> bool:
        """Parse one more line; True once a statement (or an error) is ready."""
        with self._lock:
            if self.status is not ParseStatus.NEED_MORE_INPUT:
                if self.status is not ParseStatus.IDLE:
                    logger.debug("Dropping uncollected parse result")
                self._clear()
            done = False
            for lexeme in self._lexer.feed(line):
                done = self._consume(lexeme)
            if not done:
                self.status = ParseStatus.NEED_MORE_INPUT
                return False
            self._lexer.reset()
            if self._error is not None:
                self.status = ParseStatus.ERROR
                logger.debug("Parse error: %s", self._error)
            else:
                self.status = ParseStatus.COMPLETE
                logger.debug("Parsed %r", self._tree)
            return True

    def result(self) -> tuple[StmtList | None, ParseError | None]:
        """Hand over the finished statement, or the error that ended it."""
        with self._lock:
            if self.status not in (ParseStatus.COMPLETE, ParseStatus.ERROR):
                raise ParserStateError(
                    f"result() is only valid after feed() returned True (status: {self.status.value})"
                )
            tree = self._tree if self._error is None else None
            error = self._error
            self._clear()
            self.status = ParseStatus.IDLE
            return tree, error

    # ------------------------------------------------------------------
    # Lexeme handling
    # ------------------------------------------------------------------
    def _consume(self, lexeme: Lexeme) -> bool:
        if self._error is not None:
            return lexeme.kind is Token.NEWLINE
        try:
            return self._advance(lexeme)
        except ParseError as exc:
            self._error = exc
            return lexeme.kind is Token.NEWLINE

    def _advance(self, lexeme: Lexeme) -> bool:
        if self._dollar:
            self._dollar = False
            if lexeme.kind is Token.IDENTIFIER:
                self._flush_text()
                self._parts.append(VarRef(lexeme.text))
                return False
            # A "$" without a name is plain text.
            self._text.append("$")

        match lexeme.kind:
            case Token.STRING | Token.SUBSTRING:
                self._in_word = True
                self._text.append(lexeme.text)
            case Token.TILDE:
                self._in_word = True
                self._flush_text()
                self._parts.append(Tilde(lexeme.text))
            case Token.DOLLAR:
                self._in_word = True
                self._dollar = True
            case Token.IDENTIFIER:
                raise ParseError(f"unexpected identifier {lexeme.text!r}")
            case Token.WHITESPACE:
                self._end_word()
            case Token.ESCAPED_NEWLINE:
                pass
            case Token.PIPE:
                self._end_stage(lexeme)
            case Token.SEMICOLON:
                self._end_statement(lexeme)
            case Token.NEWLINE:
                self._end_statement(lexeme)
                self._tree = StmtList(tuple(self._statements))
                return True
        return False

    def _flush_text(self) -> None:
        if self._text:
            self._parts.append(StringLit("".join(self._text)))
            self._text.clear()

    def _end_word(self) -> None:
        if not self._in_word:
            return
        self._flush_text()
        self._argv.append(Word(tuple(self._parts)))
        self._parts = []
        self._in_word = False

    def _take_command(self) -> Cmd:
        argv = self._argv
        self._argv = []
        if argv:
            head = argv[0].parts[0] if argv[0].parts else None
            if isinstance(head, StringLit) and _ASSIGNMENT_RE.match(head.text):
                raise ParseError(f"variable assignment is not supported: {head.text!r}")
        return Cmd(tuple(argv))

    def _end_stage(self, lexeme: Lexeme) -> None:
        self._end_word()
        if not self._argv:
            raise ParseError(f"unexpected token {lexeme.text!r}")
        self._stages.append(self._take_command())

    def _end_statement(self, lexeme: Lexeme) -> None:
        self._end_word()
        if self._stages and not self._argv:
            if lexeme.kind is Token.NEWLINE:
                raise ParseError("missing command after '|'")
            raise ParseError(f"unexpected token {lexeme.text!r}")
        cmd = self._take_command()
        if self._stages:
            self._statements.append(Pipeline((*self._stages, cmd)))
            self._stages = []
        elif cmd.argv or lexeme.kind is Token.SEMICOLON:
            self._statements.append(cmd)


def parse(source: str) -> list[StmtList]:
    """Parse complete source text, raising the first :class:`ParseError`."""

    parser = Parser()
    statements: list[StmtList] = []
    for line in source.splitlines():
        if not parser.feed(line):
            continue
        tree, error = parser.result()
        if error is not None:
            raise error
        if tree is None:
            raise ParserStateError("parser finished without a statement")
        statements.append(tree)
    if parser.pending:
        raise ParseError("unexpected end of input")
    return statements


__all__ = ["Parser", "ParseStatus", "parse"]
