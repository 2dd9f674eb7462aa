"""mesh package: an incremental shell parser and pipeline interpreter."""

from .ast import Cmd, Pipeline, StmtList, StringLit, Tilde, VarRef, Word
from .exceptions import (
    CommandNotFound,
    ExitRequest,
    MeshError,
    ParseError,
    ParserStateError,
    ShellError,
)
from .lexer import Lexer
from .parser import ParseStatus, Parser, parse
from .shell import CommandResult, Interpreter
from .tokens import Lexeme, Token

__all__ = [
    "Lexer",
    "Lexeme",
    "Token",
    "Parser",
    "ParseStatus",
    "parse",
    "Interpreter",
    "CommandResult",
    "StmtList",
    "Pipeline",
    "Cmd",
    "Word",
    "StringLit",
    "Tilde",
    "VarRef",
    "MeshError",
    "ParseError",
    "ShellError",
    "CommandNotFound",
    "ExitRequest",
    "ParserStateError",
]
