"""Interpreter package."""

from .common import CommandResult
from .core import Interpreter

__all__ = ["Interpreter", "CommandResult"]
