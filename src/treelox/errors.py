"""
Error types for treelox.

Three families live here:

- static errors (``LoxSyntaxError``, ``ResolveError``) collected by the lexer,
  parser and resolver before anything runs;
- ``LoxRuntimeError``, the only error a running program can produce, tagged
  with an ``ErrorKind``;
- ``InternalError``, raised when the interpreter itself is inconsistent
  (a resolver/evaluator mismatch, a collector that lost a live object).
  These are never turned into a ``LoxRuntimeError``.
"""

from enum import Enum


class ErrorKind(Enum):
    TYPE_MISMATCH = "TypeMismatch"
    UNDEFINED_VARIABLE = "UndefinedVariable"
    UNDEFINED_PROPERTY = "UndefinedProperty"
    ARITY_MISMATCH = "ArityMismatch"
    NOT_CALLABLE = "NotCallable"
    DIVIDE_BY_ZERO = "DivideByZero"
    INVALID_SUPERCLASS = "InvalidSuperclass"
    STACK_OVERFLOW = "StackOverflow"

    def __str__(self):
        return self.value


class LoxError(Exception):
    """Base for every error a user program can cause."""

    def __init__(self, message, line=None, column=None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def __str__(self):
        return self.message


class LoxSyntaxError(LoxError):
    """Scanning or parsing failure."""

    def __init__(self, message, line=None, column=None, where=""):
        super().__init__(message, line, column)
        self.where = where


class ResolveError(LoxError):
    """Static scoping error found by the resolver."""

    def __init__(self, message, line=None, column=None, where=""):
        super().__init__(message, line, column)
        self.where = where


class LoxRuntimeError(LoxError):
    def __init__(self, kind, message, line=None, column=None):
        super().__init__(message, line, column)
        self.kind = kind

    def __repr__(self):
        return f"LoxRuntimeError({self.kind}, {self.message!r}, line={self.line})"


def runtime_error(kind, token, message):
    """Build a runtime error positioned at ``token``."""
    return LoxRuntimeError(kind, message, getattr(token, "line", None), getattr(token, "column", None))


class InternalError(Exception):
    """The interpreter broke one of its own invariants."""


class ResolutionFault(InternalError):
    """A resolved lexical distance does not match the environment chain."""
