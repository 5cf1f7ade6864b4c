# src/treelox/session.py
"""
Glue between the front end and the evaluator.

``Session`` keeps one evaluator (and so one set of globals and one heap)
alive across many sources; the REPL and the ``run`` command both drive
one. ``run_source`` is the one-shot form for embedding and tests.
"""

import logging

from .lexer import Lexer
from .parser import Parser
from .resolver import Resolver
from .evaluator import Evaluator

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_STATIC_ERROR = 65
EXIT_RUNTIME_ERROR = 70


class RunResult:
    def __init__(self, static_errors=None, runtime_error=None):
        self.static_errors = list(static_errors or [])
        self.runtime_error = runtime_error

    @property
    def ok(self):
        return not self.static_errors and self.runtime_error is None

    @property
    def errors(self):
        if self.runtime_error is not None:
            return self.static_errors + [self.runtime_error]
        return list(self.static_errors)

    @property
    def exit_code(self):
        if self.static_errors:
            return EXIT_STATIC_ERROR
        if self.runtime_error is not None:
            return EXIT_RUNTIME_ERROR
        return EXIT_OK

    def __repr__(self):
        return f"RunResult(static={len(self.static_errors)}, runtime={self.runtime_error!r})"


def compile_source(source_code, filename="<stdin>", config=None):
    """Scan, parse and resolve. Returns ``(program, errors)``."""
    lexer = Lexer(source_code, filename)
    parser = Parser(lexer, config=config)
    program = parser.parse_program()
    if parser.errors:
        return program, parser.errors

    errors = Resolver().resolve(program)
    return program, errors


class Session:
    def __init__(self, output=None, config=None, heap=None):
        self.evaluator = Evaluator(output=output, heap=heap, config=config)

    @property
    def heap(self):
        return self.evaluator.heap

    @property
    def globals(self):
        return self.evaluator.globals

    def run(self, source_code, filename="<stdin>"):
        program, errors = compile_source(source_code, filename, config=self.evaluator.settings)
        if errors:
            logger.debug("%s: %d static errors", filename, len(errors))
            return RunResult(static_errors=errors)

        error = self.evaluator.run(program)
        if error is not None:
            error.filename = filename
        return RunResult(runtime_error=error)


def run_source(source_code, output=None, config=None, filename="<stdin>"):
    """Run a whole program in a fresh session."""
    return Session(output=output, config=config).run(source_code, filename)
