# src/treelox/error_reporter.py
"""
Central place where static and runtime errors are turned into readable
reports. Sources are registered by filename so a report can quote the
offending line with a caret under the column.
"""

from .errors import LoxRuntimeError


class ErrorReporter:
    def __init__(self):
        self.sources = {}

    def register_source(self, filename, source_code):
        self.sources[filename] = source_code.splitlines() if source_code else []

    def report_error(self, error_class, message, line=None, column=None, filename="<stdin>", where=""):
        """Build an error of ``error_class`` tagged with its filename.

        Callers decide whether to raise or collect the returned error.
        """
        error = error_class(message, line=line, column=column, where=where)
        error.filename = filename
        return error

    def source_line(self, filename, line):
        lines = self.sources.get(filename)
        if not lines or line is None or line < 1 or line > len(lines):
            return None
        return lines[line - 1]

    def format(self, error, filename=None):
        """Render an error the way the command line prints it."""
        filename = filename or getattr(error, "filename", "<stdin>")
        if isinstance(error, LoxRuntimeError):
            header = f"{error.kind}: {error.message}"
            if error.line is not None:
                header += f"\n[line {error.line}]"
        else:
            where = getattr(error, "where", "")
            header = f"[line {error.line}] Error{where}: {error.message}"

        text = self.source_line(filename, error.line)
        if text is None:
            return header
        gutter = f"{error.line:>4} | "
        report = f"{header}\n{gutter}{text}"
        if error.column:
            report += "\n" + " " * (len(gutter) + error.column - 1) + "^"
        return report


_reporter = None


def get_error_reporter():
    global _reporter
    if _reporter is None:
        _reporter = ErrorReporter()
    return _reporter


def reset_error_reporter():
    """Drop the shared reporter (useful for testing)."""
    global _reporter
    _reporter = None
