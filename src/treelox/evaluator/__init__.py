# src/treelox/evaluator/__init__.py
"""
Tree-walking evaluator for treelox.

Split the same way the language is: expressions, statements and calls
each live in a mixin, combined by ``Evaluator`` in ``core``.
"""

from .core import Evaluator
from .utils import debug_log

__all__ = ["Evaluator", "debug_log"]
