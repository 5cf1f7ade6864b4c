# src/treelox/__init__.py
"""
treelox: a tree-walking interpreter for a small Lox-style language with
closures, classes, single inheritance and a mark-and-sweep heap.
"""

__version__ = "0.1.0"

from .session import Session, RunResult, compile_source, run_source

__all__ = ["Session", "RunResult", "compile_source", "run_source", "__version__"]
