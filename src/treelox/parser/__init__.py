# src/treelox/parser/__init__.py
"""
Parser module for treelox.
"""

from .parser import Parser, precedences

__all__ = ["Parser", "precedences"]
