# src/treelox/cli/__init__.py
"""Command line interface for treelox."""
