#!/usr/bin/env python3
"""
Runner for a source checkout - forwards to the treelox CLI
"""

import sys
import os

# Add the src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), 'src'))

from treelox.cli.main import cli

if __name__ == "__main__":
    # If no arguments, show help
    if len(sys.argv) == 1:
        sys.argv.append('--help')

    # Shorthand: main.py program.lox -> main.py run program.lox
    if len(sys.argv) == 2 and sys.argv[1].endswith('.lox'):
        sys.argv.insert(1, 'run')

    cli()
