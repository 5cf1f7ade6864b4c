"""
treelox Safety Module

Checks that guard the interpreter's memory model:
- use-after-free and heap corruption detection (interpreter defects)
- call depth limiting (user-visible stack overflow)
"""

from .memory_safety import (
    MemoryGuard,

    # Exceptions
    MemorySafetyError,
    UseAfterFree,
    HeapCorruption,
    StackOverflow,
)

__all__ = [
    'MemoryGuard',
    'MemorySafetyError',
    'UseAfterFree',
    'HeapCorruption',
    'StackOverflow',
]
