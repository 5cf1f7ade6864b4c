"""
Test: Memory Safety Checks

Call-depth limiting, use-after-free detection and heap integrity checks.
"""

import sys
import os

import pytest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from treelox.environment import Environment
from treelox.errors import InternalError
from treelox.memory import Heap
from treelox.object import NIL
from treelox.safety import (
    MemoryGuard, MemorySafetyError, UseAfterFree, HeapCorruption, StackOverflow
)


def test_memory_guard():
    """Stack depth is bounded and unwinding restores it"""
    guard = MemoryGuard(max_stack_depth=10)

    for _ in range(10):
        guard.enter_scope()
    assert guard.stack_depth == 10

    with pytest.raises(StackOverflow) as excinfo:
        guard.enter_scope()
    assert excinfo.value.limit == 10
    assert guard.stack_depth == 10

    for _ in range(10):
        guard.exit_scope()
    assert guard.stack_depth == 0

    stats = guard.get_memory_stats()
    assert stats["max_stack_depth_observed"] == 10
    assert stats["stack_overflows_prevented"] == 1


def test_exit_scope_never_goes_negative():
    guard = MemoryGuard(max_stack_depth=2)
    guard.exit_scope()
    assert guard.stack_depth == 0


def test_safety_errors_are_internal():
    """Memory faults are interpreter defects, never user errors"""
    assert issubclass(UseAfterFree, MemorySafetyError)
    assert issubclass(HeapCorruption, MemorySafetyError)
    assert issubclass(MemorySafetyError, InternalError)
    assert not issubclass(StackOverflow, InternalError)


def test_use_after_free_prevention():
    heap = Heap()
    heap.set_root_provider(lambda: [])
    env = heap.allocate(Environment())
    env.define("x", NIL)
    heap.collect()

    assert env.freed
    with pytest.raises(UseAfterFree):
        env.get_at(0, "x")


def test_guard_verifies_heap_after_collection():
    heap = Heap()
    live = heap.allocate(Environment())
    heap.set_root_provider(lambda: [live])
    guard = MemoryGuard(verify_heap=True)
    heap.add_listener(lambda h, freed: guard.after_collection(h))

    heap.collect()
    assert guard.stats["heap_checks"] == 1

    dead = Environment()
    heap.allocate(dead)
    heap.collect()
    live.enclosing = dead
    with pytest.raises(HeapCorruption):
        guard.detect_corruption(heap)
