"""
Memory management for treelox: the heap registry and its collector.
"""

from .heap import Heap, HeapObject, heap_refs

__all__ = ["Heap", "HeapObject", "heap_refs"]
