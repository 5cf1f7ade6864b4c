"""
Memory Safety Checks

Guards that keep the interpreter honest about its own memory model:

1. Use-after-free detection: a heap object released by the collector refuses
   every further read or write.
2. Heap corruption detection: a live object that points at a released or
   unregistered object means the root set was incomplete.
3. Stack overflow protection: a hard limit on nested calls, so runaway
   recursion stops deterministically instead of exhausting the host stack.

The first two are interpreter defects and surface as ``MemorySafetyError``;
they are never reported as user errors. The call-depth limit is a user
error: the evaluator turns ``StackOverflow`` into a runtime error at the
offending call.
"""

from typing import Any, Dict

from ..errors import InternalError


class MemorySafetyError(InternalError):
    """Base class for memory safety violations"""
    pass


class UseAfterFree(MemorySafetyError):
    """Attempt to access an object the collector already reclaimed"""
    pass


class HeapCorruption(MemorySafetyError):
    """Heap integrity check failed"""
    pass


class StackOverflow(Exception):
    """Call depth exceeded"""

    def __init__(self, depth: int, limit: int):
        super().__init__(f"Stack depth {depth} exceeds maximum {limit}")
        self.depth = depth
        self.limit = limit


class MemoryGuard:
    """
    Tracks call depth for one evaluator and checks heap integrity on demand.
    """

    def __init__(self, max_stack_depth: int = 2000, verify_heap: bool = False):
        self.max_stack_depth = max_stack_depth
        self.verify_heap = verify_heap

        # Stack tracking
        self.stack_depth = 0
        self.max_observed_depth = 0

        # Statistics
        self.stats = {
            "stack_overflows_prevented": 0,
            "heap_checks": 0,
        }

    def enter_scope(self):
        """Enter a new call frame"""
        # Check limit before incrementing
        if self.stack_depth + 1 > self.max_stack_depth:
            self.stats["stack_overflows_prevented"] += 1
            raise StackOverflow(self.stack_depth + 1, self.max_stack_depth)

        self.stack_depth += 1
        self.max_observed_depth = max(self.max_observed_depth, self.stack_depth)

    def exit_scope(self):
        """Exit a call frame"""
        if self.stack_depth > 0:
            self.stack_depth -= 1

    def reset(self):
        """Forget any frames left over from an aborted execution"""
        self.stack_depth = 0

    def detect_corruption(self, heap) -> bool:
        """Run the heap's integrity check; raises HeapCorruption on failure."""
        self.stats["heap_checks"] += 1
        heap.verify()
        return False

    def after_collection(self, heap):
        """Hook run by the evaluator after every collection cycle"""
        if self.verify_heap:
            self.detect_corruption(heap)

    def get_memory_stats(self) -> Dict[str, Any]:
        """Get call-depth statistics"""
        return {
            "stack_depth": self.stack_depth,
            "max_stack_depth_observed": self.max_observed_depth,
            "max_stack_depth": self.max_stack_depth,
            **self.stats
        }
