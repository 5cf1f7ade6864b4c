# src/treelox/memory/heap.py
"""
Heap registry and mark-and-sweep collector.

Every environment, function, class and instance the evaluator creates is
registered here through ``Heap.allocate``. Values keep plain Python
references to each other; the heap decides *liveness*. A collection marks
everything reachable from the roots the evaluator reports and releases the
rest. A released object empties itself and refuses further use, so a
missing root shows up as ``UseAfterFree`` instead of silently working.
"""

import logging
import time

from ..safety.memory_safety import HeapCorruption, UseAfterFree

logger = logging.getLogger(__name__)


def heap_refs(value):
    """Heap objects directly held by ``value`` (a heap object holds itself)."""
    refs = getattr(value, "heap_refs", None)
    if refs is None:
        return ()
    return refs()


class HeapObject:
    """Base for every collector-managed object."""

    kind = "object"

    def __init__(self):
        self.slot = None
        self.marked = False
        self.freed = False

    def heap_refs(self):
        return (self,)

    def references(self):
        """Yield the heap objects this object keeps alive."""
        return iter(())

    def release(self):
        """Drop contents; called once by the sweeper."""
        self.freed = True

    def check_live(self):
        if self.freed:
            raise UseAfterFree(f"{self.kind} in slot {self.slot} used after collection")


class Heap:
    """
    Owns the set of live heap objects and decides when to collect.

    A cycle runs before a new object is registered once the live count has
    reached ``next_gc``, or on every allocation in stress mode. After each
    cycle ``next_gc`` becomes ``max(initial_threshold, live * growth_factor)``.
    """

    def __init__(self, initial_threshold=256, growth_factor=2.0, stress=False):
        if initial_threshold < 1:
            raise ValueError("initial_threshold must be positive")
        if growth_factor <= 1.0:
            raise ValueError("growth_factor must be greater than 1")

        self.initial_threshold = initial_threshold
        self.growth_factor = growth_factor
        self.stress = stress
        self.next_gc = initial_threshold

        self._objects = {}
        self._next_slot = 1
        self._root_provider = None
        self._collecting = False
        self._listeners = []

        # Statistics
        self.total_allocated = 0
        self.total_freed = 0
        self.collections = 0
        self.last_freed = 0
        self.gc_time = 0.0
        self.peak_live = 0

    def __len__(self):
        return len(self._objects)

    def __contains__(self, obj):
        slot = getattr(obj, "slot", None)
        return slot is not None and self._objects.get(slot) is obj

    def __iter__(self):
        return iter(list(self._objects.values()))

    def set_root_provider(self, provider):
        """``provider()`` returns an iterable of values that are roots right now."""
        self._root_provider = provider

    def add_listener(self, listener):
        """``listener(heap, freed)`` runs after every completed cycle."""
        self._listeners.append(listener)

    def allocate(self, obj):
        """Register ``obj``, collecting first if a cycle is due. Returns ``obj``."""
        if obj.slot is not None:
            raise HeapCorruption(f"{obj.kind} already registered in slot {obj.slot}")

        if self._should_collect():
            # the new object is not registered yet, so whatever it points at
            # must survive this cycle on its behalf
            extra = list(obj.references())
            self.collect(extra_roots=extra)

        obj.slot = self._next_slot
        self._next_slot += 1
        self._objects[obj.slot] = obj
        self.total_allocated += 1
        self.peak_live = max(self.peak_live, len(self._objects))
        return obj

    def _should_collect(self):
        if self._collecting or self._root_provider is None:
            return False
        return self.stress or len(self._objects) >= self.next_gc

    def collect(self, extra_roots=()):
        """Run one full mark-and-sweep cycle; returns the number of objects freed."""
        if self._collecting:
            return 0
        self._collecting = True
        started = time.perf_counter()
        try:
            roots = list(self._root_provider()) if self._root_provider else []
            roots.extend(extra_roots)

            for obj in self._objects.values():
                obj.marked = False

            self._mark(roots)
            freed = self._sweep()
        finally:
            self._collecting = False

        live = len(self._objects)
        self.next_gc = max(self.initial_threshold, int(live * self.growth_factor))
        self.collections += 1
        self.last_freed = freed
        self.total_freed += freed
        self.gc_time += time.perf_counter() - started

        logger.debug(
            "gc cycle %d: freed %d, live %d, next at %d",
            self.collections, freed, live, self.next_gc,
        )
        for listener in self._listeners:
            listener(self, freed)
        return freed

    def _mark(self, roots):
        worklist = []
        for root in roots:
            worklist.extend(heap_refs(root))

        while worklist:
            obj = worklist.pop()
            if obj.marked:
                continue
            if obj.freed or self._objects.get(obj.slot) is not obj:
                raise HeapCorruption(
                    f"reachable {obj.kind} (slot {obj.slot}) is not a live heap object"
                )
            obj.marked = True
            worklist.extend(obj.references())

    def _sweep(self):
        dead = [slot for slot, obj in self._objects.items() if not obj.marked]
        for slot in dead:
            obj = self._objects.pop(slot)
            logger.debug("gc: releasing %s in slot %d", obj.kind, slot)
            obj.release()
        return len(dead)

    def verify(self):
        """Check that every live object only points at live objects."""
        for slot, obj in self._objects.items():
            if obj.freed or obj.slot != slot:
                raise HeapCorruption(f"slot {slot} holds a released or misfiled {obj.kind}")
            for ref in obj.references():
                if self._objects.get(ref.slot) is not ref:
                    raise HeapCorruption(
                        f"{obj.kind} in slot {slot} points at a dead {ref.kind}"
                    )
        return True

    def stats(self):
        by_kind = {}
        for obj in self._objects.values():
            by_kind[obj.kind] = by_kind.get(obj.kind, 0) + 1
        return {
            "live": len(self._objects),
            "live_by_kind": by_kind,
            "peak_live": self.peak_live,
            "total_allocated": self.total_allocated,
            "total_freed": self.total_freed,
            "collections": self.collections,
            "last_freed": self.last_freed,
            "next_gc": self.next_gc,
            "stress": self.stress,
            "gc_time": self.gc_time,
        }
