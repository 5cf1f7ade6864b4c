# environment.py
"""
Lexical environments.

An environment is a heap object: a name -> value mapping plus a link to
the enclosing environment. Local names are reached by the hop count the
resolver computed (``get_at``/``assign_at``); everything else goes to the
global environment by name.
"""

from .errors import ErrorKind, LoxRuntimeError, ResolutionFault
from .memory.heap import HeapObject


class Environment(HeapObject):
    kind = "environment"

    def __init__(self, enclosing=None):
        super().__init__()
        self.values = {}
        self.enclosing = enclosing

    # ---- Mapping protocol helpers -------------------------------------------------

    def __contains__(self, name):
        return name in self.values

    def __iter__(self):
        return iter(self.values)

    def __len__(self):
        return len(self.values)

    def items(self):
        return self.values.items()

    def __repr__(self):
        return f"<Environment slot={self.slot} names={sorted(self.values)}>"

    # ---- Core environment operations ---------------------------------------------

    def define(self, name, value):
        """Bind ``name`` in this environment; redefinition replaces."""
        self.check_live()
        self.values[name] = value

    def ancestor(self, distance):
        environment = self
        for _ in range(distance):
            environment.check_live()
            environment = environment.enclosing
            if environment is None:
                raise ResolutionFault(f"environment chain is shorter than {distance} hops")
        environment.check_live()
        return environment

    def get_at(self, distance, name):
        environment = self.ancestor(distance)
        try:
            return environment.values[name]
        except KeyError:
            raise ResolutionFault(f"'{name}' missing at distance {distance}") from None

    def assign_at(self, distance, name, value):
        environment = self.ancestor(distance)
        if name not in environment.values:
            raise LoxRuntimeError(ErrorKind.UNDEFINED_VARIABLE, f"Undefined variable '{name}'.")
        environment.values[name] = value

    def get_global(self, name):
        self.check_live()
        try:
            return self.values[name]
        except KeyError:
            raise LoxRuntimeError(
                ErrorKind.UNDEFINED_VARIABLE, f"Undefined variable '{name}'."
            ) from None

    def assign_global(self, name, value):
        self.check_live()
        if name not in self.values:
            raise LoxRuntimeError(ErrorKind.UNDEFINED_VARIABLE, f"Undefined variable '{name}'.")
        self.values[name] = value

    # ---- Collector hooks ---------------------------------------------------------

    def references(self):
        if self.enclosing is not None:
            yield self.enclosing
        for value in self.values.values():
            yield from value.heap_refs()

    def release(self):
        self.values.clear()
        self.enclosing = None
        super().release()
