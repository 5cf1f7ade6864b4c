# object.py
"""
Runtime values.

Scalars (nil, booleans, numbers, strings) are immutable and compared by
value. Functions, classes and instances are heap objects owned by the
collector and compared by identity. A bound method pairs a function with
its receiver and is a plain value: it keeps both alive while it exists.
"""

import math
import time
from decimal import Decimal

from .errors import ErrorKind, LoxRuntimeError
from .memory.heap import HeapObject


class Object:
    def inspect(self):
        raise NotImplementedError("Subclasses must implement this method")

    def type(self):
        raise NotImplementedError("Subclasses must implement this method")

    def heap_refs(self):
        return ()

    def __str__(self):
        return self.inspect()


class Nil(Object):
    def inspect(self): return "nil"
    def type(self): return "NIL"
    def __repr__(self): return "NIL"


class Boolean(Object):
    def __init__(self, value): self.value = value
    def inspect(self): return "true" if self.value else "false"
    def type(self): return "BOOLEAN"
    def __repr__(self): return "TRUE" if self.value else "FALSE"


NIL = Nil()
TRUE = Boolean(True)
FALSE = Boolean(False)


def native_bool(value):
    return TRUE if value else FALSE


class Number(Object):
    def __init__(self, value): self.value = float(value)
    def type(self): return "NUMBER"

    def inspect(self):
        value = self.value
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        # shortest round-trip digits, written out without an exponent
        return format(Decimal(repr(value)).normalize(), "f")

    def __eq__(self, other):
        return isinstance(other, Number) and values_equal(self, other)

    def __hash__(self):
        return hash(self.value)

    def __repr__(self):
        return f"Number({self.value!r})"


class String(Object):
    def __init__(self, value): self.value = value
    def inspect(self): return self.value
    def type(self): return "STRING"

    def __eq__(self, other):
        return isinstance(other, String) and self.value == other.value

    def __hash__(self):
        return hash(self.value)

    def __repr__(self):
        return f"String({self.value!r})"


# ---- control signals ------------------------------------------------------------

class ReturnValue(Object):
    def __init__(self, value): self.value = value
    def inspect(self): return self.value.inspect()
    def type(self): return "RETURN_VALUE"


class BreakSignal(Object):
    def inspect(self): return "break"
    def type(self): return "BREAK"


class ContinueSignal(Object):
    def inspect(self): return "continue"
    def type(self): return "CONTINUE"


BREAK = BreakSignal()
CONTINUE = ContinueSignal()


# ---- callables ------------------------------------------------------------------

class LoxFunction(HeapObject, Object):
    kind = "function"

    def __init__(self, declaration, closure):
        HeapObject.__init__(self)
        self.declaration = declaration
        self.closure = closure

    @property
    def name(self):
        return self.declaration.name.lexeme

    def inspect(self): return f"<fn {self.name}>"
    def type(self): return "FUNCTION"

    def arity(self):
        return len(self.declaration.params)

    def references(self):
        if self.closure is not None:
            yield self.closure

    def release(self):
        self.closure = None
        HeapObject.release(self)

    def call(self, evaluator, arguments):
        self.check_live()
        return self.invoke(evaluator, arguments, self.closure)

    def invoke(self, evaluator, arguments, enclosing):
        """Run the body in a fresh environment enclosing ``enclosing``."""
        environment = evaluator.new_environment(enclosing)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        result = evaluator.execute_block(self.declaration.body, environment)
        if isinstance(result, ReturnValue):
            return result.value
        return NIL


class BoundMethod(Object):
    def __init__(self, function, receiver):
        self.function = function
        self.receiver = receiver

    def inspect(self): return self.function.inspect()
    def type(self): return "BOUND_METHOD"

    def arity(self):
        return self.function.arity()

    def heap_refs(self):
        return (self.function, self.receiver)

    def call(self, evaluator, arguments):
        self.function.check_live()
        this_env = evaluator.new_environment(self.function.closure)
        this_env.define("this", self.receiver)
        return self.function.invoke(evaluator, arguments, this_env)

    def __eq__(self, other):
        return (isinstance(other, BoundMethod)
                and other.function is self.function
                and other.receiver is self.receiver)

    def __hash__(self):
        return hash((id(self.function), id(self.receiver)))


class LoxClass(HeapObject, Object):
    kind = "class"

    def __init__(self, name, superclass=None, methods=None):
        HeapObject.__init__(self)
        self.name = name
        self.superclass = superclass
        self.methods = dict(methods or {})

    def inspect(self): return self.name
    def type(self): return "CLASS"

    def find_method(self, name):
        klass = self
        while klass is not None:
            klass.check_live()
            method = klass.methods.get(name)
            if method is not None:
                return method
            klass = klass.superclass
        return None

    def arity(self):
        initializer = self.find_method("init")
        if initializer is None:
            return 0
        return initializer.arity()

    def references(self):
        if self.superclass is not None:
            yield self.superclass
        yield from self.methods.values()

    def release(self):
        self.superclass = None
        self.methods.clear()
        HeapObject.release(self)

    def call(self, evaluator, arguments):
        self.check_live()
        instance = evaluator.heap.allocate(LoxInstance(self))
        initializer = self.find_method("init")
        if initializer is not None:
            with evaluator.temp_roots(instance):
                BoundMethod(initializer, instance).call(evaluator, arguments)
        return instance


class LoxInstance(HeapObject, Object):
    kind = "instance"

    def __init__(self, klass):
        HeapObject.__init__(self)
        self.klass = klass
        self.fields = {}

    def inspect(self): return f"{self.klass.name} instance"
    def type(self): return "INSTANCE"

    def get(self, name):
        """Field first, then a method bound to this instance."""
        self.check_live()
        if name in self.fields:
            return self.fields[name]
        method = self.klass.find_method(name)
        if method is not None:
            return BoundMethod(method, self)
        raise LoxRuntimeError(ErrorKind.UNDEFINED_PROPERTY, f"Undefined property '{name}'.")

    def set(self, name, value):
        self.check_live()
        self.fields[name] = value

    def references(self):
        if self.klass is not None:
            yield self.klass
        for value in self.fields.values():
            yield from value.heap_refs()

    def release(self):
        self.klass = None
        self.fields.clear()
        HeapObject.release(self)


class NativeFunction(Object):
    def __init__(self, name, arity, fn):
        self.name = name
        self._arity = arity
        self.fn = fn

    def inspect(self): return "<native fn>"
    def type(self): return "NATIVE_FUNCTION"

    def arity(self):
        return self._arity

    def call(self, evaluator, arguments):
        return self.fn(*arguments)


def _clock():
    return Number(time.time())


NATIVES = (
    NativeFunction("clock", 0, _clock),
)


# ---- helpers --------------------------------------------------------------------

def is_truthy(value):
    """nil and false are falsey; everything else is truthy."""
    if value is NIL:
        return False
    if isinstance(value, Boolean):
        return value.value
    return True


def values_equal(a, b):
    if a is b:
        return True
    if isinstance(a, Number) and isinstance(b, Number):
        # NaN is equal to itself
        if math.isnan(a.value) and math.isnan(b.value):
            return True
        return a.value == b.value
    if isinstance(a, String) and isinstance(b, String):
        return a.value == b.value
    if isinstance(a, Boolean) and isinstance(b, Boolean):
        return a.value == b.value
    if isinstance(a, BoundMethod) and isinstance(b, BoundMethod):
        return a == b
    return False


def is_callable(value):
    return isinstance(value, (LoxFunction, BoundMethod, LoxClass, NativeFunction))


def stringify(value):
    return value.inspect()
