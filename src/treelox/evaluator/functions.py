# src/treelox/evaluator/functions.py
from ..errors import ErrorKind, runtime_error
from ..object import is_callable
from ..safety.memory_safety import StackOverflow
from .utils import CallFrame, debug_log


class FunctionEvaluatorMixin:
    """Handles call expressions and dispatch to the callable kinds."""

    def eval_call_expression(self, node):
        mark = len(self._temp_roots)
        try:
            callee = self.evaluate(node.callee)
            self._temp_roots.append(callee)

            arguments = []
            for argument in node.arguments:
                value = self.evaluate(argument)
                arguments.append(value)
                self._temp_roots.append(value)

            debug_log("  Arguments evaluated", f"count: {len(arguments)}", settings=self.settings)
            return self.apply_function(callee, arguments, node.paren)
        finally:
            del self._temp_roots[mark:]

    def apply_function(self, callee, arguments, token):
        """Check ``callee`` and invoke it; ``token`` positions any error."""
        if not is_callable(callee):
            raise runtime_error(ErrorKind.NOT_CALLABLE, token, "Can only call functions and classes.")

        arity = callee.arity()
        if len(arguments) != arity:
            raise runtime_error(
                ErrorKind.ARITY_MISMATCH, token,
                f"Expected {arity} arguments but got {len(arguments)}.",
            )

        try:
            self.guard.enter_scope()
        except StackOverflow:
            raise runtime_error(ErrorKind.STACK_OVERFLOW, token, "Stack overflow.") from None

        self.frames.append(CallFrame(callee, token))
        debug_log(
            "apply_function", f"Calling {callee.inspect()} (depth {len(self.frames)})",
            settings=self.settings,
        )
        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise runtime_error(ErrorKind.STACK_OVERFLOW, token, "Stack overflow.") from None
        finally:
            self.frames.pop()
            self.guard.exit_scope()
