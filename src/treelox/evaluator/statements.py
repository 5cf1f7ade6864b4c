# src/treelox/evaluator/statements.py
from ..errors import ErrorKind, runtime_error
from ..object import (
    NIL, BREAK, CONTINUE, ReturnValue, LoxFunction, LoxClass, is_truthy, stringify
)
from .utils import debug_log


class StatementEvaluatorMixin:
    """Handles statements, blocks, loops and declarations.

    Every ``eval_*_statement`` returns ``None`` or a control signal
    (``ReturnValue``, ``BREAK``, ``CONTINUE``) for the enclosing construct.
    """

    def eval_expression_statement(self, node):
        self.evaluate(node.expression)
        return None

    def eval_print_statement(self, node):
        value = self.evaluate(node.expression)
        self.output.write(stringify(value) + "\n")
        return None

    def eval_var_statement(self, node):
        value = NIL
        if node.initializer is not None:
            value = self.evaluate(node.initializer)
        self.environment.define(node.name.lexeme, value)
        return None

    def eval_block_statement(self, node):
        debug_log("eval_block_statement", f"len={len(node.statements)}", level="verbose", settings=self.settings)
        return self.execute_block(node.statements, self.new_environment(self.environment))

    def eval_if_statement(self, node):
        if is_truthy(self.evaluate(node.condition)):
            return self.execute(node.then_branch)
        if node.else_branch is not None:
            return self.execute(node.else_branch)
        return None

    def eval_while_statement(self, node):
        while is_truthy(self.evaluate(node.condition)):
            signal = self.execute(node.body)
            if isinstance(signal, ReturnValue):
                return signal
            if signal is BREAK:
                break
            # CONTINUE falls through so a for-loop increment still runs
            if node.increment is not None:
                self.execute(node.increment)
        return None

    def eval_break_statement(self, node):
        return BREAK

    def eval_continue_statement(self, node):
        return CONTINUE

    def eval_return_statement(self, node):
        value = NIL
        if node.value is not None:
            value = self.evaluate(node.value)
        return ReturnValue(value)

    # === DECLARATIONS ===

    def eval_function_statement(self, node):
        function = self.heap.allocate(LoxFunction(node, self.environment))
        self.environment.define(node.name.lexeme, function)
        return None

    def eval_class_statement(self, node):
        mark = len(self._temp_roots)
        try:
            superclass = None
            if node.superclass is not None:
                superclass = self.evaluate(node.superclass)
                if not isinstance(superclass, LoxClass):
                    raise runtime_error(
                        ErrorKind.INVALID_SUPERCLASS, node.superclass.name,
                        "Superclass must be a class.",
                    )
                self._temp_roots.append(superclass)

            method_env = self.environment
            if superclass is not None:
                method_env = self.new_environment(self.environment)
                method_env.define("super", superclass)
                self._temp_roots.append(method_env)

            methods = {}
            for method in node.methods:
                function = self.heap.allocate(LoxFunction(method, method_env))
                methods[method.name.lexeme] = function
                self._temp_roots.append(function)

            klass = self.heap.allocate(LoxClass(node.name.lexeme, superclass, methods))
            self.environment.define(node.name.lexeme, klass)
        finally:
            del self._temp_roots[mark:]
        return None
