# src/treelox/evaluator/expressions.py
from .. import lox_token as tok
from ..errors import ErrorKind, runtime_error
from ..object import (
    NIL, TRUE, FALSE, Number, String, LoxClass, LoxInstance, BoundMethod,
    is_truthy, native_bool, values_equal
)
from .utils import debug_log

_COMPARISONS = {
    tok.GT: lambda a, b: a > b,
    tok.GTE: lambda a, b: a >= b,
    tok.LT: lambda a, b: a < b,
    tok.LTE: lambda a, b: a <= b,
}


class ExpressionEvaluatorMixin:
    """Handles evaluation of expressions: operators, variables, properties, this/super."""

    def eval_literal(self, node):
        value = node.value
        if value is None:
            return NIL
        if value is True:
            return TRUE
        if value is False:
            return FALSE
        if isinstance(value, str):
            return String(value)
        return Number(value)

    def eval_variable(self, node):
        name = node.name.lexeme
        if node.depth is None:
            return self.globals.get_global(name)
        return self.environment.get_at(node.depth, name)

    def eval_assign(self, node):
        value = self.evaluate(node.value)
        name = node.name.lexeme
        if node.depth is None:
            self.globals.assign_global(name, value)
        else:
            self.environment.assign_at(node.depth, name, value)
        return value

    def eval_unary(self, node):
        right = self.evaluate(node.right)
        operator = node.operator

        if operator.type == tok.MINUS:
            if not isinstance(right, Number):
                raise runtime_error(ErrorKind.TYPE_MISMATCH, operator, "Operand must be a number.")
            return Number(-right.value)
        if operator.type == tok.BANG:
            return native_bool(not is_truthy(right))
        raise runtime_error(ErrorKind.TYPE_MISMATCH, operator, f"Unknown operator: {operator.lexeme}")

    def eval_binary(self, node):
        left = self.evaluate(node.left)
        with self.temp_roots(left):
            right = self.evaluate(node.right)

        operator = node.operator
        op = operator.type
        debug_log(
            "  Binary", f"{left.inspect()} {operator.lexeme} {right.inspect()}",
            level="verbose", settings=self.settings,
        )

        if op == tok.EQ:
            return native_bool(values_equal(left, right))
        if op == tok.NOT_EQ:
            return native_bool(not values_equal(left, right))

        if op == tok.PLUS:
            if isinstance(left, Number) and isinstance(right, Number):
                return Number(left.value + right.value)
            if isinstance(left, String) and isinstance(right, String):
                return String(left.value + right.value)
            raise runtime_error(
                ErrorKind.TYPE_MISMATCH, operator, "Operands must be two numbers or two strings."
            )

        if not (isinstance(left, Number) and isinstance(right, Number)):
            raise runtime_error(ErrorKind.TYPE_MISMATCH, operator, "Operands must be numbers.")

        if op == tok.MINUS:
            return Number(left.value - right.value)
        if op == tok.STAR:
            return Number(left.value * right.value)
        if op == tok.SLASH:
            if right.value == 0:
                raise runtime_error(ErrorKind.DIVIDE_BY_ZERO, operator, "Division by zero.")
            return Number(left.value / right.value)
        if op in _COMPARISONS:
            return native_bool(_COMPARISONS[op](left.value, right.value))

        raise runtime_error(ErrorKind.TYPE_MISMATCH, operator, f"Unknown operator: {operator.lexeme}")

    def eval_logical(self, node):
        left = self.evaluate(node.left)
        if node.operator.type == tok.OR:
            if is_truthy(left):
                return left
        elif not is_truthy(left):
            return left
        return self.evaluate(node.right)

    # ---- properties ---------------------------------------------------------------

    def eval_get(self, node):
        obj = self.evaluate(node.object)
        if not isinstance(obj, LoxInstance):
            raise runtime_error(ErrorKind.TYPE_MISMATCH, node.name, "Only instances have properties.")
        return obj.get(node.name.lexeme)

    def eval_set(self, node):
        obj = self.evaluate(node.object)
        if not isinstance(obj, LoxInstance):
            raise runtime_error(ErrorKind.TYPE_MISMATCH, node.name, "Only instances have fields.")
        with self.temp_roots(obj):
            value = self.evaluate(node.value)
        obj.set(node.name.lexeme, value)
        return value

    def eval_this(self, node):
        return self.environment.get_at(node.depth, "this")

    def eval_super(self, node):
        superclass = self.environment.get_at(node.depth, "super")
        # "this" lives in the scope just inside the one holding "super"
        instance = self.environment.get_at(node.depth - 1, "this")
        if not isinstance(superclass, LoxClass):
            raise runtime_error(
                ErrorKind.INVALID_SUPERCLASS, node.keyword, "Superclass must be a class."
            )

        method = superclass.find_method(node.method.lexeme)
        if method is None:
            raise runtime_error(
                ErrorKind.UNDEFINED_PROPERTY, node.method,
                f"Undefined property '{node.method.lexeme}'.",
            )
        return BoundMethod(method, instance)
