# src/treelox/resolver.py
"""
Static scope resolution.

Walks a parsed program once, before evaluation, and writes onto every
``Variable``, ``Assign``, ``This`` and ``Super`` node the number of
environment hops between the reference and the scope that declares it.
References left at ``depth = None`` are looked up in the global
environment at runtime.

The scopes pushed here mirror the environments the evaluator creates:
one per block, one per function call (parameters), one holding ``this``
for every method, and one holding ``super`` around the methods of a
subclass.
"""

from enum import Enum

from .lox_ast import *
from .errors import ResolveError


class FunctionType(Enum):
    NONE = "none"
    FUNCTION = "function"
    METHOD = "method"


class ClassType(Enum):
    NONE = "none"
    CLASS = "class"
    SUBCLASS = "subclass"


class Resolver:
    def __init__(self):
        # each scope maps name -> True once its initializer has run
        self.scopes = []
        self.errors = []
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE
        self.loop_depth = 0

    def resolve(self, program):
        """Resolve a Program or a list of statements; returns the error list."""
        statements = program.statements if isinstance(program, Program) else program
        self.resolve_statements(statements)
        return self.errors

    def error(self, token, message):
        self.errors.append(ResolveError(
            message,
            line=token.line,
            column=token.column,
            where=f" at '{token.lexeme}'",
        ))

    # ---- scopes ---------------------------------------------------------------

    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name):
        if not self.scopes:
            return
        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.error(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = False

    def define(self, name):
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True

    def resolve_local(self, node, name):
        for depth, scope in enumerate(reversed(self.scopes)):
            if name in scope:
                node.depth = depth
                return
        # not found: global
        node.depth = None

    # ---- statements -----------------------------------------------------------

    def resolve_statements(self, statements):
        for stmt in statements:
            self.resolve_statement(stmt)

    def resolve_statement(self, stmt):
        if isinstance(stmt, BlockStatement):
            self.begin_scope()
            self.resolve_statements(stmt.statements)
            self.end_scope()
        elif isinstance(stmt, VarStatement):
            self.declare(stmt.name)
            if stmt.initializer is not None:
                self.resolve_expression(stmt.initializer)
            self.define(stmt.name)
        elif isinstance(stmt, FunctionStatement):
            # defined before the body so the function can recurse
            self.declare(stmt.name)
            self.define(stmt.name)
            self.resolve_function(stmt, FunctionType.FUNCTION)
        elif isinstance(stmt, ClassStatement):
            self.resolve_class(stmt)
        elif isinstance(stmt, ExpressionStatement):
            self.resolve_expression(stmt.expression)
        elif isinstance(stmt, PrintStatement):
            self.resolve_expression(stmt.expression)
        elif isinstance(stmt, IfStatement):
            self.resolve_expression(stmt.condition)
            self.resolve_statement(stmt.then_branch)
            if stmt.else_branch is not None:
                self.resolve_statement(stmt.else_branch)
        elif isinstance(stmt, WhileStatement):
            self.resolve_expression(stmt.condition)
            self.loop_depth += 1
            self.resolve_statement(stmt.body)
            if stmt.increment is not None:
                self.resolve_statement(stmt.increment)
            self.loop_depth -= 1
        elif isinstance(stmt, ReturnStatement):
            if self.current_function is FunctionType.NONE:
                self.error(stmt.keyword, "Can't return from top-level code.")
            if stmt.value is not None:
                self.resolve_expression(stmt.value)
        elif isinstance(stmt, (BreakStatement, ContinueStatement)):
            if self.loop_depth == 0:
                self.error(stmt.token, f"Can't use '{stmt.token.lexeme}' outside of a loop.")
        else:
            raise TypeError(f"Unknown statement node: {type(stmt).__name__}")

    def resolve_function(self, function, function_type):
        enclosing_function = self.current_function
        enclosing_loop_depth = self.loop_depth
        self.current_function = function_type
        self.loop_depth = 0

        self.begin_scope()
        for param in function.params:
            self.declare(param)
            self.define(param)
        self.resolve_statements(function.body)
        self.end_scope()

        self.current_function = enclosing_function
        self.loop_depth = enclosing_loop_depth

    def resolve_class(self, stmt):
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self.declare(stmt.name)
        self.define(stmt.name)

        if stmt.superclass is not None:
            if stmt.superclass.name.lexeme == stmt.name.lexeme:
                self.error(stmt.superclass.name, "A class can't inherit from itself.")
            self.current_class = ClassType.SUBCLASS
            self.resolve_expression(stmt.superclass)

            self.begin_scope()
            self.scopes[-1]["super"] = True

        self.begin_scope()
        self.scopes[-1]["this"] = True
        for method in stmt.methods:
            self.resolve_function(method, FunctionType.METHOD)
        self.end_scope()

        if stmt.superclass is not None:
            self.end_scope()

        self.current_class = enclosing_class

    # ---- expressions ----------------------------------------------------------

    def resolve_expression(self, expr):
        if isinstance(expr, Variable):
            if self.scopes and self.scopes[-1].get(expr.name.lexeme) is False:
                self.error(expr.name, "Can't read local variable in its own initializer.")
            self.resolve_local(expr, expr.name.lexeme)
        elif isinstance(expr, Assign):
            self.resolve_expression(expr.value)
            self.resolve_local(expr, expr.name.lexeme)
        elif isinstance(expr, (Binary, Logical)):
            self.resolve_expression(expr.left)
            self.resolve_expression(expr.right)
        elif isinstance(expr, Unary):
            self.resolve_expression(expr.right)
        elif isinstance(expr, Grouping):
            self.resolve_expression(expr.expression)
        elif isinstance(expr, Call):
            self.resolve_expression(expr.callee)
            for argument in expr.arguments:
                self.resolve_expression(argument)
        elif isinstance(expr, Get):
            self.resolve_expression(expr.object)
        elif isinstance(expr, Set):
            self.resolve_expression(expr.value)
            self.resolve_expression(expr.object)
        elif isinstance(expr, This):
            if self.current_class is ClassType.NONE:
                self.error(expr.keyword, "Can't use 'this' outside of a class.")
                return
            self.resolve_local(expr, "this")
        elif isinstance(expr, Super):
            if self.current_class is ClassType.NONE:
                self.error(expr.keyword, "Can't use 'super' outside of a class.")
            elif self.current_class is not ClassType.SUBCLASS:
                self.error(expr.keyword, "Can't use 'super' in a class with no superclass.")
            self.resolve_local(expr, "super")
        elif isinstance(expr, Literal):
            return
        else:
            raise TypeError(f"Unknown expression node: {type(expr).__name__}")
