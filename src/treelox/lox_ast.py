# src/treelox/lox_ast.py
#
# Closed set of node kinds. Every node keeps the token it was built from so
# runtime errors can point at a line and column. Variable-reference nodes
# (Variable, Assign, This, Super) also carry ``depth``: the lexical distance
# written by the resolver, or None for a global lookup.

# Base classes
class Node:
    def __repr__(self):
        return f"{self.__class__.__name__}()"

    def __str__(self):
        return self.__repr__()

class Statement(Node): pass
class Expression(Node): pass


class Program(Node):
    def __init__(self, statements=None):
        self.statements = statements if statements is not None else []

    def __repr__(self):
        return f"Program(statements={len(self.statements)})"


# Expression Nodes
class Literal(Expression):
    def __init__(self, token, value):
        self.token = token
        self.value = value

    def __repr__(self):
        return f"Literal({self.value!r})"

class Grouping(Expression):
    def __init__(self, token, expression):
        self.token = token
        self.expression = expression

    def __repr__(self):
        return f"Grouping({self.expression})"

class Variable(Expression):
    def __init__(self, name):
        self.token = name
        self.name = name
        self.depth = None

    def __repr__(self):
        return f"Variable({self.name.lexeme}, depth={self.depth})"

class Assign(Expression):
    def __init__(self, name, value):
        self.token = name
        self.name = name
        self.value = value
        self.depth = None

    def __repr__(self):
        return f"Assign({self.name.lexeme}, value={self.value}, depth={self.depth})"

class Unary(Expression):
    def __init__(self, operator, right):
        self.token = operator
        self.operator = operator
        self.right = right

    def __repr__(self):
        return f"Unary({self.operator.lexeme}, {self.right})"

class Binary(Expression):
    def __init__(self, left, operator, right):
        self.token = operator
        self.left = left
        self.operator = operator
        self.right = right

    def __repr__(self):
        return f"Binary({self.left} {self.operator.lexeme} {self.right})"

class Logical(Expression):
    """``and`` / ``or``; kept apart from Binary because it short-circuits."""
    def __init__(self, left, operator, right):
        self.token = operator
        self.left = left
        self.operator = operator
        self.right = right

    def __repr__(self):
        return f"Logical({self.left} {self.operator.lexeme} {self.right})"

class Call(Expression):
    def __init__(self, callee, paren, arguments):
        self.token = paren
        self.callee = callee
        self.paren = paren
        self.arguments = arguments

    def __repr__(self):
        return f"Call({self.callee}, arguments={len(self.arguments)})"

class Get(Expression):
    def __init__(self, obj, name):
        self.token = name
        self.object = obj
        self.name = name

    def __repr__(self):
        return f"Get({self.object}.{self.name.lexeme})"

class Set(Expression):
    def __init__(self, obj, name, value):
        self.token = name
        self.object = obj
        self.name = name
        self.value = value

    def __repr__(self):
        return f"Set({self.object}.{self.name.lexeme}, value={self.value})"

class This(Expression):
    def __init__(self, keyword):
        self.token = keyword
        self.keyword = keyword
        self.depth = None

    def __repr__(self):
        return f"This(depth={self.depth})"

class Super(Expression):
    def __init__(self, keyword, method):
        self.token = keyword
        self.keyword = keyword
        self.method = method
        self.depth = None

    def __repr__(self):
        return f"Super({self.method.lexeme}, depth={self.depth})"


# Statement Nodes
class ExpressionStatement(Statement):
    def __init__(self, expression):
        self.token = getattr(expression, "token", None)
        self.expression = expression

    def __repr__(self):
        return f"ExpressionStatement(expression={self.expression})"

class PrintStatement(Statement):
    def __init__(self, keyword, expression):
        self.token = keyword
        self.expression = expression

    def __repr__(self):
        return f"PrintStatement(expression={self.expression})"

class VarStatement(Statement):
    def __init__(self, name, initializer=None):
        self.token = name
        self.name = name
        self.initializer = initializer

    def __repr__(self):
        return f"VarStatement(name={self.name.lexeme}, initializer={self.initializer})"

class BlockStatement(Statement):
    def __init__(self, token, statements):
        self.token = token
        self.statements = statements

    def __repr__(self):
        return f"BlockStatement(statements={len(self.statements)})"

class IfStatement(Statement):
    def __init__(self, token, condition, then_branch, else_branch=None):
        self.token = token
        self.condition = condition
        self.then_branch = then_branch
        self.else_branch = else_branch

    def __repr__(self):
        return f"IfStatement(condition={self.condition}, has_else={self.else_branch is not None})"

class WhileStatement(Statement):
    """``increment`` is only set for loops desugared from ``for``; it runs
    after the body and after a ``continue``."""
    def __init__(self, token, condition, body, increment=None):
        self.token = token
        self.condition = condition
        self.body = body
        self.increment = increment

    def __repr__(self):
        return f"WhileStatement(condition={self.condition})"

class BreakStatement(Statement):
    def __init__(self, keyword):
        self.token = keyword

class ContinueStatement(Statement):
    def __init__(self, keyword):
        self.token = keyword

class FunctionStatement(Statement):
    def __init__(self, name, params, body):
        self.token = name
        self.name = name
        self.params = params
        # shared by every closure made from this declaration
        self.body = body

    def __repr__(self):
        params = ", ".join(p.lexeme for p in self.params)
        return f"FunctionStatement({self.name.lexeme}({params}))"

class ReturnStatement(Statement):
    def __init__(self, keyword, value=None):
        self.token = keyword
        self.keyword = keyword
        self.value = value

    def __repr__(self):
        return f"ReturnStatement(value={self.value})"

class ClassStatement(Statement):
    def __init__(self, name, superclass, methods):
        self.token = name
        self.name = name
        self.superclass = superclass  # Variable or None
        self.methods = methods        # list of FunctionStatement

    def __repr__(self):
        base = f" < {self.superclass.name.lexeme}" if self.superclass else ""
        return f"ClassStatement({self.name.lexeme}{base}, methods={len(self.methods)})"
