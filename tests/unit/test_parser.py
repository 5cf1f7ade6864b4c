"""Parser tests: tree shapes, desugaring and error recovery."""

from treelox.lexer import Lexer
from treelox.parser import Parser
from treelox.lox_ast import (
    Assign, Binary, BlockStatement, Call, ClassStatement, ExpressionStatement,
    FunctionStatement, Get, Grouping, Literal, Logical, PrintStatement, Set,
    Super, Unary, VarStatement, Variable, WhileStatement
)


def parse(source):
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    return program, parser.errors


def parse_expr(source):
    program, errors = parse(source + ";")
    assert errors == []
    assert isinstance(program.statements[0], ExpressionStatement)
    return program.statements[0].expression


def test_precedence_of_arithmetic():
    expr = parse_expr("1 + 2 * 3")
    assert isinstance(expr, Binary)
    assert expr.operator.lexeme == "+"
    assert isinstance(expr.right, Binary)
    assert expr.right.operator.lexeme == "*"


def test_comparison_binds_tighter_than_equality():
    expr = parse_expr("1 < 2 == true")
    assert expr.operator.lexeme == "=="
    assert expr.left.operator.lexeme == "<"


def test_logical_operators():
    expr = parse_expr("a or b and c")
    assert isinstance(expr, Logical)
    assert expr.operator.lexeme == "or"
    assert isinstance(expr.right, Logical)
    assert expr.right.operator.lexeme == "and"


def test_unary_and_grouping():
    expr = parse_expr("-(1 + 2)")
    assert isinstance(expr, Unary)
    assert isinstance(expr.right, Grouping)


def test_assignment_is_right_associative():
    expr = parse_expr("a = b = 3")
    assert isinstance(expr, Assign)
    assert expr.name.lexeme == "a"
    assert isinstance(expr.value, Assign)
    assert isinstance(expr.value.value, Literal)


def test_property_assignment_becomes_set():
    expr = parse_expr("a.b.c = 1")
    assert isinstance(expr, Set)
    assert expr.name.lexeme == "c"
    assert isinstance(expr.object, Get)


def test_call_chain():
    expr = parse_expr("f(1)(2, 3).x")
    assert isinstance(expr, Get)
    inner = expr.object
    assert isinstance(inner, Call)
    assert len(inner.arguments) == 2
    assert isinstance(inner.callee, Call)
    assert inner.paren.lexeme == ")"


def test_super_access():
    program, errors = parse("class A < B { m() { return super.m(); } }")
    assert errors == []
    klass = program.statements[0]
    assert isinstance(klass, ClassStatement)
    assert isinstance(klass.superclass, Variable)
    body = klass.methods[0].body
    assert isinstance(body[0].value.callee, Super)


def test_for_loop_desugars_into_block_and_while():
    program, errors = parse("for (var i = 0; i < 3; i = i + 1) print i;")
    assert errors == []
    block = program.statements[0]
    assert isinstance(block, BlockStatement)
    assert isinstance(block.statements[0], VarStatement)
    loop = block.statements[1]
    assert isinstance(loop, WhileStatement)
    assert isinstance(loop.body, PrintStatement)
    assert isinstance(loop.increment.expression, Assign)


def test_for_loop_without_clauses():
    program, errors = parse("for (;;) break;")
    assert errors == []
    loop = program.statements[0]
    assert isinstance(loop, WhileStatement)
    assert loop.condition.value is True
    assert loop.increment is None


def test_function_declaration():
    program, errors = parse("fun add(a, b) { return a + b; }")
    assert errors == []
    fn = program.statements[0]
    assert isinstance(fn, FunctionStatement)
    assert [p.lexeme for p in fn.params] == ["a", "b"]


def test_invalid_assignment_target_is_not_fatal():
    program, errors = parse("1 = 2; print 3;")
    assert [e.message for e in errors] == ["Invalid assignment target."]
    assert isinstance(program.statements[1], PrintStatement)


def test_missing_semicolon_reports_and_recovers():
    program, errors = parse("print 1\nvar x = 2;")
    assert len(errors) == 1
    assert errors[0].message == "Expect ';' after value."
    assert errors[0].where == " at 'var'"
    assert isinstance(program.statements[-1], VarStatement)


def test_error_at_end():
    _, errors = parse("print")
    assert errors[0].message == "Expect expression."
    assert errors[0].where == " at end"


def test_too_many_arguments():
    args = ", ".join(["1"] * 256)
    _, errors = parse(f"f({args});")
    assert any("Can't have more than 255 arguments." == e.message for e in errors)


def test_lexer_errors_are_merged():
    _, errors = parse("var a = 1;\nvar b = #;")
    messages = [e.message for e in errors]
    assert "Unexpected character '#'." in messages
