# src/treelox/parser/parser.py
import logging

from ..lox_token import *
from ..lox_ast import *
from ..errors import LoxSyntaxError
from ..config import config as treelox_config

logger = logging.getLogger(__name__)

# Precedence constants
LOWEST, ASSIGN_PREC, LOGIC_OR, LOGIC_AND, EQUALS, LESSGREATER, SUM, PRODUCT, PREFIX, CALL = range(1, 11)

precedences = {
    ASSIGN: ASSIGN_PREC,
    OR: LOGIC_OR,
    AND: LOGIC_AND,
    EQ: EQUALS, NOT_EQ: EQUALS,
    LT: LESSGREATER, GT: LESSGREATER, LTE: LESSGREATER, GTE: LESSGREATER,
    PLUS: SUM, MINUS: SUM,
    SLASH: PRODUCT, STAR: PRODUCT,
    LPAREN: CALL,
    DOT: CALL,
}

MAX_ARGUMENTS = 255

# Tokens that can start a declaration; used to resynchronise after an error.
_STATEMENT_STARTS = {CLASS, FUN, VAR, FOR, IF, WHILE, PRINT, RETURN, BREAK, CONTINUE}


class _ParseAbort(Exception):
    """Unwinds to the nearest declaration after an error was recorded."""


class Parser:
    def __init__(self, lexer, config=None):
        self.lexer = lexer
        self.settings = config or treelox_config
        self.errors = []
        self.cur_token = None
        self.peek_token = None

        self.prefix_parse_fns = {
            IDENT: self.parse_variable,
            NUMBER: self.parse_literal,
            STRING: self.parse_literal,
            TRUE: self.parse_literal,
            FALSE: self.parse_literal,
            NIL: self.parse_literal,
            THIS: self.parse_this,
            SUPER: self.parse_super,
            LPAREN: self.parse_grouped_expression,
            BANG: self.parse_prefix_expression,
            MINUS: self.parse_prefix_expression,
        }
        self.infix_parse_fns = {
            PLUS: self.parse_infix_expression,
            MINUS: self.parse_infix_expression,
            SLASH: self.parse_infix_expression,
            STAR: self.parse_infix_expression,
            EQ: self.parse_infix_expression,
            NOT_EQ: self.parse_infix_expression,
            LT: self.parse_infix_expression,
            GT: self.parse_infix_expression,
            LTE: self.parse_infix_expression,
            GTE: self.parse_infix_expression,
            AND: self.parse_logical_expression,
            OR: self.parse_logical_expression,
            ASSIGN: self.parse_assignment_expression,
            LPAREN: self.parse_call_expression,
            DOT: self.parse_get_expression,
        }
        self.next_token()
        self.next_token()

    def _log(self, message):
        if self.settings.should_log("verbose"):
            logger.debug(message)

    def parse_program(self):
        program = Program()
        while not self.cur_token_is(EOF):
            stmt = self.parse_declaration()
            if stmt is not None:
                program.statements.append(stmt)
            self.next_token()

        # lexer errors come first on the same line
        self.errors = sorted(
            self.lexer.errors + self.errors,
            key=lambda e: (e.line or 0, e.column or 0),
        )
        self._log(f"parsed {len(program.statements)} statements, {len(self.errors)} errors")
        return program

    # === DECLARATIONS ===

    def parse_declaration(self):
        try:
            if self.cur_token_is(CLASS):
                return self.parse_class_declaration()
            if self.cur_token_is(FUN):
                self.expect_peek(IDENT, "Expect function name.")
                return self.parse_function("function")
            if self.cur_token_is(VAR):
                return self.parse_var_declaration()
            return self.parse_statement()
        except _ParseAbort:
            self.synchronize()
            return None

    def parse_class_declaration(self):
        self.expect_peek(IDENT, "Expect class name.")
        name = self.cur_token

        superclass = None
        if self.peek_token_is(LT):
            self.next_token()
            self.expect_peek(IDENT, "Expect superclass name.")
            superclass = Variable(self.cur_token)

        self.expect_peek(LBRACE, "Expect '{' before class body.")

        methods = []
        while not self.peek_token_is(RBRACE) and not self.peek_token_is(EOF):
            self.expect_peek(IDENT, "Expect method name.")
            methods.append(self.parse_function("method"))

        self.expect_peek(RBRACE, "Expect '}' after class body.")
        return ClassStatement(name, superclass, methods)

    def parse_function(self, kind):
        name = self.cur_token
        self.expect_peek(LPAREN, f"Expect '(' after {kind} name.")

        params = []
        if not self.peek_token_is(RPAREN):
            while True:
                if len(params) >= MAX_ARGUMENTS:
                    self.error(self.peek_token, f"Can't have more than {MAX_ARGUMENTS} parameters.")
                self.expect_peek(IDENT, "Expect parameter name.")
                params.append(self.cur_token)
                if not self.peek_token_is(COMMA):
                    break
                self.next_token()

        self.expect_peek(RPAREN, "Expect ')' after parameters.")
        self.expect_peek(LBRACE, f"Expect '{{' before {kind} body.")
        body = self.parse_block()
        return FunctionStatement(name, params, body)

    def parse_var_declaration(self):
        self.expect_peek(IDENT, "Expect variable name.")
        name = self.cur_token

        initializer = None
        if self.peek_token_is(ASSIGN):
            self.next_token()
            self.next_token()
            initializer = self.parse_expression(LOWEST)

        self.expect_peek(SEMICOLON, "Expect ';' after variable declaration.")
        return VarStatement(name, initializer)

    # === STATEMENTS ===

    def parse_statement(self):
        if self.cur_token_is(PRINT):
            return self.parse_print_statement()
        elif self.cur_token_is(RETURN):
            return self.parse_return_statement()
        elif self.cur_token_is(IF):
            return self.parse_if_statement()
        elif self.cur_token_is(WHILE):
            return self.parse_while_statement()
        elif self.cur_token_is(FOR):
            return self.parse_for_statement()
        elif self.cur_token_is(BREAK):
            return self.parse_loop_jump(BreakStatement)
        elif self.cur_token_is(CONTINUE):
            return self.parse_loop_jump(ContinueStatement)
        elif self.cur_token_is(LBRACE):
            token = self.cur_token
            return BlockStatement(token, self.parse_block())
        return self.parse_expression_statement()

    def parse_block(self):
        """Parse declarations up to the matching '}'; cur_token ends on it."""
        statements = []
        self.next_token()
        while not self.cur_token_is(RBRACE) and not self.cur_token_is(EOF):
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
            self.next_token()

        if not self.cur_token_is(RBRACE):
            self.error(self.cur_token, "Expect '}' after block.")
            raise _ParseAbort()
        return statements

    def parse_print_statement(self):
        keyword = self.cur_token
        self.next_token()
        value = self.parse_expression(LOWEST)
        self.expect_peek(SEMICOLON, "Expect ';' after value.")
        return PrintStatement(keyword, value)

    def parse_return_statement(self):
        keyword = self.cur_token
        value = None
        if not self.peek_token_is(SEMICOLON):
            self.next_token()
            value = self.parse_expression(LOWEST)
        self.expect_peek(SEMICOLON, "Expect ';' after return value.")
        return ReturnStatement(keyword, value)

    def parse_loop_jump(self, node_class):
        keyword = self.cur_token
        self.expect_peek(SEMICOLON, f"Expect ';' after '{keyword.lexeme}'.")
        return node_class(keyword)

    def parse_if_statement(self):
        token = self.cur_token
        self.expect_peek(LPAREN, "Expect '(' after 'if'.")
        self.next_token()
        condition = self.parse_expression(LOWEST)
        self.expect_peek(RPAREN, "Expect ')' after if condition.")

        self.next_token()
        then_branch = self.parse_statement()
        else_branch = None
        if self.peek_token_is(ELSE):
            self.next_token()
            self.next_token()
            else_branch = self.parse_statement()
        return IfStatement(token, condition, then_branch, else_branch)

    def parse_while_statement(self):
        token = self.cur_token
        self.expect_peek(LPAREN, "Expect '(' after 'while'.")
        self.next_token()
        condition = self.parse_expression(LOWEST)
        self.expect_peek(RPAREN, "Expect ')' after condition.")
        self.next_token()
        body = self.parse_statement()
        return WhileStatement(token, condition, body)

    def parse_for_statement(self):
        """Desugar ``for (init; cond; incr) body`` into a block holding the
        initializer and a while loop that carries the increment."""
        token = self.cur_token
        self.expect_peek(LPAREN, "Expect '(' after 'for'.")
        self.next_token()

        if self.cur_token_is(SEMICOLON):
            initializer = None
        elif self.cur_token_is(VAR):
            initializer = self.parse_var_declaration()
        else:
            initializer = self.parse_expression_statement()

        if self.peek_token_is(SEMICOLON):
            self.next_token()
            condition = Literal(token, True)
        else:
            self.next_token()
            condition = self.parse_expression(LOWEST)
            self.expect_peek(SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if self.peek_token_is(RPAREN):
            self.next_token()
        else:
            self.next_token()
            increment = ExpressionStatement(self.parse_expression(LOWEST))
            self.expect_peek(RPAREN, "Expect ')' after for clauses.")

        self.next_token()
        body = self.parse_statement()

        loop = WhileStatement(token, condition, body, increment)
        if initializer is None:
            return loop
        return BlockStatement(token, [initializer, loop])

    def parse_expression_statement(self):
        expression = self.parse_expression(LOWEST)
        self.expect_peek(SEMICOLON, "Expect ';' after expression.")
        return ExpressionStatement(expression)

    # === EXPRESSIONS ===

    def parse_expression(self, precedence):
        prefix = self.prefix_parse_fns.get(self.cur_token.type)
        if prefix is None:
            self.error(self.cur_token, "Expect expression.")
            raise _ParseAbort()

        left_exp = prefix()

        while (not self.peek_token_is(SEMICOLON) and
               precedence < self.peek_precedence()):
            infix = self.infix_parse_fns.get(self.peek_token.type)
            if infix is None:
                return left_exp
            self.next_token()
            left_exp = infix(left_exp)

        return left_exp

    def parse_literal(self):
        token = self.cur_token
        if token.type in (NUMBER, STRING):
            return Literal(token, token.literal)
        if token.type == TRUE:
            return Literal(token, True)
        if token.type == FALSE:
            return Literal(token, False)
        return Literal(token, None)

    def parse_variable(self):
        return Variable(self.cur_token)

    def parse_this(self):
        return This(self.cur_token)

    def parse_super(self):
        keyword = self.cur_token
        self.expect_peek(DOT, "Expect '.' after 'super'.")
        self.expect_peek(IDENT, "Expect superclass method name.")
        return Super(keyword, self.cur_token)

    def parse_grouped_expression(self):
        token = self.cur_token
        self.next_token()
        expression = self.parse_expression(LOWEST)
        self.expect_peek(RPAREN, "Expect ')' after expression.")
        return Grouping(token, expression)

    def parse_prefix_expression(self):
        operator = self.cur_token
        self.next_token()
        right = self.parse_expression(PREFIX)
        return Unary(operator, right)

    def parse_infix_expression(self, left):
        operator = self.cur_token
        precedence = self.cur_precedence()
        self.next_token()
        right = self.parse_expression(precedence)
        return Binary(left, operator, right)

    def parse_logical_expression(self, left):
        operator = self.cur_token
        precedence = self.cur_precedence()
        self.next_token()
        right = self.parse_expression(precedence)
        return Logical(left, operator, right)

    def parse_assignment_expression(self, left):
        equals = self.cur_token
        self.next_token()
        # right associative: a = b = c
        value = self.parse_expression(ASSIGN_PREC - 1)

        if isinstance(left, Variable):
            return Assign(left.name, value)
        if isinstance(left, Get):
            return Set(left.object, left.name, value)

        # reported but not fatal, the parser is still in a sane state
        self.error(equals, "Invalid assignment target.")
        return left

    def parse_call_expression(self, callee):
        arguments = []
        if self.peek_token_is(RPAREN):
            self.next_token()
        else:
            self.next_token()
            arguments.append(self.parse_expression(LOWEST))
            while self.peek_token_is(COMMA):
                self.next_token()
                self.next_token()
                if len(arguments) >= MAX_ARGUMENTS:
                    self.error(self.cur_token, f"Can't have more than {MAX_ARGUMENTS} arguments.")
                arguments.append(self.parse_expression(LOWEST))
            self.expect_peek(RPAREN, "Expect ')' after arguments.")
        return Call(callee, self.cur_token, arguments)

    def parse_get_expression(self, obj):
        self.expect_peek(IDENT, "Expect property name after '.'.")
        return Get(obj, self.cur_token)

    # === TOKEN HELPERS ===

    def error(self, token, message):
        where = " at end" if token.type == EOF else f" at '{token.lexeme}'"
        self.errors.append(LoxSyntaxError(message, line=token.line, column=token.column, where=where))

    def synchronize(self):
        """Skip tokens until the next call to next_token() lands on the
        start of a fresh declaration."""
        while not self.cur_token_is(EOF):
            if self.cur_token_is(SEMICOLON):
                return
            if self.peek_token.type in _STATEMENT_STARTS:
                return
            self.next_token()

    def next_token(self):
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def cur_token_is(self, t):
        return self.cur_token.type == t

    def peek_token_is(self, t):
        return self.peek_token.type == t

    def expect_peek(self, t, message):
        if self.peek_token_is(t):
            self.next_token()
            return True
        self.error(self.peek_token, message)
        raise _ParseAbort()

    def peek_precedence(self):
        return precedences.get(self.peek_token.type, LOWEST)

    def cur_precedence(self):
        return precedences.get(self.cur_token.type, LOWEST)
