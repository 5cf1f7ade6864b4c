# src/treelox/lexer.py
from .lox_token import *
from .error_reporter import get_error_reporter
from .errors import LoxSyntaxError

_SINGLE_CHAR_TOKENS = {
    "(": LPAREN,
    ")": RPAREN,
    "{": LBRACE,
    "}": RBRACE,
    ",": COMMA,
    ".": DOT,
    "-": MINUS,
    "+": PLUS,
    ";": SEMICOLON,
    "*": STAR,
}

# char -> (type when followed by '=', type otherwise)
_EQUALS_PAIRS = {
    "!": (NOT_EQ, BANG),
    "=": (EQ, ASSIGN),
    "<": (LTE, LT),
    ">": (GTE, GT),
}


class Lexer:
    def __init__(self, source_code, filename="<stdin>"):
        self.input = source_code
        self.position = 0
        self.read_position = 0
        self.ch = ""
        self.line = 1
        self.column = 0
        self.filename = filename
        self.errors = []

        self.error_reporter = get_error_reporter()
        self.error_reporter.register_source(filename, source_code)

        self.read_char()

    def read_char(self):
        if self.ch == "\n":
            self.line += 1
            self.column = 0

        if self.read_position >= len(self.input):
            self.ch = ""
        else:
            self.ch = self.input[self.read_position]

        self.column += 1
        self.position = self.read_position
        self.read_position += 1

    def peek_char(self):
        if self.read_position >= len(self.input):
            return ""
        return self.input[self.read_position]

    def next_token(self):
        self.skip_whitespace_and_comments()

        line, column = self.line, self.column

        if self.ch == "":
            return Token(EOF, "", None, line, column)

        if self.ch in _EQUALS_PAIRS:
            with_eq, without = _EQUALS_PAIRS[self.ch]
            if self.peek_char() == "=":
                literal = self.ch
                self.read_char()
                tok = Token(with_eq, literal + self.ch, None, line, column)
            else:
                tok = Token(without, self.ch, None, line, column)
        elif self.ch == "/":
            tok = Token(SLASH, self.ch, None, line, column)
        elif self.ch in _SINGLE_CHAR_TOKENS:
            tok = Token(_SINGLE_CHAR_TOKENS[self.ch], self.ch, None, line, column)
        elif self.ch == '"':
            value = self.read_string()
            if value is None:
                # unterminated: read_string stopped at end of input
                return Token(EOF, "", None, self.line, self.column)
            return Token(STRING, f'"{value}"', value, line, column)
        elif self.is_digit(self.ch):
            literal = self.read_number()
            return Token(NUMBER, literal, float(literal), line, column)
        elif self.is_letter(self.ch):
            literal = self.read_identifier()
            return Token(self.lookup_ident(literal), literal, None, line, column)
        else:
            self.error(f"Unexpected character '{self.ch}'.", line, column)
            self.read_char()
            return self.next_token()

        self.read_char()
        return tok

    def tokenize(self):
        """Scan the whole input, EOF token included."""
        tokens = []
        while True:
            tok = self.next_token()
            tokens.append(tok)
            if tok.type == EOF:
                return tokens

    def error(self, message, line, column):
        error = self.error_reporter.report_error(
            LoxSyntaxError,
            message,
            line=line,
            column=column,
            filename=self.filename,
        )
        self.errors.append(error)

    def skip_whitespace_and_comments(self):
        while True:
            while self.ch in (" ", "\t", "\r", "\n"):
                self.read_char()
            if self.ch == "/" and self.peek_char() == "/":
                while self.ch != "\n" and self.ch != "":
                    self.read_char()
                continue
            return

    def read_string(self):
        start_line, start_column = self.line, self.column
        # skip the opening quote
        self.read_char()
        start = self.position
        while self.ch != '"':
            if self.ch == "":
                self.error("Unterminated string.", start_line, start_column)
                return None
            self.read_char()
        value = self.input[start:self.position]
        # consume the closing quote
        self.read_char()
        return value

    def read_number(self):
        start = self.position
        while self.is_digit(self.ch):
            self.read_char()
        if self.ch == "." and self.is_digit(self.peek_char()):
            self.read_char()
            while self.is_digit(self.ch):
                self.read_char()
        return self.input[start:self.position]

    def read_identifier(self):
        start = self.position
        while self.is_letter(self.ch) or self.is_digit(self.ch):
            self.read_char()
        return self.input[start:self.position]

    def lookup_ident(self, ident):
        return KEYWORDS.get(ident, IDENT)

    @staticmethod
    def is_letter(ch):
        return ch != "" and (ch.isalpha() or ch == "_") and ch.isascii()

    @staticmethod
    def is_digit(ch):
        return ch != "" and "0" <= ch <= "9"
