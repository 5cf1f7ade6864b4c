# src/treelox/lox_token.py

# Single-character tokens
LPAREN = "LPAREN"
RPAREN = "RPAREN"
LBRACE = "LBRACE"
RBRACE = "RBRACE"
COMMA = "COMMA"
DOT = "DOT"
MINUS = "MINUS"
PLUS = "PLUS"
SEMICOLON = "SEMICOLON"
SLASH = "SLASH"
STAR = "STAR"

# One or two character tokens
BANG = "BANG"
NOT_EQ = "NOT_EQ"
ASSIGN = "ASSIGN"
EQ = "EQ"
GT = "GT"
GTE = "GTE"
LT = "LT"
LTE = "LTE"

# Literals
IDENT = "IDENT"
STRING = "STRING"
NUMBER = "NUMBER"

# Keywords
AND = "AND"
CLASS = "CLASS"
ELSE = "ELSE"
FALSE = "FALSE"
FUN = "FUN"
FOR = "FOR"
IF = "IF"
NIL = "NIL"
OR = "OR"
PRINT = "PRINT"
RETURN = "RETURN"
SUPER = "SUPER"
THIS = "THIS"
TRUE = "TRUE"
VAR = "VAR"
WHILE = "WHILE"
BREAK = "BREAK"
CONTINUE = "CONTINUE"

EOF = "EOF"

KEYWORDS = {
    "and": AND,
    "class": CLASS,
    "else": ELSE,
    "false": FALSE,
    "for": FOR,
    "fun": FUN,
    "if": IF,
    "nil": NIL,
    "or": OR,
    "print": PRINT,
    "return": RETURN,
    "super": SUPER,
    "this": THIS,
    "true": TRUE,
    "var": VAR,
    "while": WHILE,
    "break": BREAK,
    "continue": CONTINUE,
}


class Token:
    def __init__(self, type, lexeme, literal=None, line=1, column=1):
        self.type = type
        self.lexeme = lexeme
        self.literal = literal
        self.line = line
        self.column = column

    def __repr__(self):
        return f"Token({self.type}, {self.lexeme!r}, line={self.line}, column={self.column})"

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return (self.type, self.lexeme, self.literal, self.line) == (
            other.type, other.lexeme, other.literal, other.line
        )

    def __hash__(self):
        return hash((self.type, self.lexeme, self.line, self.column))
