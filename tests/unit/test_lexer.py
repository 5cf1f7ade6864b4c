"""Lexer tests: token kinds, literals, positions and error recovery."""

from treelox.lexer import Lexer
from treelox.lox_token import (
    AND, BANG, CLASS, CONTINUE, EOF, EQ, GTE, IDENT, LPAREN, NOT_EQ, NUMBER,
    RPAREN, SEMICOLON, SLASH, STRING, VAR, ASSIGN, BREAK
)


def kinds(source):
	return [t.type for t in Lexer(source).tokenize()]


def test_keywords_and_identifiers():
	assert kinds("var class and breaker break continue") == [
		VAR, CLASS, AND, IDENT, BREAK, CONTINUE, EOF
	]


def test_one_and_two_character_operators():
	assert kinds("! != = == >= / ( ) ;") == [
		BANG, NOT_EQ, ASSIGN, EQ, GTE, SLASH, LPAREN, RPAREN, SEMICOLON, EOF
	]


def test_number_literal_is_float():
	token = Lexer("12.5").next_token()
	assert token.type == NUMBER
	assert token.literal == 12.5
	assert token.lexeme == "12.5"


def test_trailing_dot_is_not_part_of_number():
	tokens = Lexer("3.").tokenize()
	assert tokens[0].literal == 3.0
	assert tokens[1].lexeme == "."


def test_string_literal_keeps_raw_text():
	token = Lexer('"hi there"').next_token()
	assert token.type == STRING
	assert token.literal == "hi there"
	assert token.lexeme == '"hi there"'


def test_comments_are_skipped():
	assert kinds("// nothing here\nvar x; // trailing") == [VAR, IDENT, SEMICOLON, EOF]


def test_positions_track_lines_and_columns():
	tokens = Lexer("var a;\n  print a;").tokenize()
	assert (tokens[0].line, tokens[0].column) == (1, 1)
	assert (tokens[1].line, tokens[1].column) == (1, 5)
	assert (tokens[3].line, tokens[3].column) == (2, 3)


def test_multiline_string_advances_line():
	tokens = Lexer('"a\nb" x').tokenize()
	assert tokens[0].literal == "a\nb"
	assert tokens[1].line == 2


def test_unexpected_character_is_reported_and_skipped():
	lexer = Lexer("var @ x;")
	assert [t.type for t in lexer.tokenize()] == [VAR, IDENT, SEMICOLON, EOF]
	assert len(lexer.errors) == 1
	assert lexer.errors[0].message == "Unexpected character '@'."
	assert lexer.errors[0].column == 5


def test_repeated_errors_leave_no_state_on_the_reporter():
	from treelox.error_reporter import get_error_reporter

	for _ in range(50):
		Lexer("var @ x;", "<repl>").tokenize()
	reporter = get_error_reporter()
	assert set(vars(reporter)) == {"sources"}
	assert list(reporter.sources) == ["<repl>"]


def test_unterminated_string():
	lexer = Lexer('print "oops')
	lexer.tokenize()
	assert [e.message for e in lexer.errors] == ["Unterminated string."]
	assert lexer.errors[0].line == 1
