import pytest

from prehnite.errors import ParseError
from prehnite.lexer import tokenize
from prehnite.token import Keyword, Token, TokenKind


def kw(keyword):
    return Token(TokenKind.KEYWORD, keyword)


def ident(name):
    return Token(TokenKind.IDENT, name)


def test_keywords_and_identifiers():
    assert tokenize("SELECT id FROM Users") == [
        kw(Keyword.SELECT),
        ident("id"),
        kw(Keyword.FROM),
        ident("Users"),
    ]


def test_keywords_are_case_insensitive():
    assert tokenize("sElEcT") == [kw(Keyword.SELECT)]


def test_operators():
    assert tokenize("<= >= <> != < > = + - * /") == [
        Token(TokenKind.LT_EQ),
        Token(TokenKind.GT_EQ),
        Token(TokenKind.NOT_EQ),
        Token(TokenKind.NOT_EQ),
        Token(TokenKind.LT),
        Token(TokenKind.GT),
        Token(TokenKind.EQ),
        Token(TokenKind.PLUS),
        Token(TokenKind.MINUS),
        Token(TokenKind.STAR),
        Token(TokenKind.SLASH),
    ]


def test_numbers():
    assert tokenize("0 42 3.5") == [
        Token(TokenKind.INTEGER, 0),
        Token(TokenKind.INTEGER, 42),
        Token(TokenKind.REAL, 3.5),
    ]


def test_dotted_identifier():
    assert tokenize("users.id") == [ident("users"), Token(TokenKind.DOT), ident("id")]
    assert tokenize("3.5") == [Token(TokenKind.REAL, 3.5)]


def test_trailing_dot_is_not_part_of_number():
    assert tokenize("3.") == [Token(TokenKind.INTEGER, 3), Token(TokenKind.DOT)]


def test_strings_with_escaped_quote():
    assert tokenize("'it''s fine'") == [Token(TokenKind.STR, "it's fine")]


def test_string_keeps_non_ascii_text():
    assert tokenize("'héllo wörld'") == [Token(TokenKind.STR, "héllo wörld")]


def test_line_comments_are_skipped():
    assert tokenize("a -- this is ignored\n b") == [ident("a"), ident("b")]


def test_comment_at_end_of_input():
    assert tokenize("a -- trailing") == [ident("a")]


def test_punctuation_and_placeholder():
    assert tokenize("(?, ?);") == [
        Token(TokenKind.LPAREN),
        Token(TokenKind.QUESTION),
        Token(TokenKind.COMMA),
        Token(TokenKind.QUESTION),
        Token(TokenKind.RPAREN),
        Token(TokenKind.SEMICOLON),
    ]


def test_identifier_with_underscore_and_digits():
    assert tokenize("_user_2") == [ident("_user_2")]


def test_empty_input():
    assert tokenize("   \n\t") == []


def test_rejects_unterminated_string():
    with pytest.raises(ParseError):
        tokenize("'oops")


def test_rejects_stray_character():
    with pytest.raises(ParseError, match="unexpected character"):
        tokenize("a @ b")


def test_rejects_lone_bang():
    with pytest.raises(ParseError):
        tokenize("a ! b")


def test_integer_range():
    assert tokenize("9223372036854775807") == [
        Token(TokenKind.INTEGER, 9223372036854775807)
    ]
    with pytest.raises(ParseError, match="out of range"):
        tokenize("9223372036854775808")