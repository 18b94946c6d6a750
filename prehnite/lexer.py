"""The SQL lexer: turns source text into a flat list of tokens.

``--`` starts a comment that runs to the end of the line.
"""

from __future__ import annotations

import re
from typing import Iterator, List

from .errors import ParseError
from .token import Keyword, Token, TokenKind

_I64_MAX = 2**63 - 1

_TOKEN_RE = re.compile(
    r"""
      (?P<space>\s+)
    | (?P<comment>--[^\n]*)
    | (?P<string>'(?:[^']|'')*')
    | (?P<number>[0-9]+(?:\.[0-9]+)?)
    | (?P<word>[^\W\d]\w*)
    | (?P<op><=|<>|>=|!=|[,.;()*+\-/=?<>])
    """,
    re.VERBOSE,
)

_OPERATORS = {
    ",": TokenKind.COMMA,
    ".": TokenKind.DOT,
    ";": TokenKind.SEMICOLON,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "*": TokenKind.STAR,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "/": TokenKind.SLASH,
    "=": TokenKind.EQ,
    "?": TokenKind.QUESTION,
    "<": TokenKind.LT,
    "<=": TokenKind.LT_EQ,
    "<>": TokenKind.NOT_EQ,
    "!=": TokenKind.NOT_EQ,
    ">": TokenKind.GT,
    ">=": TokenKind.GT_EQ,
}


def tokenize(text: str) -> List[Token]:
    """Tokenize one chunk of SQL text, raising ParseError on bad input."""
    return list(_scan(text))


def _scan(text: str) -> Iterator[Token]:
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise _error_at(text[pos])
        pos = match.end()
        kind = match.lastgroup
        lexeme = match.group()
        if kind in ("space", "comment"):
            continue
        if kind == "string":
            yield Token(TokenKind.STR, lexeme[1:-1].replace("''", "'"))
        elif kind == "number":
            yield _number(lexeme)
        elif kind == "word":
            keyword = Keyword.from_word(lexeme)
            if keyword is None:
                yield Token(TokenKind.IDENT, lexeme)
            else:
                yield Token(TokenKind.KEYWORD, keyword)
        else:
            yield Token(_OPERATORS[lexeme])


def _number(lexeme: str) -> Token:
    if "." in lexeme:
        return Token(TokenKind.REAL, float(lexeme))
    value = int(lexeme)
    if value > _I64_MAX:
        raise ParseError(f"integer literal {lexeme!r} is out of range")
    return Token(TokenKind.INTEGER, value)


def _error_at(char: str) -> ParseError:
    if char == "'":
        return ParseError("unterminated string literal")
    if char == "!":
        return ParseError("'!' must be part of '!='")
    return ParseError(f"unexpected character {char!r}")