"""Lexical tokens: reserved words and the token stream's element type."""

from __future__ import annotations

import enum
import string
from dataclasses import dataclass
from typing import Optional, Union

_ASCII_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)


class Keyword(enum.Enum):
    """A reserved word, valued by its upper-case spelling."""

    SELECT = "SELECT"
    FROM = "FROM"
    WHERE = "WHERE"
    INSERT = "INSERT"
    INTO = "INTO"
    VALUES = "VALUES"
    CREATE = "CREATE"
    TABLE = "TABLE"
    DROP = "DROP"
    UPDATE = "UPDATE"
    SET = "SET"
    DELETE = "DELETE"
    INDEX = "INDEX"
    ON = "ON"
    JOIN = "JOIN"
    INNER = "INNER"
    LEFT = "LEFT"
    CROSS = "CROSS"
    AS = "AS"
    ORDER = "ORDER"
    BY = "BY"
    ASC = "ASC"
    DESC = "DESC"
    GROUP = "GROUP"
    HAVING = "HAVING"
    VACUUM = "VACUUM"
    EXPLAIN = "EXPLAIN"
    ANALYZE = "ANALYZE"
    PRIMARY = "PRIMARY"
    KEY = "KEY"
    UNIQUE = "UNIQUE"
    REFERENCES = "REFERENCES"
    CASCADE = "CASCADE"
    NO = "NO"
    ACTION = "ACTION"
    RESTRICT = "RESTRICT"
    BEGIN = "BEGIN"
    COMMIT = "COMMIT"
    ROLLBACK = "ROLLBACK"
    LIMIT = "LIMIT"
    OFFSET = "OFFSET"
    AND = "AND"
    OR = "OR"
    NOT = "NOT"
    IS = "IS"
    IN = "IN"
    EXISTS = "EXISTS"
    NULL = "NULL"
    TRUE = "TRUE"
    FALSE = "FALSE"
    INT = "INT"
    INTEGER = "INTEGER"
    TEXT = "TEXT"
    REAL = "REAL"
    FLOAT = "FLOAT"
    BOOL = "BOOL"
    BOOLEAN = "BOOLEAN"

    @classmethod
    def from_word(cls, word: str) -> Optional["Keyword"]:
        """Map a word to its keyword (ASCII case-insensitively), or None."""
        try:
            return cls(word.translate(_ASCII_UPPER))
        except ValueError:
            return None


class TokenKind(enum.Enum):
    """The category of a lexical token."""

    INTEGER = "integer"
    REAL = "real"
    STR = "string"
    IDENT = "identifier"
    KEYWORD = "keyword"
    COMMA = ","
    DOT = "."
    SEMICOLON = ";"
    LPAREN = "("
    RPAREN = ")"
    STAR = "*"
    PLUS = "+"
    MINUS = "-"
    SLASH = "/"
    EQ = "="
    NOT_EQ = "<>"
    LT = "<"
    LT_EQ = "<="
    GT = ">"
    GT_EQ = ">="
    QUESTION = "?"


TokenValue = Union[int, float, str, Keyword, None]


@dataclass(frozen=True)
class Token:
    """One lexical token.

    ``value`` carries the payload for literals (int, float, str), identifiers
    (the name as written) and keywords (a :class:`Keyword`); it is None for
    punctuation and operators.
    """

    kind: TokenKind
    value: TokenValue = None

    def __str__(self) -> str:
        if self.kind is TokenKind.KEYWORD:
            return self.value.value  # type: ignore[union-attr]
        if self.kind is TokenKind.STR:
            return "'" + str(self.value).replace("'", "''") + "'"
        if self.value is None:
            return self.kind.value
        return str(self.value)