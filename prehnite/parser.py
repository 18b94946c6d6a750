"""Statement-level SQL parsing: token stream into a statement tree.

Expressions and SELECT queries are handled by
:class:`~prehnite.expressions.ExpressionParser`. :class:`Parser` adds every
other statement kind. Subqueries go back through :meth:`Parser.statement`.
"""

from __future__ import annotations

from typing import List, Optional

from .ast import (
    Analyze,
    Begin,
    ColumnConstraint,
    ColumnDef,
    Commit,
    CreateIndex,
    CreateTable,
    Delete,
    DropIndex,
    DropTable,
    Explain,
    Expr,
    Insert,
    NotNull,
    PrimaryKey,
    References,
    ReferentialAction,
    Rollback,
    Statement,
    TypeName,
    Unique,
    Update,
    Vacuum,
)
from .errors import ParseError
from .expressions import ExpressionParser
from .lexer import tokenize
from .token import Keyword, Token, TokenKind

_TYPE_NAMES = {
    Keyword.INT: TypeName.INT,
    Keyword.INTEGER: TypeName.INT,
    Keyword.TEXT: TypeName.TEXT,
    Keyword.REAL: TypeName.REAL,
    Keyword.FLOAT: TypeName.REAL,
    Keyword.BOOL: TypeName.BOOL,
    Keyword.BOOLEAN: TypeName.BOOL,
}


def _describe(token: Optional[Token]) -> str:
    return "end of input" if token is None else f"'{token}'"


class Parser(ExpressionParser):
    """A recursive-descent parser for every kind of SQL statement."""

    def statement(self) -> Statement:
        """Parse one statement of any kind."""
        token = self._peek()
        if token is None:
            raise ParseError("empty statement")
        if token.kind is not TokenKind.KEYWORD:
            raise ParseError(
                f"expected the start of a statement, found {_describe(token)}"
            )
        keyword = token.value
        if keyword is Keyword.SELECT:
            return self._select()
        if keyword is Keyword.INSERT:
            return self._insert()
        if keyword is Keyword.CREATE:
            return self._create()
        if keyword is Keyword.DROP:
            return self._drop()
        if keyword is Keyword.UPDATE:
            return self._update()
        if keyword is Keyword.DELETE:
            return self._delete()
        if keyword is Keyword.ANALYZE:
            self._pos += 1
            return Analyze(self._expect_name())
        if keyword is Keyword.EXPLAIN:
            return self._explain()
        simple = {
            Keyword.VACUUM: Vacuum,
            Keyword.BEGIN: Begin,
            Keyword.COMMIT: Commit,
            Keyword.ROLLBACK: Rollback,
        }.get(keyword)  # type: ignore[call-overload]
        if simple is not None:
            self._pos += 1
            return simple()
        raise ParseError(f"expected the start of a statement, found {_describe(token)}")

    def _finish(self) -> None:
        """Allow one trailing ``;`` and reject anything after it."""
        self._accept(TokenKind.SEMICOLON)
        if not self.at_end():
            raise ParseError(
                f"unexpected input after statement: {_describe(self._peek())}"
            )

    # --- EXPLAIN --------------------------------------------------------------

    def _explain(self) -> Explain:
        self._expect_keyword(Keyword.EXPLAIN)
        analyze = self._accept_keyword(Keyword.ANALYZE)
        if not self._at_keyword(Keyword.SELECT):
            if analyze:
                raise ParseError("EXPLAIN ANALYZE must be followed by a SELECT")
            raise ParseError("EXPLAIN must be followed by a SELECT")
        return Explain(self.statement(), analyze)

    # --- DDL ------------------------------------------------------------------

    def _create(self) -> Statement:
        self._expect_keyword(Keyword.CREATE)
        if self._at_keyword(Keyword.TABLE):
            return self._create_table()
        if self._at_keyword(Keyword.INDEX):
            return self._create_index()
        raise ParseError(
            f"expected TABLE or INDEX after CREATE, found {_describe(self._peek())}"
        )

    def _create_table(self) -> CreateTable:
        self._expect_keyword(Keyword.TABLE)
        name = self._expect_name()
        self._expect(TokenKind.LPAREN)
        columns: List[ColumnDef] = []
        while True:
            column = self._expect_name()
            ty = self._type_name()
            columns.append(ColumnDef(column, ty, self._column_constraints()))
            if not self._list_continues("column list"):
                return CreateTable(name, columns)

    def _create_index(self) -> CreateIndex:
        self._expect_keyword(Keyword.INDEX)
        name = self._expect_name()
        self._expect_keyword(Keyword.ON)
        table = self._expect_name()
        self._expect(TokenKind.LPAREN)
        return CreateIndex(name, table, self._name_list())

    def _drop(self) -> Statement:
        self._expect_keyword(Keyword.DROP)
        if self._accept_keyword(Keyword.TABLE):
            return DropTable(self._expect_name())
        if self._accept_keyword(Keyword.INDEX):
            return DropIndex(self._expect_name())
        raise ParseError(
            f"expected TABLE or INDEX after DROP, found {_describe(self._peek())}"
        )

    def _type_name(self) -> TypeName:
        token = self._advance()
        if token is not None and token.kind is TokenKind.KEYWORD:
            ty = _TYPE_NAMES.get(token.value)  # type: ignore[arg-type]
            if ty is not None:
                return ty
        raise ParseError(
            f"expected a column type (INT, TEXT, REAL, BOOL), found {_describe(token)}"
        )

    def _column_constraints(self) -> List[ColumnConstraint]:
        constraints: List[ColumnConstraint] = []
        while True:
            if self._accept_keyword(Keyword.PRIMARY):
                self._expect_keyword(Keyword.KEY)
                constraints.append(PrimaryKey())
            elif self._accept_keyword(Keyword.NOT):
                self._expect_keyword(Keyword.NULL)
                constraints.append(NotNull())
            elif self._accept_keyword(Keyword.UNIQUE):
                constraints.append(Unique())
            elif self._accept_keyword(Keyword.REFERENCES):
                table = self._expect_name()
                self._expect(TokenKind.LPAREN)
                column = self._expect_name()
                self._expect(TokenKind.RPAREN)
                constraints.append(References(table, column, self._on_delete()))
            else:
                return constraints

    def _on_delete(self) -> ReferentialAction:
        if not self._accept_keyword(Keyword.ON):
            return ReferentialAction.RESTRICT
        self._expect_keyword(Keyword.DELETE)
        if self._accept_keyword(Keyword.CASCADE):
            return ReferentialAction.CASCADE
        if self._accept_keyword(Keyword.SET):
            self._expect_keyword(Keyword.NULL)
            return ReferentialAction.SET_NULL
        if self._accept_keyword(Keyword.RESTRICT):
            return ReferentialAction.RESTRICT
        if self._accept_keyword(Keyword.NO):
            self._expect_keyword(Keyword.ACTION)
            return ReferentialAction.RESTRICT
        raise ParseError(
            "expected CASCADE / SET NULL / RESTRICT / NO ACTION after ON DELETE, "
            f"found {_describe(self._peek())}"
        )

    # --- DML ------------------------------------------------------------------

    def _insert(self) -> Insert:
        self._expect_keyword(Keyword.INSERT)
        self._expect_keyword(Keyword.INTO)
        table = self._expect_name()
        columns = self._name_list() if self._accept(TokenKind.LPAREN) else None
        self._expect_keyword(Keyword.VALUES)
        rows: List[List[Expr]] = []
        while True:
            self._expect(TokenKind.LPAREN)
            row: List[Expr] = []
            while True:
                row.append(self.expr())
                if not self._list_continues("value list"):
                    break
            rows.append(row)
            if not self._accept(TokenKind.COMMA):
                return Insert(table, columns, rows)

    def _update(self) -> Update:
        self._expect_keyword(Keyword.UPDATE)
        table = self._expect_name()
        self._expect_keyword(Keyword.SET)
        assignments = []
        while True:
            column = self._expect_name()
            self._expect(TokenKind.EQ)
            assignments.append((column, self.expr()))
            if not self._accept(TokenKind.COMMA):
                break
        return Update(table, assignments, self._optional_where())

    def _delete(self) -> Delete:
        self._expect_keyword(Keyword.DELETE)
        self._expect_keyword(Keyword.FROM)
        table = self._expect_name()
        return Delete(table, self._optional_where())

    # --- helpers --------------------------------------------------------------

    def _name_list(self) -> List[str]:
        """Names separated by commas, up to and including the closing ``)``."""
        names: List[str] = []
        while True:
            names.append(self._expect_name())
            if not self._list_continues("column list"):
                return names

    def _list_continues(self, what: str) -> bool:
        """Consume ``,`` (True) or ``)`` (False); anything else is an error."""
        token = self._advance()
        if token is not None and token.kind is TokenKind.COMMA:
            return True
        if token is not None and token.kind is TokenKind.RPAREN:
            return False
        raise ParseError(f"expected ',' or ')' in {what}, found {_describe(token)}")


def parse(text: str) -> Statement:
    """Parse exactly one SQL statement; a single trailing ``;`` is allowed."""
    parser = Parser(tokenize(text))
    statement = parser.statement()
    parser._finish()
    return statement