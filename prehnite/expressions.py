"""Recursive-descent parsing of expressions and SELECT queries.

Expression precedence, loosest to tightest::

    OR  <  AND  <  NOT  <  comparisons / IN  <  + -  <  * /  <  unary -  <  primary

``IS [NOT] NULL`` binds as a postfix on a primary. A SELECT is parsed here
too, because expressions may contain subqueries.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .ast import (
    Aggregate,
    AggregateArg,
    AggregateExpr,
    AggregateFunc,
    BinaryOp,
    BoolLit,
    Column,
    ColumnRef,
    Exists,
    Expr,
    FromClause,
    InSubquery,
    IntLit,
    IsNull,
    Join,
    JoinKind,
    NullLit,
    OrderKey,
    Placeholder,
    Projection,
    RealLit,
    ScalarSubquery,
    Select,
    SelectAggregate,
    SelectColumn,
    SelectExpr,
    SelectItem,
    Statement,
    StrLit,
    TableRef,
    Unary,
    UnaryOp,
    Wildcard,
    binary,
)
from .errors import ParseError
from .token import Keyword, Token, TokenKind

_COMPARISONS = {
    TokenKind.EQ: BinaryOp.EQ,
    TokenKind.NOT_EQ: BinaryOp.NOT_EQ,
    TokenKind.LT: BinaryOp.LT,
    TokenKind.LT_EQ: BinaryOp.LT_EQ,
    TokenKind.GT: BinaryOp.GT,
    TokenKind.GT_EQ: BinaryOp.GT_EQ,
}

_ADDITIVE = {TokenKind.PLUS: BinaryOp.ADD, TokenKind.MINUS: BinaryOp.SUB}
_MULTIPLICATIVE = {TokenKind.STAR: BinaryOp.MUL, TokenKind.SLASH: BinaryOp.DIV}

_JOIN_STARTS = {
    Keyword.INNER: JoinKind.INNER,
    Keyword.LEFT: JoinKind.LEFT,
    Keyword.CROSS: JoinKind.CROSS,
}


def _describe(token: Optional[Token]) -> str:
    return "end of input" if token is None else f"'{token}'"


def _aggregate_func(name: str) -> AggregateFunc:
    try:
        return AggregateFunc(name.upper())
    except ValueError:
        raise ParseError(f"unknown function '{name}'") from None


class ExpressionParser:
    """A cursor over a token list that parses expressions and SELECTs."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        self._tokens: List[Token] = list(tokens)
        self._pos = 0
        self._placeholders = 0

    # --- cursor helpers ---------------------------------------------------

    def _peek(self, offset: int = 0) -> Optional[Token]:
        index = self._pos + offset
        return self._tokens[index] if index < len(self._tokens) else None

    def _advance(self) -> Optional[Token]:
        token = self._peek()
        if token is not None:
            self._pos += 1
        return token

    def _at(self, kind: TokenKind) -> bool:
        token = self._peek()
        return token is not None and token.kind is kind

    def _at_keyword(self, keyword: Keyword, offset: int = 0) -> bool:
        token = self._peek(offset)
        return (
            token is not None
            and token.kind is TokenKind.KEYWORD
            and token.value is keyword
        )

    def _accept(self, kind: TokenKind) -> bool:
        if self._at(kind):
            self._pos += 1
            return True
        return False

    def _accept_keyword(self, keyword: Keyword) -> bool:
        if self._at_keyword(keyword):
            self._pos += 1
            return True
        return False

    def _expect(self, kind: TokenKind) -> None:
        if not self._accept(kind):
            raise ParseError(f"expected '{kind.value}', found {_describe(self._peek())}")

    def _expect_keyword(self, keyword: Keyword) -> None:
        if not self._accept_keyword(keyword):
            raise ParseError(
                f"expected keyword {keyword.value}, found {_describe(self._peek())}"
            )

    def _expect_name(self) -> str:
        token = self._advance()
        if token is None or token.kind is not TokenKind.IDENT:
            raise ParseError(f"expected a name, found {_describe(token)}")
        return token.value  # type: ignore[return-value]

    def at_end(self) -> bool:
        """True once every token has been consumed."""
        return self._pos >= len(self._tokens)

    def column_ref(self) -> ColumnRef:
        """Parse a bare ``name`` or a qualified ``table.name``."""
        first = self._expect_name()
        if self._accept(TokenKind.DOT):
            return ColumnRef(self._expect_name(), first)
        return ColumnRef.bare(first)

    # --- statements -------------------------------------------------------

    def statement(self) -> Statement:
        """Parse a statement; only SELECT is understood at this level."""
        token = self._peek()
        if token is None:
            raise ParseError("empty statement")
        if self._at_keyword(Keyword.SELECT):
            return self._select()
        raise ParseError(f"expected a SELECT, found {_describe(token)}")

    def _select(self) -> Select:
        self._expect_keyword(Keyword.SELECT)
        projection = self._projection()
        self._expect_keyword(Keyword.FROM)
        from_ = self._from_clause()
        filter_ = self._optional_where()
        group_by = self._optional_group_by()
        having = self._optional_clause(Keyword.HAVING)
        order_by = self._optional_order_by()
        limit, offset = self._optional_limit()
        return Select(
            from_=from_,
            projection=projection,
            filter=filter_,
            group_by=group_by,
            having=having,
            order_by=order_by,
            limit=limit,
            offset=offset,
        )

    def _projection(self) -> Projection:
        if self._accept(TokenKind.STAR):
            return Wildcard()
        items: List[SelectItem] = []
        while True:
            expr = self.expr()
            if isinstance(expr, Column):
                items.append(SelectColumn(expr.ref))
            elif isinstance(expr, AggregateExpr):
                items.append(SelectAggregate(expr.aggregate))
            else:
                items.append(SelectExpr(expr))
            if not self._accept(TokenKind.COMMA):
                return items

    def _from_clause(self) -> FromClause:
        table = self._table_ref()
        joins: List[Join] = []
        while True:
            if self._accept_keyword(Keyword.JOIN):
                kind = JoinKind.INNER
            else:
                token = self._peek()
                if token is None or token.kind is not TokenKind.KEYWORD:
                    break
                kind = _JOIN_STARTS.get(token.value)  # type: ignore[arg-type]
                if kind is None:
                    break
                self._pos += 1
                self._expect_keyword(Keyword.JOIN)
            joined = self._table_ref()
            on: Optional[Expr] = None
            if kind is not JoinKind.CROSS:
                self._expect_keyword(Keyword.ON)
                on = self.expr()
            joins.append(Join(kind, joined, on))
        return FromClause(table, joins)

    def _table_ref(self) -> TableRef:
        name = self._expect_name()
        return TableRef(name, self._optional_alias())

    def _optional_alias(self) -> Optional[str]:
        if self._accept_keyword(Keyword.AS):
            return self._expect_name()
        if self._at(TokenKind.IDENT):
            return self._expect_name()
        return None

    def _optional_where(self) -> Optional[Expr]:
        return self._optional_clause(Keyword.WHERE)

    def _optional_clause(self, keyword: Keyword) -> Optional[Expr]:
        if self._accept_keyword(keyword):
            return self.expr()
        return None

    def _optional_group_by(self) -> List[ColumnRef]:
        if not self._accept_keyword(Keyword.GROUP):
            return []
        self._expect_keyword(Keyword.BY)
        columns = [self.column_ref()]
        while self._accept(TokenKind.COMMA):
            columns.append(self.column_ref())
        return columns

    def _optional_order_by(self) -> List[OrderKey]:
        if not self._accept_keyword(Keyword.ORDER):
            return []
        self._expect_keyword(Keyword.BY)
        keys: List[OrderKey] = []
        while True:
            column = self.column_ref()
            descending = False
            if self._accept_keyword(Keyword.DESC):
                descending = True
            else:
                self._accept_keyword(Keyword.ASC)
            keys.append(OrderKey(column, descending))
            if not self._accept(TokenKind.COMMA):
                return keys

    def _optional_limit(self) -> Tuple[Optional[int], Optional[int]]:
        if not self._accept_keyword(Keyword.LIMIT):
            return None, None
        limit = self._expect_count("LIMIT")
        offset = self._expect_count("OFFSET") if self._accept_keyword(Keyword.OFFSET) else None
        return limit, offset

    def _expect_count(self, clause: str) -> int:
        token = self._advance()
        if token is None or token.kind is not TokenKind.INTEGER or token.value < 0:  # type: ignore[operator]
            raise ParseError(
                f"{clause} expects a non-negative integer, found {_describe(token)}"
            )
        return token.value  # type: ignore[return-value]

    def _subquery(self) -> Statement:
        self._expect(TokenKind.LPAREN)
        statement = self.statement()
        self._expect(TokenKind.RPAREN)
        return statement

    # --- expressions, loosest binding first --------------------------------

    def expr(self) -> Expr:
        """Parse one expression."""
        return self._or_expr()

    def _or_expr(self) -> Expr:
        left = self._and_expr()
        while self._accept_keyword(Keyword.OR):
            left = binary(BinaryOp.OR, left, self._and_expr())
        return left

    def _and_expr(self) -> Expr:
        left = self._not_expr()
        while self._accept_keyword(Keyword.AND):
            left = binary(BinaryOp.AND, left, self._not_expr())
        return left

    def _not_expr(self) -> Expr:
        if self._accept_keyword(Keyword.NOT):
            return Unary(UnaryOp.NOT, self._not_expr())
        return self._comparison()

    def _comparison(self) -> Expr:
        left = self._additive()
        while True:
            token = self._peek()
            op = _COMPARISONS.get(token.kind) if token is not None else None
            if op is not None:
                self._pos += 1
                left = binary(op, left, self._additive())
                continue
            if self._at_keyword(Keyword.NOT) and self._at_keyword(Keyword.IN, 1):
                self._pos += 2
                negated = True
            elif self._accept_keyword(Keyword.IN):
                negated = False
            else:
                return left
            left = InSubquery(left, self._subquery(), negated)

    def _additive(self) -> Expr:
        left = self._multiplicative()
        while (token := self._peek()) is not None and token.kind in _ADDITIVE:
            self._pos += 1
            left = binary(_ADDITIVE[token.kind], left, self._multiplicative())
        return left

    def _multiplicative(self) -> Expr:
        left = self._unary()
        while (token := self._peek()) is not None and token.kind in _MULTIPLICATIVE:
            self._pos += 1
            left = binary(_MULTIPLICATIVE[token.kind], left, self._unary())
        return left

    def _unary(self) -> Expr:
        if self._accept(TokenKind.MINUS):
            return Unary(UnaryOp.NEG, self._unary())
        return self._postfix()

    def _postfix(self) -> Expr:
        inner = self._primary()
        if not self._accept_keyword(Keyword.IS):
            return inner
        negated = self._accept_keyword(Keyword.NOT)
        self._expect_keyword(Keyword.NULL)
        return IsNull(inner, negated)

    def _primary(self) -> Expr:
        token = self._advance()
        if token is None:
            raise ParseError("expected an expression, found end of input")
        kind = token.kind
        if kind is TokenKind.INTEGER:
            return IntLit(token.value)  # type: ignore[arg-type]
        if kind is TokenKind.REAL:
            return RealLit(token.value)  # type: ignore[arg-type]
        if kind is TokenKind.STR:
            return StrLit(token.value)  # type: ignore[arg-type]
        if kind is TokenKind.QUESTION:
            index = self._placeholders
            self._placeholders += 1
            return Placeholder(index)
        if kind is TokenKind.KEYWORD:
            if token.value is Keyword.TRUE:
                return BoolLit(True)
            if token.value is Keyword.FALSE:
                return BoolLit(False)
            if token.value is Keyword.NULL:
                return NullLit()
            if token.value is Keyword.EXISTS:
                return Exists(self._subquery())
        if kind is TokenKind.IDENT:
            name: str = token.value  # type: ignore[assignment]
            if self._at(TokenKind.LPAREN):
                return AggregateExpr(self._aggregate_call(name))
            if self._accept(TokenKind.DOT):
                return Column(ColumnRef(self._expect_name(), name))
            return Column(ColumnRef.bare(name))
        if kind is TokenKind.LPAREN:
            if self._at_keyword(Keyword.SELECT):
                statement = self.statement()
                self._expect(TokenKind.RPAREN)
                return ScalarSubquery(statement)
            inner = self.expr()
            self._expect(TokenKind.RPAREN)
            return inner
        raise ParseError(f"expected an expression, found {_describe(token)}")

    def _aggregate_call(self, name: str) -> Aggregate:
        func = _aggregate_func(name)
        self._expect(TokenKind.LPAREN)
        arg: AggregateArg
        if self._accept(TokenKind.STAR):
            arg = Wildcard()
        else:
            arg = self.column_ref()
        self._expect(TokenKind.RPAREN)
        return Aggregate(func, arg)