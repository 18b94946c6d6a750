import pytest

from prehnite.ast import (
    Aggregate,
    AggregateExpr,
    AggregateFunc,
    Binary,
    BinaryOp,
    BoolLit,
    Column,
    ColumnRef,
    Exists,
    InSubquery,
    IntLit,
    IsNull,
    JoinKind,
    NullLit,
    OrderKey,
    Placeholder,
    RealLit,
    ScalarSubquery,
    Select,
    SelectAggregate,
    SelectColumn,
    SelectExpr,
    StrLit,
    TableRef,
    Unary,
    UnaryOp,
    Wildcard,
)
from prehnite.errors import ParseError
from prehnite.expressions import ExpressionParser
from prehnite.lexer import tokenize


def parse_expr(text):
    parser = ExpressionParser(tokenize(text))
    expr = parser.expr()
    assert parser.at_end()
    return expr


def parse_select(text):
    parser = ExpressionParser(tokenize(text))
    stmt = parser.statement()
    assert parser.at_end()
    return stmt


def col(name, table=None):
    return Column(ColumnRef(name, table))


def test_arithmetic_precedence():
    assert parse_expr("1 + 2 * 3") == Binary(
        BinaryOp.ADD, IntLit(1), Binary(BinaryOp.MUL, IntLit(2), IntLit(3))
    )


def test_subtraction_is_left_associative():
    assert parse_expr("a - b - c") == Binary(
        BinaryOp.SUB, Binary(BinaryOp.SUB, col("a"), col("b")), col("c")
    )


def test_and_binds_tighter_than_or():
    assert parse_expr("a OR b AND c") == Binary(
        BinaryOp.OR, col("a"), Binary(BinaryOp.AND, col("b"), col("c"))
    )


def test_not_wraps_comparison():
    assert parse_expr("NOT a = 1") == Unary(
        UnaryOp.NOT, Binary(BinaryOp.EQ, col("a"), IntLit(1))
    )


def test_unary_minus_binds_tightest():
    assert parse_expr("-x * 2") == Binary(
        BinaryOp.MUL, Unary(UnaryOp.NEG, col("x")), IntLit(2)
    )


@pytest.mark.parametrize(
    "text, op",
    [
        ("a = b", BinaryOp.EQ),
        ("a <> b", BinaryOp.NOT_EQ),
        ("a != b", BinaryOp.NOT_EQ),
        ("a < b", BinaryOp.LT),
        ("a <= b", BinaryOp.LT_EQ),
        ("a > b", BinaryOp.GT),
        ("a >= b", BinaryOp.GT_EQ),
    ],
)
def test_comparison_operators(text, op):
    assert parse_expr(text) == Binary(op, col("a"), col("b"))


def test_is_null_and_is_not_null():
    assert parse_expr("name IS NULL") == IsNull(col("name"), False)
    assert parse_expr("name IS NOT NULL") == IsNull(col("name"), True)


def test_literals():
    assert parse_expr("TRUE") == BoolLit(True)
    assert parse_expr("false") == BoolLit(False)
    assert parse_expr("NULL") == NullLit()
    assert parse_expr("'it''s'") == StrLit("it's")
    assert parse_expr("3.5") == RealLit(3.5)


def test_placeholders_numbered_left_to_right():
    assert parse_expr("? + ? = ?") == Binary(
        BinaryOp.EQ,
        Binary(BinaryOp.ADD, Placeholder(0), Placeholder(1)),
        Placeholder(2),
    )


def test_qualified_column():
    assert parse_expr("users.id") == col("id", "users")


def test_column_ref_method():
    parser = ExpressionParser(tokenize("u.name"))
    assert parser.column_ref() == ColumnRef("name", "u")
    assert parser.at_end()


def test_aggregates_case_insensitive():
    assert parse_expr("COUNT(*)") == AggregateExpr(
        Aggregate(AggregateFunc.COUNT, Wildcard())
    )
    assert parse_expr("sum(o.amount)") == AggregateExpr(
        Aggregate(AggregateFunc.SUM, ColumnRef("amount", "o"))
    )


def test_unknown_function_rejected():
    with pytest.raises(ParseError):
        parse_expr("frob(x)")


def test_parenthesised_expression():
    assert parse_expr("(1 + 2) * 3") == Binary(
        BinaryOp.MUL, Binary(BinaryOp.ADD, IntLit(1), IntLit(2)), IntLit(3)
    )


def test_in_and_not_in_subquery():
    inner = parse_select("SELECT user_id FROM admins")
    assert parse_expr("id IN (SELECT user_id FROM admins)") == InSubquery(
        col("id"), inner, False
    )
    assert parse_expr("id NOT IN (SELECT user_id FROM admins)") == InSubquery(
        col("id"), inner, True
    )


def test_exists_and_not_exists():
    inner = parse_select("SELECT * FROM s")
    assert parse_expr("EXISTS (SELECT * FROM s)") == Exists(inner)
    assert parse_expr("NOT EXISTS (SELECT * FROM s)") == Unary(
        UnaryOp.NOT, Exists(inner)
    )


def test_scalar_subquery():
    expr = parse_expr("price > (SELECT AVG(amount) FROM s)")
    assert isinstance(expr, Binary)
    assert expr.op is BinaryOp.GT
    assert expr.right == ScalarSubquery(parse_select("SELECT AVG(amount) FROM s"))


def test_expression_errors():
    with pytest.raises(ParseError):
        parse_expr("")
    with pytest.raises(ParseError):
        parse_expr("(1 + 2")
    with pytest.raises(ParseError):
        parse_expr("a IS 5")


def test_at_end_false_with_leftover_tokens():
    parser = ExpressionParser(tokenize("a b"))
    assert parser.expr() == col("a")
    assert parser.at_end() is False


def test_select_star():
    stmt = parse_select("SELECT * FROM users")
    assert stmt == Select(from_=stmt.from_, projection=Wildcard())
    assert stmt.from_.table == TableRef("users")
    assert stmt.from_.joins == []


def test_select_items():
    stmt = parse_select("SELECT region, COUNT(*), a + 1 FROM t GROUP BY region")
    assert stmt.projection == [
        SelectColumn(ColumnRef("region")),
        SelectAggregate(Aggregate(AggregateFunc.COUNT, Wildcard())),
        SelectExpr(Binary(BinaryOp.ADD, col("a"), IntLit(1))),
    ]
    assert stmt.group_by == [ColumnRef("region")]


def test_select_full_clauses():
    stmt = parse_select(
        "SELECT a FROM t WHERE a >= 1 GROUP BY a HAVING COUNT(*) > 1 "
        "ORDER BY b DESC, c ASC LIMIT 10 OFFSET 5"
    )
    assert stmt.filter == Binary(BinaryOp.GT_EQ, col("a"), IntLit(1))
    assert stmt.having == Binary(
        BinaryOp.GT,
        AggregateExpr(Aggregate(AggregateFunc.COUNT, Wildcard())),
        IntLit(1),
    )
    assert stmt.order_by == [
        OrderKey(ColumnRef("b"), True),
        OrderKey(ColumnRef("c"), False),
    ]
    assert stmt.limit == 10
    assert stmt.offset == 5


def test_limit_rejects_negative_and_non_integer():
    with pytest.raises(ParseError):
        parse_select("SELECT * FROM t LIMIT -1")
    with pytest.raises(ParseError):
        parse_select("SELECT * FROM t LIMIT 1.5")


def test_joins_and_aliases():
    stmt = parse_select(
        "SELECT u.name FROM users u JOIN orders AS o ON u.id = o.user_id "
        "LEFT JOIN refunds r ON o.id = r.order_id CROSS JOIN extra"
    )
    assert stmt.from_.table == TableRef("users", "u")
    kinds = [join.kind for join in stmt.from_.joins]
    assert kinds == [JoinKind.INNER, JoinKind.LEFT, JoinKind.CROSS]
    assert stmt.from_.joins[0].table == TableRef("orders", "o")
    assert stmt.from_.joins[0].on == Binary(
        BinaryOp.EQ, col("id", "u"), col("user_id", "o")
    )
    assert stmt.from_.joins[2].on is None


def test_join_requires_on():
    with pytest.raises(ParseError):
        parse_select("SELECT * FROM a JOIN b")


def test_statement_errors():
    with pytest.raises(ParseError, match="empty statement"):
        ExpressionParser([]).statement()
    with pytest.raises(ParseError):
        ExpressionParser(tokenize("DELETE FROM t")).statement()
    with pytest.raises(ParseError):
        ExpressionParser(tokenize("SELECT * FROM")).statement()