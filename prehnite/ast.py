"""The syntax tree produced by the parser.

These types describe shape, not meaning: the parser guarantees a query is
well-formed, while whoever consumes the tree decides whether it is valid.
Names are stored exactly as written.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union


@dataclass(frozen=True)
class Wildcard:
    """``*``: every column in a projection, or the argument of ``COUNT(*)``."""


class JoinKind(enum.Enum):
    """The flavour of a join."""

    INNER = "INNER"
    LEFT = "LEFT"
    CROSS = "CROSS"
    # Semi- and anti-joins are never written by the parser; a planner mints
    # them when rewriting EXISTS / NOT EXISTS subqueries.
    SEMI = "SEMI"
    ANTI = "ANTI"


class ReferentialAction(enum.Enum):
    """What happens to child rows when a referenced parent row is deleted."""

    RESTRICT = "RESTRICT"
    CASCADE = "CASCADE"
    SET_NULL = "SET NULL"


class TypeName(enum.Enum):
    """A column type as written in SQL text."""

    INT = "INT"
    TEXT = "TEXT"
    REAL = "REAL"
    BOOL = "BOOL"


class AggregateFunc(enum.Enum):
    COUNT = "COUNT"
    SUM = "SUM"
    AVG = "AVG"
    MIN = "MIN"
    MAX = "MAX"


class UnaryOp(enum.Enum):
    NEG = "-"
    NOT = "NOT"


class BinaryOp(enum.Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    EQ = "="
    NOT_EQ = "<>"
    LT = "<"
    LT_EQ = "<="
    GT = ">"
    GT_EQ = ">="
    AND = "AND"
    OR = "OR"


@dataclass(frozen=True)
class ColumnRef:
    """A column reference, optionally qualified: ``id`` or ``users.id``."""

    name: str
    table: Optional[str] = None

    @classmethod
    def bare(cls, name: str) -> "ColumnRef":
        """An unqualified reference to ``name``."""
        return cls(name)

    def __str__(self) -> str:
        if self.table is None:
            return self.name
        return f"{self.table}.{self.name}"


@dataclass(frozen=True)
class TableRef:
    """A table named in a ``FROM`` clause, with an optional alias."""

    name: str
    alias: Optional[str] = None

    def qualifier(self) -> str:
        """The name qualified column references must use: alias, else name."""
        return self.alias if self.alias is not None else self.name


@dataclass(frozen=True)
class Aggregate:
    """An aggregate call such as ``COUNT(*)`` or ``SUM(amount)``."""

    func: AggregateFunc
    arg: AggregateArg


@dataclass(frozen=True)
class OrderKey:
    """One ``ORDER BY`` key."""

    column: ColumnRef
    descending: bool = False


# --- column constraints -------------------------------------------------


@dataclass(frozen=True)
class PrimaryKey:
    """``PRIMARY KEY``; implies NOT NULL and UNIQUE."""


@dataclass(frozen=True)
class NotNull:
    """``NOT NULL``."""


@dataclass(frozen=True)
class Unique:
    """``UNIQUE``; multiple NULLs are allowed."""


@dataclass(frozen=True)
class References:
    """``REFERENCES table(column) [ON DELETE ...]``."""

    table: str
    column: str
    on_delete: ReferentialAction = ReferentialAction.RESTRICT


@dataclass
class ColumnDef:
    """A column declaration inside ``CREATE TABLE``."""

    name: str
    ty: TypeName
    constraints: List[ColumnConstraint] = field(default_factory=list)


# --- expressions --------------------------------------------------------


@dataclass(frozen=True)
class NullLit:
    """The ``NULL`` literal."""


@dataclass(frozen=True)
class IntLit:
    value: int


@dataclass(frozen=True)
class RealLit:
    value: float


@dataclass(frozen=True)
class StrLit:
    value: str


@dataclass(frozen=True)
class BoolLit:
    value: bool


@dataclass(frozen=True)
class Placeholder:
    """A ``?`` bind parameter, numbered from 0 left to right in a statement."""

    index: int


@dataclass(frozen=True)
class Column:
    ref: ColumnRef


@dataclass(frozen=True)
class AggregateExpr:
    """An aggregate used as an expression (SELECT list or HAVING only)."""

    aggregate: Aggregate


@dataclass(frozen=True)
class Unary:
    op: UnaryOp
    expr: Expr


@dataclass(frozen=True)
class Binary:
    op: BinaryOp
    left: Expr
    right: Expr


@dataclass(frozen=True)
class IsNull:
    """``expr IS NULL``, or ``IS NOT NULL`` when negated."""

    expr: Expr
    negated: bool = False


@dataclass(frozen=True)
class InSubquery:
    """``expr [NOT] IN (subquery)``."""

    expr: Expr
    subquery: Statement
    negated: bool = False


@dataclass(frozen=True)
class Exists:
    """``EXISTS (subquery)``."""

    subquery: Statement


@dataclass(frozen=True)
class ScalarSubquery:
    """``(SELECT ...)`` used as a value."""

    subquery: Statement


@dataclass(frozen=True)
class InList:
    """An ``IN`` whose subquery has been materialised into literal values.

    ``has_null`` records whether any value was NULL, so three-valued logic
    can apply. Never produced by the parser.
    """

    expr: Expr
    values: Tuple[Expr, ...]
    has_null: bool = False
    negated: bool = False


@dataclass(frozen=True)
class CorrelatedExists:
    """An ``EXISTS`` whose subquery refers to an outer-query column."""

    subquery: Statement


@dataclass(frozen=True)
class CorrelatedScalarSubquery:
    """A scalar subquery that refers to an outer-query column."""

    subquery: Statement


@dataclass(frozen=True)
class CorrelatedInSubquery:
    """An ``IN`` subquery that refers to an outer-query column."""

    expr: Expr
    subquery: Statement
    negated: bool = False


def binary(op: BinaryOp, left: Expr, right: Expr) -> Binary:
    """Build a binary operation node."""
    return Binary(op, left, right)


# --- SELECT pieces ------------------------------------------------------


@dataclass(frozen=True)
class SelectColumn:
    column: ColumnRef


@dataclass(frozen=True)
class SelectAggregate:
    aggregate: Aggregate


@dataclass(frozen=True)
class SelectExpr:
    """Any other expression in a SELECT list: arithmetic, literal, subquery."""

    expr: Expr


@dataclass
class Join:
    """One join appended to a ``FROM`` clause; ``on`` is None only for CROSS."""

    kind: JoinKind
    table: TableRef
    on: Optional[Expr] = None


@dataclass
class FromClause:
    """A first table, then joins applied left to right."""

    table: TableRef
    joins: List[Join] = field(default_factory=list)


# --- statements ---------------------------------------------------------


@dataclass
class CreateTable:
    name: str
    columns: List[ColumnDef] = field(default_factory=list)


@dataclass
class DropTable:
    name: str


@dataclass
class CreateIndex:
    name: str
    table: str
    columns: List[str] = field(default_factory=list)


@dataclass
class DropIndex:
    name: str


@dataclass
class Insert:
    """``INSERT``; ``columns`` is None for "every column, in order"."""

    table: str
    columns: Optional[List[str]] = None
    rows: List[List[Expr]] = field(default_factory=list)


@dataclass
class Select:
    """A ``SELECT``; ``projection`` is a Wildcard or a list of select items."""

    from_: FromClause
    projection: Projection = field(default_factory=Wildcard)
    filter: Optional[Expr] = None
    group_by: List[ColumnRef] = field(default_factory=list)
    having: Optional[Expr] = None
    order_by: List[OrderKey] = field(default_factory=list)
    limit: Optional[int] = None
    offset: Optional[int] = None


@dataclass
class Update:
    table: str
    assignments: List[Tuple[str, Expr]] = field(default_factory=list)
    filter: Optional[Expr] = None


@dataclass
class Delete:
    table: str
    filter: Optional[Expr] = None


@dataclass(frozen=True)
class Vacuum:
    """``VACUUM``: rebuild the database file compactly."""


@dataclass
class Analyze:
    """``ANALYZE table``: gather per-column statistics."""

    table: str


@dataclass
class Explain:
    """``EXPLAIN [ANALYZE] select``."""

    inner: Statement
    analyze: bool = False


@dataclass(frozen=True)
class Begin:
    """``BEGIN``."""


@dataclass(frozen=True)
class Commit:
    """``COMMIT``."""


@dataclass(frozen=True)
class Rollback:
    """``ROLLBACK``."""


AggregateArg = Union[Wildcard, ColumnRef]

ColumnConstraint = Union[PrimaryKey, NotNull, Unique, References]

Expr = Union[
    NullLit,
    IntLit,
    RealLit,
    StrLit,
    BoolLit,
    Placeholder,
    Column,
    AggregateExpr,
    Unary,
    Binary,
    IsNull,
    InSubquery,
    Exists,
    ScalarSubquery,
    InList,
    CorrelatedExists,
    CorrelatedScalarSubquery,
    CorrelatedInSubquery,
]

SelectItem = Union[SelectColumn, SelectAggregate, SelectExpr]

Projection = Union[Wildcard, List[SelectItem]]

Statement = Union[
    CreateTable,
    DropTable,
    CreateIndex,
    DropIndex,
    Insert,
    Select,
    Update,
    Delete,
    Vacuum,
    Analyze,
    Explain,
    Begin,
    Commit,
    Rollback,
]