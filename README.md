# prehnite

The SQL frontend of a small relational database: a lexer, an abstract
syntax tree and a hand-written recursive-descent parser. It turns SQL text
into a statement tree and rejects malformed input. It checks syntax only.

## Installation

```
pip install .
```

For the test suite:

```
pip install .[test]
pytest
```

## Parsing a statement

```python
from prehnite.parser import parse
from prehnite.ast import Select

stmt = parse("SELECT name FROM users u WHERE u.id = ? ORDER BY name DESC LIMIT 10")
assert isinstance(stmt, Select)
print(stmt.from_.table.qualifier())  # "u"
print(stmt.limit)                     # 10
```

`parse` accepts exactly one statement. A single trailing `;` is allowed.
Any other text after the statement raises `prehnite.errors.ParseError`.
Every error from the lexer or the parser is a `ParseError`, which is a
subclass of `prehnite.errors.SqlError`.

The tree is made of the dataclasses and enums in `prehnite.ast`: statement
classes such as `Select`, `Insert`, `Update`, `Delete`, `CreateTable`,
`CreateIndex`, `Explain` and `Analyze`; expression classes such as
`Column`, `Binary`, `Unary`, `IsNull`, `InSubquery`, `Exists`,
`ScalarSubquery`, `Placeholder` and the literals `IntLit`, `RealLit`,
`StrLit`, `BoolLit` and `NullLit`. A `Select` projection is either a
`Wildcard` or a list of `SelectColumn`, `SelectAggregate` and `SelectExpr`
items.

## Supported statements

- `SELECT` with joins (`JOIN` / `INNER JOIN`, `LEFT JOIN`, `CROSS JOIN`),
  table aliases (`AS x` or a bare `x`), `WHERE`, `GROUP BY`, `HAVING`,
  `ORDER BY ... ASC|DESC`, and `LIMIT n [OFFSET m]`
- `INSERT INTO t [(cols)] VALUES (...), (...)`
- `UPDATE t SET col = expr, ... [WHERE ...]`
- `DELETE FROM t [WHERE ...]`
- `CREATE TABLE` with the column types `INT`/`INTEGER`, `TEXT`,
  `REAL`/`FLOAT` and `BOOL`/`BOOLEAN`, and the constraints `PRIMARY KEY`,
  `NOT NULL`, `UNIQUE` and
  `REFERENCES t(c) [ON DELETE CASCADE | SET NULL | RESTRICT | NO ACTION]`
  (with no `ON DELETE` clause the action is `RESTRICT`)
- `DROP TABLE`, `CREATE INDEX name ON t (cols)`, `DROP INDEX`
- `VACUUM`, `ANALYZE t`, `EXPLAIN [ANALYZE] SELECT ...`
- `BEGIN`, `COMMIT`, `ROLLBACK`

## Expressions

Operators bind in this order, from loosest to tightest:

`OR` < `AND` < `NOT` < comparisons (`= <> != < <= > >=`, `[NOT] IN (subquery)`) < `+ -` < `* /` < unary `-` < primary

`IS [NOT] NULL` is a postfix on a primary. The following are also
expressions:

- `EXISTS (subquery)` and scalar `(SELECT ...)` subqueries
- the aggregates `COUNT`, `SUM`, `AVG`, `MIN` and `MAX`, taking `*` or a
  column
- `?` bind placeholders, numbered from 0 left to right within a statement

`IN` takes only a subquery; a literal list such as `x IN (1, 2)` is not
accepted.

`prehnite.expressions.ExpressionParser` parses expressions and `SELECT`
queries from a token list on its own; `prehnite.parser.Parser` extends it
with every other statement kind.

## Tokenizing

```python
from prehnite.lexer import tokenize

tokens = tokenize("SELECT id FROM users -- a comment")
```

`tokenize` returns a list of `prehnite.token.Token` values, each with a
`TokenKind` and, for literals, identifiers and keywords, a `value`.
Keywords are case-insensitive. String literals use single quotes, and `''`
inside a literal stands for one quote. A `--` comment runs to the end of
the line. Integer literals larger than a signed 64-bit integer are
rejected.

## What this package does not do

It only parses. There is no storage engine, no query execution, no
planner, no transactions and no command-line shell: the statement trees
it builds, including `BEGIN`, `VACUUM` and `EXPLAIN`, are not run by
anything in this package.