"""Exceptions raised by the SQL frontend."""


class SqlError(Exception):
    """Base class for every error the SQL frontend reports."""


class ParseError(SqlError):
    """Raised when SQL text cannot be tokenized or parsed."""