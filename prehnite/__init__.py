"""SQL frontend: lexer, abstract syntax tree and recursive-descent parser."""

__version__ = "0.59.0"
__all__ = ["ast", "errors", "expressions", "lexer", "parser", "token"]