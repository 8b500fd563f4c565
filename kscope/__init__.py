"""
kscope Front End

Lexer, parser and syntax tree for a minimal expression-oriented language.
The trees it produces are consumed by a separate code generator.

Architecture:
    kscope/
    ├── lexer/           # Operators, tokens, byte scanner
    └── parser/          # AST nodes, precedence-climbing parser
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .lexer import Lexer, Token, TokenType, Operator, LexerError
from .parser import Parser, Function, Prototype, ParseError, parse_string

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "Token",
    "TokenType",
    "Operator",
    "Function",
    "Prototype",
    "parse_string",

    # Errors
    "LexerError",
    "ParseError",

    # Version info
    "__version__",
    "__license__",
]
