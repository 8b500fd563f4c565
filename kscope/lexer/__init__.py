"""
kscope Lexer Package

Forward-only tokenizer over an in-memory byte buffer.

Key Features:
- One byte of lookahead, one token per call
- Provenance text (consumed bytes minus whitespace) for every token
- Fixed-width integer literals with an explicit overflow error
- Source location tracking for diagnostics
"""

from .operators import Operator
from .tokens import Token, TokenType, SourceLocation
from .lexer import Lexer, tokenize_string
from .errors import Diagnostic, LexerError

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "Operator",
    "Diagnostic",
    "LexerError",
    "tokenize_string",
]
