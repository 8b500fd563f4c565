"""
Token definitions for the kscope lexer.

The alphabet is deliberately small:
- Literals (unsigned decimal integers)
- Identifiers and the five keywords
- Binary operators (see operators.py)
- Parentheses and commas
- End of input
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .operators import Operator, PUNCTUATION_OPERATORS


class TokenType(Enum):
    """Enumeration of all token types in kscope."""

    # Special
    EOF = auto()                    # End of input, repeated forever once reached

    # Literals and names
    NUMBER = auto()                 # 42
    IDENTIFIER = auto()             # foo, x1

    # Keywords
    DEF = auto()                    # def
    EXTERN = auto()                 # extern
    IF = auto()                     # if
    THEN = auto()                   # then
    ELSE = auto()                   # else

    # Operators (value holds the Operator)
    OPERATOR = auto()               # + - * / <

    # Punctuation
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    COMMA = auto()                  # ,


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source buffer.

    Used for error reporting only; the grammar never depends on it.
    """
    filename: str
    line: int
    column: int
    offset: int  # Byte offset from start of buffer

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    A lexical token.

    ``lexeme`` is the non-whitespace text consumed to produce the token, which
    is also what the parser stitches together as provenance text.
    """
    type: TokenType
    lexeme: str
    value: Any                      # int for NUMBER, str for IDENTIFIER, Operator for OPERATOR
    location: SourceLocation

    def __str__(self) -> str:
        if self.type == TokenType.NUMBER:
            return f"Number({self.value})"
        if self.type == TokenType.IDENTIFIER:
            return f"Identifier({self.value!r})"
        if self.type == TokenType.OPERATOR:
            return f"Operator({self.value.name})"
        return self.type.name

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")

    @property
    def is_keyword(self) -> bool:
        return self.type in KEYWORDS.values()

    @property
    def is_identifier(self) -> bool:
        return self.type == TokenType.IDENTIFIER

    @property
    def is_eof(self) -> bool:
        return self.type == TokenType.EOF

    def is_operator(self, op: Optional[Operator] = None) -> bool:
        """Check for an operator token, optionally a specific one."""
        if self.type != TokenType.OPERATOR:
            return False
        return op is None or self.value is op

    def describe(self) -> str:
        """Human readable form used in diagnostics."""
        if self.type == TokenType.EOF:
            return "end of input"
        return f"{self} '{self.lexeme}'"


# Lookup tables used by the lexer

KEYWORDS: Dict[str, TokenType] = {
    "def": TokenType.DEF,
    "extern": TokenType.EXTERN,
    "if": TokenType.IF,
    "then": TokenType.THEN,
    "else": TokenType.ELSE,
}

PUNCTUATION: Dict[int, TokenType] = {
    ord("("): TokenType.LEFT_PAREN,
    ord(")"): TokenType.RIGHT_PAREN,
    ord(","): TokenType.COMMA,
}
for _byte in PUNCTUATION_OPERATORS:
    PUNCTUATION[_byte] = TokenType.OPERATOR
del _byte

# Only these three bytes are skipped between tokens
WHITESPACE = frozenset(b"\n\r ")

# A zero byte stands for "past the end of input"
SENTINEL = 0

DEFAULT_NUMBER_BITS = 64
