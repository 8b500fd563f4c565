"""
Binary operator table for kscope.

Each operator carries a fixed binding strength. Operators compare by
precedence only, which is what the parser's precedence climbing relies on.
"""

from enum import Enum
from typing import Dict


class Operator(Enum):
    """Binary operators and their precedence."""

    ASSIGN = "="
    LESS = "<"
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    OTHER = "?"                     # placeholder, never produced by the lexer

    @property
    def precedence(self) -> int:
        return _PRECEDENCE.get(self, 0)

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def is_binary(self) -> bool:
        """Whether the operator may continue an expression."""
        return self in BINARY_OPERATORS

    def __lt__(self, other: "Operator") -> bool:
        if not isinstance(other, Operator):
            return NotImplemented
        return self.precedence < other.precedence

    def __le__(self, other: "Operator") -> bool:
        if not isinstance(other, Operator):
            return NotImplemented
        return self.precedence <= other.precedence

    def __gt__(self, other: "Operator") -> bool:
        if not isinstance(other, Operator):
            return NotImplemented
        return self.precedence > other.precedence

    def __ge__(self, other: "Operator") -> bool:
        if not isinstance(other, Operator):
            return NotImplemented
        return self.precedence >= other.precedence

    def __str__(self) -> str:
        return self.value


_PRECEDENCE: Dict[Operator, int] = {
    Operator.ASSIGN: 10,
    Operator.LESS: 20,
    Operator.ADD: 30,
    Operator.SUB: 30,
    Operator.MUL: 40,
    Operator.DIV: 40,
}

# ASSIGN is reserved: recognized here but not lexed from any punctuation yet
BINARY_OPERATORS = frozenset({
    Operator.LESS,
    Operator.ADD,
    Operator.SUB,
    Operator.MUL,
    Operator.DIV,
})

# Single-byte punctuation that lexes to an operator token
PUNCTUATION_OPERATORS: Dict[int, Operator] = {
    ord("+"): Operator.ADD,
    ord("-"): Operator.SUB,
    ord("*"): Operator.MUL,
    ord("/"): Operator.DIV,
    ord("<"): Operator.LESS,
}
