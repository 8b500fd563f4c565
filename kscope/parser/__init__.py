"""
kscope Parser Package

Recursive descent parser with precedence climbing for binary operators.
Produces one top-level Function per statement, together with the
whitespace-stripped text it was parsed from.

Key Features:
- One token of lookahead, pulled from the lexer on demand
- Left-associative binary operators, grouped by precedence
- Fail-fast diagnostics naming the expected construct and the token found
"""

from .ast_nodes import (
    ASTNode, ASTNodeType, ASTVisitor, SourceSpan,
    Expr, NumberLiteral, VariableRef, BinaryOp, Call, Conditional,
    Prototype, Function, FunctionKind,
)
from .parser import Parser, parse_string
from .errors import ParseError
from .printer import format_tree

__all__ = [
    # Core parser
    "Parser",
    "parse_string",

    # AST nodes
    "ASTNode", "ASTNodeType", "ASTVisitor", "SourceSpan",
    "Expr", "NumberLiteral", "VariableRef", "BinaryOp", "Call", "Conditional",
    "Prototype", "Function", "FunctionKind",
    "format_tree",

    # Error handling
    "ParseError",
]
