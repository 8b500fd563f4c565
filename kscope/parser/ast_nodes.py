"""
Abstract Syntax Tree node definitions for kscope.

Three families of nodes:
- Expressions (NumberLiteral, VariableRef, BinaryOp, Call, Conditional)
- Prototype, the name and parameter list of a signature
- Function, the top-level unit handed to the code generator

Nodes are built once by the parser and never mutated. Every node owns its
children exclusively. Equality is structural and ignores source spans, so
two parses of the same text compare equal.
"""

import re
from abc import ABC, abstractmethod
from typing import List, Optional, Any, Tuple
from dataclasses import dataclass
from enum import Enum

from ..lexer.operators import Operator
from ..lexer.tokens import SourceLocation


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""

    # Expressions
    NUMBER_LITERAL = "NumberLiteral"
    VARIABLE_REF = "VariableRef"
    BINARY_OP = "BinaryOp"
    CALL = "Call"
    CONDITIONAL = "Conditional"

    # Signatures and top level
    PROTOTYPE = "Prototype"
    FUNCTION = "Function"


class FunctionKind(Enum):
    """The three valid shapes of a top-level Function."""
    DEFINITION = "definition"       # prototype and body
    EXTERN = "extern"               # prototype only
    ANONYMOUS = "anonymous"         # body only


@dataclass
class SourceSpan:
    """Represents a span of source code (start and end locations)."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename == self.end.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start}-{self.end}"


_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class ASTVisitor(ABC):
    """
    Visitor over kscope trees.

    ``visit`` dispatches on the node class: a ``Call`` goes to ``visit_call``,
    a ``NumberLiteral`` to ``visit_number_literal`` and so on. Nodes without
    a handler fall through to ``generic_visit``.
    """

    def visit(self, node: 'ASTNode') -> Any:
        method = getattr(self, "visit_" + node.visitor_suffix, self.generic_visit)
        return method(node)

    @abstractmethod
    def generic_visit(self, node: 'ASTNode') -> Any:
        pass


class ASTNode(ABC):
    """Base class for all AST nodes."""

    # Names of the attributes that make up the node's structure
    _fields: Tuple[str, ...] = ()

    def __init__(self, node_type: ASTNodeType, span: Optional[SourceSpan] = None):
        self.node_type = node_type
        self.span = span

    @property
    def visitor_suffix(self) -> str:
        return _CAMEL_BOUNDARY.sub("_", self.node_type.value).lower()

    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""
        return visitor.visit(self)

    @abstractmethod
    def children(self) -> List['ASTNode']:
        """Get all child nodes."""
        pass

    def walk(self):
        """Yield this node and every descendant, depth first."""
        yield self
        for child in self.children():
            yield from child.walk()

    def __eq__(self, other) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return all(getattr(self, f) == getattr(other, f) for f in self._fields)

    def __hash__(self) -> int:
        return hash((self.node_type,) + tuple(_freeze(getattr(self, f)) for f in self._fields))

    def __str__(self) -> str:
        if self.span is None:
            return self.node_type.value
        return f"{self.node_type.value}@{self.span}"

    def __repr__(self) -> str:
        fields = ", ".join(f"{f}={getattr(self, f)!r}" for f in self._fields)
        return f"{self.__class__.__name__}({fields})"


def _freeze(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


# ============================================================================
# Expressions
# ============================================================================

class Expr(ASTNode):
    """Base class for value-producing expressions."""
    pass


class NumberLiteral(Expr):
    """Unsigned integer literal."""
    _fields = ("value",)

    def __init__(self, value: int, span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.NUMBER_LITERAL, span)
        self.value = value

    def children(self) -> List[ASTNode]:
        return []


class VariableRef(Expr):
    """Reference to a named value (a function parameter)."""
    _fields = ("name",)

    def __init__(self, name: str, span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.VARIABLE_REF, span)
        self.name = name

    def children(self) -> List[ASTNode]:
        return []


class BinaryOp(Expr):
    """Binary operation expression."""
    _fields = ("op", "lhs", "rhs")

    def __init__(self, op: Operator, lhs: Expr, rhs: Expr, span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.BINARY_OP, span)
        self.op = op
        self.lhs = lhs
        self.rhs = rhs

    def children(self) -> List[ASTNode]:
        return [self.lhs, self.rhs]


class Call(Expr):
    """Call of a named function with positional arguments."""
    _fields = ("name", "args")

    def __init__(self, name: str, args: List[Expr], span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.CALL, span)
        self.name = name
        self.args = list(args)

    def children(self) -> List[ASTNode]:
        return list(self.args)


class Conditional(Expr):
    """``if predicate then then_branch else else_branch``; always has both branches."""
    _fields = ("predicate", "then_branch", "else_branch")

    def __init__(self, predicate: Expr, then_branch: Expr, else_branch: Expr,
                 span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.CONDITIONAL, span)
        self.predicate = predicate
        self.then_branch = then_branch
        self.else_branch = else_branch

    def children(self) -> List[ASTNode]:
        return [self.predicate, self.then_branch, self.else_branch]


# ============================================================================
# Signatures and top-level functions
# ============================================================================

class Prototype(ASTNode):
    """
    Function signature: a name and its parameter names.

    Parameter names are not checked for uniqueness.
    """
    _fields = ("name", "params")

    # Name a code generator may give to anonymous top-level expressions
    ANONYMOUS_NAME = "__anon_fn"

    def __init__(self, name: str, params: List[str], span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.PROTOTYPE, span)
        self.name = name
        self.params = list(params)

    @classmethod
    def anonymous(cls) -> 'Prototype':
        """Parameterless prototype named ``ANONYMOUS_NAME``."""
        return cls(cls.ANONYMOUS_NAME, [])

    @property
    def arity(self) -> int:
        return len(self.params)

    def children(self) -> List[ASTNode]:
        return []


class Function(ASTNode):
    """
    Top-level unit: definition, extern declaration or anonymous expression.

    Exactly one of the three shapes is valid; a function with neither a
    prototype nor a body cannot come out of the grammar and is rejected.
    """
    _fields = ("prototype", "body")

    def __init__(self, prototype: Optional[Prototype], body: Optional[Expr],
                 span: Optional[SourceSpan] = None):
        if prototype is None and body is None:
            raise ValueError("Function needs a prototype, a body, or both")
        super().__init__(ASTNodeType.FUNCTION, span)
        self.prototype = prototype
        self.body = body

    @property
    def kind(self) -> FunctionKind:
        if self.prototype is None:
            return FunctionKind.ANONYMOUS
        if self.body is None:
            return FunctionKind.EXTERN
        return FunctionKind.DEFINITION

    @property
    def is_definition(self) -> bool:
        return self.kind is FunctionKind.DEFINITION

    @property
    def is_extern(self) -> bool:
        return self.kind is FunctionKind.EXTERN

    @property
    def is_anonymous(self) -> bool:
        return self.kind is FunctionKind.ANONYMOUS

    def children(self) -> List[ASTNode]:
        children: List[ASTNode] = []
        if self.prototype is not None:
            children.append(self.prototype)
        if self.body is not None:
            children.append(self.body)
        return children
