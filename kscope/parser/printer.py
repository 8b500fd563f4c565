"""
S-expression dump of kscope trees, for debug logs and test failure messages.
"""

from typing import Any

from .ast_nodes import (
    ASTVisitor, ASTNode, NumberLiteral, VariableRef, BinaryOp, Call,
    Conditional, Prototype, Function
)


class SExpressionPrinter(ASTVisitor):
    """Render a tree as a single-line s-expression."""

    def visit_number_literal(self, node: NumberLiteral) -> str:
        return str(node.value)

    def visit_variable_ref(self, node: VariableRef) -> str:
        return node.name

    def visit_binary_op(self, node: BinaryOp) -> str:
        return f"({node.op.symbol} {self.visit(node.lhs)} {self.visit(node.rhs)})"

    def visit_call(self, node: Call) -> str:
        parts = ["call", node.name] + [self.visit(arg) for arg in node.args]
        return "(" + " ".join(parts) + ")"

    def visit_conditional(self, node: Conditional) -> str:
        return (f"(if {self.visit(node.predicate)} "
                f"{self.visit(node.then_branch)} {self.visit(node.else_branch)})")

    def visit_prototype(self, node: Prototype) -> str:
        return "(" + " ".join([node.name] + node.params) + ")"

    def visit_function(self, node: Function) -> str:
        if node.prototype is None:
            return f"(anon {self.visit(node.body)})"
        if node.body is None:
            return f"(extern {self.visit(node.prototype)})"
        return f"(def {self.visit(node.prototype)} {self.visit(node.body)})"

    def generic_visit(self, node: ASTNode) -> Any:
        raise TypeError(f"No printer for {node.__class__.__name__}")


def format_tree(node: ASTNode) -> str:
    """Return the s-expression form of ``node``, e.g. ``(+ 1 (* 2 3))``."""
    return node.accept(SExpressionPrinter())
