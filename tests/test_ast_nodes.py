"""
Tests for kscope AST nodes and the visitor machinery.
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from kscope.lexer import Operator
from kscope.parser import (
    ASTVisitor, ASTNodeType, NumberLiteral, VariableRef, BinaryOp, Call,
    Conditional, Prototype, Function, FunctionKind, format_tree, parse_string,
)


class CallCollector(ASTVisitor):
    """Collects callee names, walking into every child."""

    def __init__(self):
        self.names = []

    def visit_call(self, node):
        self.names.append(node.name)
        self.generic_visit(node)

    def generic_visit(self, node):
        for child in node.children():
            self.visit(child)


class TestFunctionShapes(unittest.TestCase):

    def test_three_valid_shapes(self):
        proto = Prototype("f", ["x"])
        body = VariableRef("x")

        self.assertIs(Function(proto, body).kind, FunctionKind.DEFINITION)
        self.assertIs(Function(proto, None).kind, FunctionKind.EXTERN)
        self.assertIs(Function(None, body).kind, FunctionKind.ANONYMOUS)

    def test_empty_function_is_rejected(self):
        with self.assertRaises(ValueError):
            Function(None, None)

    def test_anonymous_prototype(self):
        proto = Prototype.anonymous()
        self.assertEqual(proto.name, "__anon_fn")
        self.assertEqual(proto.arity, 0)


class TestNodes(unittest.TestCase):

    def test_structural_equality_and_hash(self):
        a = BinaryOp(Operator.ADD, NumberLiteral(1), Call("f", [VariableRef("x")]))
        b = BinaryOp(Operator.ADD, NumberLiteral(1), Call("f", [VariableRef("x")]))

        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))
        self.assertNotEqual(a, BinaryOp(Operator.SUB, NumberLiteral(1), Call("f", [VariableRef("x")])))
        self.assertNotEqual(NumberLiteral(1), VariableRef("1"))

    def test_children(self):
        cond = Conditional(VariableRef("c"), NumberLiteral(1), NumberLiteral(2))
        self.assertEqual(cond.children(), [VariableRef("c"), NumberLiteral(1), NumberLiteral(2)])
        self.assertEqual(Function(Prototype("f", []), None).children(), [Prototype("f", [])])

    def test_walk_is_depth_first(self):
        function = parse_string("def f(x) g(x) + 1")[0]

        self.assertEqual(
            [node.node_type for node in function.walk()],
            [ASTNodeType.FUNCTION, ASTNodeType.PROTOTYPE, ASTNodeType.BINARY_OP,
             ASTNodeType.CALL, ASTNodeType.VARIABLE_REF, ASTNodeType.NUMBER_LITERAL]
        )

    def test_call_args_are_copied(self):
        args = [NumberLiteral(1)]
        call = Call("f", args)
        args.append(NumberLiteral(2))
        self.assertEqual(len(call.args), 1)

    def test_repr(self):
        self.assertEqual(repr(NumberLiteral(3)), "NumberLiteral(value=3)")
        self.assertEqual(repr(Prototype("f", ["a"])), "Prototype(name='f', params=['a'])")


class TestVisitors(unittest.TestCase):

    def test_dispatch_by_node_class(self):
        collector = CallCollector()
        for function in parse_string("def f(x) g(h(x), 1) extern g(a b) k() + f(2)"):
            function.accept(collector)

        self.assertEqual(collector.names, ["g", "h", "k", "f"])

    def test_format_tree(self):
        functions = parse_string("extern sin(x) def f(a, b) if a < b then sin(a) else b*2 f(1, 2)")

        self.assertEqual(
            [format_tree(f) for f in functions],
            [
                "(extern (sin x))",
                "(def (f a b) (if (< a b) (call sin a) (* b 2)))",
                "(anon (call f 1 2))",
            ]
        )


if __name__ == '__main__':
    unittest.main()
