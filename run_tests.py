#!/usr/bin/env python3
"""
Main test runner for the kscope front end.
"""

import sys
import os
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.dirname(__file__))
sys.path.insert(0, project_root)


def run_smoke_test():
    """Lex and parse a small program end to end."""
    from kscope.lexer import Lexer, LexerError
    from kscope.parser import Parser, ParseError, format_tree

    code = """
    extern putchard(c)
    def fib(n) if n < 2 then n else fib(n-1) + fib(n-2)
    fib(10)
    """

    print("Testing lexer + parser pipeline...")
    try:
        tokens = Lexer(code).tokenize()
        print(f"  🔧 Lexing... {len(tokens)} tokens")

        print("  🔧 Parsing...")
        for function, text in Parser(Lexer(code)):
            print(f"     {function.kind.value:<10} {format_tree(function)}")
            print(f"     {'':<10} from {text!r}")
    except (LexerError, ParseError) as e:
        print(f"❌ Pipeline test FAILED:\n{e}")
        return False

    print("✅ Pipeline test PASSED")
    print()
    return True


def run_all_tests():
    """Run the smoke test and the unittest suite."""
    print("🚀 kscope Front End Test Suite")
    print("=" * 60)

    if not run_smoke_test():
        return False

    suite = unittest.defaultTestLoader.discover(os.path.join(project_root, "tests"))
    result = unittest.TextTestRunner(verbosity=2).run(suite)
    return result.wasSuccessful()


if __name__ == "__main__":
    sys.exit(0 if run_all_tests() else 1)
