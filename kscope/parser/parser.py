"""
kscope Recursive Descent Parser

Pulls tokens from a Lexer with exactly one token of lookahead and builds one
top-level Function per call. Binary expressions use precedence climbing:
equal precedence associates left, and the parser only recurses when the next
operator binds strictly tighter than the current one.
"""

import logging
from typing import Iterator, List, Optional, Tuple, Union

from ..lexer.lexer import Lexer
from ..lexer.errors import LexerError
from ..lexer.tokens import Token, TokenType
from ..lexer.operators import Operator
from .ast_nodes import (
    Expr, NumberLiteral, VariableRef, BinaryOp, Call, Conditional,
    Prototype, Function, SourceSpan
)
from .errors import (
    ParseError, create_unexpected_token_error, create_missing_keyword_error,
    create_invalid_expression_error, create_malformed_prototype_error,
    create_argument_list_error, create_nesting_too_deep_error
)
from .printer import format_tree

logger = logging.getLogger(__name__)

# Deepest expression nesting accepted before P014
DEFAULT_MAX_DEPTH = 100


class Parser:
    """
    kscope parser.

    The parser is the only consumer of its lexer. Errors are fatal: once a
    LexerError or ParseError escapes, every later call raises it again.
    """

    def __init__(self, lexer: Lexer, max_depth: int = DEFAULT_MAX_DEPTH):
        """
        Initialize the parser and pre-fill the lookahead.

        Args:
            lexer: Token source; must not be read by anyone else afterwards
            max_depth: Deepest expression nesting accepted before P014

        Raises:
            ValueError: If max_depth is not positive
            LexerError: If the first token is already invalid
        """
        if max_depth <= 0:
            raise ValueError(f"max_depth must be positive, got {max_depth}")
        self.max_depth = max_depth
        self._depth = 0
        self.lexer = lexer
        self._lookahead, _ = lexer.next_token()
        self._previous: Optional[Token] = None
        self._consumed: List[str] = []
        self._error: Optional[Exception] = None

    @property
    def provenance(self) -> str:
        """
        Text consumed by the most recent ``parse_next`` call.

        This is the concatenation of the consumed tokens' text with all
        whitespace removed, not a verbatim slice of the source.
        """
        return "".join(self._consumed)

    @property
    def is_exhausted(self) -> bool:
        return self._lookahead.type == TokenType.EOF

    def parse_next(self) -> Optional[Function]:
        """
        Parse one top-level statement.

        Returns:
            The next Function, or None once the input is exhausted

        Raises:
            ParseError: On any grammar violation
            LexerError: If the lexer rejects the input
        """
        if self._error is not None:
            raise self._error

        self._consumed = []
        try:
            function = self._parse_statement()
        except (LexerError, ParseError) as e:
            self._error = e
            raise

        if function is not None:
            logger.debug("parsed %s from %r", format_tree(function), self.provenance)
        return function

    def parse(self) -> List[Function]:
        """Parse every remaining statement."""
        return [function for function, _ in self]

    def __iter__(self) -> Iterator[Tuple[Function, str]]:
        """Yield ``(function, provenance)`` pairs in document order."""
        while True:
            function = self.parse_next()
            if function is None:
                return
            yield function, self.provenance

    # Statements

    def _parse_statement(self) -> Optional[Function]:
        token_type = self._peek().type
        if token_type == TokenType.EOF:
            return None
        if token_type == TokenType.DEF:
            return self._parse_definition()
        if token_type == TokenType.EXTERN:
            return self._parse_extern()
        return self._parse_top_level_expression()

    def _parse_definition(self) -> Function:
        """definition := 'def' prototype expr"""
        start_token = self._advance()
        prototype = self._parse_prototype()
        body = self._parse_expression()
        return Function(prototype, body, self._span_from(start_token))

    def _parse_extern(self) -> Function:
        """extern_decl := 'extern' prototype"""
        start_token = self._advance()
        prototype = self._parse_prototype()
        return Function(prototype, None, self._span_from(start_token))

    def _parse_top_level_expression(self) -> Function:
        """A bare expression becomes a nameless, parameterless Function."""
        start_token = self._peek()
        body = self._parse_expression()
        return Function(None, body, self._span_from(start_token))

    def _parse_prototype(self) -> Prototype:
        """
        prototype := IDENT '(' (COMMA | IDENT)* ')'

        The parameter list does not enforce comma alternation: commas are
        skipped wherever they appear, so ``(a b)`` and ``(a,,b)`` both
        yield ``[a, b]``.
        """
        start_token = self._peek()
        if start_token.type != TokenType.IDENTIFIER:
            raise create_malformed_prototype_error(TokenType.IDENTIFIER, start_token)
        name = self._advance().value

        if self._peek().type != TokenType.LEFT_PAREN:
            raise create_malformed_prototype_error(TokenType.LEFT_PAREN, self._peek(), name)
        self._advance()

        params = []
        while True:
            token = self._peek()
            if token.type == TokenType.COMMA:
                self._advance()
            elif token.type == TokenType.IDENTIFIER:
                params.append(self._advance().value)
            elif token.type == TokenType.RIGHT_PAREN:
                self._advance()
                break
            else:
                raise create_malformed_prototype_error("parameter name or ')'", token, name)

        return Prototype(name, params, self._span_from(start_token))

    # Expressions

    def _parse_expression(self) -> Expr:
        """expr := primary binary_tail"""
        if self._depth >= self.max_depth:
            raise create_nesting_too_deep_error(self.max_depth, self._peek())

        self._depth += 1
        try:
            lhs = self._parse_primary()
            return self._parse_binary_tail(lhs, 0)
        finally:
            self._depth -= 1

    def _parse_binary_tail(self, lhs: Expr, min_precedence: int) -> Expr:
        """Fold operators of precedence >= ``min_precedence`` onto ``lhs``."""
        while self._peek().is_operator():
            operator_token = self._peek()
            op = operator_token.value
            if op.precedence < min_precedence:
                break
            if not op.is_binary:
                raise create_unexpected_token_error("binary operator", operator_token)
            self._advance()

            rhs = self._parse_primary()
            ahead = self._peek_binary_operator()
            while ahead is not None and ahead > op:
                rhs = self._parse_binary_tail(rhs, op.precedence + 1)
                ahead = self._peek_binary_operator()

            lhs = BinaryOp(op, lhs, rhs, self._join_spans(lhs, rhs))

        return lhs

    def _parse_primary(self) -> Expr:
        token = self._peek()
        if token.type == TokenType.NUMBER:
            return self._parse_number()
        if token.type == TokenType.LEFT_PAREN:
            return self._parse_grouping()
        if token.type == TokenType.IDENTIFIER:
            return self._parse_identifier_or_call()
        if token.type == TokenType.IF:
            return self._parse_conditional()
        raise create_invalid_expression_error(token)

    def _parse_number(self) -> NumberLiteral:
        token = self._advance()
        return NumberLiteral(token.value, SourceSpan(token.location, token.location))

    def _parse_grouping(self) -> Expr:
        """Parse parenthesized expression."""
        self._advance()  # Consume (
        expr = self._parse_expression()
        self._consume(TokenType.RIGHT_PAREN)
        return expr

    def _parse_identifier_or_call(self) -> Expr:
        name_token = self._advance()
        name = name_token.value
        if self._peek().type != TokenType.LEFT_PAREN:
            return VariableRef(name, SourceSpan(name_token.location, name_token.location))

        self._advance()  # Consume (
        args: List[Expr] = []
        if self._peek().type == TokenType.RIGHT_PAREN:
            self._advance()
        else:
            while True:
                args.append(self._parse_expression())
                separator = self._peek()
                if separator.type == TokenType.COMMA:
                    self._advance()
                elif separator.type == TokenType.RIGHT_PAREN:
                    self._advance()
                    break
                else:
                    raise create_argument_list_error(name, separator)

        return Call(name, args, self._span_from(name_token))

    def _parse_conditional(self) -> Conditional:
        """'if' expr 'then' expr 'else' expr"""
        start_token = self._advance()
        predicate = self._parse_expression()

        if self._peek().type != TokenType.THEN:
            raise create_missing_keyword_error(TokenType.THEN, "conditional", self._peek())
        self._advance()
        then_branch = self._parse_expression()

        if self._peek().type != TokenType.ELSE:
            raise create_missing_keyword_error(TokenType.ELSE, "conditional", self._peek())
        self._advance()
        else_branch = self._parse_expression()

        return Conditional(predicate, then_branch, else_branch, self._span_from(start_token))

    # Utility methods

    def _peek(self) -> Token:
        """Return the lookahead token without consuming it."""
        return self._lookahead

    def _peek_binary_operator(self) -> Optional[Operator]:
        token = self._lookahead
        if token.is_operator() and token.value.is_binary:
            return token.value
        return None

    def _advance(self) -> Token:
        """Consume the lookahead token and pull the next one from the lexer."""
        token = self._lookahead
        if token.type != TokenType.EOF:
            self._lookahead, _ = self.lexer.next_token()
        self._consumed.append(token.lexeme)
        self._previous = token
        return token

    def _consume(self, token_type: TokenType) -> Token:
        """Consume token of expected type or raise error."""
        if self._peek().type == token_type:
            return self._advance()
        raise create_unexpected_token_error(token_type, self._peek())

    def _span_from(self, start_token: Token) -> SourceSpan:
        end = self._previous.location if self._previous is not None else start_token.location
        return SourceSpan(start_token.location, end)

    @staticmethod
    def _join_spans(lhs: Expr, rhs: Expr) -> Optional[SourceSpan]:
        if lhs.span is None or rhs.span is None:
            return None
        return SourceSpan(lhs.span.start, rhs.span.end)


def parse_string(source: Union[bytes, str], filename: str = "<string>") -> List[Function]:
    """
    Convenience function to parse a whole buffer.

    Args:
        source: Source bytes or text
        filename: Filename for error reporting

    Returns:
        Top-level functions in document order

    Raises:
        LexerError: If lexing fails
        ParseError: If parsing fails
    """
    return Parser(Lexer(source, filename)).parse()
