"""
Error handling for the kscope parser.

Every grammar violation is fatal. A ParseError names the construct the parser
was looking for and the token it found instead; there is no resynchronization.
"""

from typing import Optional, List, Union

from ..lexer.tokens import Token, TokenType, SourceLocation
from ..lexer.errors import Diagnostic, suggest_keyword_corrections


class ParseError(Exception):
    """
    Exception raised when the parser meets a token the grammar forbids.

    ``expected`` describes what the grammar wanted; ``token`` is what it got.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        token: Optional[Token] = None,
        expected: Optional[str] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )
        self.token = token
        self.expected = expected

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    @property
    def category(self) -> Optional[str]:
        return PARSER_ERROR_CODES.get(self.code)

    def __str__(self) -> str:
        return str(self.diagnostic)


_TOKEN_NAMES = {
    TokenType.LEFT_PAREN: "'('",
    TokenType.RIGHT_PAREN: "')'",
    TokenType.COMMA: "','",
    TokenType.THEN: "'then'",
    TokenType.ELSE: "'else'",
    TokenType.IDENTIFIER: "identifier",
    TokenType.NUMBER: "number",
}


def describe_expected(expected: Union[TokenType, str]) -> str:
    if isinstance(expected, TokenType):
        return _TOKEN_NAMES.get(expected, expected.name)
    return expected


def _keyword_suggestions(found: Token) -> List[str]:
    if not found.is_identifier:
        return []
    return [f"Did you mean '{k}'?" for k in suggest_keyword_corrections(found.lexeme)]


# Common parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P002": "Missing keyword",
    "P005": "Invalid expression",
    "P008": "Malformed function signature",
    "P010": "Unexpected end of input",
    "P013": "Malformed argument list",
    "P014": "Nesting too deep",
}


def create_unexpected_token_error(expected: Union[TokenType, str], found: Token) -> ParseError:
    """Create an error for an unexpected token."""
    expected_str = describe_expected(expected)
    if found.is_eof:
        return create_unexpected_eof_error(expected_str, found)

    return ParseError(
        message=f"Expected {expected_str}, found {found.describe()}",
        location=found.location,
        token=found,
        expected=expected_str,
        code="P001",
        help_text=f"The parser expected to see {expected_str} at this position.",
        suggestions=_keyword_suggestions(found) or None
    )


def create_missing_keyword_error(keyword: TokenType, construct: str, found: Token) -> ParseError:
    """Create an error for a missing 'then' / 'else' in a conditional."""
    expected_str = describe_expected(keyword)
    if found.is_eof:
        return create_unexpected_eof_error(expected_str, found)

    return ParseError(
        message=f"Expected {expected_str} in {construct}, found {found.describe()}",
        location=found.location,
        token=found,
        expected=expected_str,
        code="P002",
        help_text="Conditionals take the form: if <expr> then <expr> else <expr>",
        suggestions=_keyword_suggestions(found) or None
    )


def create_invalid_expression_error(found: Token) -> ParseError:
    """Create an error for a token that cannot start an expression."""
    if found.is_eof:
        return create_unexpected_eof_error("expression", found)

    return ParseError(
        message=f"Expected expression, found {found.describe()}",
        location=found.location,
        token=found,
        expected="expression",
        code="P005",
        help_text="An expression starts with a number, an identifier, '(' or 'if'.",
        suggestions=_keyword_suggestions(found) or None
    )


def create_malformed_prototype_error(expected: Union[TokenType, str], found: Token,
                                     name: Optional[str] = None) -> ParseError:
    """Create an error for a broken function signature."""
    expected_str = describe_expected(expected)
    if found.is_eof:
        return create_unexpected_eof_error(expected_str, found)

    where = f" in prototype of '{name}'" if name else " in prototype"
    return ParseError(
        message=f"Expected {expected_str}{where}, found {found.describe()}",
        location=found.location,
        token=found,
        expected=expected_str,
        code="P008",
        help_text="Prototypes take the form: name(param1, param2, ...)",
    )


def create_argument_list_error(callee: str, found: Token) -> ParseError:
    """Create an error for a call whose arguments are not comma separated."""
    if found.is_eof:
        return create_unexpected_eof_error(f"')' or ',' in arguments of call to '{callee}'", found)

    return ParseError(
        message=f"Expected ')' or ',' in arguments of call to '{callee}', found {found.describe()}",
        location=found.location,
        token=found,
        expected="')' or ','",
        code="P013",
        help_text="Call arguments must be separated by commas.",
        suggestions=[f"Insert ',' before {found.describe()}"]
    )


def create_unexpected_eof_error(expected: str, found: Token) -> ParseError:
    """Create an error for unexpected end of input."""
    return ParseError(
        message=f"Unexpected end of input, expected {expected}",
        location=found.location,
        token=found,
        expected=expected,
        code="P010",
        help_text=f"The parser reached the end of the input while expecting {expected}.",
    )


def create_nesting_too_deep_error(max_depth: int, found: Token) -> ParseError:
    """Create an error for an expression nested past the parser's depth limit."""
    return ParseError(
        message=f"{PARSER_ERROR_CODES['P014']}: more than {max_depth} levels at {found.describe()}",
        location=found.location,
        token=found,
        expected=f"expression nested at most {max_depth} deep",
        code="P014",
        help_text="Split the expression into smaller functions.",
    )
