"""
kscope Lexer - turns a byte buffer into tokens, one at a time.

The scan is forward only: a single byte of lookahead, no rewinding. Every
token comes back together with the text consumed to produce it, minus the
whitespace that was skipped on the way.
"""

import logging
from typing import Iterator, List, Optional, Tuple, Union

from .tokens import (
    Token, TokenType, SourceLocation, KEYWORDS, PUNCTUATION, WHITESPACE,
    SENTINEL, DEFAULT_NUMBER_BITS
)
from .operators import PUNCTUATION_OPERATORS
from .errors import create_invalid_character_error, create_number_overflow_error

logger = logging.getLogger(__name__)

_DIGIT_ZERO = ord("0")


def _is_digit(byte: int) -> bool:
    return 0x30 <= byte <= 0x39


def _is_alpha(byte: int) -> bool:
    return 0x41 <= byte <= 0x5A or 0x61 <= byte <= 0x7A


def _is_alnum(byte: int) -> bool:
    return _is_digit(byte) or _is_alpha(byte)


class Lexer:
    """
    kscope lexical analyzer.

    Pull-based: call ``next_token`` for each token. Once the end of input
    (or a zero byte) is reached, every further call returns the same EOF
    token without touching the buffer again.
    """

    def __init__(
        self,
        source: Union[bytes, bytearray, str],
        filename: str = "<input>",
        number_bits: int = DEFAULT_NUMBER_BITS
    ):
        """
        Initialize the lexer with an in-memory buffer.

        Args:
            source: Source bytes; a str is UTF-8 encoded first
            filename: Name used in diagnostics
            number_bits: Unsigned width integer literals must fit in
        """
        if isinstance(source, str):
            source = source.encode("utf-8")
        if number_bits <= 0:
            raise ValueError(f"number_bits must be positive, got {number_bits}")

        self.source = bytes(source)
        self.filename = filename
        self.number_bits = number_bits
        self.max_number = (1 << number_bits) - 1
        self.pos = 0
        self.line = 1
        self.column = 1
        self._eof: Optional[Token] = None

    @property
    def is_exhausted(self) -> bool:
        """True once EOF has been produced."""
        return self._eof is not None

    def next_token(self) -> Tuple[Token, str]:
        """
        Scan the next token.

        Returns:
            ``(token, consumed_text)`` where consumed_text is every byte read
            since the previous token with space, CR and LF left out.

        Raises:
            LexerError: On a byte that starts no token, or an integer
                literal wider than ``number_bits``
        """
        if self._eof is not None:
            return self._eof, ""

        self._skip_whitespace()
        location = self._location()
        current = self._look_ahead()

        if current == SENTINEL:
            self._eof = Token(TokenType.EOF, "", None, location)
            logger.debug("%s: end of input", location)
            return self._eof, ""

        if _is_digit(current):
            token = self._tokenize_number(location)
        elif _is_alpha(current):
            token = self._tokenize_identifier_or_keyword(location)
        else:
            token = self._tokenize_punctuation(location)

        logger.debug("%s: %s", location, token)
        return token, token.lexeme

    def tokenize(self) -> List[Token]:
        """
        Scan the remaining input.

        Returns:
            List of tokens ending with the EOF token
        """
        return list(self)

    def __iter__(self) -> Iterator[Token]:
        while True:
            token, _ = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    def _tokenize_number(self, location: SourceLocation) -> Token:
        """Consume a maximal digit run as an unsigned base-10 value."""
        start_pos = self.pos
        value = 0
        overflowed = False

        while _is_digit(self._look_ahead()):
            digit = self._consume() - _DIGIT_ZERO
            if overflowed:
                continue
            value = value * 10 + digit
            if value > self.max_number:
                overflowed = True

        lexeme = self.source[start_pos:self.pos].decode("ascii")
        if overflowed:
            raise create_number_overflow_error(lexeme, self.number_bits, location)

        return Token(TokenType.NUMBER, lexeme, value, location)

    def _tokenize_identifier_or_keyword(self, location: SourceLocation) -> Token:
        """Consume a maximal alphanumeric run; keywords match exactly."""
        start_pos = self.pos

        while _is_alnum(self._look_ahead()):
            self._consume()

        lexeme = self.source[start_pos:self.pos].decode("ascii")
        token_type = KEYWORDS.get(lexeme, TokenType.IDENTIFIER)
        value = lexeme if token_type == TokenType.IDENTIFIER else None

        return Token(token_type, lexeme, value, location)

    def _tokenize_punctuation(self, location: SourceLocation) -> Token:
        """Consume exactly one byte and map it to punctuation or an operator."""
        byte = self._consume()
        token_type = PUNCTUATION.get(byte)
        if token_type is None:
            raise create_invalid_character_error(byte, location)

        value = PUNCTUATION_OPERATORS.get(byte) if token_type == TokenType.OPERATOR else None
        return Token(token_type, chr(byte), value, location)

    def _skip_whitespace(self):
        while self._look_ahead() in WHITESPACE:
            self._consume()

    def _look_ahead(self) -> int:
        if self.pos < len(self.source):
            return self.source[self.pos]
        return SENTINEL

    def _consume(self) -> int:
        """Advance by one byte, updating line/column."""
        byte = self.source[self.pos]
        self.pos += 1
        if byte == 0x0A:
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return byte

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)


def tokenize_string(source: Union[bytes, str], filename: str = "<string>") -> List[Token]:
    """
    Convenience function to tokenize a whole buffer.

    Args:
        source: Source bytes or text
        filename: Filename for error reporting

    Returns:
        List of tokens including the final EOF token

    Raises:
        LexerError: If lexing fails
    """
    return Lexer(source, filename).tokenize()
