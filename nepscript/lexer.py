"""Lexer for nepscript.

The lexer turns raw source text into tokens one at a time. The core is the
pure function `scan_token`, which takes a cursor into the source and returns
the next token together with the advanced cursor. `Lexer` wraps it with the
state needed by the compiler front end, and `tokenize` drains a whole source
string into a list terminated by a single EOF token.

Rules are tried in a fixed priority order: the increment operator, whitespace,
`null`, keywords containing spaces, identifiers and keywords, integer
numbers, operators, string literals and finally punctuation.
"""

from __future__ import annotations

import string
from typing import List, Optional, Tuple

from .errors import InvalidStateError, LexerError
from .tokens import (
    KEYWORDS, MULTIWORD_KEYWORDS, NULL_LITERAL, PUNCTUATION,
    SINGLE_CHAR_OPERATORS, TWO_CHAR_OPERATORS, Token, TokenKind,
)

IDENT_START = frozenset(string.ascii_letters)
IDENT_CHARS = frozenset(string.ascii_letters + string.digits + '_')
DIGITS = frozenset(string.digits)


def scan_token(source: str, cursor: int) -> Tuple[Token, int]:
    """Return the token starting at `cursor` and the cursor just past it."""
    length = len(source)
    while True:
        if cursor >= length:
            return Token(TokenKind.EOF, '', cursor), cursor
        if source.startswith('++', cursor):
            return Token(TokenKind.OPERATOR, '++', cursor), cursor + 2
        if source[cursor].isspace():
            cursor += 1
            continue
        break

    if source.startswith(NULL_LITERAL, cursor):
        return Token(TokenKind.NULL, NULL_LITERAL, cursor), cursor + len(NULL_LITERAL)

    c = source[cursor]
    if c in IDENT_START:
        return _scan_identifier_or_keyword(source, cursor)
    if c in DIGITS:
        end = cursor
        while end < length and source[end] in DIGITS:
            end += 1
        return Token(TokenKind.NUMBER, source[cursor:end], cursor), end
    if c in SINGLE_CHAR_OPERATORS:
        pair = source[cursor:cursor + 2]
        if pair in TWO_CHAR_OPERATORS:
            return Token(TokenKind.OPERATOR, pair, cursor), cursor + 2
        return Token(TokenKind.OPERATOR, c, cursor), cursor + 1
    if c == '"':
        # no escape sequences: the next quote always terminates the literal
        end = source.find('"', cursor + 1)
        if end == -1:
            raise LexerError('UnterminatedString', 'unterminated string literal', cursor, c)
        return Token(TokenKind.STRING, source[cursor + 1:end], cursor), end + 1
    if c in PUNCTUATION:
        return Token(PUNCTUATION[c], c, cursor), cursor + 1
    raise LexerError('UnexpectedCharacter', f"unexpected character {c!r}", cursor, c)


def _scan_identifier_or_keyword(source: str, cursor: int) -> Tuple[Token, int]:
    for text, kind in MULTIWORD_KEYWORDS:
        if source.startswith(text, cursor):
            return Token(kind, text, cursor), cursor + len(text)
    end = cursor
    while end < len(source) and source[end] in IDENT_CHARS:
        end += 1
    lexeme = source[cursor:end]
    kind = KEYWORDS.get(lexeme, TokenKind.IDENTIFIER)
    return Token(kind, lexeme, cursor), end


class Lexer:
    """Stateful wrapper around `scan_token` used by the compiler facade."""
    def __init__(self):
        self._source: Optional[str] = None
        self._cursor = 0

    def init(self, source: str) -> None:
        self._source = source
        self._cursor = 0

    def reset(self) -> None:
        self._source = None
        self._cursor = 0

    @property
    def cursor(self) -> int:
        return self._cursor

    def has_more(self) -> bool:
        if self._source is None:
            return False
        return self._cursor < len(self._source)

    def next_token(self) -> Token:
        if self._source is None:
            raise InvalidStateError('lexer has no source; call init() before next_token()')
        token, self._cursor = scan_token(self._source, self._cursor)
        return token


def tokenize(source: str, lexer: Optional[Lexer] = None) -> List[Token]:
    """Convert source code into a list of tokens ending with one EOF token."""
    if lexer is None:
        lexer = Lexer()
    lexer.init(source)
    tokens: List[Token] = []
    while True:
        token = lexer.next_token()
        tokens.append(token)
        if token.kind is TokenKind.EOF:
            return tokens
