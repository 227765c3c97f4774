"""Token model for nepscript.

Tokens are produced one at a time by the lexer and are immutable once
produced. Each token carries its kind, the exact lexeme and the offset of
its first character in the source string.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple


class TokenKind(Enum):
    IDENTIFIER = 'Identifier'
    NUMBER = 'Number'
    STRING = 'String'
    OPERATOR = 'Operator'
    SEMICOLON = 'Semicolon'
    COMMA = 'Comma'
    LEFT_PAREN = 'LeftParen'
    RIGHT_PAREN = 'RightParen'
    LEFT_BRACE = 'LeftBrace'
    RIGHT_BRACE = 'RightBrace'
    LEFT_SQUARE = 'LeftSquare'
    RIGHT_SQUARE = 'RightSquare'
    PRINT = 'Print'
    IF = 'If'
    ELSE_IF = 'ElseIf'
    ELSE = 'Else'
    WHILE = 'While'
    BREAK = 'Break'
    CONTINUE = 'Continue'
    FUNCTION = 'Function'
    RETURN = 'Return'
    BOOLEAN = 'Boolean'
    KEYWORD = 'Keyword'
    NULL = 'Null'
    EOF = 'EOF'

    def __repr__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    offset: int = 0

    def __repr__(self) -> str:
        return f"Token({self.kind.value}, {self.text!r}, @{self.offset})"


# Keywords containing a space. They are matched by a fixed-span comparison
# before the identifier scan, because the space would end a normal identifier.
MULTIWORD_KEYWORDS: List[Tuple[str, TokenKind]] = [
    ('haina bhane', TokenKind.ELSE),
    ('jaba samma', TokenKind.WHILE),
    ('jaari rakh', TokenKind.CONTINUE),
    ('kaam ra firta', TokenKind.FUNCTION),
]

# Single-word keywords; the lexeme is scanned as an identifier first and
# reclassified through this table.
KEYWORDS: Dict[str, TokenKind] = {
    'nikaal': TokenKind.PRINT,
    'yedi': TokenKind.IF,
    'navaye': TokenKind.ELSE_IF,
    'sahi': TokenKind.BOOLEAN,
    'galat': TokenKind.BOOLEAN,
    'bhayo': TokenKind.BREAK,
    'kaam': TokenKind.FUNCTION,
    'firta': TokenKind.RETURN,
    'rakh': TokenKind.KEYWORD,
}

DECLARE_KEYWORD = 'rakh'
RETURNING_FUNCTION_KEYWORD = 'kaam ra firta'
TRUE_LITERAL = 'sahi'
FALSE_LITERAL = 'galat'
NULL_LITERAL = 'null'

TWO_CHAR_OPERATORS = ('<=', '>=', '==', '!=')
SINGLE_CHAR_OPERATORS = '=+-*/%<>!'

PUNCTUATION: Dict[str, TokenKind] = {
    ';': TokenKind.SEMICOLON,
    ',': TokenKind.COMMA,
    '(': TokenKind.LEFT_PAREN,
    ')': TokenKind.RIGHT_PAREN,
    '{': TokenKind.LEFT_BRACE,
    '}': TokenKind.RIGHT_BRACE,
    '[': TokenKind.LEFT_SQUARE,
    ']': TokenKind.RIGHT_SQUARE,
}
