"""
Token definitions for the CODE language

做了啥: lexer 每次吐出一个 Token: [TokenType, lexeme, literal, line, column]
"""

from enum import Enum, auto
from dataclasses import dataclass, replace
from typing import Any


class TokenType(Enum):
    # Program framing
    BEGIN = auto()
    END = auto()
    CODE = auto()

    # Statements
    IF = auto()
    ELSE = auto()
    WHILE = auto()
    DISPLAY = auto()
    SCAN = auto()

    # Data types
    INT = auto()
    FLOAT = auto()
    CHAR = auto()
    BOOL = auto()

    # Literals
    INT_LITERAL = auto()
    FLOAT_LITERAL = auto()
    CHAR_LITERAL = auto()
    BOOL_LITERAL = auto()
    STRING_LITERAL = auto()
    ESCAPE = auto()          # [#], [&], ...

    IDENTIFIER = auto()

    # Arithmetic operators
    PLUS = auto()
    MINUS = auto()
    MULTIPLY = auto()
    DIVIDE = auto()
    MODULO = auto()
    ASSIGN = auto()

    # Comparison operators
    EQ = auto()      # ==
    NE = auto()      # <>
    LT = auto()      # <
    LE = auto()      # <=
    GT = auto()      # >
    GE = auto()      # >=

    # Logical operators
    AND = auto()
    OR = auto()
    NOT = auto()

    # Delimiters
    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()
    COLON = auto()
    DOLLAR = auto()     # newline in DISPLAY
    AMPERSAND = auto()  # concatenation in DISPLAY

    # Special
    NEWLINE = auto()
    ERROR = auto()
    EOF = auto()


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str
    literal: Any
    line: int
    column: int

    def as_identifier(self) -> 'Token':
        """Copy of this token reclassified as an identifier (used by parser recovery)."""
        return replace(self, type=TokenType.IDENTIFIER, literal=None)

    def __str__(self):
        return f"{self.type.name} {self.lexeme!r} ({self.line},{self.column})"
