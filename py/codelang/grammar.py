"""
Grammar tables shared by every stage of the pipeline

- 关键字 / 数据类型关键字的识别
- 二元运算符优先级
- Int 与 Float 互相兼容 (numeric coercion)
- 字面量的正则
"""

import re
from enum import Enum
from typing import Optional

from .tokens import Token, TokenType


class DataType(Enum):
    INT = "Int"
    FLOAT = "Float"
    CHAR = "Char"
    BOOL = "Bool"
    STRING = "String"

    def __str__(self):
        return self.value


KEYWORDS = {
    'BEGIN': TokenType.BEGIN,
    'END': TokenType.END,
    'CODE': TokenType.CODE,
    'IF': TokenType.IF,
    'ELSE': TokenType.ELSE,
    'WHILE': TokenType.WHILE,
    'DISPLAY': TokenType.DISPLAY,
    'SCAN': TokenType.SCAN,
    'AND': TokenType.AND,
    'OR': TokenType.OR,
    'NOT': TokenType.NOT,
    'INT': TokenType.INT,
    'FLOAT': TokenType.FLOAT,
    'CHAR': TokenType.CHAR,
    'BOOL': TokenType.BOOL,
}

# declarable types
TYPE_KEYWORDS = {
    TokenType.INT: DataType.INT,
    TokenType.FLOAT: DataType.FLOAT,
    TokenType.CHAR: DataType.CHAR,
    TokenType.BOOL: DataType.BOOL,
}

LITERAL_TYPES = {
    TokenType.INT_LITERAL: DataType.INT,
    TokenType.FLOAT_LITERAL: DataType.FLOAT,
    TokenType.CHAR_LITERAL: DataType.CHAR,
    TokenType.BOOL_LITERAL: DataType.BOOL,
    TokenType.STRING_LITERAL: DataType.STRING,
    TokenType.ESCAPE: DataType.CHAR,
}

# 数字越大, 优先级越高; 0 表示不是二元运算符
PRECEDENCE = {
    TokenType.OR: 1,
    TokenType.AND: 1,
    TokenType.EQ: 2,
    TokenType.NE: 2,
    TokenType.LT: 2,
    TokenType.LE: 2,
    TokenType.GT: 2,
    TokenType.GE: 2,
    TokenType.PLUS: 3,
    TokenType.MINUS: 3,
    TokenType.MULTIPLY: 4,
    TokenType.DIVIDE: 4,
    TokenType.MODULO: 4,
}

ARITHMETIC = {TokenType.PLUS, TokenType.MINUS, TokenType.MULTIPLY, TokenType.DIVIDE, TokenType.MODULO}
COMPARISON = {TokenType.EQ, TokenType.NE, TokenType.LT, TokenType.LE, TokenType.GT, TokenType.GE}
LOGICAL = {TokenType.AND, TokenType.OR}
UNARY = {TokenType.PLUS, TokenType.MINUS, TokenType.NOT}

NUMERIC = {DataType.INT, DataType.FLOAT}
NON_NUMERIC = {DataType.CHAR, DataType.STRING, DataType.BOOL}

INT_PATTERN = re.compile(r'^\d+$')
FLOAT_PATTERN = re.compile(r'^\d*\.\d+$')
BOOL_PATTERN = re.compile(r'^"(?:TRUE|FALSE)"$')
STRING_PATTERN = re.compile(r'^"[^"]*"$')
CHAR_PATTERN = re.compile(r"^'(?:\[[\[\]&$#]\]|[^\[\]&$#'])'$")
ESCAPE_PATTERN = re.compile(r'^\[[\[\]&$#]\]$')


def precedence(token_type: TokenType) -> int:
    return PRECEDENCE.get(token_type, 0)


def is_compatible(expected: DataType, actual: DataType) -> bool:
    """Int and Float coerce into each other; every other pair must match exactly."""
    if expected in NUMERIC and actual in NUMERIC:
        return True
    return expected == actual


def binary_result_type(op: TokenType, left: DataType, right: DataType) -> Optional[DataType]:
    """
    Static type of `left op right`, or None when the operand pair is rejected.
    The evaluator's operation table (values.py) accepts exactly the same pairs.
    """
    if not is_compatible(left, right):
        return None
    if op in ARITHMETIC and left in NON_NUMERIC and right in NON_NUMERIC:
        return None
    if op in LOGICAL and (left != DataType.BOOL or right != DataType.BOOL):
        return None
    if op in COMPARISON:
        return DataType.BOOL
    return left


def unary_result_type(op: TokenType, operand: DataType) -> Optional[DataType]:
    """NOT needs a Bool; + and - pass the operand type through (negating a non-number fails at run time)."""
    if op == TokenType.NOT:
        return DataType.BOOL if operand == DataType.BOOL else None
    return operand


def classify_word(text: str, line: int, column: int) -> Token:
    """
    关键字 / 标识符
    Upper-case words that are not reserved look like misspelt keywords and come back as ERROR
    tokens; the parser turns them into identifiers when they are being declared or already are.
    """
    token_type = KEYWORDS.get(text)
    if token_type is not None:
        return Token(token_type, text, None, line, column)
    if text == 'STRING':
        return Token(TokenType.ERROR, text, "Invalid data type.", line, column)
    if len(text) > 1 and text.isalpha() and text.isupper():
        return Token(TokenType.ERROR, text, "Invalid keyword.", line, column)
    return Token(TokenType.IDENTIFIER, text, None, line, column)
