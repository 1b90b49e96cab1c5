"""
Runtime values and the operator table

每个运行时的值都带着自己的 DataType, 二元/一元运算按照下面的表来做:
- Int 与 Float 混合运算时提升为 Float
- 不允许的操作数组合, 与 grammar.binary_result_type 完全一致
"""

import math
import operator
from dataclasses import dataclass
from typing import Any, Callable, Dict

from .errors import CodeRuntimeError
from .grammar import (
    DataType, BOOL_PATTERN, CHAR_PATTERN, FLOAT_PATTERN, INT_PATTERN, STRING_PATTERN,
    LITERAL_TYPES, NUMERIC, binary_result_type, unary_result_type,
)
from .tokens import Token, TokenType


@dataclass(frozen=True)
class Value:
    type: DataType
    data: Any

    def text(self) -> str:
        """Display form of the value."""
        if self.type == DataType.BOOL:
            return "TRUE" if self.data else "FALSE"
        if self.type == DataType.FLOAT:
            text = repr(float(self.data))
            return text[:-2] if text.endswith('.0') else text
        return str(self.data)

    def is_true(self) -> bool:
        return self.type == DataType.BOOL and bool(self.data)

    @classmethod
    def from_token(cls, token: Token) -> 'Value':
        return cls(LITERAL_TYPES[token.type], token.literal)

    @classmethod
    def parse(cls, text: str) -> 'Value':
        """
        Typed value of one SCAN input field, recognised the same way the lexer
        recognises literals. Bare TRUE/FALSE and bare single characters are accepted
        too since console input is not source code.
        """
        if INT_PATTERN.match(text):
            return cls(DataType.INT, int(text))
        if FLOAT_PATTERN.match(text):
            return cls(DataType.FLOAT, float(text))
        if BOOL_PATTERN.match(text):
            return cls(DataType.BOOL, text == '"TRUE"')
        if text in ('TRUE', 'FALSE'):
            return cls(DataType.BOOL, text == 'TRUE')
        if CHAR_PATTERN.match(text):
            return cls(DataType.CHAR, text[len(text) // 2])
        if len(text) == 1:
            return cls(DataType.CHAR, text)
        if STRING_PATTERN.match(text):
            return cls(DataType.STRING, text[1:-1])
        return cls(DataType.STRING, text)


NEWLINE = Value(DataType.STRING, "\n")


def _int_div(a: int, b: int) -> int:
    # truncates toward zero
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def _int_mod(a: int, b: int) -> int:
    return a - b * _int_div(a, b)


def _divide(a, b, is_float):
    if b == 0:
        raise CodeRuntimeError("Division by zero.")
    return a / b if is_float else _int_div(a, b)


def _modulo(a, b, is_float):
    if b == 0:
        raise CodeRuntimeError("Division by zero.")
    return math.fmod(a, b) if is_float else _int_mod(a, b)


ARITHMETIC_OPS: Dict[TokenType, Callable] = {
    TokenType.PLUS: lambda a, b, is_float: a + b,
    TokenType.MINUS: lambda a, b, is_float: a - b,
    TokenType.MULTIPLY: lambda a, b, is_float: a * b,
    TokenType.DIVIDE: _divide,
    TokenType.MODULO: _modulo,
}

COMPARISON_OPS: Dict[TokenType, Callable] = {
    TokenType.EQ: operator.eq,
    TokenType.NE: operator.ne,
    TokenType.LT: operator.lt,
    TokenType.LE: operator.le,
    TokenType.GT: operator.gt,
    TokenType.GE: operator.ge,
}

LOGICAL_OPS: Dict[TokenType, Callable] = {
    TokenType.AND: lambda a, b: a and b,
    TokenType.OR: lambda a, b: a or b,
}


def apply_binary(op: Token, left: Value, right: Value) -> Value:
    if binary_result_type(op.type, left.type, right.type) is None:
        raise CodeRuntimeError(
            f"Operator '{op.lexeme}' cannot be applied to operands of type {left.type} and {right.type}",
            op.line, op.column)

    if op.type in ARITHMETIC_OPS:
        is_float = DataType.FLOAT in (left.type, right.type)
        try:
            result = ARITHMETIC_OPS[op.type](left.data, right.data, is_float)
            if is_float:
                result = float(result)
        except CodeRuntimeError as e:
            raise e.at(op)
        except OverflowError:
            # an Int too large to become a Float
            raise CodeRuntimeError("Number too large.", op.line, op.column)
        return Value(DataType.FLOAT if is_float else DataType.INT, result)

    if op.type in COMPARISON_OPS:
        return Value(DataType.BOOL, COMPARISON_OPS[op.type](left.data, right.data))

    if op.type in LOGICAL_OPS:
        return Value(DataType.BOOL, LOGICAL_OPS[op.type](left.data, right.data))

    raise CodeRuntimeError(f"Unknown operator '{op.lexeme}'.", op.line, op.column)


def apply_unary(op: Token, operand: Value) -> Value:
    if unary_result_type(op.type, operand.type) is None:
        raise CodeRuntimeError(
            f"Operator '{op.lexeme}' cannot be applied to {operand.type}", op.line, op.column)

    if op.type == TokenType.NOT:
        # the operand counts as true only when its text contains TRUE
        return Value(DataType.BOOL, "TRUE" not in operand.text())
    if op.type == TokenType.MINUS:
        if operand.type not in NUMERIC:
            raise CodeRuntimeError(
                f"Operator '-' cannot be applied to {operand.type}", op.line, op.column)
        return Value(operand.type, -operand.data)
    return operand
