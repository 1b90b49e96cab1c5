"""
Errors raised by the pipeline stages

Lexical errors never get here: the lexer hands them to the parser as ERROR tokens,
and the parser raises them as CodeSyntaxError.
"""

from typing import Optional


class CodeError(Exception):
    phase = "error"

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    @property
    def has_position(self) -> bool:
        return self.line is not None and self.column is not None

    def at(self, token) -> 'CodeError':
        """Same error positioned at `token`, unless it already carries a position."""
        if self.has_position or token is None:
            return self
        return type(self)(self.message, token.line, token.column)

    def render(self) -> str:
        if self.has_position:
            return f"({self.line},{self.column}): {self.message}"
        return self.message

    def __str__(self):
        return self.render()


class CodeSyntaxError(CodeError):
    phase = "syntax"


class CodeSemanticError(CodeError):
    phase = "semantic"


class CodeRuntimeError(CodeError):
    phase = "runtime"
