"""
AST Node definitions for the CODE language

Every node keeps the token(s) it was parsed from, so later stages can report (row,column).
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .tokens import Token
from .values import Value


@dataclass(frozen=True)
class ASTNode:
    pass


# ---- Expressions ----

@dataclass(frozen=True)
class Expression(ASTNode):
    pass


@dataclass(frozen=True)
class Literal(Expression):
    token: Token
    value: Value


@dataclass(frozen=True)
class Identifier(Expression):
    token: Token

    @property
    def name(self) -> str:
        return self.token.lexeme


@dataclass(frozen=True)
class Grouping(Expression):
    # ( inner )
    open_paren: Token
    inner: Expression
    close_paren: Token


@dataclass(frozen=True)
class Unary(Expression):
    operator: Token
    operand: Expression


@dataclass(frozen=True)
class Binary(Expression):
    left: Expression
    operator: Token
    right: Expression


# ---- Statements ----

@dataclass(frozen=True)
class Statement(ASTNode):
    pass


@dataclass(frozen=True)
class Program(ASTNode):
    statements: Tuple[Statement, ...]


@dataclass(frozen=True)
class Declarator(ASTNode):
    name_token: Token
    initializer: Optional[Expression]

    @property
    def name(self) -> str:
        return self.name_token.lexeme


@dataclass(frozen=True)
class VariableDeclaration(Statement):
    # INT a, b = 1, c
    type_token: Token
    declarators: Tuple[Declarator, ...]


@dataclass(frozen=True)
class Assignment(Statement):
    # a = b = expr: targets[i] 后面跟着 equals[i]
    targets: Tuple[Token, ...]
    equals: Tuple[Token, ...]
    value: Expression


@dataclass(frozen=True)
class Display(Statement):
    token: Token
    operands: Tuple[Expression, ...]


@dataclass(frozen=True)
class Scan(Statement):
    token: Token
    targets: Tuple[Token, ...]


@dataclass(frozen=True)
class Branch(ASTNode):
    # condition is None for the trailing unconditional ELSE
    token: Token
    condition: Optional[Expression]
    body: Program


@dataclass(frozen=True)
class Conditional(Statement):
    branches: Tuple[Branch, ...]


@dataclass(frozen=True)
class Loop(Statement):
    token: Token
    condition: Expression
    body: Program
