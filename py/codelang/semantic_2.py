"""
Semantic analyzer for the CODE language
Type-checks the AST before anything runs

做了什么: 遍历一次 AST, 只记录每个变量声明的类型, 遇到第一个类型/作用域错误就停.
作用域是扁平的: IF/WHILE 的块和整个程序共用同一张表, 表是显式传进每个函数的.
"""

import logging
from typing import Dict, Iterator, Optional

from .ast_nodes import (
    Assignment, Binary, Conditional, Display, Expression, Grouping, Identifier, Literal, Loop,
    Program, Scan, Statement, Unary, VariableDeclaration,
)
from .errors import CodeSemanticError
from .grammar import DataType, TYPE_KEYWORDS, binary_result_type, is_compatible, unary_result_type
from .tokens import Token

logger = logging.getLogger(__name__)


class SymbolTable:
    """identifier -> declared DataType, one table for the whole program"""

    def __init__(self):
        self.types: Dict[str, DataType] = {}

    def __contains__(self, name: str) -> bool:
        return name in self.types

    def declare(self, name: str, data_type: DataType):
        self.types[name] = data_type

    def type_of(self, name: str) -> DataType:
        return self.types[name]


def _fail(message: str, token: Token):
    raise CodeSemanticError(message, token.line, token.column)


def _identifiers(node: Expression) -> Iterator[Identifier]:
    """Every Identifier inside an expression, left to right."""
    if isinstance(node, Identifier):
        yield node
    elif isinstance(node, Grouping):
        yield from _identifiers(node.inner)
    elif isinstance(node, Unary):
        yield from _identifiers(node.operand)
    elif isinstance(node, Binary):
        yield from _identifiers(node.left)
        yield from _identifiers(node.right)


class SemanticAnalyzer:
    def analyze(self, program: Program, table: Optional[SymbolTable] = None) -> SymbolTable:
        table = SymbolTable() if table is None else table
        logger.debug("analyzing program")
        self.check_block(program, table)
        logger.debug("analysis finished, %d variables declared", len(table.types))
        return table

    def check_block(self, block: Program, table: SymbolTable):
        for statement in block.statements:
            self.check_statement(statement, table)

    def check_statement(self, node: Statement, table: SymbolTable):
        if isinstance(node, VariableDeclaration):
            self.check_declaration(node, table)
        elif isinstance(node, Assignment):
            self.check_assignment(node, table)
        elif isinstance(node, Display):
            # 输出项只要求引用的变量已声明, 算出来的值类型留给运行时去检查
            for operand in node.operands:
                for identifier in _identifiers(operand):
                    if identifier.name not in table:
                        _fail(f'Variable "{identifier.name}" does not exists.', identifier.token)
        elif isinstance(node, Scan):
            for target in node.targets:
                if target.lexeme not in table:
                    _fail(f'Variable "{target.lexeme}" does not exists.', node.token)
        elif isinstance(node, Conditional):
            for branch in node.branches:
                if branch.condition is not None:
                    self.check_condition(branch.condition, branch.token, table)
                self.check_block(branch.body, table)
        elif isinstance(node, Loop):
            self.check_condition(node.condition, node.token, table)
            self.check_block(node.body, table)
        else:
            raise CodeSemanticError(f"Unknown statement type: {type(node).__name__}")

    def check_declaration(self, node: VariableDeclaration, table: SymbolTable):
        data_type = TYPE_KEYWORDS[node.type_token.type]

        for declarator in node.declarators:
            if declarator.name in table:
                _fail(f'Variable "{declarator.name}" already exists.', node.type_token)

            if declarator.initializer is not None:
                value_type = self.check_expression(declarator.initializer, table)
                if not is_compatible(data_type, value_type):
                    _fail(f'Unable to assign {value_type} on "{declarator.name}".', node.type_token)

            table.declare(declarator.name, data_type)

    def check_assignment(self, node: Assignment, table: SymbolTable):
        value_type = None
        for target, equals in zip(node.targets, node.equals):
            if target.lexeme not in table:
                _fail(f'Variable "{target.lexeme}" does not exists.', equals)

            if value_type is None:
                value_type = self.check_expression(node.value, table)
            if not is_compatible(table.type_of(target.lexeme), value_type):
                _fail(f'Unable to assign {value_type} on "{target.lexeme}".', equals)

    def check_condition(self, condition: Expression, token: Token, table: SymbolTable):
        if self.check_expression(condition, table) != DataType.BOOL:
            _fail(f"Expression is not {DataType.BOOL}", token)

    def check_expression(self, node: Expression, table: SymbolTable) -> DataType:
        if isinstance(node, Literal):
            return node.value.type

        elif isinstance(node, Identifier):
            if node.name not in table:
                _fail(f'Variable "{node.name}" does not exists.', node.token)
            return table.type_of(node.name)

        elif isinstance(node, Grouping):
            return self.check_expression(node.inner, table)

        elif isinstance(node, Unary):
            operand_type = self.check_expression(node.operand, table)
            result = unary_result_type(node.operator.type, operand_type)
            if result is None:
                _fail(f"Operator '{node.operator.lexeme}' cannot be applied to {operand_type}", node.operator)
            return result

        elif isinstance(node, Binary):
            left = self.check_expression(node.left, table)
            right = self.check_expression(node.right, table)
            result = binary_result_type(node.operator.type, left, right)
            if result is None:
                _fail(f"Operator '{node.operator.lexeme}' cannot be applied to operands of type {left} and {right}",
                      node.operator)
            return result

        raise CodeSemanticError(f"Unknown expression type: {type(node).__name__}")


def analyze(program: Program) -> SymbolTable:
    return SemanticAnalyzer().analyze(program)
