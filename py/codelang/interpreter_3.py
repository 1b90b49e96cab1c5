"""
Interpreter for the CODE language
Executes the AST

通过执行 Interpreter.execute(): 内部是循环执行 AST 中的各个 statement(语句).
只有在 parse 和语义分析都成功之后才会运行.
"""

import logging
import sys
from typing import Dict, Optional, TextIO, Tuple

from .ast_nodes import (
    Assignment, Binary, Conditional, Display, Expression, Grouping, Identifier, Literal, Loop,
    Program, Scan, Statement, Unary, VariableDeclaration,
)
from .errors import CodeRuntimeError
from .grammar import DataType, TYPE_KEYWORDS, is_compatible
from .tokens import Token
from .values import Value, apply_binary, apply_unary

logger = logging.getLogger(__name__)


class VariableTable:
    '''
    变量怎么管理: 整个程序只有一张表, IF/WHILE 块不开新的作用域
    name -> (declared type, current value or None while unassigned)
    '''
    def __init__(self):
        self.variables: Dict[str, Tuple[DataType, Optional[Value]]] = {}

    def define(self, name: str, data_type: DataType, value: Optional[Value]):
        # 新建(define)变量; a declaration inside a loop body simply binds again
        self.variables[name] = (data_type, value)

    def type_of(self, name: str, token: Optional[Token] = None) -> DataType:
        return self._entry(name, token)[0]

    def get(self, name: str, token: Optional[Token] = None) -> Value:
        # 获得变量值
        value = self._entry(name, token)[1]
        if value is None:
            raise CodeRuntimeError(f"Variable '{name}' is null.").at(token)
        return value

    def set(self, name: str, value: Value, token: Optional[Token] = None):
        # 修改变量值
        data_type = self.type_of(name, token)
        self.variables[name] = (data_type, value)

    def _entry(self, name: str, token: Optional[Token]) -> Tuple[DataType, Optional[Value]]:
        if name not in self.variables:
            # declared in a branch that never ran
            raise CodeRuntimeError(f"Variable '{name}' is not declared.").at(token)
        return self.variables[name]


class Interpreter:
    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self.stdin = stdin
        self.stdout = stdout

    def write(self, text: str):
        out = self.stdout or sys.stdout
        out.write(text)
        out.flush()

    def read_line(self) -> Optional[str]:
        line = (self.stdin or sys.stdin).readline()
        if line == '':
            return None
        return line.rstrip('\r\n')

    def execute(self, program: Program, table: Optional[VariableTable] = None) -> VariableTable:
        '''
        遍历执行每个 statement, 从而完成程序执行. note: 一个循环是作为一个 statement 出现的.
        每个 statement 会根据解析出的 AST, 而内部包含子 statement, 形成了层层嵌套的树结构
        '''
        table = VariableTable() if table is None else table
        logger.debug("executing program")
        self.execute_block(program, table)
        logger.debug("execution finished")
        return table

    def execute_block(self, block: Program, table: VariableTable):
        for statement in block.statements:
            self.eval_statement(statement, table)

    def eval_statement(self, node: Statement, table: VariableTable):
        logger.debug("executing %s", type(node).__name__)

        if isinstance(node, VariableDeclaration):
            # 变量定义
            data_type = TYPE_KEYWORDS[node.type_token.type]
            for declarator in node.declarators:
                value = None
                if declarator.initializer is not None:
                    value = self.eval_expression(declarator.initializer, table)
                table.define(declarator.name, data_type, value)

        elif isinstance(node, Assignment):
            # 变量赋值: 右边只求值一次, 链上每个变量都拿到同一个值
            value = self.eval_expression(node.value, table)
            for target in node.targets:
                table.set(target.lexeme, value, target)

        elif isinstance(node, Display):
            self.write(''.join(self.eval_expression(operand, table).text() for operand in node.operands))

        elif isinstance(node, Scan):
            self.eval_scan(node, table)

        elif isinstance(node, Conditional):
            # 第一个为真的分支执行; 都不为真时, 执行最后那个不带条件的 ELSE (如果有)
            for branch in node.branches:
                if branch.condition is None or self.eval_expression(branch.condition, table).is_true():
                    self.execute_block(branch.body, table)
                    break

        elif isinstance(node, Loop):
            # while 循环: 调用宿主语言的 while 完成, 每次迭代前重新求值条件
            while self.eval_expression(node.condition, table).is_true():
                self.execute_block(node.body, table)

        else:
            raise CodeRuntimeError(f"Unknown statement type: {type(node).__name__}")

    def eval_scan(self, node: Scan, table: VariableTable):
        line = self.read_line()
        if line is None:
            raise CodeRuntimeError("Missing input/s.")

        fields = line.replace(' ', '').split(',')
        if len(fields) != len(node.targets):
            raise CodeRuntimeError("Missing input/s.")

        for target, field in zip(node.targets, fields):
            value = Value.parse(field)
            if not is_compatible(table.type_of(target.lexeme, target), value.type):
                raise CodeRuntimeError(f'Unable to assign {value.type} on "{target.lexeme}".')
            table.set(target.lexeme, value, target)

    def eval_expression(self, node: Expression, table: VariableTable) -> Value:
        if isinstance(node, Literal):
            return node.value

        elif isinstance(node, Identifier):
            return table.get(node.name, node.token)

        elif isinstance(node, Grouping):
            return self.eval_expression(node.inner, table)

        elif isinstance(node, Binary):
            left = self.eval_expression(node.left, table)
            right = self.eval_expression(node.right, table)
            return apply_binary(node.operator, left, right)

        elif isinstance(node, Unary):
            operand = self.eval_expression(node.operand, table)
            return apply_unary(node.operator, operand)

        raise CodeRuntimeError(f"Unknown expression type: {type(node).__name__}")
