"""
Parser for the CODE language
Pulls tokens from the lexer and builds an Abstract Syntax Tree (AST)

做了什么: 边从 lexer 取 token, 边做语法 parse. 输出语法树(AST)
- 通过调用 Parser.parse_program()
- 所用算法: 从顶往下, 递归下降; 表达式部分用 precedence climbing
- BEGIN/END 块, IF/ELSE IF/ELSE, WHILE 三者的处理, 可以看出递归下降法怎么做的
- 只看一个 token 的 lookahead, 遇到第一个错误就停
"""

import logging
from contextlib import contextmanager
from typing import List, Optional, Set

from .ast_nodes import (
    Assignment, Binary, Branch, Conditional, Declarator, Display, Expression, Grouping, Identifier,
    Literal, Loop, Program, Scan, Statement, Unary, VariableDeclaration,
)
from .config import DEFAULT_MAX_DEPTH
from .errors import CodeSyntaxError
from .grammar import LITERAL_TYPES, TYPE_KEYWORDS, UNARY, precedence
from .lexer_0 import Lexer
from .tokens import Token, TokenType
from .values import NEWLINE, Value

logger = logging.getLogger(__name__)

# lexer errors that only mean "this word looks like a keyword"
WORD_ERRORS = ("Invalid keyword.", "Invalid data type.")


class Parser:
    def __init__(self, lexer: Lexer, max_depth: int = DEFAULT_MAX_DEPTH):
        self.lexer = lexer
        self.max_depth = max_depth
        self.depth = 0
        self.can_declare = True         # declarations must lead their block
        self.in_declaration = False
        self.declared: Set[str] = set()  # names seen in declarations, for ERROR token recovery
        self.current = self.recover(lexer.next_token(), None)

    def error(self, msg: str):
        """ parse 出错时 """
        token = self.current
        raise CodeSyntaxError(msg, token.line, token.column)

    def match(self, *token_types: TokenType) -> bool:
        return self.current.type in token_types

    def advance(self) -> Token:
        token = self.current
        self.current = self.recover(self.lexer.next_token(), token)
        return token

    def expect(self, token_type: TokenType) -> Token:
        if self.current.type != token_type:
            self.error(f"Unexpected {self.current.type.name} token expected {token_type.name} token")
        return self.advance()

    def recover(self, token: Token, previous: Optional[Token]) -> Token:
        """
        An ERROR token right after a type keyword (or a comma in a declaration list), or one
        spelling an already declared name, is really an identifier: 返回一个新的 IDENTIFIER token.
        Any other ERROR token is a syntax error.
        """
        if token.type != TokenType.ERROR:
            return token

        declaring = previous is not None and (
            previous.type in TYPE_KEYWORDS or (self.in_declaration and previous.type == TokenType.COMMA))
        if (declaring and token.literal in WORD_ERRORS) or token.lexeme in self.declared:
            logger.debug("treating %r at (%d,%d) as an identifier", token.lexeme, token.line, token.column)
            return token.as_identifier()
        raise CodeSyntaxError(token.literal, token.line, token.column)

    @contextmanager
    def nested(self):
        self.depth += 1
        try:
            if self.depth > self.max_depth:
                self.error("Nesting too deep.")
            yield
        finally:
            self.depth -= 1

    def skip_newlines(self):
        while self.match(TokenType.NEWLINE):
            self.advance()

    def parse_program(self) -> Program:
        """
        BEGIN CODE ... END CODE, 然后必须是文件结尾: 本 class 暴露出的其实就是这个函数
        """
        logger.debug("parsing program")
        program = self.parse_block(TokenType.CODE)
        self.expect(TokenType.EOF)
        logger.debug("parsed %d top-level statements", len(program.statements))
        return program

    def parse_block(self, kind: TokenType) -> Program:
        """
        BEGIN <kind>
            declarations
            statements
        END <kind>
        kind 是 CODE / IF / WHILE 之一
        """
        with self.nested():
            outer_can_declare = self.can_declare
            self.can_declare = True
            try:
                self.skip_newlines()
                self.expect(TokenType.BEGIN)                 # BEGIN
                self.expect(kind)                            #   CODE|IF|WHILE
                self.skip_newlines()

                statements = self.parse_statements()         # 块内的各个语句

                self.expect(TokenType.END)                   # END
                self.expect(kind)                            #   CODE|IF|WHILE
                self.skip_newlines()
            finally:
                self.can_declare = outer_can_declare
        return Program(tuple(statements))

    def parse_statements(self) -> List[Statement]:
        statements = []
        while not self.match(TokenType.END):
            token = self.current

            if token.type in TYPE_KEYWORDS:
                if not self.can_declare:
                    self.error("Invalid syntax.")
                statements.append(self.parse_var_declaration())
            elif token.type == TokenType.IDENTIFIER:
                self.can_declare = False
                statements.append(self.parse_assignment())
            elif token.type == TokenType.DISPLAY:
                self.can_declare = False
                statements.append(self.parse_display())
            elif token.type == TokenType.SCAN:
                self.can_declare = False
                statements.append(self.parse_scan())
            elif token.type == TokenType.IF:
                self.can_declare = False
                statements.append(self.parse_if_statement())
            elif token.type == TokenType.WHILE:
                self.can_declare = False
                statements.append(self.parse_while_statement())
            elif token.type == TokenType.EOF:
                self.error("Missing End Statement.")
            else:
                self.error(f'Invalid syntax "{token.lexeme}".')

            self.skip_newlines()
        return statements

    def parse_var_declaration(self) -> VariableDeclaration:
        """
        Parse variable declaration(s), all sharing one type:
        - Single: INT a = 1
        - Multiple: INT a, b=1, c (uninitialized vars stay unset)
        """
        self.in_declaration = True
        try:
            type_token = self.advance()
            declarators = [self.parse_declarator()]
            while self.match(TokenType.COMMA):
                self.advance()
                declarators.append(self.parse_declarator())
        finally:
            self.in_declaration = False
        return VariableDeclaration(type_token, tuple(declarators))

    def parse_declarator(self) -> Declarator:
        name_token = self.expect(TokenType.IDENTIFIER)
        initializer = None
        if self.match(TokenType.ASSIGN):
            self.advance()
            initializer = self.parse_expression()
        self.declared.add(name_token.lexeme)
        return Declarator(name_token, initializer)

    def parse_assignment(self) -> Assignment:
        """
        a = expr
        a = b = c = expr   每个后面跟着 '=' 的标识符都是赋值目标, 表达式只 parse 一次
        """
        targets = [self.expect(TokenType.IDENTIFIER)]
        equals = [self.expect(TokenType.ASSIGN)]
        value = self.parse_expression()

        while self.match(TokenType.ASSIGN):
            if not isinstance(value, Identifier):
                self.error("Invalid assignment target.")
            targets.append(value.token)
            equals.append(self.advance())
            value = self.parse_expression()

        return Assignment(tuple(targets), tuple(equals), value)

    def parse_display(self) -> Display:
        """
        DISPLAY: expr & $ & expr ...
        必须正好在换行处结束
        """
        display_token = self.expect(TokenType.DISPLAY)
        self.expect(TokenType.COLON)

        operands = [self.parse_display_segment()]
        while self.match(TokenType.AMPERSAND):
            self.advance()
            operands.append(self.parse_display_segment())

        if not self.match(TokenType.NEWLINE):
            self.error(f"Unexpected {self.current.type.name} token expected NEWLINE token")
        return Display(display_token, tuple(operands))

    def parse_display_segment(self) -> Expression:
        if self.match(TokenType.DOLLAR):
            return Literal(self.advance(), NEWLINE)
        return self.parse_expression()

    def parse_scan(self) -> Scan:
        """
        SCAN: a, b, c
        """
        scan_token = self.expect(TokenType.SCAN)
        self.expect(TokenType.COLON)

        targets = [self.expect(TokenType.IDENTIFIER)]
        while self.match(TokenType.COMMA):
            self.advance()
            targets.append(self.expect(TokenType.IDENTIFIER))
        return Scan(scan_token, tuple(targets))

    def parse_if_statement(self) -> Conditional:
        '''
        IF (..) BEGIN IF .. END IF
        ELSE IF (..) BEGIN IF .. END IF     可以有多个
        ELSE BEGIN IF .. END IF             最多一个, 且必须在最后
        '''
        if_token = self.expect(TokenType.IF)                  # IF
        condition = self.parse_condition()                    #   (...)
        branches = [Branch(if_token, condition, self.parse_block(TokenType.IF))]

        has_else = False
        while self.match(TokenType.ELSE):                     # ELSE
            if has_else:
                self.error(f"Invalid syntax {self.current.type.name}")
            else_token = self.advance()

            if self.match(TokenType.IF):                      #    IF   也就是组成了 ELSE IF
                self.advance()
                condition = self.parse_condition()
            else:
                condition = None
                has_else = True

            branches.append(Branch(else_token, condition, self.parse_block(TokenType.IF)))

        return Conditional(tuple(branches))

    def parse_while_statement(self) -> Loop:
        """
        WHILE (...) BEGIN WHILE ... END WHILE
        """
        while_token = self.expect(TokenType.WHILE)
        condition = self.parse_condition()
        return Loop(while_token, condition, self.parse_block(TokenType.WHILE))

    def parse_condition(self) -> Grouping:
        open_paren = self.expect(TokenType.LPAREN)
        inner = self.parse_expression()
        close_paren = self.expect(TokenType.RPAREN)
        return Grouping(open_paren, inner, close_paren)

    def parse_expression(self) -> Expression:
        return self.parse_binary(self.parse_operand(), 1)

    def parse_binary(self, left: Expression, min_precedence: int) -> Expression:
        """
        Precedence climbing: 吃掉优先级 >= min_precedence 的二元运算符;
        右操作数后面如果跟着优先级更高的运算符, 先递归把它们吸收进右操作数
        """
        while precedence(self.current.type) >= min_precedence:
            operator = self.advance()
            op_precedence = precedence(operator.type)
            right = self.parse_operand()

            while precedence(self.current.type) > op_precedence:
                right = self.parse_binary(right, op_precedence + 1)

            left = Binary(left, operator, right)
        return left

    def parse_operand(self) -> Expression:
        token = self.current

        if token.type in UNARY:
            with self.nested():
                self.advance()
                return Unary(token, self.parse_operand())

        elif token.type == TokenType.LPAREN:
            with self.nested():
                self.advance()
                inner = self.parse_expression()
                close_paren = self.expect(TokenType.RPAREN)
                return Grouping(token, inner, close_paren)

        elif token.type == TokenType.IDENTIFIER:
            self.advance()
            return Identifier(token)

        elif token.type in LITERAL_TYPES:
            self.advance()
            return Literal(token, Value.from_token(token))

        else:
            self.error(f"Unexpected {token.type.name} token expected expression token.")


def parse(source: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Program:
    return Parser(Lexer(source), max_depth).parse_program()
