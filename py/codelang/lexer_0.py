"""
Lexer for the CODE language
Converts source code into tokens, one token per call

做了啥: parser 每调用一次 next_token(), 就从源代码里切出一个 Token.
- 不会抛异常: 词法错误以 ERROR token 的形式交给 parser 处理
- 输入耗尽后, 永远返回 EOF token
"""

import logging
from typing import List, Optional

from .grammar import ESCAPE_PATTERN, BOOL_PATTERN, STRING_PATTERN, CHAR_PATTERN, INT_PATTERN, FLOAT_PATTERN, classify_word
from .tokens import Token, TokenType

logger = logging.getLogger(__name__)

HORIZONTAL_WHITESPACE = ' \t\r'

SINGLE_CHAR_TOKENS = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.MULTIPLY,
    '/': TokenType.DIVIDE,
    '%': TokenType.MODULO,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    ',': TokenType.COMMA,
    ':': TokenType.COLON,
    '$': TokenType.DOLLAR,
    '&': TokenType.AMPERSAND,
    '>': TokenType.GT,
    '<': TokenType.LT,
    '=': TokenType.ASSIGN,
}

# longest first: two-character operators win over their one-character prefixes
DOUBLE_CHAR_TOKENS = {
    '>=': TokenType.GE,
    '<=': TokenType.LE,
    '<>': TokenType.NE,
    '==': TokenType.EQ,
}


class Lexer:
    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    def peek(self, offset: int = 0) -> Optional[str]:
        pos = self.pos + offset
        if pos < len(self.source):
            return self.source[pos]
        return None

    def advance(self) -> Optional[str]:
        """Newlines are only consumed by next_token(), which moves the line counter itself."""
        if self.pos < len(self.source):
            char = self.source[self.pos]
            self.pos += 1
            self.column += 1
            return char
        return None

    def skip_comment(self):
        while self.peek() is not None and self.peek() != '\n':
            self.advance()

    def error(self, text: str, message: str, line: int, column: int) -> Token:
        logger.debug("lexical error at (%d,%d): %s %r", line, column, message, text)
        return Token(TokenType.ERROR, text, message, line, column)

    def next_token(self) -> Token:
        while self.peek() is not None:
            char = self.peek()
            start_line = self.line
            start_column = self.column

            if char in HORIZONTAL_WHITESPACE:
                self.advance()
                continue

            if char == '\n':
                self.pos += 1
                self.line += 1
                self.column = 1
                return Token(TokenType.NEWLINE, '\n', None, start_line, start_column)

            # Comments: 注释吃到行尾, 换行符留给下一次调用
            if char == '#':
                self.skip_comment()
                continue

            # Identifiers and keywords
            if char.isalpha() or char == '_':
                return self.read_word()

            # Numbers
            if char.isdigit() or char == '.':
                return self.read_number()

            if char == '"':
                return self.read_bool_or_string()

            if char == "'":
                return self.read_char()

            if char == '[':
                return self.read_escape()

            pair = char + (self.peek(1) or '')
            if pair in DOUBLE_CHAR_TOKENS:
                self.advance()
                self.advance()
                return Token(DOUBLE_CHAR_TOKENS[pair], pair, None, start_line, start_column)

            if char in SINGLE_CHAR_TOKENS:
                self.advance()
                return Token(SINGLE_CHAR_TOKENS[char], char, None, start_line, start_column)

            self.advance()
            return self.error(char, "Unknown symbol", start_line, start_column)

        return Token(TokenType.EOF, '', None, self.line, self.column)

    def tokenize(self) -> List[Token]:
        """Drain the whole input; the list ends with the EOF token."""
        tokens = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                return tokens

    def read_word(self) -> Token:
        start = self.pos
        start_column = self.column
        while self.peek() is not None and (self.peek().isalnum() or self.peek() == '_'):
            self.advance()
        return classify_word(self.source[start:self.pos], self.line, start_column)

    def read_number(self) -> Token:
        start = self.pos
        start_column = self.column
        while self.peek() is not None and (self.peek().isdigit() or self.peek() == '.'):
            self.advance()

        text = self.source[start:self.pos]
        if INT_PATTERN.match(text):
            return Token(TokenType.INT_LITERAL, text, int(text), self.line, start_column)
        if FLOAT_PATTERN.match(text):
            return Token(TokenType.FLOAT_LITERAL, text, float(text), self.line, start_column)
        return self.error(text, "Invalid Number.", self.line, start_column)

    def read_quoted(self, quote: str) -> str:
        """
        Scan from an opening quote up to the matching quote, or up to the last character
        before a whitespace boundary, whichever comes first.
        """
        start = self.pos
        self.advance()  # opening quote
        while (self.peek() is not None and self.peek() != quote and self.peek() != '\n'
               and not _is_space(self.peek(1))):
            self.advance()
        if self.peek() is not None and self.peek() != '\n':
            self.advance()
        return self.source[start:self.pos]

    def read_bool_or_string(self) -> Token:
        start_column = self.column
        text = self.read_quoted('"')

        if BOOL_PATTERN.match(text):
            return Token(TokenType.BOOL_LITERAL, text, text == '"TRUE"', self.line, start_column)
        if STRING_PATTERN.match(text):
            return Token(TokenType.STRING_LITERAL, text, text[1:-1], self.line, start_column)
        if "TRUE" in text or "FALSE" in text:
            return self.error(text, "Invalid BOOL literal", self.line, start_column)
        return self.error(text, "Invalid STRING literal", self.line, start_column)

    def read_char(self) -> Token:
        start_column = self.column
        text = self.read_quoted("'")

        if CHAR_PATTERN.match(text):
            # 'c' 或 '[c]': 真正的字符总在正中间
            return Token(TokenType.CHAR_LITERAL, text, text[len(text) // 2], self.line, start_column)
        return self.error(text, "Invalid CHAR literal.", self.line, start_column)

    def read_escape(self) -> Token:
        start = self.pos
        start_column = self.column
        while self.peek() is not None and not self.peek().isspace():
            self.advance()

        text = self.source[start:self.pos]
        if ESCAPE_PATTERN.match(text):
            return Token(TokenType.ESCAPE, text, text[1], self.line, start_column)
        return self.error(text, f"Invalid '{text}' as escape sequence.", self.line, start_column)


def _is_space(char: Optional[str]) -> bool:
    return char is not None and char.isspace()
