"""
CODE language interpreter: lexer -> parser -> semantic analyzer -> tree-walking interpreter
"""

from .errors import CodeError, CodeRuntimeError, CodeSemanticError, CodeSyntaxError
from .interpreter_3 import Interpreter
from .lexer_0 import Lexer
from .parser_1 import Parser
from .pipeline import Failure, Result, compile_source, run_source
from .semantic_2 import SemanticAnalyzer

__version__ = "0.1.0"
