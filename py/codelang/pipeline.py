"""
The lexer -> parser -> semantic -> interpreter waterfall

Each stage only starts once the previous one finished without error. A stage's first error
stops the run and comes back as a Failure inside the Result; nothing here prints it.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, TextIO

from .ast_nodes import Program
from .config import DEFAULT_MAX_DEPTH
from .errors import CodeError
from .interpreter_3 import Interpreter
from .lexer_0 import Lexer
from .parser_1 import Parser
from .semantic_2 import SemanticAnalyzer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Failure:
    phase: str      # "syntax" | "semantic" | "runtime"
    message: str
    line: Optional[int] = None
    column: Optional[int] = None

    @classmethod
    def from_error(cls, error: CodeError) -> 'Failure':
        return cls(error.phase, error.message, error.line, error.column)

    def render(self) -> str:
        if self.line is not None and self.column is not None:
            return f"({self.line},{self.column}): {self.message}"
        return self.message


@dataclass(frozen=True)
class Result:
    program: Optional[Program] = None
    failure: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def _guard(phase: str, step: Callable[[], object]) -> Optional[Failure]:
    try:
        step()
    except CodeError as e:
        logger.debug("%s phase failed: %s", phase, e.render())
        return Failure.from_error(e)
    except RecursionError:
        return Failure(phase, "Maximum recursion depth exceeded.")
    return None


def compile_source(source: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Result:
    """Parse and type-check; nothing is executed."""
    holder = {}

    def parse():
        holder['program'] = Parser(Lexer(source), max_depth).parse_program()

    failure = _guard("syntax", parse)
    if failure is not None:
        return Result(failure=failure)

    program = holder['program']
    failure = _guard("semantic", lambda: SemanticAnalyzer().analyze(program))
    return Result(program=program, failure=failure)


def run_source(source: str, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None,
               max_depth: int = DEFAULT_MAX_DEPTH) -> Result:
    result = compile_source(source, max_depth)
    if not result.ok:
        return result

    interpreter = Interpreter(stdin, stdout)
    failure = _guard("runtime", lambda: interpreter.execute(result.program))
    return Result(program=result.program, failure=failure)
