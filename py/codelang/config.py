"""
Run settings, collected from the command line and the environment
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_MAX_DEPTH = 100
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVEL_ENV = "CODELANG_LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    check_only: bool = False     # stop after semantic analysis
    echo: bool = False           # print the program before running it
    dump_tokens: bool = False
    color: bool = True
    log_level: str = DEFAULT_LOG_LEVEL
    max_depth: int = DEFAULT_MAX_DEPTH

    @classmethod
    def from_args(cls, args, environ: Optional[Mapping[str, str]] = None) -> 'Settings':
        environ = os.environ if environ is None else environ
        log_level = args.log_level or environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL
        return cls(
            check_only=args.check,
            echo=args.echo,
            dump_tokens=args.tokens,
            color=not args.no_color and "NO_COLOR" not in environ,
            log_level=log_level.upper(),
            max_depth=args.max_depth,
        )
