"""Compiler facade: source text in, `RunResult` out.

A `Compiler` owns one lexer and one parser and reuses them between calls;
`reset()` puts both back into their initial state. Every failure of
`compile()` comes out as a `CompileError` tagged with where it happened.
"""

from __future__ import annotations

from typing import List

from .ast import Program
from .errors import CompileError, NepError, NepRuntimeError
from .interpreter import Interpreter, RunResult
from .lexer import Lexer, tokenize
from .parser import Parser
from .tokens import Token


class Compiler:
    def __init__(self, debug_level: int = 0):
        self.debug_level = debug_level
        self.lexer = Lexer()
        self.parser = Parser()

    def reset(self) -> None:
        self.lexer.reset()
        self.parser.reset()

    def tokenize(self, code: str) -> List[Token]:
        return tokenize(code, self.lexer)

    def parse(self, code: str) -> Program:
        self.parser.initialize(self.tokenize(code))
        return self.parser.parse_program()

    def compile(self, code: str) -> RunResult:
        try:
            program = self.parse(code)
            return Interpreter(debug_level=self.debug_level).run(program)
        except NepRuntimeError as e:
            raise CompileError('runtime', str(e)) from e
        except NepError as e:
            raise CompileError('parse', str(e)) from e
        except Exception as e:
            raise CompileError('unexpected', f"{type(e).__name__}: {e}") from e


_default_compiler = Compiler()


def compile_source(code: str) -> RunResult:
    """Compile and run `code` with the shared default compiler."""
    return _default_compiler.compile(code)


def reset_state() -> None:
    """Clear the default compiler's parser and lexer state."""
    _default_compiler.reset()
