# nepscript language package
# This package provides a lexer, parser and interpreter for nepscript.
from .compiler import Compiler, compile_source, reset_state
from .errors import CompileError, NepError
from .interpreter import Interpreter, RunResult, parse_program, run_file, run_program
from .lexer import tokenize

__all__ = [
    'Compiler',
    'compile_source',
    'reset_state',
    'CompileError',
    'NepError',
    'Interpreter',
    'RunResult',
    'parse_program',
    'run_file',
    'run_program',
    'tokenize',
]
