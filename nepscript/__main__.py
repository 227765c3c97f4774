"""CLI entry point for the nepscript interpreter.

Usage:
    python -m nepscript [-v|-vv|-vvv] <program.nep>
    python -m nepscript [-v...] --emit-ast <program.nep>
    python -m nepscript [-v...] --ast <ast_json_file>
    python -m nepscript --tokens <program.nep>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .nep file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file
  --tokens      Print the token stream of the given .nep file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import json
import sys
import time
from pathlib import Path
from typing import List, NoReturn, Optional

from termcolor import colored

from .ast_json import ast_to_obj, program_from_obj
from .compiler import Compiler
from .errors import CompileError, NepError
from .interpreter import Interpreter, RunResult

SOURCE_SUFFIX = '.nep'


def fail(message: str) -> NoReturn:
    print(colored(message, 'red'), file=sys.stderr)
    sys.exit(1)


def read_source(path_arg: str) -> str:
    program_file = Path(path_arg)
    if program_file.suffix != SOURCE_SUFFIX:
        fail(f"Error: {program_file} is not a {SOURCE_SUFFIX} file")
    if not program_file.exists():
        fail(f"Error: file {program_file} not found")
    with open(program_file, 'r', encoding='utf-8') as f:
        return f.read()


def print_result(name: str, result: RunResult, elapsed: float) -> None:
    print(colored(f"== nepscript: {name} ==", 'cyan', attrs=['bold']))
    for line in result.outputs:
        print(line)
    print(colored(f"-- finished in {elapsed * 1000:.2f} ms --", 'cyan'))


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog='nepscript', description="nepscript language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='NEP_FILE', help='emit AST JSON for the given .nep file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    group.add_argument('--tokens', metavar='NEP_FILE', help='print the tokens of the given .nep file')
    parser.add_argument('program', nargs='?', help='nepscript program file (.nep) to execute')
    args = parser.parse_args(argv)

    compiler = Compiler(debug_level=args.v)

    # Dump tokens
    if args.tokens:
        source = read_source(args.tokens)
        try:
            tokens = compiler.tokenize(source)
        except NepError as e:
            fail(f"Compiler Error: {e}")
        for token in tokens:
            print(f"{token.offset}\t{token.kind.value}\t{token.text!r}")
        return

    # Emit AST mode
    if args.emit_ast:
        source = read_source(args.emit_ast)
        try:
            ast_program = compiler.parse(source)
        except NepError as e:
            fail(f"Compiler Error: {e}")
        out_path = Path(args.emit_ast + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(ast_program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            fail(f"Error: file {ast_path} not found")
        with open(ast_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        try:
            ast_program = program_from_obj(data)
        except (TypeError, ValueError, KeyError) as e:
            fail(f"Error: invalid AST file {ast_path}: {e}")
        start = time.perf_counter()
        try:
            result = Interpreter(debug_level=args.v).run(ast_program)
        except NepError as e:
            fail(f"Runtime Error: {e}")
        print_result(ast_path.name, result, time.perf_counter() - start)
        return

    # Default: execute source file
    if not args.program:
        parser.error('missing program file; or use --emit-ast/--ast/--tokens')
    source = read_source(args.program)
    start = time.perf_counter()
    try:
        result = compiler.compile(source)
    except CompileError as e:
        fail(str(e))
    print_result(Path(args.program).name, result, time.perf_counter() - start)


if __name__ == '__main__':
    main()
