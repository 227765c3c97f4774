"""Tree-walking evaluator for nepscript.

`Interpreter.evaluate` dispatches on the node class and returns either a
runtime value or a control signal (break, continue, return). Statement
sequences stop at the first signal and hand it to their caller; `While`
consumes break and continue, calls consume return. Every block and every
call gets a fresh child environment. Its output log is appended to the
enclosing (or calling) environment when it finishes.

The module also provides the convenience entry points `parse_program`,
`run_program` and `run_file`.
"""

from __future__ import annotations

import math
import sys
from typing import IO, List, NamedTuple, Optional, Union

from .ast import (
    Assign, BinaryExpr, Block, BoolLit, Break, Call, Continue, FuncDecl,
    Identifier, If, Increment, Node, NullLit, NumberLit, Print, Program,
    Return, StringLit, VarDecl, While,
)
from .environment import Environment
from .errors import NepRuntimeError
from .lexer import tokenize
from .parser import Parser
from .values import (
    NULL, BoolVal, BreakSignal, ContinueSignal, FunctionVal, NumberVal,
    ReturnSignal, RuntimeValue, Signal, StringVal, is_signal, to_string, type_name,
)


# Each nepscript call costs a handful of Python frames.
RECURSION_LIMIT = 10000


class RunResult(NamedTuple):
    value: RuntimeValue
    outputs: List[str]


def parse_program(source: str) -> Program:
    """Tokenize and parse source code into a Program AST."""
    parser = Parser(tokenize(source))
    return parser.parse_program()


class Interpreter:
    """Core interpreter that executes a nepscript AST."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.debug_level = debug_level
        self.debug_fp: Optional[IO[str]] = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    # Public API
    def run(self, program: Program) -> RunResult:
        previous_limit = sys.getrecursionlimit()
        sys.setrecursionlimit(max(previous_limit, RECURSION_LIMIT))
        try:
            return self.eval_program(program)
        except RecursionError as e:
            raise NepRuntimeError('StackOverflow', 'maximum call depth exceeded') from e
        finally:
            sys.setrecursionlimit(previous_limit)
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

    def eval_program(self, program: Program) -> RunResult:
        # the root environment belongs to this run only
        env = Environment()
        last: RuntimeValue = NULL
        for stmt in program.body:
            result = self.evaluate(stmt, env)
            if is_signal(result):
                raise NepRuntimeError('ControlFlow', f"{type(result).__name__} reached the top level of the program")
            last = result
        return RunResult(last, env.outputs)

    def evaluate(self, node: Node, env: Environment) -> Union[RuntimeValue, Signal]:
        if isinstance(node, NumberLit):
            return NumberVal(node.value)
        if isinstance(node, StringLit):
            return StringVal(node.value)
        if isinstance(node, BoolLit):
            return BoolVal(node.value)
        if isinstance(node, NullLit):
            return NULL
        if isinstance(node, Identifier):
            return env.lookup(node.name)
        if isinstance(node, BinaryExpr):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self.apply_binary_op(node.op, left, right)
        if isinstance(node, Call):
            return self.call_function(node, env)
        if isinstance(node, VarDecl):
            value = self.evaluate(node.init, env)
            env.define(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"declare {node.name}: {type_name(value)} = {to_string(value)}")
            return value
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            env.assign(node.name, value)
            return value
        if isinstance(node, Increment):
            current = env.lookup(node.name)
            if not isinstance(current, NumberVal):
                raise NepRuntimeError('TypeError', f"cannot increment '{node.name}': it is a {type_name(current)}, not a number")
            new_value = NumberVal(current.value + 1)
            env.assign(node.name, new_value)
            return new_value
        if isinstance(node, Print):
            value = self.evaluate(node.value, env)
            if not isinstance(value, (StringVal, NumberVal, BoolVal)):
                raise NepRuntimeError('TypeError', f"cannot print a value of type {type_name(value)}")
            env.add_output(to_string(value))
            return value
        if isinstance(node, If):
            test = self.evaluate(node.test, env)
            if not isinstance(test, BoolVal):
                raise NepRuntimeError('TypeError', f"'yedi' condition must be boolean, got {type_name(test)}")
            if self.debug_level >= 3:
                self.debug(f"if condition -> {test.value}")
            if test.value:
                return self.eval_block(node.consequent, env)
            if node.alternate is not None:
                return self.evaluate(node.alternate, env)
            return NULL
        if isinstance(node, Block):
            return self.eval_block(node, env)
        if isinstance(node, While):
            return self.eval_while(node, env)
        if isinstance(node, FuncDecl):
            func = FunctionVal(node.name, tuple(p.name for p in node.params), node.body, env)
            env.define(node.name, func)
            if self.debug_level >= 2:
                self.debug(f"define function {node.name}({', '.join(func.params)})")
            return func
        if isinstance(node, Return):
            value = self.evaluate(node.argument, env) if node.argument is not None else NULL
            return ReturnSignal(value)
        if isinstance(node, Break):
            return BreakSignal()
        if isinstance(node, Continue):
            return ContinueSignal()
        if isinstance(node, Program):
            return self.eval_program(node).value
        raise NotImplementedError(f"evaluate: unexpected node type {type(node).__name__}")

    def eval_block(self, block: Block, env: Environment) -> Union[RuntimeValue, Signal]:
        block_env = env.child()
        result: Union[RuntimeValue, Signal] = NULL
        for stmt in block.body:
            result = self.evaluate(stmt, block_env)
            if is_signal(result):
                break
        block_env.bubble_outputs()
        return result

    def eval_while(self, node: While, env: Environment) -> Union[RuntimeValue, Signal]:
        last: Union[RuntimeValue, Signal] = NULL
        while True:
            test = self.evaluate(node.test, env)
            if not isinstance(test, BoolVal):
                raise NepRuntimeError('TypeError', f"'jaba samma' condition must be boolean, got {type_name(test)}")
            if not test.value:
                break
            result = self.eval_block(node.body, env)
            if isinstance(result, BreakSignal):
                break
            if isinstance(result, ContinueSignal):
                continue
            if isinstance(result, ReturnSignal):
                return result
            last = result
        return last

    def call_function(self, node: Call, env: Environment) -> RuntimeValue:
        func = env.find(node.callee)
        if not isinstance(func, FunctionVal):
            raise NepRuntimeError('NotAFunction', f"'{node.callee}' is not a function")
        if len(node.args) != len(func.params):
            raise NepRuntimeError('ArityMismatch', f"{func.name} expects {len(func.params)} arguments, got {len(node.args)}")
        # arguments are evaluated in the caller's environment
        args = [self.evaluate(arg, env) for arg in node.args]
        if self.debug_level >= 3:
            self.debug(f"call {func.name}({', '.join(to_string(a) for a in args)})")

        # the closure, not the caller, is the parent: scoping is lexical
        call_env = Environment(parent=func.closure)
        for name, value in zip(func.params, args):
            call_env.define(name, value)
        result = self.eval_block(func.body, call_env)
        if isinstance(result, ReturnSignal):
            ret_val = result.value
        elif is_signal(result):
            raise NepRuntimeError('ControlFlow', f"{type(result).__name__} escaped function {func.name}")
        else:
            ret_val = NULL
        env.outputs.extend(call_env.outputs)
        return ret_val

    def apply_binary_op(self, op: str, a: RuntimeValue, b: RuntimeValue) -> RuntimeValue:
        if isinstance(a, NumberVal) and isinstance(b, NumberVal):
            x, y = a.value, b.value
            if op == '+':
                return NumberVal(x + y)
            if op == '-':
                return NumberVal(x - y)
            if op == '*':
                return NumberVal(x * y)
            if op == '/':
                if y == 0:
                    raise NepRuntimeError('DivisionByZero', 'division by zero')
                return NumberVal(x / y)
            if op == '%':
                if y == 0:
                    raise NepRuntimeError('DivisionByZero', 'modulo by zero')
                # remainder takes the sign of the dividend
                return NumberVal(math.fmod(x, y))
            if op == '<':
                return BoolVal(x < y)
            if op == '>':
                return BoolVal(x > y)
            if op == '<=':
                return BoolVal(x <= y)
            if op == '>=':
                return BoolVal(x >= y)
            if op == '==':
                return BoolVal(x == y)
            if op == '!=':
                return BoolVal(x != y)
            raise NepRuntimeError('UnsupportedOperator', f"unsupported operator {op}")
        if isinstance(a, StringVal) or isinstance(b, StringVal):
            if op == '+':
                return StringVal(to_string(a) + to_string(b))
            if op == '==':
                return BoolVal(a == b)
            raise NepRuntimeError('UnsupportedOperator', f"unsupported operator for strings: {op}")
        raise NepRuntimeError('UnsupportedOperator',
                              f"operands of {op} must be numbers or strings, got {type_name(a)} and {type_name(b)}")


def run_program(source: str, debug_level: int = 0) -> RunResult:
    """Convenience function to parse and run a nepscript program from source."""
    ast_program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level)
    return interpreter.run(ast_program)


def run_file(file_path: str, debug_level: int = 0) -> RunResult:
    """Parse and run a nepscript file."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    return run_program(source, debug_level=debug_level)
