import json
from pathlib import Path

import pytest

from nepscript.ast import Block, FuncDecl, Identifier, NullLit, Program, Return
from nepscript.ast_json import ast_from_obj, ast_to_obj, program_from_obj
from nepscript.interpreter import Interpreter, parse_program

EXAMPLES = sorted((Path(__file__).parent.parent / 'examples').glob('*.nep'))


@pytest.mark.parametrize('path', EXAMPLES, ids=lambda p: p.name)
def test_example_survives_json(path):
    program = parse_program(path.read_text(encoding='utf-8'))
    data = json.loads(json.dumps(ast_to_obj(program)))
    rebuilt = program_from_obj(data)
    assert rebuilt == program
    assert Interpreter().run(rebuilt).outputs == Interpreter().run(program).outputs


def test_function_params_are_plain_names():
    node = FuncDecl('f', [Identifier('a'), Identifier('b')], Block([Return(NullLit())]), True)
    obj = ast_to_obj(node)
    assert obj['type'] == 'FuncDecl'
    assert obj['params'] == ['a', 'b']
    assert obj['returns'] is True
    assert ast_from_obj(obj) == node


def test_root_must_be_program():
    with pytest.raises(ValueError):
        program_from_obj({'type': 'Block', 'body': []})
    assert program_from_obj({'type': 'Program', 'body': []}) == Program([])


def test_unknown_node_type():
    with pytest.raises(ValueError):
        ast_from_obj({'type': 'Lambda'})
