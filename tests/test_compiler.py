import pytest

from nepscript import Compiler, compile_source, reset_state
from nepscript.errors import CompileError
from nepscript.interpreter import Interpreter


@pytest.fixture(autouse=True)
def clean_state():
    reset_state()
    yield
    reset_state()


def test_compile_source_returns_outputs():
    result = compile_source('rakh x = 2; nikaal x * 21;')
    assert result.outputs == ['42']


def test_compile_source_can_be_called_repeatedly():
    # every compile re-initializes the shared parser, so redeclaring is fine
    assert compile_source('rakh x = 1; nikaal x;').outputs == ['1']
    assert compile_source('rakh x = 2; nikaal x;').outputs == ['2']


def test_parse_failure_is_a_compiler_error():
    with pytest.raises(CompileError) as excinfo:
        compile_source('rakh x = ;')
    assert excinfo.value.origin == 'parse'
    assert str(excinfo.value).startswith('Compiler Error: ParseError:')


def test_semantic_errors_are_compiler_errors():
    with pytest.raises(CompileError) as excinfo:
        compile_source('nikaal y;')
    assert excinfo.value.origin == 'parse'
    assert "Undeclared variable 'y'" in str(excinfo.value)


def test_lexer_failure_is_a_compiler_error():
    with pytest.raises(CompileError) as excinfo:
        compile_source('nikaal "never closed;')
    assert excinfo.value.origin == 'parse'
    assert 'UnterminatedString' in str(excinfo.value)


def test_runtime_failure():
    with pytest.raises(CompileError) as excinfo:
        compile_source('nikaal 1 / 0;')
    assert excinfo.value.origin == 'runtime'
    assert str(excinfo.value) == 'Runtime Error: DivisionByZero: division by zero'


def test_unexpected_failure(monkeypatch):
    def broken_run(self, program):
        raise RuntimeError('boom')

    monkeypatch.setattr(Interpreter, 'run', broken_run)
    with pytest.raises(CompileError) as excinfo:
        Compiler().compile('nikaal 1;')
    assert excinfo.value.origin == 'unexpected'
    assert str(excinfo.value) == 'Unexpected Error: RuntimeError: boom'
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_reset_clears_parser_and_lexer():
    compiler = Compiler()
    compiler.parse('rakh x = 1;')
    assert 'x' in compiler.parser.globals
    compiler.reset()
    assert len(compiler.parser.globals) == 0
    assert compiler.parser.tokens == []
    assert not compiler.lexer.has_more()


def test_compiler_tokenize():
    tokens = Compiler().tokenize('nikaal 1;')
    assert [t.text for t in tokens] == ['nikaal', '1', ';', '']


def test_stack_overflow_is_a_runtime_error():
    with pytest.raises(CompileError) as excinfo:
        compile_source('kaam ra firta loop(n) { firta loop(n); } nikaal loop(1);')
    assert excinfo.value.origin == 'runtime'
    assert str(excinfo.value).startswith('Runtime Error: StackOverflow:')
