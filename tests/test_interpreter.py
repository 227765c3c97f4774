import pytest

from nepscript.ast import (
    BinaryExpr, Block, BoolLit, Break, Call, FuncDecl, Identifier, If,
    Increment, NullLit, NumberLit, Print, Program, StringLit, VarDecl,
)
from nepscript.environment import Environment
from nepscript.errors import NepRuntimeError
from nepscript.interpreter import Interpreter, parse_program, run_program
from nepscript.values import NULL, NumberVal, StringVal, format_number


def outputs(source):
    return run_program(source).outputs


def runtime_error(program):
    with pytest.raises(NepRuntimeError) as excinfo:
        Interpreter().run(program)
    return excinfo.value


def test_print_number():
    assert outputs('nikaal 42;') == ['42']


def test_modulo():
    assert outputs('nikaal 5 % 2;') == ['1']


def test_modulo_keeps_sign_of_dividend():
    assert outputs('nikaal (0 - 7) % 3;') == ['-1']


def test_division_yields_fraction():
    assert outputs('nikaal 5 / 2;') == ['2.5']


def test_division_by_zero():
    with pytest.raises(NepRuntimeError) as excinfo:
        run_program('nikaal 5 / 0;')
    assert excinfo.value.name == 'DivisionByZero'


def test_modulo_by_zero():
    with pytest.raises(NepRuntimeError) as excinfo:
        run_program('rakh x = 5 % 0;')
    assert excinfo.value.name == 'DivisionByZero'


def test_string_concatenation():
    assert outputs('nikaal "a" + "b" + "c";') == ['abc']


def test_number_and_string_concatenation():
    assert outputs('nikaal "n=" + 3; nikaal 3 + "x"; nikaal 1 + 2 + "!";') == ['n=3', '3x', '3!']


def test_boolean_printing():
    assert outputs('rakh b = 1 < 2; nikaal b; nikaal galat;') == ['true', 'false']


def test_string_equality():
    source = 'rakh s = "ram"; yedi (s == "ram") { nikaal "same"; }'
    assert outputs(source) == ['same']


def test_uninitialized_variable_is_zero():
    assert outputs('rakh x; nikaal x;') == ['0']


def test_increment():
    assert outputs('rakh x = 1; x++; x++; nikaal x;') == ['3']


def test_while_counts():
    source = 'rakh x = 5; jaba samma (x < 8) { nikaal x; x++; }'
    assert outputs(source) == ['5', '6', '7']


def test_break_stops_loop():
    source = '''
    rakh i = 0;
    jaba samma (sahi) {
        yedi (i == 3) { bhayo; }
        nikaal i;
        i++;
    }
    nikaal "done";
    '''
    assert outputs(source) == ['0', '1', '2', 'done']


def test_continue_skips_rest_of_body():
    source = '''
    rakh i = 0;
    jaba samma (i < 5) {
        i++;
        yedi (i % 2 == 0) { jaari rakh; }
        nikaal i;
    }
    '''
    assert outputs(source) == ['1', '3', '5']


def test_else_if_selects_one_branch():
    source = '''
    rakh x = 0;
    jaba samma (x < 3) {
        yedi (x == 0) { nikaal "zero"; }
        navaye (x == 1) { nikaal "one"; }
        haina bhane { nikaal "many"; }
        x++;
    }
    '''
    assert outputs(source) == ['zero', 'one', 'many']


def test_block_declaration_does_not_escape():
    assert outputs('rakh x = 1; yedi (sahi) { rakh x = 2; nikaal x; } nikaal x;') == ['2', '1']


def test_assignment_updates_outer_variable():
    assert outputs('rakh x = 1; yedi (sahi) { x = 2; } nikaal x;') == ['2']


def test_deep_recursion():
    source = '''
    kaam ra firta sum(n) {
        yedi (n == 0) { firta 0; }
        firta n + sum(n - 1);
    }
    nikaal sum(600);
    '''
    assert outputs(source) == ['180300']


def test_unbounded_recursion_is_a_runtime_error():
    source = 'kaam ra firta down(n) { firta down(n + 1); } nikaal down(0);'
    with pytest.raises(NepRuntimeError) as excinfo:
        run_program(source)
    assert excinfo.value.name == 'StackOverflow'


def test_function_call_and_return():
    source = '''
    kaam ra firta add(a, b) { firta a + b; }
    nikaal add(2, 3);
    '''
    assert outputs(source) == ['5']


def test_recursion():
    source = '''
    kaam ra firta fib(n) {
        yedi (n < 2) { firta n; }
        firta fib(n - 1) + fib(n - 2);
    }
    nikaal fib(10);
    '''
    assert outputs(source) == ['55']


def test_return_from_inside_loop():
    source = '''
    kaam ra firta first_over(limit) {
        rakh i = 0;
        jaba samma (sahi) {
            yedi (i > limit) { firta i; }
            i++;
        }
    }
    nikaal first_over(3);
    '''
    assert outputs(source) == ['4']


def test_closure_reads_defining_environment():
    source = '''
    rakh base = 10;
    kaam ra firta add(n) { firta base + n; }
    base = 7;
    nikaal add(5);
    '''
    assert outputs(source) == ['12']


def test_function_locals_are_private():
    source = '''
    rakh x = 1;
    kaam f() { rakh x = 99; nikaal x; }
    f();
    nikaal x;
    '''
    assert outputs(source) == ['99', '1']


def test_function_without_firta_returns_null():
    result = run_program('kaam f() { nikaal "hi"; } f();')
    assert result.value == NULL
    assert result.outputs == ['hi']


def test_outputs_of_calls_keep_program_order():
    source = '''
    kaam ra firta double(a) { nikaal "in double"; firta a * 2; }
    nikaal "before";
    nikaal double(4);
    nikaal "after";
    '''
    assert outputs(source) == ['before', 'in double', '8', 'after']


def test_undeclared_function_fails_at_runtime():
    with pytest.raises(NepRuntimeError) as excinfo:
        run_program('foo();')
    assert excinfo.value.name == 'NotAFunction'


def test_calling_a_number_fails():
    with pytest.raises(NepRuntimeError) as excinfo:
        run_program('rakh x = 1; x();')
    assert excinfo.value.name == 'NotAFunction'


def test_wrong_argument_count():
    with pytest.raises(NepRuntimeError) as excinfo:
        run_program('kaam f(a) { nikaal a; } f(1, 2);')
    assert excinfo.value.name == 'ArityMismatch'


def test_printing_null_is_a_type_error():
    with pytest.raises(NepRuntimeError) as excinfo:
        run_program('nikaal null;')
    assert excinfo.value.name == 'TypeError'


def test_run_result_value_is_last_statement():
    result = run_program('rakh x = 5; rakh y = "s";')
    assert result.value == StringVal('s')
    assert result.outputs == []


def test_runs_are_independent_and_deterministic():
    source = 'rakh x = 1; jaba samma (x < 4) { nikaal x * x; x++; }'
    first = run_program(source)
    second = run_program(source)
    assert first == second
    assert first.outputs == ['1', '4', '9']


def test_undefined_variable_at_runtime():
    error = runtime_error(Program([Print(Identifier('ghost'))]))
    assert error.name == 'UndefinedVariable'


def test_boolean_arithmetic_is_unsupported():
    error = runtime_error(Program([Print(BinaryExpr(BoolLit(True), '+', NumberLit(1)))]))
    assert error.name == 'UnsupportedOperator'


def test_string_subtraction_is_unsupported():
    error = runtime_error(Program([Print(BinaryExpr(StringLit('a'), '-', StringLit('b')))]))
    assert error.name == 'UnsupportedOperator'


def test_non_boolean_condition():
    error = runtime_error(Program([If(NumberLit(1), Block([]))]))
    assert error.name == 'TypeError'


def test_increment_of_string():
    error = runtime_error(Program([VarDecl('s', StringLit('a')), Increment('s')]))
    assert error.name == 'TypeError'


def test_break_at_top_level():
    error = runtime_error(Program([Break()]))
    assert error.name == 'ControlFlow'


def test_break_escaping_function():
    program = Program([
        FuncDecl('f', [], Block([Break()]), False),
        Call('f', []),
    ])
    error = runtime_error(program)
    assert error.name == 'ControlFlow'


def test_null_literal_evaluates_to_null():
    result = Interpreter().run(Program([VarDecl('n', NullLit())]))
    assert result.value == NULL


def test_evaluate_single_node():
    interp = Interpreter()
    env = Environment()
    assert interp.evaluate(BinaryExpr(NumberLit(2), '*', NumberLit(3)), env) == NumberVal(6)


def test_debug_trace(tmp_path):
    debug_file = tmp_path / 'debug.txt'
    source = '''
    kaam ra firta inc(n) { firta n + 1; }
    rakh x = inc(1);
    yedi (x == 2) { nikaal x; }
    '''
    interp = Interpreter(debug_level=3, debug_file=str(debug_file))
    result = interp.run(parse_program(source))
    assert result.outputs == ['2']
    trace = debug_file.read_text(encoding='utf-8')
    assert 'define function inc(n)' in trace
    assert 'call inc(1)' in trace
    assert 'declare x: number = 2' in trace
    assert 'if condition -> True' in trace


def test_debug_level_two_skips_calls(tmp_path):
    debug_file = tmp_path / 'debug.txt'
    interp = Interpreter(debug_level=2, debug_file=str(debug_file))
    interp.run(Program([
        FuncDecl('f', [], Block([Print(StringLit('x'))]), False),
        Call('f', []),
    ]))
    trace = debug_file.read_text(encoding='utf-8')
    assert 'define function f()' in trace
    assert 'call' not in trace


def test_large_and_tiny_numbers_use_exponent():
    assert outputs('nikaal 1000000000 * 1000000000 * 1000;') == ['1e+21']
    assert outputs('nikaal 1 / 1000000000;') == ['1e-9']
    assert outputs('nikaal 1000000000 * 1000000000 * 100;') == ['100000000000000000000']
    assert outputs('nikaal 1 / 1000000;') == ['0.000001']


@pytest.mark.parametrize('value, text', [
    (0.0, '0'),
    (-0.0, '0'),
    (2.5, '2.5'),
    (-3.0, '-3'),
    (0.00015, '0.00015'),
    (1.5e-7, '1.5e-7'),
    (1.25e22, '1.25e+22'),
    (-1e21, '-1e+21'),
    (float('inf'), 'Infinity'),
    (float('nan'), 'NaN'),
])
def test_format_number(value, text):
    assert format_number(value) == text
