"""Static expression checks run by the parser.

`infer_type` walks an expression subtree against the parser's symbol table
and returns the expression's static type, or None when it cannot be known
(function calls, `null`, function parameters, or a subtree that already
produced a diagnostic). Problems are reported through the parser's error
sink; nothing here raises.

The rules mirror what the evaluator accepts: numbers combine with every
arithmetic and comparison operator, strings only support `+` (concatenation,
also with a number on either side) and `==`, and booleans take part in no
binary operator at all.
"""

from __future__ import annotations

from typing import Callable, Optional

from .ast import BinaryExpr, BoolLit, Call, Identifier, Node, NullLit, NumberLit, StringLit
from .symbols import SymbolTable, VarType

ARITHMETIC_OPS = frozenset({'+', '-', '*', '/', '%'})
COMPARISON_OPS = frozenset({'<', '>', '<=', '>=', '==', '!='})

Reporter = Callable[[str], None]


def infer_type(node: Node, scope: SymbolTable, report: Reporter, strict: bool = False) -> Optional[VarType]:
    """Return the static type of `node`.

    With `strict` set (print statements), comparisons between two numbers
    are rejected as well.
    """
    if isinstance(node, NumberLit):
        return VarType.NUMBER
    if isinstance(node, StringLit):
        return VarType.STRING
    if isinstance(node, BoolLit):
        return VarType.BOOLEAN
    if isinstance(node, NullLit):
        return None
    if isinstance(node, Identifier):
        info = scope.lookup(node.name)
        if info is None:
            report(f"Undeclared variable '{node.name}' used in expression.")
            return None
        if not info.type_known:
            return None
        return info.type
    if isinstance(node, Call):
        for arg in node.args:
            infer_type(arg, scope, report)
        return None
    if isinstance(node, BinaryExpr):
        left = infer_type(node.left, scope, report, strict)
        right = infer_type(node.right, scope, report, strict)
        if left is None or right is None:
            return None
        return binary_result_type(node.op, left, right, report, strict)
    return None


def binary_result_type(op: str, left: VarType, right: VarType, report: Reporter,
                       strict: bool = False) -> Optional[VarType]:
    if left is VarType.NUMBER and right is VarType.NUMBER:
        if op in ARITHMETIC_OPS:
            return VarType.NUMBER
        if strict:
            report(f"Invalid operation for 'number': '{op}' not supported here.")
            return None
        return VarType.BOOLEAN
    if left is VarType.STRING and right is VarType.STRING:
        if op == '+':
            return VarType.STRING
        if op == '==':
            return VarType.BOOLEAN
        report(f"Invalid operation for 'string': '{op}' not supported.")
        return None
    if {left, right} == {VarType.NUMBER, VarType.STRING} and op == '+':
        # number is stringified by concatenation
        return VarType.STRING
    report(f"Type mismatch: cannot combine '{left}' with '{right}' using '{op}'.")
    return None


def check_condition(node: Node, scope: SymbolTable, report: Reporter, construct: str) -> None:
    """Report a condition whose static type is known and not boolean."""
    cond_type = infer_type(node, scope, report)
    if cond_type is not None and cond_type is not VarType.BOOLEAN:
        report(f"'{construct}' condition must be boolean, but it is '{cond_type}'.")
