"""Runtime values and control signals for nepscript.

`RuntimeValue` is a closed union of small frozen dataclasses. Every
consumption site (print, binary operators, conditions) matches on the
concrete classes and rejects anything else.

Break, continue and return are not exceptions. Evaluating those statements
yields a signal object, which statement sequences hand back to their caller
unchanged until a `While` (break/continue) or a call (return) takes it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Tuple, Union

from .ast import Block

if TYPE_CHECKING:
    from .environment import Environment


@dataclass(frozen=True)
class NullVal:
    def __repr__(self) -> str:
        return 'null'


@dataclass(frozen=True)
class NumberVal:
    value: float


@dataclass(frozen=True)
class StringVal:
    value: str


@dataclass(frozen=True)
class BoolVal:
    value: bool


@dataclass(frozen=True, eq=False)
class FunctionVal:
    """A user function: parameter names, shared body and defining environment."""
    name: str
    params: Tuple[str, ...]
    body: Block = field(repr=False)
    closure: 'Environment' = field(repr=False)

    def __repr__(self) -> str:
        return f"<kaam {self.name}>"


RuntimeValue = Union[NullVal, NumberVal, StringVal, BoolVal, FunctionVal]

NULL = NullVal()


@dataclass(frozen=True)
class BreakSignal:
    pass


@dataclass(frozen=True)
class ContinueSignal:
    pass


@dataclass(frozen=True)
class ReturnSignal:
    value: RuntimeValue


Signal = Union[BreakSignal, ContinueSignal, ReturnSignal]

SIGNALS = (BreakSignal, ContinueSignal, ReturnSignal)


def is_signal(result: object) -> bool:
    return isinstance(result, SIGNALS)


def format_number(value: float) -> str:
    """Format a number the way the language prints it: `5`, `2.5`, `1e+21`, `1e-7`.

    Magnitudes from 1e-6 up to (not including) 1e21 use plain decimal
    notation; anything outside that range uses an exponent with no padding.
    """
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'Infinity' if value > 0 else '-Infinity'
    magnitude = abs(value)
    if magnitude == 0 or 1e-6 <= magnitude < 1e21:
        if value.is_integer():
            return str(int(value))
        # shortest round-trip digits, never in exponent form
        return format(Decimal(repr(value)), 'f')
    mantissa, _, exponent = repr(value).partition('e')
    power = int(exponent)
    return f"{mantissa}e{'+' if power >= 0 else '-'}{abs(power)}"


def type_name(value: RuntimeValue) -> str:
    """Return the language-level type name of a runtime value."""
    if isinstance(value, NullVal):
        return 'null'
    if isinstance(value, NumberVal):
        return 'number'
    if isinstance(value, StringVal):
        return 'string'
    if isinstance(value, BoolVal):
        return 'boolean'
    if isinstance(value, FunctionVal):
        return 'function'
    return type(value).__name__


def to_string(value: RuntimeValue) -> str:
    """Stringify a value for concatenation and printing."""
    if isinstance(value, StringVal):
        return value.value
    if isinstance(value, NumberVal):
        return format_number(value.value)
    if isinstance(value, BoolVal):
        return 'true' if value.value else 'false'
    if isinstance(value, NullVal):
        return 'null'
    if isinstance(value, FunctionVal):
        return repr(value)
    raise TypeError(f"not a runtime value: {value!r}")
