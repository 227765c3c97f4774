"""Parse-time symbol tables.

The parser keeps one declared-variable map per block it parses. Lookups
fall back to the enclosing map; declarations always go into the current
one, so a name may be declared at most once per map while inner blocks may
shadow outer names. These tables only drive static diagnostics. The
evaluator never consults them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Optional

from .ast import Node


class VarType(Enum):
    NUMBER = 'number'
    STRING = 'string'
    BOOLEAN = 'boolean'

    def __str__(self) -> str:
        return self.value


class ScopeKind(Enum):
    GLOBAL = 'global'
    LOCAL = 'local'


@dataclass
class VariableInfo:
    name: str
    type: VarType
    value: Optional[Node] = None  # last known value expression
    scope: ScopeKind = ScopeKind.LOCAL
    # False for function parameters (registered as STRING until call time)
    # and for names initialised from a call or `null`.
    type_known: bool = True


class SymbolTable:
    """A declared-variable map linked to the map of the enclosing block."""
    def __init__(self, parent: Optional['SymbolTable'] = None):
        self.parent = parent
        self.kind = ScopeKind.GLOBAL if parent is None else ScopeKind.LOCAL
        self.variables: Dict[str, VariableInfo] = {}

    def child(self) -> 'SymbolTable':
        return SymbolTable(self)

    def declares(self, name: str) -> bool:
        """True if `name` is declared in this map (parents are not searched)."""
        return name in self.variables

    def declare(self, name: str, var_type: VarType, value: Optional[Node] = None,
                type_known: bool = True) -> VariableInfo:
        info = VariableInfo(name, var_type, value, self.kind, type_known)
        self.variables[name] = info
        return info

    def lookup(self, name: str) -> Optional[VariableInfo]:
        if name in self.variables:
            return self.variables[name]
        if self.parent is not None:
            return self.parent.lookup(name)
        return None

    def clear(self) -> None:
        self.variables.clear()

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None

    def __iter__(self) -> Iterator[VariableInfo]:
        return iter(self.variables.values())

    def __len__(self) -> int:
        return len(self.variables)
