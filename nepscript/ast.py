"""Abstract Syntax Tree (AST) definitions for nepscript.

Each class corresponds to one construct of the language. Nodes form a
plain tree: every child is owned by exactly one parent and nothing points
back up. Function values created at runtime share their `Block` by
reference, which is safe because nodes are never mutated after parsing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass
class Program(Node):
    body: List[Node] = field(default_factory=list)


@dataclass
class Block(Node):
    body: List[Node] = field(default_factory=list)


@dataclass
class VarDecl(Node):
    name: str
    init: Node


@dataclass
class Assign(Node):
    name: str
    value: Node


@dataclass
class Increment(Node):
    name: str


@dataclass
class BinaryExpr(Node):
    left: Node
    op: str
    right: Node


@dataclass
class Identifier(Node):
    name: str


@dataclass
class NumberLit(Node):
    value: float


@dataclass
class StringLit(Node):
    value: str


@dataclass
class BoolLit(Node):
    value: bool


@dataclass
class NullLit(Node):
    pass


@dataclass
class Print(Node):
    value: Node


@dataclass
class If(Node):
    test: Node
    consequent: Block
    alternate: Optional[Union['If', Block]] = None


@dataclass
class While(Node):
    test: Node
    body: Block


@dataclass
class Break(Node):
    pass


@dataclass
class Continue(Node):
    pass


@dataclass
class FuncDecl(Node):
    name: str
    params: List[Identifier]
    body: Block
    returns: bool


@dataclass
class Call(Node):
    callee: str
    args: List[Node] = field(default_factory=list)


@dataclass
class Return(Node):
    argument: Optional[Node] = None
