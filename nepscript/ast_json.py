"""JSON serialization/deserialization for the nepscript AST.

This module converts between AST dataclasses and plain Python dict/list
structures suitable for JSON encoding. Numbers are stored as floats, the
same representation the evaluator uses.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import (
    Program, Block, VarDecl, Assign, Increment, BinaryExpr, Identifier,
    NumberLit, StringLit, BoolLit, NullLit, Print, If, While, Break,
    Continue, FuncDecl, Call, Return,
)


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None

    if isinstance(node, Program):
        return {"type": "Program", "body": [ast_to_obj(n) for n in node.body]}
    if isinstance(node, Block):
        return {"type": "Block", "body": [ast_to_obj(n) for n in node.body]}
    if isinstance(node, VarDecl):
        return {"type": "VarDecl", "name": node.name, "init": ast_to_obj(node.init)}
    if isinstance(node, Assign):
        return {"type": "Assign", "name": node.name, "value": ast_to_obj(node.value)}
    if isinstance(node, Increment):
        return {"type": "Increment", "name": node.name}
    if isinstance(node, BinaryExpr):
        return {
            "type": "BinaryExpr",
            "left": ast_to_obj(node.left),
            "op": node.op,
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, Identifier):
        return {"type": "Identifier", "name": node.name}
    if isinstance(node, NumberLit):
        return {"type": "NumberLit", "value": node.value}
    if isinstance(node, StringLit):
        return {"type": "StringLit", "value": node.value}
    if isinstance(node, BoolLit):
        return {"type": "BoolLit", "value": node.value}
    if isinstance(node, NullLit):
        return {"type": "NullLit"}
    if isinstance(node, Print):
        return {"type": "Print", "value": ast_to_obj(node.value)}
    if isinstance(node, If):
        return {
            "type": "If",
            "test": ast_to_obj(node.test),
            "consequent": ast_to_obj(node.consequent),
            "alternate": ast_to_obj(node.alternate),
        }
    if isinstance(node, While):
        return {"type": "While", "test": ast_to_obj(node.test), "body": ast_to_obj(node.body)}
    if isinstance(node, Break):
        return {"type": "Break"}
    if isinstance(node, Continue):
        return {"type": "Continue"}
    if isinstance(node, FuncDecl):
        return {
            "type": "FuncDecl",
            "name": node.name,
            "params": [p.name for p in node.params],
            "body": ast_to_obj(node.body),
            "returns": node.returns,
        }
    if isinstance(node, Call):
        return {"type": "Call", "callee": node.callee, "args": [ast_to_obj(a) for a in node.args]}
    if isinstance(node, Return):
        return {"type": "Return", "argument": ast_to_obj(node.argument)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "Program":
        return Program(body=[ast_from_obj(n) for n in obj["body"]])
    if t == "Block":
        return Block(body=[ast_from_obj(n) for n in obj["body"]])
    if t == "VarDecl":
        return VarDecl(name=obj["name"], init=ast_from_obj(obj["init"]))
    if t == "Assign":
        return Assign(name=obj["name"], value=ast_from_obj(obj["value"]))
    if t == "Increment":
        return Increment(name=obj["name"])
    if t == "BinaryExpr":
        return BinaryExpr(left=ast_from_obj(obj["left"]), op=obj["op"], right=ast_from_obj(obj["right"]))
    if t == "Identifier":
        return Identifier(name=obj["name"])
    if t == "NumberLit":
        return NumberLit(value=float(obj["value"]))
    if t == "StringLit":
        return StringLit(value=obj["value"])
    if t == "BoolLit":
        return BoolLit(value=bool(obj["value"]))
    if t == "NullLit":
        return NullLit()
    if t == "Print":
        return Print(value=ast_from_obj(obj["value"]))
    if t == "If":
        return If(
            test=ast_from_obj(obj["test"]),
            consequent=ast_from_obj(obj["consequent"]),
            alternate=ast_from_obj(obj.get("alternate")),
        )
    if t == "While":
        return While(test=ast_from_obj(obj["test"]), body=ast_from_obj(obj["body"]))
    if t == "Break":
        return Break()
    if t == "Continue":
        return Continue()
    if t == "FuncDecl":
        return FuncDecl(
            name=obj["name"],
            params=[Identifier(p) for p in obj["params"]],
            body=ast_from_obj(obj["body"]),
            returns=bool(obj.get("returns", False)),
        )
    if t == "Call":
        return Call(callee=obj["callee"], args=[ast_from_obj(a) for a in obj["args"]])
    if t == "Return":
        return Return(argument=ast_from_obj(obj.get("argument")))

    raise ValueError(f"Unknown AST node type: {t}")


def program_from_obj(obj: Dict[str, Any]) -> Program:
    program = ast_from_obj(obj)
    if not isinstance(program, Program):
        raise ValueError("AST JSON root must be a Program node")
    return program
