from typing import Dict, List, Optional

from nepscript.errors import NepRuntimeError
from nepscript.values import RuntimeValue


class Environment:
    """A scope mapping names to runtime values, linked to its parent scope.

    Each environment also keeps the output log of the print statements
    executed directly in it. Blocks and calls copy their log onto the
    enclosing environment when they finish, so every output ends up in the
    root environment of the run.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, RuntimeValue] = {}
        self.outputs: List[str] = []

    def define(self, name: str, value: RuntimeValue) -> None:
        """Bind `name` in this environment, replacing any previous binding here."""
        self.values[name] = value

    def assign(self, name: str, value: RuntimeValue) -> None:
        """Rebind `name` in the nearest environment that already owns it."""
        if name in self.values:
            self.values[name] = value
        elif self.parent:
            self.parent.assign(name, value)
        else:
            raise NepRuntimeError('UndefinedVariable', f"variable '{name}' is not defined")

    def lookup(self, name: str) -> RuntimeValue:
        value = self.find(name)
        if value is None:
            raise NepRuntimeError('UndefinedVariable', f"variable '{name}' is not defined")
        return value

    def find(self, name: str) -> Optional[RuntimeValue]:
        if name in self.values:
            return self.values[name]
        if self.parent:
            return self.parent.find(name)
        return None

    def child(self) -> 'Environment':
        return Environment(parent=self)

    def add_output(self, output: str) -> None:
        self.outputs.append(output)

    def bubble_outputs(self) -> None:
        """Append this environment's whole output log to the parent's log."""
        if self.parent is not None:
            self.parent.outputs.extend(self.outputs)
