from typing import List, Optional


class NepError(Exception):
    """Base class for every error raised by the nepscript toolchain."""
    def __init__(self, name: str, message: str):
        super().__init__(f"{name}: {message}")
        self.name = name
        self.message = message


class LexerError(NepError):
    """Raised when the source contains a character no lexer rule accepts."""
    def __init__(self, name: str, message: str, offset: int, char: Optional[str] = None):
        super().__init__(name, f"{message} at offset {offset}")
        self.offset = offset
        self.char = char


class InvalidStateError(NepError):
    """Raised when a lexer is asked for tokens before it was given a source."""
    def __init__(self, message: str):
        super().__init__('InvalidState', message)


class ParseError(NepError):
    """Structural parse failure; aborts the parse of the whole file."""
    def __init__(self, message: str, offset: Optional[int] = None):
        if offset is not None:
            message = f"{message} at offset {offset}"
        super().__init__('ParseError', message)
        self.offset = offset


class DiagnosticsError(ParseError):
    """Raised after a full parse when semantic errors were reported."""
    def __init__(self, messages: List[str]):
        self.messages = list(messages)
        super().__init__('parsing failed with errors:\n' + '\n'.join(self.messages))


class NepRuntimeError(NepError):
    """Fatal evaluation error (division by zero, undefined variable, ...)."""


class CompileError(Exception):
    """Single failure surfaced by the compiler facade.

    `origin` is 'parse' for lexer and parser failures, 'runtime' for
    evaluation failures and 'unexpected' for anything else.
    """
    PREFIXES = {
        'parse': 'Compiler Error',
        'runtime': 'Runtime Error',
        'unexpected': 'Unexpected Error',
    }

    def __init__(self, origin: str, message: str):
        super().__init__(f"{self.PREFIXES[origin]}: {message}")
        self.origin = origin
        self.message = message
