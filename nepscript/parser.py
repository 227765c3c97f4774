"""Recursive-descent parser for nepscript.

`Parser` walks a token list with a single shared cursor (`self.pos`). There
is one `parse_*` routine per construct; each consumes its tokens and returns
the AST subtree it built. Scope and type checks run while parsing, against a
chain of `SymbolTable` objects with one table per block.

Errors come in two tiers. A structural violation (a missing delimiter, a
malformed function header) raises `ParseError` at once and aborts the whole
parse. A semantic problem (an undeclared or redeclared name, a type
mismatch) is reported to the error sink and parsing continues, so one run
surfaces as many diagnostics as possible. `parse_program` raises
`DiagnosticsError` at the end if anything was reported.

Every expression position uses the same precedence-climbing grammar:
equality < relational < additive < multiplicative, all left associative.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from .ast import (
    Assign, BinaryExpr, Block, BoolLit, Break, Call, Continue, FuncDecl,
    Identifier, If, Increment, Node, NullLit, NumberLit, Print, Program,
    Return, StringLit, VarDecl, While,
)
from .errors import DiagnosticsError, ParseError
from .symbols import SymbolTable, VarType
from .tokens import DECLARE_KEYWORD, RETURNING_FUNCTION_KEYWORD, TRUE_LITERAL, Token, TokenKind
from .typecheck import check_condition, infer_type

PRECEDENCE = {
    '==': 1, '!=': 1,
    '<': 2, '<=': 2, '>': 2, '>=': 2,
    '+': 3, '-': 3,
    '*': 4, '/': 4, '%': 4,
}


def describe(token: Token) -> str:
    if token.kind is TokenKind.EOF:
        return 'end of input'
    return f"{token.kind.value} {token.text!r}"


def contains_return(node: Node) -> bool:
    """True if a `Return` occurs in `node`, not counting nested functions."""
    if isinstance(node, Return):
        return True
    if isinstance(node, Block):
        return any(contains_return(stmt) for stmt in node.body)
    if isinstance(node, If):
        if contains_return(node.consequent):
            return True
        return node.alternate is not None and contains_return(node.alternate)
    if isinstance(node, While):
        return contains_return(node.body)
    return False


class Parser:
    def __init__(self, tokens: Optional[List[Token]] = None,
                 report_error: Optional[Callable[[str], None]] = None):
        self.tokens: List[Token] = []
        self.pos = 0
        self.errors: List[str] = []
        self.sink = report_error
        self.globals = SymbolTable()
        self.function_depth = 0
        self.loop_depth = 0
        if tokens is not None:
            self.initialize(tokens)

    def reset(self) -> None:
        self.tokens = []
        self.pos = 0
        self.errors = []
        self.globals.clear()
        self.function_depth = 0
        self.loop_depth = 0

    def initialize(self, tokens: List[Token]) -> None:
        self.reset()
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].kind is not TokenKind.EOF:
            end = self.tokens[-1].offset + len(self.tokens[-1].text) if self.tokens else 0
            self.tokens.append(Token(TokenKind.EOF, '', end))

    def report(self, message: str) -> None:
        self.errors.append(message)
        if self.sink is not None:
            self.sink(message)

    # Cursor helpers

    def peek(self, offset: int = 0) -> Token:
        if not self.tokens:
            return Token(TokenKind.EOF, '', 0)
        index = self.pos + offset
        if index < len(self.tokens):
            return self.tokens[index]
        return self.tokens[-1]

    def advance(self) -> Token:
        token = self.peek()
        if token.kind is not TokenKind.EOF:
            self.pos += 1
        return token

    def check(self, kind: TokenKind, text: Optional[str] = None) -> bool:
        token = self.peek()
        if token.kind is not kind:
            return False
        return text is None or token.text == text

    def expect(self, kind: TokenKind, what: str, text: Optional[str] = None) -> Token:
        token = self.peek()
        if not self.check(kind, text):
            raise ParseError(f"expected {what} but found {describe(token)}", token.offset)
        return self.advance()

    # Statements

    def parse_program(self) -> Program:
        body: List[Node] = []
        while not self.check(TokenKind.EOF):
            stmt = self.parse_statement(self.globals)
            if stmt is not None:
                body.append(stmt)
        if self.errors:
            raise DiagnosticsError(self.errors)
        return Program(body)

    def parse_statement(self, scope: SymbolTable) -> Optional[Node]:
        token = self.peek()
        kind = token.kind
        if kind is TokenKind.KEYWORD and token.text == DECLARE_KEYWORD:
            return self.parse_variable_declaration(scope)
        if kind is TokenKind.PRINT:
            return self.parse_print(scope)
        if kind is TokenKind.IDENTIFIER:
            if self.peek(1).kind is TokenKind.LEFT_PAREN:
                return self.parse_call(scope)
            return self.parse_assignment(scope)
        if kind is TokenKind.IF:
            return self.parse_if(scope)
        if kind is TokenKind.WHILE:
            return self.parse_while(scope)
        if kind is TokenKind.FUNCTION:
            return self.parse_function_declaration(scope)
        if kind is TokenKind.RETURN:
            return self.parse_return(scope)
        if kind is TokenKind.BREAK:
            return self.parse_break()
        if kind is TokenKind.CONTINUE:
            return self.parse_continue()
        if kind is TokenKind.SEMICOLON:
            self.advance()
            return None
        if kind is TokenKind.EOF:
            raise ParseError("unexpected end of input", token.offset)
        self.report(f"Unexpected token {token.text!r} at offset {token.offset}.")
        self.advance()
        return None

    def parse_block(self, scope: SymbolTable) -> Block:
        """Parse `{ statement* }` using `scope` as the block's own table."""
        self.expect(TokenKind.LEFT_BRACE, "'{'")
        body: List[Node] = []
        while not self.check(TokenKind.RIGHT_BRACE):
            if self.check(TokenKind.EOF):
                raise ParseError("expected '}' but found end of input", self.peek().offset)
            stmt = self.parse_statement(scope)
            if stmt is not None:
                body.append(stmt)
        self.advance()
        return Block(body)

    def parse_variable_declaration(self, scope: SymbolTable) -> VarDecl:
        self.advance()  # rakh
        name_token = self.expect(TokenKind.IDENTIFIER, f"identifier after '{DECLARE_KEYWORD}'")
        name = name_token.text
        redeclared = scope.declares(name)
        if redeclared:
            self.report(f"Variable '{name}' is already declared in this scope.")
        else:
            scope.declare(name, VarType.NUMBER)

        init: Node = NumberLit(0.0)
        if self.check(TokenKind.OPERATOR, '='):
            self.advance()
            init = self.parse_expression()
            init_type = infer_type(init, scope, self.report)
            if not redeclared:
                if init_type is None:
                    scope.declare(name, VarType.NUMBER, init, type_known=False)
                else:
                    scope.declare(name, init_type, init)
        self.expect(TokenKind.SEMICOLON, "';' after declaration")
        return VarDecl(name, init)

    def parse_assignment(self, scope: SymbolTable) -> Node:
        name_token = self.advance()
        name = name_token.text
        info = scope.lookup(name)
        if info is None:
            self.report(f"Variable '{name}' is not declared.")

        if self.check(TokenKind.OPERATOR, '='):
            self.advance()
            value = self.parse_expression()
            infer_type(value, scope, self.report)
            self.expect(TokenKind.SEMICOLON, "';' after assignment")
            if info is not None:
                info.value = value
            return Assign(name, value)

        if self.check(TokenKind.OPERATOR, '++'):
            self.advance()
            self.expect(TokenKind.SEMICOLON, "';' after '++'")
            if info is not None:
                if info.type_known and info.type is not VarType.NUMBER:
                    self.report(f"Cannot increment '{name}': it is '{info.type}', not 'number'.")
                elif isinstance(info.value, NumberLit):
                    info.value = NumberLit(info.value.value + 1)
            return Increment(name)

        raise ParseError(f"expected '=' or '++' after '{name}' but found {describe(self.peek())}",
                         self.peek().offset)

    def parse_print(self, scope: SymbolTable) -> Print:
        self.advance()  # nikaal
        value = self.parse_expression()
        infer_type(value, scope, self.report, strict=True)
        self.expect(TokenKind.SEMICOLON, "';' after print statement")
        return Print(value)

    def parse_if(self, scope: SymbolTable) -> If:
        self.advance()  # yedi
        test, consequent = self._parse_branch(scope, 'yedi')
        else_ifs: List[If] = []
        while self.check(TokenKind.ELSE_IF):
            self.advance()
            branch_test, branch_body = self._parse_branch(scope, 'navaye')
            else_ifs.append(If(branch_test, branch_body))

        alternate: Optional[Node] = None
        if self.check(TokenKind.ELSE):
            self.advance()
            alternate = self.parse_block(scope.child())
        # fold the else-if chain from the right: each branch falls through to the next
        for branch in reversed(else_ifs):
            branch.alternate = alternate
            alternate = branch
        return If(test, consequent, alternate)

    def _parse_branch(self, scope: SymbolTable, keyword: str) -> Tuple[Node, Block]:
        self.expect(TokenKind.LEFT_PAREN, f"'(' after '{keyword}'")
        test = self.parse_expression()
        self.expect(TokenKind.RIGHT_PAREN, f"')' after '{keyword}' condition")
        check_condition(test, scope, self.report, keyword)
        body = self.parse_block(scope.child())
        return test, body

    def parse_while(self, scope: SymbolTable) -> While:
        self.advance()  # jaba samma
        self.expect(TokenKind.LEFT_PAREN, "'(' after 'jaba samma'")
        test = self.parse_expression()
        self.expect(TokenKind.RIGHT_PAREN, "')' after 'jaba samma' condition")
        check_condition(test, scope, self.report, 'jaba samma')
        self.loop_depth += 1
        body = self.parse_block(scope.child())
        self.loop_depth -= 1
        return While(test, body)

    def parse_function_declaration(self, scope: SymbolTable) -> FuncDecl:
        keyword = self.advance()
        returns = keyword.text == RETURNING_FUNCTION_KEYWORD
        name = self.expect(TokenKind.IDENTIFIER, f"function name after '{keyword.text}'").text
        self.expect(TokenKind.LEFT_PAREN, f"'(' after function name '{name}'")

        body_scope = scope.child()
        params: List[Identifier] = []
        if not self.check(TokenKind.RIGHT_PAREN):
            while True:
                param = self.expect(TokenKind.IDENTIFIER, 'parameter name').text
                if body_scope.declares(param):
                    self.report(f"Parameter '{param}' is repeated in function '{name}'.")
                body_scope.declare(param, VarType.STRING, type_known=False)
                params.append(Identifier(param))
                if not self.check(TokenKind.COMMA):
                    break
                self.advance()
        self.expect(TokenKind.RIGHT_PAREN, "',' or ')' in parameter list")

        saved_loop_depth = self.loop_depth
        self.function_depth += 1
        self.loop_depth = 0
        body = self.parse_block(body_scope)
        self.function_depth -= 1
        self.loop_depth = saved_loop_depth

        has_return = contains_return(body)
        if returns and not has_return:
            raise ParseError(f"function '{name}' is declared with '{RETURNING_FUNCTION_KEYWORD}' "
                             f"but has no 'firta' statement", keyword.offset)
        if not returns and has_return:
            raise ParseError(f"function '{name}' is declared with 'kaam' and must not contain "
                             f"a 'firta' statement", keyword.offset)
        return FuncDecl(name, params, body, returns)

    def parse_call(self, scope: SymbolTable) -> Call:
        """Call used as a statement; the trailing ';' is required."""
        call = self.parse_call_expression()
        infer_type(call, scope, self.report)
        self.expect(TokenKind.SEMICOLON, "';' after function call")
        return call

    def parse_return(self, scope: SymbolTable) -> Return:
        self.advance()  # firta
        if self.function_depth == 0:
            self.report("'firta' used outside of a function.")
        argument: Optional[Node] = None
        if not self.check(TokenKind.SEMICOLON):
            argument = self.parse_expression()
            infer_type(argument, scope, self.report)
        self.expect(TokenKind.SEMICOLON, "';' after 'firta'")
        return Return(argument)

    def parse_break(self) -> Break:
        self.advance()  # bhayo
        if self.loop_depth == 0:
            self.report("'bhayo' used outside of a loop.")
        self.expect(TokenKind.SEMICOLON, "';' after 'bhayo'")
        return Break()

    def parse_continue(self) -> Continue:
        self.advance()  # jaari rakh
        if self.loop_depth == 0:
            self.report("'jaari rakh' used outside of a loop.")
        self.expect(TokenKind.SEMICOLON, "';' after 'jaari rakh'")
        return Continue()

    # Expressions (precedence climbing)

    def parse_expression(self, precedence: int = 0) -> Node:
        left = self.parse_primary()
        while True:
            token = self.peek()
            if token.kind is not TokenKind.OPERATOR or token.text not in PRECEDENCE:
                break
            op_precedence = PRECEDENCE[token.text]
            if op_precedence <= precedence:
                break
            self.advance()
            right = self.parse_expression(op_precedence)
            left = BinaryExpr(left, token.text, right)
        return left

    def parse_primary(self) -> Node:
        token = self.peek()
        if token.kind is TokenKind.NUMBER:
            self.advance()
            return NumberLit(float(token.text))
        if token.kind is TokenKind.STRING:
            self.advance()
            return StringLit(token.text)
        if token.kind is TokenKind.BOOLEAN:
            self.advance()
            return BoolLit(token.text == TRUE_LITERAL)
        if token.kind is TokenKind.NULL:
            self.advance()
            return NullLit()
        if token.kind is TokenKind.IDENTIFIER:
            if self.peek(1).kind is TokenKind.LEFT_PAREN:
                return self.parse_call_expression()
            self.advance()
            return Identifier(token.text)
        if token.kind is TokenKind.LEFT_PAREN:
            self.advance()
            expr = self.parse_expression()
            self.expect(TokenKind.RIGHT_PAREN, "closing ')'")
            return expr
        raise ParseError(f"unexpected {describe(token)} in expression", token.offset)

    def parse_call_expression(self) -> Call:
        """`name(args)` without the trailing ';'."""
        name = self.expect(TokenKind.IDENTIFIER, 'function name').text
        self.expect(TokenKind.LEFT_PAREN, f"'(' after function name '{name}'")
        args: List[Node] = []
        if not self.check(TokenKind.RIGHT_PAREN):
            while True:
                args.append(self.parse_expression())
                if not self.check(TokenKind.COMMA):
                    break
                self.advance()
        self.expect(TokenKind.RIGHT_PAREN, "',' or ')' in argument list")
        return Call(name, args)
