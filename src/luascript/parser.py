## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Token
from .errors import ScriptSyntaxError, ScriptIncompleteParse
from .lexer import tokenize
from .nodes import (
    Program, Param, FunctionDeclaration, VariableDeclaration, ClassDeclaration,
    BinaryExpression, UnaryExpression, Literal, Identifier, CallExpression, MemberExpression,
    IfStatement, ForStatement, ForInStatement, WhileStatement,
    ReturnStatement, ExpressionStatement, PrintStatement,
)


# Binding power of binary operators; all are left-associative.
PRECEDENCE: dict[str, int] = {
    'or': 1,
    'and': 2,
    '==': 3, '!=': 3, '<': 3, '>': 3, '<=': 3, '>=': 3,
    '..': 4, '+': 4, '-': 4,
    '*': 5, '/': 5, '%': 5,
    '^': 6,
}

WORD_OPERATORS = ('and', 'or')


class Parser:
    """Recursive-descent parser for statements, with precedence climbing for expressions."""

    def __init__(self, tokens: list[Token], filename: str | None = None):
        self.tokens = [t for t in tokens if t.kind != 'comment']
        self.pos = 0
        self.filename = filename

    # Cursor ──────────────────────────────────────────────────────────────────────────────────
    def peek(self, offset: int = 0) -> Token | None:
        i = self.pos + offset
        return self.tokens[i] if i < len(self.tokens) else None

    def advance(self) -> Token:
        token = self.peek()
        if token is None: self.fail("more input")
        self.pos += 1
        return token

    def check(self, kind: str, text: str | None = None) -> bool:
        return (token := self.peek()) is not None and token.is_(kind, text)

    def accept(self, kind: str, text: str | None = None) -> Token | None:
        if self.check(kind, text):
            return self.advance()
        return None

    def expect(self, kind: str, text: str | None = None) -> Token:
        if not self.check(kind, text):
            self.fail(f"{kind} '{text}'" if text else kind)
        return self.advance()

    def fail(self, expected: str):
        token = self.peek()
        if token is None:
            last = self.tokens[-1] if self.tokens else None
            line, column = (last.line, last.column) if last else (1, 1)
            raise ScriptIncompleteParse(f"Expected {expected}, got end of input.", expected=expected, token=None,
                                        line=line, column=column, position=self.pos, filename=self.filename)
        raise ScriptSyntaxError(f"Expected {expected}, got {token!r} at line {token.line}, column {token.column}.",
                                expected=expected, token=token, line=token.line, column=token.column,
                                position=self.pos, filename=self.filename)

    # Statements ──────────────────────────────────────────────────────────────────────────────
    def parse_program(self) -> Program:
        body = self.parse_block()
        if self.peek() is not None:
            self.fail("statement")
        return Program(body)

    def parse_block(self) -> tuple:
        """Statements up to the end of input or a closing brace, which is left unconsumed."""
        body = []
        while (token := self.peek()) is not None and not token.is_('punctuation', '}'):
            if self.accept('punctuation', ';'): continue
            body.append(self.parse_statement())
        return tuple(body)

    def parse_braced_block(self) -> tuple:
        self.expect('punctuation', '{')
        body = self.parse_block()
        self.expect('punctuation', '}')
        return body

    def parse_statement(self):
        token = self.peek()
        if token is None: self.fail("statement")
        if token.kind != 'keyword':
            return ExpressionStatement(self.parse_expression())

        match token.text:
            case 'fn':
                return self.parse_function()
            case 'local' | 'const':
                return self.parse_variable_declaration()
            case 'class':
                return self.parse_class()
            case 'if':
                return self.parse_if()
            case 'for':
                return self.parse_for()
            case 'while':
                return self.parse_while()
            case 'return':
                return self.parse_return()
            case 'print':
                return self.parse_print()
        return ExpressionStatement(self.parse_expression())

    def parse_function(self) -> FunctionDeclaration:
        self.expect('keyword', 'fn')
        name = self.expect('identifier').text

        self.expect('punctuation', '(')
        params = []
        if not self.check('punctuation', ')'):
            while True:
                param_name = self.expect('identifier').text
                declared = self.expect('type-name').text if self.accept('punctuation', ':') else None
                params.append(Param(param_name, declared))
                if not self.accept('punctuation', ','): break
        self.expect('punctuation', ')')

        return_type = tok.text if (tok := self.accept('type-name')) else None
        body = self.parse_braced_block()
        return FunctionDeclaration(name, tuple(params), return_type, body)

    def parse_variable_declaration(self) -> VariableDeclaration:
        kind = self.advance().text
        declared = self.expect('type-name').text
        self.expect('punctuation', ':')
        name = self.expect('identifier').text
        init = self.parse_expression() if self.accept('operator', '=') else None
        return VariableDeclaration(kind, declared, name, init)

    def parse_class(self) -> ClassDeclaration:
        self.expect('keyword', 'class')
        name = self.expect('identifier').text

        self.expect('punctuation', '{')
        methods = []
        while not self.check('punctuation', '}'):
            if not self.check('keyword', 'fn'):
                self.fail("function declaration in class body")
            methods.append(self.parse_function())
        self.expect('punctuation', '}')
        return ClassDeclaration(name, tuple(methods))

    def parse_if(self) -> IfStatement:
        # Entered on either `if` or `elseif`, so each `elseif` nests as the previous branch's alternate.
        self.advance()
        test = self.parse_expression()
        consequent = self.parse_braced_block()

        alternate = None
        if self.check('keyword', 'elseif'):
            alternate = self.parse_if()
        elif self.accept('keyword', 'else'):
            alternate = self.parse_braced_block()
        return IfStatement(test, consequent, alternate)

    def parse_for(self) -> ForStatement | ForInStatement:
        self.expect('keyword', 'for')
        var = self.expect('identifier').text

        if self.accept('keyword', 'in'):
            iterator = self.parse_expression()
            return ForInStatement(var, iterator, self.parse_braced_block())

        self.expect('operator', '=')
        start = self.parse_expression()
        self.expect('punctuation', ',')
        end = self.parse_expression()
        step = self.parse_expression() if self.accept('punctuation', ',') else None
        return ForStatement(var, start, end, step, self.parse_braced_block())

    def parse_while(self) -> WhileStatement:
        self.expect('keyword', 'while')
        test = self.parse_expression()
        return WhileStatement(test, self.parse_braced_block())

    def parse_return(self) -> ReturnStatement:
        self.expect('keyword', 'return')
        token = self.peek()
        if token is None or token.is_('punctuation', '}') or token.is_('punctuation', ';'):
            return ReturnStatement(None)
        return ReturnStatement(self.parse_expression())

    def parse_print(self) -> PrintStatement:
        self.expect('keyword', 'print')
        self.expect('punctuation', '(')
        argument = self.parse_expression()
        self.expect('punctuation', ')')
        return PrintStatement(argument)

    # Expressions ─────────────────────────────────────────────────────────────────────────────
    def binary_precedence(self) -> int:
        token = self.peek()
        if token is None: return 0
        if token.kind == 'operator' or (token.kind == 'keyword' and token.text in WORD_OPERATORS):
            return PRECEDENCE.get(token.text, 0)
        return 0

    def parse_expression(self, min_precedence: int = 0):
        left = self.parse_primary()
        while (precedence := self.binary_precedence()) > min_precedence:
            operator = self.advance().text
            right = self.parse_expression(precedence)
            left = BinaryExpression(operator, left, right)
        return left

    def parse_primary(self):
        token = self.peek()
        if token is None: self.fail("expression")

        if token.kind in ('number', 'string') or token.is_('keyword', 'true') or token.is_('keyword', 'false'):
            return self.parse_literal()
        if token.is_('type-name', 'nil') or token.is_('keyword', 'nil'):
            return self.parse_literal()
        if token.kind == 'identifier':
            return self.parse_identifier()
        if token.kind == 'type-name' and (after := self.peek(1)) is not None and after.is_('punctuation', '('):
            # Globals such as `array` share their name with a type.
            return self.parse_identifier()
        if self.accept('punctuation', '('):
            expr = self.parse_expression()
            self.expect('punctuation', ')')
            return expr
        if token.is_('operator', '-') or token.is_('keyword', 'not'):
            self.advance()
            return UnaryExpression(token.text, self.parse_primary())
        self.fail("expression")

    def parse_literal(self) -> Literal:
        token = self.advance()
        match token.kind, token.text:
            case 'number', text:
                return Literal(float(text))
            case 'string', text:
                return Literal(text)
            case 'keyword', 'true':
                return Literal(True)
            case 'keyword', 'false':
                return Literal(False)
        return Literal(None)

    def parse_identifier(self):
        if not self.check('type-name'):
            self.expect('identifier')
        node = Identifier(self.advance().text)
        while True:
            if self.accept('punctuation', '.'):
                node = MemberExpression(node, self.expect('identifier').text)
            elif self.accept('punctuation', '('):
                node = CallExpression(node, self.parse_arguments())
            else:
                return node

    def parse_arguments(self) -> tuple:
        args = []
        if not self.check('punctuation', ')'):
            while True:
                args.append(self.parse_expression())
                if not self.accept('punctuation', ','): break
        self.expect('punctuation', ')')
        return tuple(args)


def parse_program(tokens: list[Token], filename: str | None = None) -> Program:
    return Parser(tokens, filename=filename).parse_program()


def parse(source: str, filename: str | None = None) -> Program:
    return parse_program(tokenize(source, filename=filename), filename=filename)
