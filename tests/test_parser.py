## luascript — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from luascript import parser
from luascript.errors import ScriptSyntaxError, ScriptIncompleteParse
from luascript.nodes import (
    Program, Param, FunctionDeclaration, VariableDeclaration, ClassDeclaration,
    BinaryExpression as Bin, UnaryExpression, Literal as Lit, Identifier as Id,
    CallExpression, MemberExpression, IfStatement, ForStatement, ForInStatement,
    WhileStatement, ReturnStatement, ExpressionStatement, PrintStatement,
)


def _statements(source: str):
    return parser.parse(source, filename="<test>").body


def _expression(source: str):
    [stmt] = _statements(source)
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expression


## EXPRESSIONS

def test_multiplication_binds_tighter_than_addition():
    assert _expression("1 + 2 * 3") == Bin('+', Lit(1.0), Bin('*', Lit(2.0), Lit(3.0)))


def test_binary_operators_are_left_associative():
    assert _expression("10 - 3 - 2") == Bin('-', Bin('-', Lit(10.0), Lit(3.0)), Lit(2.0))
    assert _expression("a .. b .. c") == Bin('..', Bin('..', Id('a'), Id('b')), Id('c'))


def test_power_binds_tighter_than_multiplication():
    assert _expression("2 * 3 ^ 2") == Bin('*', Lit(2.0), Bin('^', Lit(3.0), Lit(2.0)))


def test_logic_and_comparison_levels():
    assert _expression("a or b and c") == Bin('or', Id('a'), Bin('and', Id('b'), Id('c')))
    assert _expression("a .. b == c") == Bin('==', Bin('..', Id('a'), Id('b')), Id('c'))
    assert _expression("x < 1 and y") == Bin('and', Bin('<', Id('x'), Lit(1.0)), Id('y'))


def test_unary_binds_to_primary_only():
    assert _expression("-2 ^ 2") == Bin('^', UnaryExpression('-', Lit(2.0)), Lit(2.0))
    assert _expression("not a == b") == Bin('==', UnaryExpression('not', Id('a')), Id('b'))


def test_parentheses_override_precedence():
    assert _expression("(1 + 2) * 3") == Bin('*', Bin('+', Lit(1.0), Lit(2.0)), Lit(3.0))


def test_postfix_member_and_call_chain():
    assert _expression("a.b.c(x)") == CallExpression(MemberExpression(MemberExpression(Id('a'), 'b'), 'c'), (Id('x'),))
    assert _expression("f(1)(2)") == CallExpression(CallExpression(Id('f'), (Lit(1.0),)), (Lit(2.0),))
    assert _expression("g()") == CallExpression(Id('g'), ())


def test_literals():
    assert _expression('"text"') == Lit('text')
    assert _expression("true") == Lit(True)
    assert _expression("false") == Lit(False)
    assert _expression("nil") == Lit(None)
    assert _expression("2.5") == Lit(2.5)


## STATEMENTS

def test_function_declaration_with_types():
    [fn] = _statements("fn add(a: number, b) number { return a + b }")
    assert fn == FunctionDeclaration(
        'add', (Param('a', 'number'), Param('b', None)), 'number',
        (ReturnStatement(Bin('+', Id('a'), Id('b'))),))


def test_function_without_params_or_return_type():
    [fn] = _statements("fn noop() { }")
    assert fn == FunctionDeclaration('noop', (), None, ())


def test_variable_declarations():
    local, const = _statements('local number: x = 5\nconst string: s')
    assert local == VariableDeclaration('local', 'number', 'x', Lit(5.0))
    assert const == VariableDeclaration('const', 'string', 's', None)


def test_class_declaration_holds_methods():
    [cls] = _statements("class Point { fn origin() { return 0 } fn twice(x) { return x * 2 } }")
    assert isinstance(cls, ClassDeclaration)
    assert cls.name == 'Point'
    assert [m.name for m in cls.body] == ['origin', 'twice']


def test_elseif_chain_nests_to_the_right():
    [stmt] = _statements("if a { print(1) } elseif b { print(2) } elseif c { print(3) } else { print(4) }")
    p = lambda n: (PrintStatement(Lit(float(n))),)
    assert stmt == IfStatement(Id('a'), p(1), IfStatement(Id('b'), p(2), IfStatement(Id('c'), p(3), p(4))))


def test_if_without_else():
    [stmt] = _statements("if x { print(x) }")
    assert stmt.alternate is None


def test_numeric_for_with_and_without_step():
    plain, stepped = _statements("for i = 1, 3 { }\nfor j = 10, 1, -1 { print(j) }")
    assert plain == ForStatement('i', Lit(1.0), Lit(3.0), None, ())
    assert stepped == ForStatement('j', Lit(10.0), Lit(1.0), UnaryExpression('-', Lit(1.0)),
                                   (PrintStatement(Id('j')),))


def test_for_in_and_while():
    loop, spin = _statements("for v in items { print(v) }\nwhile n > 0 { n }")
    assert loop == ForInStatement('v', Id('items'), (PrintStatement(Id('v')),))
    assert spin == WhileStatement(Bin('>', Id('n'), Lit(0.0)), (ExpressionStatement(Id('n')),))


def test_bare_return():
    [fn] = _statements("fn f() { return }")
    assert fn.body == (ReturnStatement(None),)
    [fn] = _statements("fn g() { return; }")
    assert fn.body == (ReturnStatement(None),)


def test_semicolons_and_comments_are_skipped():
    body = _statements("// leading comment\nprint(1); print(2);;\n")
    assert body == (PrintStatement(Lit(1.0)), PrintStatement(Lit(2.0)))


def test_program_is_immutable_tuple_tree():
    program = parser.parse("local number: x = 1\nprint(x)")
    assert isinstance(program, Program)
    assert isinstance(program.body, tuple)
    with pytest.raises(AttributeError):
        program.body = ()


def test_parse_from_tokens():
    from luascript.lexer import tokenize
    assert parser.parse_program(tokenize("x")) == Program((ExpressionStatement(Id('x')),))


## ERRORS

def test_variable_declaration_requires_type_first():
    with pytest.raises(ScriptSyntaxError) as exc_info:
        parser.parse("local x = 1", filename="<test>")
    err = exc_info.value
    assert err.expected == 'type-name'
    assert err.token.text == 'x'
    assert (err.line, err.column) == (1, 7)
    assert err.filename == "<test>"
    assert not isinstance(err, ScriptIncompleteParse)


def test_unknown_parameter_type_is_rejected():
    with pytest.raises(ScriptSyntaxError, match="type-name"):
        parser.parse("fn f(x: int) { }")


def test_class_body_only_contains_functions():
    with pytest.raises(ScriptSyntaxError, match="function declaration"):
        parser.parse("class C { local number: x = 1 }")


def test_break_and_continue_are_reserved():
    for word in ('break', 'continue'):
        with pytest.raises(ScriptSyntaxError) as exc_info:
            parser.parse(f"while true {{ {word} }}")
        assert not isinstance(exc_info.value, ScriptIncompleteParse)


def test_stray_closing_brace():
    with pytest.raises(ScriptSyntaxError, match="statement"):
        parser.parse("print(1) }")


def test_unfinished_input_is_incomplete():
    for source in ("fn f() {", "1 +", "if x { print(1) } else", "print("):
        with pytest.raises(ScriptIncompleteParse):
            parser.parse(source)


def test_type_named_global_can_be_called():
    assert _expression("array(1, 2)") == CallExpression(Id('array'), (Lit(1.0), Lit(2.0)))
    [loop] = _statements("for v in array(1) { }")
    assert loop.iterator == CallExpression(Id('array'), (Lit(1.0),))


def test_type_name_alone_is_not_an_expression():
    with pytest.raises(ScriptSyntaxError, match="expression"):
        parser.parse("array + 1")
