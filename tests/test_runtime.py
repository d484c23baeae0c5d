## luascript — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import io

import pytest

from luascript.errors import ScriptNameError, ScriptArgumentError
from luascript.runtime import Runtime
from luascript.nodes import Program


def test_run_resets_globals_by_default():
    rt = Runtime()
    rt.run("local number: x = 1")
    with pytest.raises(ScriptNameError):
        rt.run("x")


def test_run_can_keep_globals():
    rt = Runtime()
    rt.run("local number: x = 1")
    assert rt.run("x + 1", reset=False) == 2


def test_lookup_and_call_script_function():
    rt = Runtime()
    rt.run("fn square(n: number) number { return n * n }")
    assert rt.call('square', 7.0) == 49
    with pytest.raises(ScriptArgumentError):
        rt.call('square', "7")
    assert rt.lookup('square').name == 'square'


def test_parse_and_unparse():
    rt = Runtime()
    program = rt.parse("print(1 + 2)")
    assert isinstance(program, Program)
    assert rt.unparse(program) == "print(1 + 2)\n"


def test_tokenize():
    assert [t.text for t in Runtime().tokenize("a.b(1)")] == ['a', '.', 'b', '(', '1', ')']


def test_registered_builtins_survive_reset():
    rt = Runtime()
    rt.register_builtin('answer', lambda: 42)
    rt.reset()
    assert rt.run("answer()") == 42
    assert 'answer' in rt.list_builtins()


def test_statistics_are_counted():
    stats = {}
    rt = Runtime(output=io.StringIO(), stats=stats)
    rt.run("fn f(x) { return x }\nfor i = 1, 3 { f(i) }")
    assert stats['calls'] == 3
    assert stats['steps'] >= 5


def test_verbose_trace_lists_calls():
    trace = io.StringIO()
    rt = Runtime(output=io.StringIO(), verbosity=1, trace=trace)
    rt.run("fn f(x) { return x * 2 }\nf(4)")
    lines = trace.getvalue().splitlines()
    assert any("call" in line and "f(4)" in line for line in lines)
    assert any("return" in line and "8" in line for line in lines)
