## luascript — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from luascript.types import Array, ClassRecord, Return, is_number, is_truthy, type_name, validate_arguments
from luascript.nodes import Param, FunctionDeclaration


def test_booleans_are_not_numbers():
    assert is_number(1.0) and is_number(3)
    assert not is_number(True)
    assert type_name(True) == 'bool'
    assert type_name(0.0) == 'number'


def test_type_name_of_composites():
    assert type_name(None) == 'nil'
    assert type_name(Array()) == 'array'
    assert type_name(ClassRecord('C', {})) == 'Class'
    assert type_name({'k': 1}) == 'table'
    assert type_name(FunctionDeclaration('f', (), None, ())) == 'function'
    assert type_name(len) == 'function'


def test_truthiness():
    assert not is_truthy(None)
    assert not is_truthy(False)
    for value in (0.0, "", Array(), True):
        assert is_truthy(value)


def test_validate_arguments_reports_first_mismatch():
    params = (Param('a', 'number'), Param('b'), Param('c', 'string'), Param('d', 'table'))
    assert validate_arguments(params, [1.0, None, "s", 5.0]) == (True, 0, "")
    assert validate_arguments(params, [1.0, None, 2.0, 5.0]) == (False, 3, 'string')
    assert validate_arguments(params, ["x", None, 2.0, 5.0]) == (False, 1, 'number')


def test_return_outcome_defaults_to_nil():
    assert Return().value is None
    assert Return(3.0) == Return(3.0)
