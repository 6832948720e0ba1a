import pytest

from pre_wgsl.errors import MalformedExpression
from pre_wgsl.macros import MacroTable
from pre_wgsl.parser import evaluate, wrap_int

@pytest.mark.parametrize("expr, expected", [
    ("1 + 2 * 3", 7),
    ("(1 + 2) * 3", 9),
    ("1 << 2 + 1", 8),
    ("1 < 2 == 1", 1),
    ("2 - 1 - 1", 0),
    ("64 / 4 / 2", 8),
    ("1 || 0 && 0", 1),
    ("(1 || 0) && 0", 0),
    ("3 >= 3 && 2 <= 1", 0),
    ("10 % 4", 2),
    ("!0", 1),
    ("!5", 0),
    ("-3 + 5", 2),
    ("- -2", 2),
    ("+4", 4),
    ("!!7", 1),
])
def test_arithmetic_and_precedence(expr, expected):
    assert evaluate(expr, MacroTable()) == expected

def test_division_by_zero_is_zero():
    assert evaluate("1/0", MacroTable()) == 0
    assert evaluate("1%0", MacroTable()) == 0
    assert evaluate("5 + 1/0", MacroTable()) == 5

def test_division_truncates_toward_zero():
    assert evaluate("-7 / 2", MacroTable()) == -3
    assert evaluate("-7 % 2", MacroTable()) == -1
    assert evaluate("7 % -2", MacroTable()) == 1

def test_32_bit_wraparound():
    assert evaluate("2147483647 + 1", MacroTable()) == -2147483648
    assert wrap_int(0xFFFFFFFF) == -1

def test_shift_edge_cases():
    assert evaluate("1 << 40", MacroTable()) == 0
    assert evaluate("1 << -1", MacroTable()) == 0
    assert evaluate("-8 >> 1", MacroTable()) == -4

def test_macro_identifiers(macros):
    assert evaluate("(NUM_THREADS * BLOCKS) == 256", macros) == 1
    assert evaluate("(NUM_THREADS * BLOCKS) != 256", macros) == 0
    assert evaluate("FLAG", macros) == 1
    assert evaluate("NEGATIVE * 2", macros) == -6

def test_undefined_identifier_is_zero(macros):
    assert evaluate("UNSET", macros) == 0
    assert evaluate("UNSET == 0", macros) == 1

@pytest.mark.parametrize("expr", [
    "defined(FLAG)",
    "defined FLAG",
    "defined( FLAG)",
    "defined  (  FLAG  )",
    "defined(TYPE)",
])
def test_defined_forms(macros, expr):
    assert evaluate(expr, macros) == 1

def test_defined_unset(macros):
    assert evaluate("defined(UNSET)", macros) == 0
    assert evaluate("! defined(UNSET)", macros) == 1
    assert evaluate("defined UNSET || defined BLOCKS", macros) == 1

def test_non_integer_macro_value(macros):
    with pytest.raises(MalformedExpression, match="TYPE"):
        evaluate("TYPE == 1", macros)

def test_no_short_circuit(macros):
    # Both operands are evaluated even when the left side decides the result
    with pytest.raises(MalformedExpression):
        evaluate("0 && TYPE", macros)
    with pytest.raises(MalformedExpression):
        evaluate("1 || TYPE", macros)

@pytest.mark.parametrize("expr", [
    "(1",
    "((1 + 2)",
    "1)",
    "1 + 2)",
    "defined",
    "defined()",
    "defined(1)",
    "defined(FLAG",
    "1 2",
])
def test_malformed_expressions(macros, expr):
    with pytest.raises(MalformedExpression):
        evaluate(expr, macros)

def test_error_names_expression():
    with pytest.raises(MalformedExpression) as excinfo:
        evaluate("(1 + 2", MacroTable())
    assert "(1 + 2" in str(excinfo.value)

def test_empty_expression_is_false():
    assert evaluate("", MacroTable()) == 0
