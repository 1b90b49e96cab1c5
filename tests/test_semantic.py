"""Semantic analyzer tests: declarations, assignment compatibility and operator typing."""

import pytest

from codelang.errors import CodeSemanticError
from codelang.grammar import DataType
from codelang.parser_1 import parse
from codelang.semantic_2 import SemanticAnalyzer, SymbolTable, analyze


def program(*lines):
    return "BEGIN CODE\n" + "\n".join(lines) + "\nEND CODE\n"


def check(*lines):
    return analyze(parse(program(*lines)))


def semantic_error(*lines):
    with pytest.raises(CodeSemanticError) as info:
        check(*lines)
    return info.value


def test_table_records_declared_types():
    table = check("INT a = 1, b", "FLOAT f", "CHAR c = 'x'", 'BOOL ok = "TRUE"')
    assert table.types == {
        "a": DataType.INT,
        "b": DataType.INT,
        "f": DataType.FLOAT,
        "c": DataType.CHAR,
        "ok": DataType.BOOL,
    }


def test_redeclaration():
    error = semantic_error("INT x", "INT x=1")
    assert error.message == 'Variable "x" already exists.'
    assert (error.line, error.column) == (3, 1)


def test_redeclaration_in_one_statement():
    error = semantic_error("INT a, a")
    assert error.message == 'Variable "a" already exists.'


def test_redeclaration_inside_a_branch():
    error = semantic_error(
        "INT x = 1",
        "IF (x == 1)", "BEGIN IF", "INT x = 2", "END IF",
    )
    assert error.message == 'Variable "x" already exists.'


def test_branch_declarations_are_visible_afterwards():
    table = check(
        "INT x = 1",
        "IF (x == 1)", "BEGIN IF", "INT y = 2", "END IF",
        "DISPLAY: y",
    )
    assert "y" in table


@pytest.mark.parametrize("lines", [
    ("INT x = 2.5",),
    ("FLOAT f = 1",),
    ("INT x", "FLOAT f = 1.5", "x = f"),
    ("BOOL b = 1 < 2.5",),
    ("CHAR a = 'a', b = 'b'", "BOOL same = a == b"),
])
def test_accepted_programs(lines):
    check(*lines)


def test_char_into_int():
    error = semantic_error("INT x = 'a'")
    assert error.message == 'Unable to assign Char on "x".'
    assert (error.line, error.column) == (2, 1)


def test_string_into_char():
    error = semantic_error('CHAR c = "ab"')
    assert error.message == 'Unable to assign String on "c".'


def test_assignment_error_points_at_equals():
    error = semantic_error("BOOL b", "b = 1")
    assert error.message == 'Unable to assign Int on "b".'
    assert (error.line, error.column) == (3, 3)


def test_chained_assignment_checks_every_target():
    error = semantic_error("INT a", "CHAR c", "a = c = 'z'")
    assert error.message == 'Unable to assign Char on "a".'
    assert (error.line, error.column) == (4, 3)


def test_assignment_to_undeclared():
    error = semantic_error("x = 1")
    assert error.message == 'Variable "x" does not exists.'
    assert (error.line, error.column) == (2, 3)


def test_undeclared_in_expression():
    error = semantic_error("INT a", "a = b + 1")
    assert error.message == 'Variable "b" does not exists.'
    assert (error.line, error.column) == (3, 5)


def test_undeclared_in_display():
    error = semantic_error("DISPLAY: missing")
    assert error.message == 'Variable "missing" does not exists.'


def test_scan_into_undeclared():
    error = semantic_error("INT a", "SCAN: a, z")
    assert error.message == 'Variable "z" does not exists.'
    assert (error.line, error.column) == (3, 1)


def test_if_condition_must_be_bool():
    error = semantic_error("INT x = 1", "IF (x)", "BEGIN IF", "END IF")
    assert error.message == "Expression is not Bool"
    assert (error.line, error.column) == (3, 1)


def test_else_if_condition_must_be_bool():
    error = semantic_error(
        "INT x = 1",
        "IF (x == 1)", "BEGIN IF", "END IF",
        "ELSE IF (x + 1)", "BEGIN IF", "END IF",
    )
    assert error.message == "Expression is not Bool"
    assert error.line == 6


def test_while_condition_must_be_bool():
    error = semantic_error("FLOAT f = 1.0", "WHILE (f)", "BEGIN WHILE", "END WHILE")
    assert error.message == "Expression is not Bool"


def test_arithmetic_on_chars():
    error = semantic_error("CHAR a = 'x', b = 'y'", "CHAR d = a + b")
    assert error.message == "Operator '+' cannot be applied to operands of type Char and Char"
    assert (error.line, error.column) == (3, 12)


def test_int_and_bool_do_not_mix():
    error = semantic_error("INT x = 1", 'INT y = x + "TRUE"')
    assert error.message == "Operator '+' cannot be applied to operands of type Int and Bool"


def test_logical_operators_need_bools():
    error = semantic_error("INT x = 1", "BOOL b = x AND x")
    assert error.message == "Operator 'AND' cannot be applied to operands of type Int and Int"


def test_not_needs_a_bool():
    error = semantic_error("INT x = 1", "BOOL b = NOT x")
    assert error.message == "Operator 'NOT' cannot be applied to Int"


def test_unary_sign_passes_the_type_through():
    table = check("CHAR c = 'a'", "CHAR d = +c", "CHAR e = -c", 'BOOL b = -"TRUE"')
    assert table.type_of("d") == DataType.CHAR
    assert table.type_of("b") == DataType.BOOL


def test_display_only_needs_declared_identifiers():
    check("CHAR c = 'a'", "INT x = 1", "DISPLAY: +c & -c & 'a' == 1 & x + c & NOT x")


def test_undeclared_identifier_nested_in_display():
    error = semantic_error("INT x = 1", "DISPLAY: x & (x + -ghost)")
    assert error.message == 'Variable "ghost" does not exists.'
    assert (error.line, error.column) == (3, 20)


def test_numeric_expression_type_follows_left_operand():
    check("INT x = 1 + 2.5", "FLOAT f = 2 * 1.5")


def test_analyzer_reuses_a_given_table():
    table = SymbolTable()
    table.declare("outer", DataType.INT)
    result = SemanticAnalyzer().analyze(parse(program("outer = 3")), table)
    assert result is table
