"""End-to-end interpreter tests driven through run_source with in-memory streams."""

import io

from codelang.interpreter_3 import Interpreter, VariableTable
from codelang.grammar import DataType
from codelang.parser_1 import parse
from codelang.pipeline import run_source
from codelang.values import Value


def program(*lines):
    return "BEGIN CODE\n" + "\n".join(lines) + "\nEND CODE\n"


def run(source, stdin=""):
    out = io.StringIO()
    result = run_source(source, stdin=io.StringIO(stdin), stdout=out)
    return result, out.getvalue()


def output_of(*lines, stdin=""):
    result, out = run(program(*lines), stdin)
    assert result.ok, result.failure
    return out


def failure_of(*lines, stdin=""):
    result, _ = run(program(*lines), stdin)
    assert not result.ok
    return result.failure


# ---- documented scenarios ----

def test_sum():
    assert output_of("INT x=5, y=3", "DISPLAY: x + y") == "8"


def test_int_plus_float():
    assert output_of("INT x=5", "FLOAT y=2.5", "DISPLAY: x + y") == "7.5"


def test_dollar_is_a_newline():
    assert output_of("INT x=10", 'DISPLAY: "Value:" & $ & x') == "Value:\n10"


def test_countdown():
    assert output_of(
        "INT x=3", "WHILE (x > 0)", "BEGIN WHILE", "DISPLAY: x", "x = x - 1", "END WHILE",
    ) == "321"


def test_redeclaration_produces_no_output():
    result, out = run("BEGIN CODE\nINT x\nINT x=1\nEND CODE")
    assert out == ""
    assert result.failure.phase == "semantic"
    assert "already exists" in result.failure.message


def test_scan_with_too_few_fields():
    failure = failure_of("INT x,y", "SCAN: x,y", stdin="1\n")
    assert failure.phase == "runtime"
    assert failure.message == "Missing input/s."


# ---- statements ----

def test_chained_assignment_gives_every_target_the_value():
    assert output_of("INT a, b, c", "a = b = c = 4", "DISPLAY: a & b & c") == "444"


def test_if_chain_takes_first_true_branch():
    lines = [
        "IF (n % 2 == 0)", "BEGIN IF", 'DISPLAY: "even"', "END IF",
        "ELSE IF (n > 5)", "BEGIN IF", 'DISPLAY: "big"', "END IF",
        "ELSE", "BEGIN IF", 'DISPLAY: "small"', "END IF",
    ]
    assert output_of("INT n = 4", *lines) == "even"
    assert output_of("INT n = 7", *lines) == "big"
    assert output_of("INT n = 3", *lines) == "small"


def test_if_without_else_can_skip_everything():
    assert output_of("INT n = 1", "IF (n > 5)", "BEGIN IF", 'DISPLAY: "big"', "END IF") == ""


def test_declaration_in_loop_body_binds_again():
    assert output_of(
        "INT i = 1",
        "WHILE (i <= 3)", "BEGIN WHILE", "INT sq = i * i", 'DISPLAY: sq & " "', "i = i + 1", "END WHILE",
    ) == "1 4 9 "


def test_nested_loops():
    assert output_of(
        "INT i = 0, j",
        "WHILE (i < 2)", "BEGIN WHILE",
        "j = 0",
        "WHILE (j < 3)", "BEGIN WHILE", "DISPLAY: i & j & \" \"", "j = j + 1", "END WHILE",
        "i = i + 1",
        "END WHILE",
    ) == "00 01 02 10 11 12 "


def test_display_escapes_and_chars():
    assert output_of("CHAR c = 'a', h = '[#]'", "DISPLAY: c & [&] & h & [[] & []]") == "a&#[]"


def test_display_only_newline():
    assert output_of("DISPLAY: $") == "\n"


def test_bool_results_display_as_keywords():
    assert output_of(
        "INT x = 5", 'BOOL t = "TRUE", f = "FALSE"',
        "DISPLAY: t AND f & $ & t OR f & $ & NOT t & $ & NOT f & $ & x <> 5",
    ) == "FALSE\nTRUE\nFALSE\nTRUE\nFALSE"


def test_arithmetic_rules():
    assert output_of("DISPLAY: 7 / 2 & \" \" & -7 / 2 & \" \" & -7 % 3 & \" \" & 2.0 * 2 & \" \" & 7.5 % 2") \
        == "3 -3 -1 4 1.5"


def test_float_into_int_variable_keeps_float_value():
    assert output_of("INT x = 1 + 2.5", "DISPLAY: x") == "3.5"


def test_bool_from_comparison():
    assert output_of("BOOL b = 3 > 2", "DISPLAY: b") == "TRUE"


# ---- runtime errors ----

def test_unassigned_variable():
    failure = failure_of("INT x", "DISPLAY: x")
    assert failure.message == "Variable 'x' is null."
    assert (failure.line, failure.column) == (3, 10)


def test_variable_declared_in_branch_that_never_ran():
    failure = failure_of(
        "INT x = 1",
        "IF (x == 2)", "BEGIN IF", "INT y = 5", "END IF",
        "DISPLAY: y",
    )
    assert failure.message == "Variable 'y' is not declared."
    assert (failure.line, failure.column) == (7, 10)


def test_division_by_zero():
    failure = failure_of("INT z = 0", "DISPLAY: 1 / z")
    assert failure.phase == "runtime"
    assert failure.message == "Division by zero."
    assert (failure.line, failure.column) == (3, 12)


def test_output_before_a_runtime_error_is_kept():
    result, out = run(program("INT z = 0", 'DISPLAY: "before" & $', "DISPLAY: 1 / z"))
    assert out == "before\n"
    assert not result.ok


def test_unary_plus_on_a_char():
    assert output_of("CHAR c = 'a'", "DISPLAY: +c") == "a"


def test_display_operand_types_are_checked_when_run():
    result, out = run(program('DISPLAY: "hi" & $', "DISPLAY: 'a' == 1"))
    assert out == "hi\n"
    assert result.failure.phase == "runtime"
    assert result.failure.message == "Operator '==' cannot be applied to operands of type Char and Int"
    assert (result.failure.line, result.failure.column) == (3, 14)


def test_negating_a_char_fails_when_run():
    failure = failure_of("CHAR c = 'a'", "DISPLAY: -c")
    assert failure.phase == "runtime"
    assert failure.message == "Operator '-' cannot be applied to Char"
    assert (failure.line, failure.column) == (3, 10)


def test_overflowing_float_conversion():
    failure = failure_of(
        "INT x = 10, k = 0",
        "WHILE (k < 400)", "BEGIN WHILE", "x = x * 10", "k = k + 1", "END WHILE",
        "DISPLAY: x * 1.5",
    )
    assert failure.phase == "runtime"
    assert failure.message == "Number too large."
    assert (failure.line, failure.column) == (8, 12)


# ---- SCAN ----

def test_scan_mixed_types():
    out = output_of(
        "INT n", "FLOAT r", "CHAR ch", "BOOL ok",
        "SCAN: n, r", "DISPLAY: n * r & $",
        "SCAN: ch, ok", "DISPLAY: ch & ok",
        stdin="3, 4.5\nx,TRUE\n",
    )
    assert out == "13.5\nxTRUE"


def test_scan_quoted_values():
    assert output_of("CHAR c", "BOOL b", "SCAN: c, b", "DISPLAY: c & b", stdin="'z', \"FALSE\"\n") == "zFALSE"


def test_scan_at_end_of_input():
    failure = failure_of("INT x", "SCAN: x", stdin="")
    assert failure.message == "Missing input/s."
    assert failure.line is None


def test_scan_with_too_many_fields():
    assert failure_of("INT x", "SCAN: x", stdin="1, 2\n").message == "Missing input/s."


def test_scan_type_mismatch():
    failure = failure_of("INT n", "SCAN: n", stdin="abc\n")
    assert failure.message == 'Unable to assign String on "n".'


def test_scan_in_a_loop():
    out = output_of(
        "INT total = 0, k = 0, v",
        "WHILE (k < 3)", "BEGIN WHILE", "SCAN: v", "total = total + v", "k = k + 1", "END WHILE",
        "DISPLAY: total",
        stdin="1\n2\n3\n",
    )
    assert out == "6"


# ---- direct use ----

def test_execute_returns_the_variable_table():
    out = io.StringIO()
    table = Interpreter(stdout=out).execute(parse(program("INT a = 2", "FLOAT f", "f = a * 1.5")))
    assert isinstance(table, VariableTable)
    assert table.get("a") == Value(DataType.INT, 2)
    assert table.get("f") == Value(DataType.FLOAT, 3.0)
    assert table.type_of("f") == DataType.FLOAT


def test_default_streams_are_the_process_streams(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("41\n"))
    Interpreter().execute(parse(program("INT n", "SCAN: n", "DISPLAY: n + 1")))
    assert capsys.readouterr().out == "42"
