"""CLI tests for the haumea entry point, run in-process through main()."""

from pathlib import Path

import pytest

from haumea.cli import main

ADD = "to add with (a, b) do\n    return a + b\nend\n"


@pytest.fixture
def program(tmp_path: Path):
    def write(source: str) -> str:
        path = tmp_path / "prog.hau"
        path.write_text(source)
        return str(path)

    return write


def test_help(capsys):
    assert main(["--help"]) == 0
    assert "haumea [OPTIONS] FILE" in capsys.readouterr().out


def test_runs_entry_with_arguments(program, capsys):
    path = program(ADD)
    assert main(["--entry", "add", path, "3", "4"]) == 0
    assert capsys.readouterr().out == "7\n"


def test_float_and_negative_arguments(program, capsys):
    path = program(ADD)
    assert main(["--entry", "add", path, "-3", "4.5"]) == 0
    assert capsys.readouterr().out == "1.5\n"


def test_default_entry_is_main(program, capsys):
    path = program("to main return 2 * 21")
    assert main([path]) == 0
    assert capsys.readouterr().out == "42\n"


def test_no_return_value_prints_nothing(program, capsys):
    path = program("to main do set x to 1 end")
    assert main([path]) == 0
    assert capsys.readouterr().out == ""


def test_bad_argument_is_usage_error(program, capsys):
    path = program(ADD)
    assert main(["--entry", "add", path, "three", "4"]) == 2
    assert "not a number" in capsys.readouterr().err


def test_unknown_flag(capsys):
    assert main(["--fast"]) == 2
    assert "unknown flag '--fast'" in capsys.readouterr().err


def test_missing_file_argument(capsys):
    assert main([]) == 2
    assert "missing file argument" in capsys.readouterr().err


def test_flag_needs_value(capsys):
    assert main(["--entry"]) == 2
    assert "needs a value" in capsys.readouterr().err


def test_bad_max_depth(program, capsys):
    assert main(["--max-depth", "0", program(ADD)]) == 2


def test_bad_log_level(program, capsys):
    assert main(["--log-level", "LOUD", program(ADD)]) == 2


def test_nonexistent_file(tmp_path, capsys):
    missing = str(tmp_path / "nope.hau")
    assert main([missing]) == 1
    assert "No such file or directory" in capsys.readouterr().err


def test_invalid_utf8(tmp_path, capsys):
    path = tmp_path / "bad.hau"
    path.write_bytes(b"to main return \xff")
    assert main([str(path)]) == 1
    assert "invalid utf-8" in capsys.readouterr().err


def test_parse_error(program, capsys):
    assert main([program("to main return g(1)")]) == 1
    err = capsys.readouterr().err
    assert err.startswith("haumea: parse error: ")
    assert "line 1 col 17" in err


def test_lex_error(program, capsys):
    assert main([program("to main return 1 ? 2")]) == 1
    assert "haumea: parse error: unexpected character: '?'" in capsys.readouterr().err


def test_runtime_error(program, capsys):
    assert main([program("to main return 1 / 0")]) == 1
    assert "haumea: runtime error: division by zero" in capsys.readouterr().err


def test_max_depth_flag(program, capsys):
    path = program("to down with (n) do if n then down(n - 1) return n end")
    assert main(["--entry", "down", "--max-depth", "5", path, "4"]) == 0
    assert capsys.readouterr().out == "4\n"
    assert main(["--entry", "down", "--max-depth", "5", path, "5"]) == 1
    assert "call depth limit of 5 exceeded" in capsys.readouterr().err


def test_emit(program, capsys):
    assert main(["--emit", program("to add with (a,b) do return a+b end")]) == 0
    assert capsys.readouterr().out == ADD


def test_check_clean(program, capsys):
    assert main(["--check", program(ADD)]) == 0
    assert capsys.readouterr().err == ""


def test_check_reports_errors(program, capsys):
    assert main(["--check", program("to main do missing() end")]) == 1
    assert "haumea: error: call to undefined function 'missing'" in capsys.readouterr().err


def test_check_notes_do_not_fail(program, capsys):
    assert main(["--check", program("to f return 1 to f return 2")]) == 0
    assert "haumea: note: function 'f' redeclared" in capsys.readouterr().err


def test_deeply_nested_expression_is_parse_error(program, capsys):
    depth = 5000
    path = program("to main return " + "(" * depth + "1" + ")" * depth)
    assert main([path]) == 1
    err = capsys.readouterr().err
    assert "parse error" in err
    assert "nested too deeply" in err


def test_out_of_range_float_argument(program, capsys):
    path = program(ADD)
    huge = "1" + "0" * 400 + ".0"
    assert main(["--entry", "add", path, huge, "1"]) == 2
    assert "not a number in range" in capsys.readouterr().err


def test_depth_limit_reported_for_deeply_nested_bodies(program, capsys):
    nesting = 60
    body = "do " * nesting + "f(n + 1) " + "end " * nesting
    path = program("to f with (n) do\n    " + body + "\n    return n\nend\n")
    assert main(["--entry", "f", "--max-depth", "100", path, "0"]) == 1
    assert "call depth limit of 100" in capsys.readouterr().err
