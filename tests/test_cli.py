"""
Tests for the exprcc command-line tool.

Uses click's CliRunner; file output tests write under pytest's tmp_path.
"""

import pytest
from click.testing import CliRunner

from exprc import __version__
from exprc.cli.exprcc import main
from exprc.cli.errors import ExitCode
from exprc.compiler import compile_expression


@pytest.fixture
def runner():
    return CliRunner()


class TestStdout:
    """Test output written to stdout."""

    def test_asm_default(self, runner):
        result = runner.invoke(main, ["1 + 2 * 3"])
        assert result.exit_code == 0, result.output
        assert result.output == compile_expression("1 + 2 * 3")

    def test_llvm(self, runner):
        result = runner.invoke(main, ["-b", "llvm", "7 / 2"])
        assert result.exit_code == 0, result.output
        assert 'define i32 @"main"()' in result.output
        assert "sdiv i32" in result.output

    def test_backend_case_insensitive(self, runner):
        result = runner.invoke(main, ["--backend", "LLVM", "1"])
        assert result.exit_code == 0, result.output
        assert "define i32" in result.output

    def test_entry(self, runner):
        result = runner.invoke(main, ["--entry", "calc", "1"])
        assert result.exit_code == 0
        assert "  .global calc" in result.output

    def test_leading_minus_after_double_dash(self, runner):
        result = runner.invoke(main, ["--", "-7 / 2"])
        assert result.exit_code == 0, result.output
        assert "  neg %rax" in result.output


class TestDebugOutput:
    """Test the --tokens and --ast flags."""

    def test_tokens(self, runner):
        result = runner.invoke(main, ["--tokens", "2+2"])
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "Token(NUMBER, 2, 1:1)",
            "Token(PUNCT, '+', 1:2)",
            "Token(NUMBER, 2, 1:3)",
        ]

    def test_ast(self, runner):
        result = runner.invoke(main, ["--ast", "3 > 1"])
        assert result.exit_code == 0
        assert result.output == "Binary LESS\n  Number 1\n  Number 3\n"

    def test_ast_reports_errors(self, runner):
        result = runner.invoke(main, ["--ast", "(1"])
        assert result.exit_code == ExitCode.BUILD_ERROR


class TestFileOutput:
    """Test writing to an output file."""

    def test_asm_file(self, runner, tmp_path):
        output = tmp_path / "prog.s"
        result = runner.invoke(main, ["1 + 2", "-o", str(output)])
        assert result.exit_code == 0, result.output
        assert result.output == ""
        assert output.read_text() == compile_expression("1 + 2")

    def test_bitcode_file(self, runner, tmp_path):
        output = tmp_path / "out.bc"
        result = runner.invoke(main, ["-b", "llvm", "7 / 2", "-o", str(output)])
        assert result.exit_code == 0, result.output
        assert output.read_bytes()[:2] == b"BC"

    def test_textual_ir_file(self, runner, tmp_path):
        output = tmp_path / "out.ll"
        result = runner.invoke(main, ["-b", "llvm", "1 < 2", "-o", str(output)])
        assert result.exit_code == 0, result.output
        text = output.read_text()
        assert "define i32" in text
        assert text.endswith("\n")

    def test_verbose(self, runner, tmp_path):
        output = tmp_path / "prog.s"
        result = runner.invoke(main, ["-v", "1", "-o", str(output)])
        assert result.exit_code == 0, result.output
        assert output.exists()

    def test_output_is_directory(self, runner, tmp_path):
        outdir = tmp_path / "outdir"
        outdir.mkdir()
        result = runner.invoke(main, ["1", "-o", str(outdir)])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_output_directory_missing(self, runner, tmp_path):
        output = tmp_path / "missing" / "prog.s"
        result = runner.invoke(main, ["1 + 2", "-o", str(output)])
        assert result.exit_code == ExitCode.INVALID_ARGS, result.output
        assert "Internal error" not in result.output
        assert not output.exists()

    def test_output_parent_is_file(self, runner, tmp_path):
        parent = tmp_path / "plain.txt"
        parent.write_text("")
        result = runner.invoke(main, ["1", "-o", str(parent / "prog.s")])
        assert result.exit_code == ExitCode.INVALID_ARGS, result.output

    def test_no_file_on_error(self, runner, tmp_path):
        output = tmp_path / "prog.s"
        result = runner.invoke(main, ["1 +", "-o", str(output)])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert not output.exists()


class TestErrors:
    """Test error reporting and exit codes."""

    def test_missing_paren(self, runner):
        result = runner.invoke(main, ["(1+2"])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "<input>:1:5: error: expected ')'" in result.output

    def test_unexpected_character(self, runner):
        result = runner.invoke(main, ["1 + x"])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "unexpected character 'x'" in result.output

    def test_overflow(self, runner):
        result = runner.invoke(main, ["99999999999"])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "does not fit in 32 bits" in result.output

    def test_unknown_backend(self, runner):
        result = runner.invoke(main, ["-b", "wasm", "1"])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_missing_expression(self, runner):
        result = runner.invoke(main, [])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "exprcc" in result.output
        assert __version__ in result.output

    def test_nesting_too_deep(self, runner):
        source = "(" * 200 + "1" + ")" * 200
        result = runner.invoke(main, [source])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "nested more than 63 levels" in result.output


class TestLongInput:
    """Test inputs far longer than typical expressions."""

    def test_long_chain_asm(self, runner):
        result = runner.invoke(main, ["+".join(["1"] * 1000)])
        assert result.exit_code == 0, result.output
        assert result.output.count("  add %rdi, %rax") == 999

    def test_long_chain_llvm(self, runner):
        result = runner.invoke(main, ["-b", "llvm", "+".join(["1"] * 1000)])
        assert result.exit_code == 0, result.output

    def test_long_chain_ast(self, runner):
        result = runner.invoke(main, ["--ast", "-".join(["2"] * 1000)])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[0] == "Binary SUBTRACT"
