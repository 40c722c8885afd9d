# =============================================================================
# test_irgen.py - LLVM IR Generator Tests
# =============================================================================
# Tests for LLVM IR generation with llvmlite.
#
# Test coverage includes:
#   - Module and function layout
#   - Instruction selection per operator
#   - Verification and bitcode output
#   - Behavior of the generated function, checked by JIT execution
# =============================================================================

import pytest
from llvmlite import ir

from exprc.compiler.parser import parse_source, MAX_NESTING_DEPTH
from exprc.compiler.ast import Expression
from exprc.compiler.irgen import (
    IRGenerator,
    INT32,
    emit_ir,
    verify_module,
    module_to_bitcode,
)
from exprc.compiler.errors import CodeGenError, InternalInvariantError
from exprc.errors import SourceLocation

from machine import EXPRESSIONS, evaluate


def ir_text(source: str) -> str:
    """Helper to compile an expression and return the textual IR."""
    return str(emit_ir(parse_source(source)))


# =============================================================================
# Module Layout Tests
# =============================================================================

class TestLayout:
    """Test the shape of the generated module."""

    def test_single_function(self):
        module = emit_ir(parse_source("42"))
        functions = list(module.functions)
        assert len(functions) == 1
        func = functions[0]
        assert func.name == "main"
        assert func.ftype.return_type == INT32
        assert func.ftype.args == ()

    def test_single_entry_block(self):
        func = emit_ir(parse_source("1 + 2")).get_global("main")
        assert len(func.blocks) == 1
        assert func.blocks[0].name == "entry"

    def test_ends_with_ret(self):
        func = emit_ir(parse_source("(1 + 2) * 3")).get_global("main")
        block = func.blocks[0]
        assert block.is_terminated
        assert block.terminator.opname == "ret"

    def test_literal_returns_constant(self):
        assert "ret i32 42" in ir_text("42")

    def test_names(self):
        module = IRGenerator(module_name="calc", entry_point="expr").generate(parse_source("1"))
        assert module.name == "calc"
        assert module.get_global("expr") is not None

    def test_unknown_node(self):
        with pytest.raises(CodeGenError):
            emit_ir(Expression(location=SourceLocation("<input>", 1, 1)))


# =============================================================================
# Instruction Selection Tests
# =============================================================================

class TestInstructionSelection:
    """Test the instructions chosen for each operator."""

    @pytest.mark.parametrize("source,opcode", [
        ("1 + 2", "add"),
        ("1 - 2", "sub"),
        ("1 * 2", "mul"),
        ("7 / 2", "sdiv"),
    ])
    def test_arithmetic(self, source, opcode):
        assert f"{opcode} i32" in ir_text(source)

    @pytest.mark.parametrize("source,predicate", [
        ("1 == 2", "eq"),
        ("1 != 2", "ne"),
        ("1 < 2", "slt"),
        ("1 <= 2", "sle"),
    ])
    def test_comparison_predicate(self, source, predicate):
        text = ir_text(source)
        assert f"icmp {predicate} i32" in text

    def test_comparison_widened(self):
        """Comparison results are zero-extended from i1 to i32."""
        text = ir_text("1 < 2")
        assert "zext i1" in text
        assert "to i32" in text

    def test_greater_than_uses_slt(self):
        text = ir_text("3 > 1")
        assert "icmp slt i32 1, 3" in text

    def test_negation(self):
        assert "sub i32 0, 5" in ir_text("-5")


# =============================================================================
# Verification and Bitcode Tests
# =============================================================================

class TestVerification:
    """Test module verification and serialization."""

    @pytest.mark.parametrize("source", ["42", "1 + 2 * 3", "(1 < 2) == (3 >= 4)"])
    def test_verifies(self, source):
        verify_module(emit_ir(parse_source(source)))

    def test_bitcode_magic(self):
        data = module_to_bitcode(emit_ir(parse_source("1 + 2")))
        assert data[:2] == b"BC"

    def test_invalid_module_rejected(self):
        module = ir.Module(name="broken")
        func = ir.Function(module, ir.FunctionType(INT32, []), name="main")
        func.append_basic_block(name="entry")  # no terminator
        with pytest.raises(InternalInvariantError):
            verify_module(module)


# =============================================================================
# Execution Tests
# =============================================================================

class TestExecution:
    """JIT-compile the generated module and compare results."""

    @pytest.mark.parametrize("source,expected", EXPRESSIONS)
    def test_value(self, jit, source, expected):
        assert jit(emit_ir(parse_source(source))) == expected

    @pytest.mark.parametrize("source", [
        "2147483647 + 1",
        "65536 * 65536",
        "-2147483647 - 2",
    ])
    def test_wrapping(self, jit, source):
        tree = parse_source(source)
        assert jit(emit_ir(tree)) == evaluate(tree)

    def test_custom_entry_point(self, jit):
        module = emit_ir(parse_source("6 * 7"), entry_point="answer")
        assert jit(module, "answer") == 42


# =============================================================================
# Input Size Tests
# =============================================================================

class TestInputSize:
    """Test IR generation for long chains and deep nesting."""

    def test_long_chain(self, jit):
        module = emit_ir(parse_source("+".join(["1"] * 1000)))
        verify_module(module)
        assert jit(module) == 1000

    def test_long_run_of_signs(self, jit):
        assert jit(emit_ir(parse_source("-" * 1001 + "7"))) == -7

    def test_deepest_nesting(self, jit):
        source = "(1 + " * MAX_NESTING_DEPTH + "1" + ")" * MAX_NESTING_DEPTH
        assert jit(emit_ir(parse_source(source))) == MAX_NESTING_DEPTH + 1
