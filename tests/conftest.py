"""
Shared Test Fixtures
====================

The jit fixture runs an LLVM module's entry function through MCJIT so the
IR generator can be checked by executing what it builds.
"""

import ctypes

import pytest
import llvmlite.binding as llvm


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def jit():
    """
    Fixture: run an llvmlite module's `main` and return its i32 result.

    Every engine takes ownership of its target machine, so each run
    creates its own.
    """
    llvm.initialize_native_target()
    llvm.initialize_native_asmprinter()
    target = llvm.Target.from_default_triple()

    def run(module, entry_point: str = "main") -> int:
        mod = llvm.parse_assembly(str(module))
        mod.verify()
        engine = llvm.create_mcjit_compiler(mod, target.create_target_machine())
        engine.finalize_object()
        func_ptr = engine.get_function_address(entry_point)
        return ctypes.CFUNCTYPE(ctypes.c_int32)(func_ptr)()

    return run
