"""
exprc Command-Line Interface
============================

- **exprcc**: compile one expression to assembly or LLVM IR

Implemented as a Click application with help text and unified error
reporting (see exprc.cli.errors).
"""

__all__ = ["exprcc"]
