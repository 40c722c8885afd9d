"""
exprcc - Expression Compiler Command-Line Interface
===================================================

This module implements the command-line interface for the expression
compiler. It reads one expression from the command line, compiles it,
and writes the result to stdout or to a file.

Usage Examples
--------------
Assembly to stdout:
    $ exprcc "1 + 2 * 3"

Assemble and run with the host toolchain:
    $ exprcc "(1 + 2) * 3" -o prog.s && cc prog.s -o prog && ./prog; echo $?

LLVM bitcode:
    $ exprcc -b llvm "7 / 2" -o out.bc

Expressions starting with '-' need '--' first:
    $ exprcc -- "-7 / 2"
"""

import logging
from pathlib import Path
from typing import Optional

import click

from exprc import __version__
from exprc.cli.errors import handle_cli_exception
from exprc.compiler import (
    Compiler,
    CompilerOptions,
    CompilerResult,
    scan,
    parse_source,
    dump_tree,
    module_to_bitcode,
)

logger = logging.getLogger(__name__)

INPUT_NAME = "<input>"


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def write_output(result: CompilerResult, output: Path) -> int:
    """
    Write the compiled artifact to `output`.

    With the llvm backend a '.bc' suffix selects bitcode; anything else
    gets textual IR.

    Returns:
        Number of bytes written
    """
    if result.module is not None and output.suffix.lower() == ".bc":
        data = module_to_bitcode(result.module)
        output.write_bytes(data)
        return len(data)

    text = result.output
    if not text.endswith("\n"):
        text += "\n"
    output.write_text(text, encoding="utf-8")
    return len(text.encode("utf-8"))


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument("expression")
@click.option(
    "-b", "--backend",
    type=click.Choice(["asm", "llvm"], case_sensitive=False),
    default="asm",
    show_default=True,
    help="Output kind: x86-64 assembly text or an LLVM IR module",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout). With -b llvm, a .bc suffix writes bitcode",
)
@click.option(
    "--entry",
    default="main",
    show_default=True,
    help="Name of the generated entry point",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print tokens and exit (for debugging)",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print the expression tree and exit (for debugging)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="exprcc")
def main(
    expression: str,
    backend: str,
    output: Optional[Path],
    entry: str,
    tokens: bool,
    ast: bool,
    verbose: bool,
) -> None:
    """
    Compile an arithmetic expression.

    EXPRESSION is a single expression using integers, + - * /,
    == != < <= > >= and parentheses.

    \b
    Examples:
        exprcc "1 + 2 * 3"               # Assembly to stdout
        exprcc "1 + 2 * 3" -o prog.s     # Assembly to a file
        exprcc -b llvm "7 / 2"           # Textual LLVM IR to stdout
        exprcc -b llvm "7 / 2" -o out.bc # LLVM bitcode
        exprcc --ast "3 > 1"             # Show the parsed tree
    """
    setup_logging(verbose)

    try:
        if tokens:
            for token in scan(expression, INPUT_NAME):
                click.echo(repr(token))
            return

        if ast:
            click.echo(dump_tree(parse_source(expression, INPUT_NAME)))
            return

        options = CompilerOptions(backend=backend, entry_point=entry)
        result = Compiler(options).compile_source(expression, INPUT_NAME)

        if output is None:
            text = result.output
            click.echo(text, nl=not text.endswith("\n"))
            return

        size = write_output(result, output)
        logger.debug(f"Tokenized: {result.token_count} tokens")
        logger.debug(f"Wrote {size} bytes to {output}")

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
